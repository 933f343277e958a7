"""Configuration resolution and merging logic.

This module provides the single entrypoint for configuration resolution:
resolve_config(). It layers schema defaults, driver defaults and caller
values, applies environment overrides and returns a validated, frozen
InternalConfig.

Precedence (highest to lowest):
1. Environment variables (CRUD_API_*)
2. Caller values
3. Driver defaults (address, port)
4. ParamConfig (schema defaults)
"""

import json
import logging
from typing import Any, Iterable, Mapping, Optional

from crudapi.schemas.param import ParamConfig, SCHEMA_KEYS
from crudapi.schemas.driver import driver_defaults
from crudapi.schemas.middleware import declared_middlewares, parse_middlewares
from crudapi.schemas.environment import ENV_PREFIX, EnvironmentResolver
from crudapi.schemas.errors import InvalidKeyError
from crudapi.schemas.internal import InternalConfig


logger = logging.getLogger(__name__)

_LIST_KEYS = ("tables", "middlewares", "controllers", "customControllers", "customOpenApiBuilders")


def merge_values(base: Mapping, *overrides: Mapping) -> dict:
    """Merge flat value maps.

    Later maps override earlier ones, key by key. A None value counts as
    not supplied and never overrides.

    Parameters
    ----------
    base : Mapping
        Base values (lowest priority)
    *overrides : Mapping
        Override values (higher priority, left to right)

    Examples
    --------
    >>> merge_values({"a": 1, "b": 2}, {"b": 3}, {"b": None, "c": 4})
    {'a': 1, 'b': 3, 'c': 4}
    """
    result = dict(base)
    for override in overrides:
        for key, value in override.items():
            if value is not None:
                result[key] = value
    return result


def flatten_values(values: Mapping[str, Any]) -> dict:
    """Convert decoded list, mapping and JSON values back to strings.

    This accepts the output of ``InternalConfig.to_values()`` as input, so
    resolution only ever works on the flat string forms.
    """
    result = dict(values)
    for key in _LIST_KEYS:
        if isinstance(result.get(key), (list, tuple)):
            result[key] = ",".join(str(item) for item in result[key])
    if isinstance(result.get("mapping"), Mapping):
        result["mapping"] = ",".join(
            f"{left}={right}" for left, right in result["mapping"].items()
        )
    if isinstance(result.get("openApiBase"), Mapping):
        result["openApiBase"] = json.dumps(result["openApiBase"])
    return result


def validate_keys(values: Mapping[str, Any], schema: Iterable[str] = SCHEMA_KEYS) -> None:
    """Reject the first key that is not part of the schema.

    Raises
    ------
    InvalidKeyError
        Naming the first unknown key in input order.
    """
    allowed = set(schema)
    for key in values:
        if key not in allowed:
            raise InvalidKeyError(key)


def validate_caller_keys(values: Mapping[str, Any], middlewares) -> None:
    """Check caller keys before None values are dropped by the merge.

    Plain keys must be in the schema; dotted keys must name a declared
    middleware.

    Raises
    ------
    InvalidKeyError
        Naming the first offending key in input order.
    """
    declared = declared_middlewares(middlewares)
    allowed = set(SCHEMA_KEYS)
    for key in values:
        if "." in key:
            if key.split(".", 1)[0] not in declared:
                raise InvalidKeyError(key)
        elif key not in allowed:
            raise InvalidKeyError(key)


def resolve_config(
    values: Optional[Mapping[str, Any]] = None,
    env=None,
    prefix: str = ENV_PREFIX,
) -> InternalConfig:
    """Resolve the final runtime configuration from caller values.

    This is the SINGLE ENTRYPOINT for configuration resolution.

    Steps:
    1. Driver defaults from the requested driver (mysql when absent)
    2. Merge: schema defaults < driver defaults < caller values
    3. ``<PREFIX>_MIDDLEWARES`` replaces the middleware list
    4. Caller keys checked against the schema and declared middlewares
    5. Dotted ``middleware.property`` keys folded into the middlewares
    6. Unknown keys rejected
    7. ``<PREFIX>_*`` environment overrides, middleware properties included
    8. Validation into a frozen InternalConfig

    Parameters
    ----------
    values : Mapping, optional
        Flat caller values keyed by canonical key, plus dotted middleware
        property keys.
    env : Mapping or callable, optional
        Environment source (``name -> value``). Defaults to ``os.environ``.
    prefix : str, optional
        Root environment variable prefix.

    Returns
    -------
    InternalConfig
        Fully validated, immutable runtime configuration

    Raises
    ------
    InvalidKeyError
        If a key is not in the schema or names an undeclared middleware.
    UnknownDriverError
        If the requested driver is not supported.
    ValidationError
        If a value has the wrong shape.

    Examples
    --------
    >>> config = resolve_config({"driver": "sqlite"}, env={})
    >>> config.address, config.port
    ('data.db', 0)
    >>> config.middleware_names()
    ['errors', 'cors']
    """
    caller = flatten_values(values or {})
    environment = EnvironmentResolver(prefix, env)

    merged = merge_values(
        ParamConfig().to_values(),
        driver_defaults(caller).to_values(),
        caller,
    )

    middlewares = environment.middlewares_override()
    if middlewares is not None:
        merged["middlewares"] = middlewares

    validate_caller_keys(caller, merged["middlewares"])
    merged = parse_middlewares(merged)
    validate_keys(merged)
    merged = environment.apply(merged)

    config = InternalConfig.model_validate(merged)
    logger.info(
        "Resolved %s configuration (middlewares: %s)",
        config.driver, ", ".join(config.middleware_names()) or "none",
    )
    return config
