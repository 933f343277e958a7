"""Middleware property decomposition.

Caller values scope properties to a middleware with dotted keys::

    {"middlewares": "cors,errors", "cors.allowedOrigins": "*"}

parse_middlewares() folds those keys into one property map per declared
middleware and turns ``middlewares`` into an ordered mapping in execution
order, which is the reverse of declaration order: the last declared
middleware wraps the handler first.
"""

import logging
from typing import Any, Mapping

from crudapi.schemas.errors import InvalidKeyError


logger = logging.getLogger(__name__)


def split_list(value: str) -> list:
    """Split a comma separated string into trimmed, non-empty items.

    Order and duplicates are preserved.

    Examples
    --------
    >>> split_list(" a, b ,, c ")
    ['a', 'b', 'c']
    """
    return [item.strip() for item in value.split(",") if item.strip()]


def declared_middlewares(value) -> dict:
    """Return ``{name: properties}`` for a ``middlewares`` value.

    A string declares names in declaration order, each starting with no
    properties. A mapping is a registry that was resolved before and is
    copied as-is. Repeated names collapse into the first declaration.
    """
    if isinstance(value, Mapping):
        return {str(name): dict(props) for name, props in value.items()}
    return {name: {} for name in split_list(value)}


def parse_middlewares(values: Mapping[str, Any]) -> dict:
    """Route dotted ``middleware.property`` keys into middleware properties.

    Parameters
    ----------
    values : Mapping
        Merged configuration values, possibly containing dotted keys.

    Returns
    -------
    dict
        A copy of ``values`` without dotted keys, where ``middlewares`` is an
        ordered ``{name: {property: value}}`` mapping in execution order.

    Raises
    ------
    InvalidKeyError
        If a dotted key names a middleware that was not declared.

    Examples
    --------
    >>> parsed = parse_middlewares({"middlewares": "cors,errors", "errors.debug": "1"})
    >>> parsed["middlewares"]
    {'errors': {'debug': '1'}, 'cors': {}}
    """
    declared = values.get("middlewares", "")
    properties = declared_middlewares(declared)

    result = {}
    for key, value in values.items():
        if "." not in key:
            result[key] = value
            continue
        middleware, name = key.split(".", 1)
        if middleware not in properties:
            raise InvalidKeyError(key)
        properties[middleware][name] = value

    # A resolved registry is already in execution order
    if not isinstance(declared, Mapping):
        properties = dict(reversed(list(properties.items())))

    result["middlewares"] = properties
    logger.debug("Middleware execution order: %s", ", ".join(properties))
    return result
