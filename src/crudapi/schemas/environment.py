"""Environment variable overrides.

Every resolved key can be overridden by an environment variable whose name
is derived from the key::

    cacheTime                  -> CRUD_API_CACHE_TIME
    middlewares (early)        -> CRUD_API_MIDDLEWARES
    cors.allowedOrigins        -> CRUD_API_CORS_ALLOWED_ORIGINS

Middleware properties drop the ``MIDDLEWARES`` segment so that the
variable name does not repeat it. Unset and empty variables leave the
value untouched.

Dots and camelCase boundaries derive the same separator, so
``cors.allowed.origins`` and ``cors.allowedOrigins`` both read
``CRUD_API_CORS_ALLOWED_ORIGINS``.
"""

import os
import re
import logging
from typing import Any, Callable, Mapping, Optional, Union


logger = logging.getLogger(__name__)

# Root prefix of every environment variable read by crudapi
ENV_PREFIX = "CRUD_API"

EnvLookup = Callable[[str], Optional[str]]

_WORD_BOUNDARY = re.compile(r"(?<!^)([A-Z])")


def env_suffix(key: str) -> str:
    """Derive the environment variable suffix for a configuration key.

    Examples
    --------
    >>> env_suffix("customOpenApiBuilders")
    'CUSTOM_OPEN_API_BUILDERS'
    >>> env_suffix("cors.allowedOrigins")
    'CORS_ALLOWED_ORIGINS'
    """
    return _WORD_BOUNDARY.sub(r"_\1", key.replace(".", "_")).upper()


def as_lookup(env: Union[None, Mapping[str, str], EnvLookup]) -> EnvLookup:
    """Normalize an environment source to a ``name -> value`` callable.

    None reads the process environment.
    """
    if env is None:
        return os.environ.get
    if isinstance(env, Mapping):
        return env.get
    if callable(env):
        return env
    raise TypeError(f"Unsupported environment source: {type(env).__name__}")


class EnvironmentResolver:
    """Apply environment overrides to configuration values.

    Parameters
    ----------
    prefix : str
        Root prefix identifying the application, e.g. ``CRUD_API``.
    lookup : Mapping or callable, optional
        Environment source. Defaults to the process environment.

    Examples
    --------
    >>> resolver = EnvironmentResolver("APP", {"APP_CACHE_TIME": "60"})
    >>> resolver.apply({"cacheTime": 10})
    {'cacheTime': '60'}
    """

    def __init__(self, prefix: str = ENV_PREFIX,
                 lookup: Union[None, Mapping[str, str], EnvLookup] = None):
        self.prefix = prefix
        self.lookup = as_lookup(lookup)

    def get(self, name: str) -> Optional[str]:
        """Return the variable's value, or None when unset or empty."""
        value = self.lookup(name)
        if value:
            return value
        return None

    def middlewares_override(self) -> Optional[str]:
        """Return the flat ``<PREFIX>_MIDDLEWARES`` list, if set."""
        return self.get(f"{self.prefix}_MIDDLEWARES")

    def apply(self, values: Mapping[str, Any]) -> dict:
        """Return a copy of ``values`` with environment overrides applied."""
        return self._apply(values, self.prefix)

    def _apply(self, values: Mapping[str, Any], prefix: str) -> dict:
        result = {}
        for key, value in values.items():
            name = f"{prefix}_{env_suffix(key)}"
            if isinstance(value, Mapping):
                result[key] = self._apply(value, self._strip_middlewares(name))
                continue
            override = self.get(name)
            if override is None:
                result[key] = value
            else:
                logger.debug("Overriding '%s' from %s", key, name)
                result[key] = override
        return result

    def _strip_middlewares(self, name: str) -> str:
        # CRUD_API_MIDDLEWARES_CORS -> CRUD_API_CORS
        segment = f"{self.prefix}_MIDDLEWARES_"
        if name.startswith(segment):
            return f"{self.prefix}_{name[len(segment):]}"
        return name
