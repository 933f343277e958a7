"""Pydantic configuration schemas for the crudapi service.

This module provides the configuration pipeline: schema defaults, driver
defaults, middleware property decomposition, environment overrides and
the frozen runtime configuration.

Exports
-------
resolve_config : function
    Single entrypoint for configuration resolution
InternalConfig : class
    Fully validated, authoritative runtime configuration
MiddlewareConfig : class
    One middleware and its properties
ParamConfig : class
    Schema defaults (complete)
EnvironmentResolver : class
    Environment variable overrides
ConfigError, InvalidKeyError, UnknownDriverError : exceptions
    Resolution failures
"""

from crudapi.schemas.resolve import resolve_config
from crudapi.schemas.internal import InternalConfig, MiddlewareConfig
from crudapi.schemas.param import ParamConfig, SCHEMA_KEYS
from crudapi.schemas.driver import Driver, driver_defaults
from crudapi.schemas.environment import ENV_PREFIX, EnvironmentResolver
from crudapi.schemas.errors import ConfigError, InvalidKeyError, UnknownDriverError

__all__ = [
    'resolve_config',
    'InternalConfig',
    'MiddlewareConfig',
    'ParamConfig',
    'SCHEMA_KEYS',
    'Driver',
    'driver_defaults',
    'ENV_PREFIX',
    'EnvironmentResolver',
    'ConfigError',
    'InvalidKeyError',
    'UnknownDriverError',
]
