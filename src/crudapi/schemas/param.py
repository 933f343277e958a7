"""ParamConfig: Built-in defaults for the crudapi service.

This module defines the canonical schema: the complete, ordered set of
top-level configuration keys and their defaults. It is the single source
of truth for defaults and for key validation.

Runtime code NEVER reads from ParamConfig directly - it only receives
InternalConfig.
"""

from typing import Optional
from pydantic import Field
from crudapi.schemas.base import CrudApiBaseModel


# Bitmask understood by the JSON output formatter
JSON_UNESCAPED_UNICODE = 256

DEFAULT_OPEN_API_BASE = '{"info":{"title":"PHP-CRUD-API","version":"1.0.0"}}'


class ParamConfig(CrudApiBaseModel):
    """Canonical configuration schema with base defaults.

    Field order is the schema order. ``driver``, ``address`` and ``port``
    default to None here; their real defaults depend on the driver and
    come from :func:`crudapi.schemas.driver.driver_defaults`.

    Usage
    -----
    This config is NOT used directly by runtime code. It serves as the
    base layer in config resolution:

        internal_cfg = resolve_config({"driver": "pgsql"})
    """

    driver: Optional[str] = None
    address: Optional[str] = None
    port: Optional[int] = None
    username: str = ""
    password: str = Field("", repr=False)
    database: str = ""
    command: str = ""
    tables: str = ""
    mapping: str = ""
    middlewares: str = "cors,errors"
    controllers: str = "records,geojson,openapi,status"
    custom_controllers: str = Field("", alias="customControllers")
    custom_open_api_builders: str = Field("", alias="customOpenApiBuilders")
    cache_type: str = Field("TempFile", alias="cacheType")
    cache_path: str = Field("", alias="cachePath")
    cache_time: int = Field(10, alias="cacheTime", ge=0)
    json_options: int = Field(JSON_UNESCAPED_UNICODE, alias="jsonOptions")
    debug: bool = False
    base_path: str = Field("", alias="basePath")
    open_api_base: str = Field(DEFAULT_OPEN_API_BASE, alias="openApiBase")

    def to_values(self) -> dict:
        """Return the defaults keyed by canonical key, in schema order."""
        return self.model_dump(by_alias=True)


def _schema_keys() -> tuple:
    return tuple(
        field.alias or name for name, field in ParamConfig.model_fields.items()
    )


# Canonical top-level keys, in schema order
SCHEMA_KEYS = _schema_keys()
