"""InternalConfig: Authoritative runtime configuration.

This is the ONLY config schema that the HTTP and database layers see. It is
fully validated, typed and frozen. Raw string forms (comma lists,
``key=value`` lists, JSON documents) are decoded once here so consumers
never parse configuration themselves.
"""

import json
from typing import Any, Mapping, Optional
from pydantic import ConfigDict, Field, field_validator

from crudapi.schemas.base import CrudApiBaseModel
from crudapi.schemas.driver import Driver
from crudapi.schemas.middleware import split_list


def parse_mapping(value: str) -> dict:
    """Parse ``"a=1,b=2"`` into ``{"a": "1", "b": "2"}``.

    Entries are split on the first ``=``. Entries without ``=``, with an
    empty name or with a repeated name are rejected.
    """
    mapping = {}
    for entry in split_list(value):
        if "=" not in entry:
            raise ValueError(f"mapping entry '{entry}' has no '='")
        left, right = (part.strip() for part in entry.split("=", 1))
        if not left:
            raise ValueError(f"mapping entry '{entry}' has an empty name")
        if left in mapping:
            raise ValueError(f"mapping entry '{left}' is defined twice")
        mapping[left] = right
    return mapping


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    if isinstance(value, (str, int, float)):
        return str(value)
    raise ValueError(f"unsupported property value {value!r}")


class MiddlewareConfig(CrudApiBaseModel):
    """One middleware with its properties."""
    name: str
    properties: dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(
        extra='forbid',
        validate_assignment=True,
        use_enum_values=True,
        populate_by_name=True,
        frozen=True,  # Immutable after construction
    )

    @field_validator("properties", mode="before")
    @classmethod
    def stringify_properties(cls, v):
        """Property values are strings; scalars are converted."""
        if isinstance(v, Mapping):
            return {str(key): _stringify(value) for key, value in v.items()}
        return v


class InternalConfig(CrudApiBaseModel):
    """Authoritative runtime configuration.

    Built once by :func:`crudapi.schemas.resolve.resolve_config`. Fields are
    read directly:

        config = resolve_config({"driver": "pgsql", "tables": "posts,users"})
        config.port               # 5432
        config.tables             # ('posts', 'users')
        config.middleware_names() # ['errors', 'cors']

    Input accepts both field names and the canonical camelCase keys
    (``cacheTime``). Strings coming from the environment are coerced to the
    field type.
    """

    driver: Driver
    address: str
    port: int = Field(ge=0, le=65535)
    username: str
    password: str = Field(repr=False)
    database: str
    command: str
    tables: tuple[str, ...]
    mapping: dict[str, str]
    middlewares: tuple[MiddlewareConfig, ...]
    controllers: tuple[str, ...]
    custom_controllers: tuple[str, ...] = Field(alias="customControllers")
    custom_open_api_builders: tuple[str, ...] = Field(alias="customOpenApiBuilders")
    cache_type: str = Field(alias="cacheType")
    cache_path: str = Field(alias="cachePath")
    cache_time: int = Field(alias="cacheTime", ge=0)
    json_options: int = Field(alias="jsonOptions")
    debug: bool
    base_path: str = Field(alias="basePath")
    open_api_base: dict[str, Any] = Field(alias="openApiBase")

    model_config = ConfigDict(
        extra='forbid',
        validate_assignment=True,
        use_enum_values=True,
        populate_by_name=True,
        frozen=True,  # Immutable after construction
    )

    @field_validator(
        "tables", "controllers", "custom_controllers", "custom_open_api_builders",
        mode="before",
    )
    @classmethod
    def split_comma_list(cls, v):
        """Split ``" a, b ,, c "`` into ``("a", "b", "c")``."""
        if isinstance(v, str):
            return tuple(split_list(v))
        return v

    @field_validator("mapping", mode="before")
    @classmethod
    def parse_mapping_list(cls, v):
        if isinstance(v, str):
            return parse_mapping(v)
        return v

    @field_validator("middlewares", mode="before")
    @classmethod
    def build_registry(cls, v):
        """Turn an ordered ``{name: properties}`` mapping into the registry."""
        if isinstance(v, Mapping):
            return tuple(
                {"name": name, "properties": properties}
                for name, properties in v.items()
            )
        return v

    @field_validator("open_api_base", mode="before")
    @classmethod
    def decode_open_api_base(cls, v):
        """Decode the OpenAPI base document; it must be a JSON object."""
        if isinstance(v, str):
            document = json.loads(v)
            if not isinstance(document, dict):
                raise ValueError("openApiBase must be a JSON object")
            return document
        return v

    def middleware_names(self) -> list:
        """Middleware names in execution order."""
        return [middleware.name for middleware in self.middlewares]

    def middleware_map(self) -> dict:
        """Return ``{name: {property: value}}`` in execution order."""
        return {
            middleware.name: dict(middleware.properties)
            for middleware in self.middlewares
        }

    def get_middleware(self, name: str) -> Optional[MiddlewareConfig]:
        for middleware in self.middlewares:
            if middleware.name == name:
                return middleware
        return None

    def to_values(self) -> dict:
        """Dump back into the flat caller-value shape, keyed canonically.

        Feeding the result to ``resolve_config`` reproduces this config.
        """
        values = self.model_dump(by_alias=True)
        values["middlewares"] = self.middleware_map()
        return values
