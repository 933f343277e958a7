"""Base Pydantic model with strict defaults for crudapi configs.

All configuration schemas inherit from this base so that defaults, driver
defaults and the resolved configuration validate the same way.
"""

from pydantic import BaseModel, ConfigDict


class CrudApiBaseModel(BaseModel):
    """Base model for all crudapi configuration schemas.

    Enforces strict validation:
    - No extra fields allowed
    - Validates assignments after initialization
    - Accepts both field names and canonical (camelCase) aliases

    String values are passed through untouched: credentials and paths
    must not lose surrounding whitespace.
    """

    model_config = ConfigDict(
        extra='forbid',           # Reject unknown fields
        validate_assignment=True, # Validate on field mutation
        use_enum_values=True,     # Store drivers as plain strings
        populate_by_name=True,    # Allow 'cache_time' and 'cacheTime'
    )
