"""Error taxonomy for configuration resolution.

Resolution fails fast and atomically: either a complete InternalConfig
is produced or one of these exceptions propagates to the caller.

Key distinction:
- InvalidKeyError: a key that is not part of the canonical schema
- UnknownDriverError: a driver without known defaults
- pydantic.ValidationError: a value of the wrong shape (bad mapping,
  bad JSON, non-numeric port, ...)

All of them are ValueError subclasses so callers can treat every
configuration problem uniformly.
"""


class ConfigError(ValueError):
    """Base class for configuration resolution errors."""
    pass


class InvalidKeyError(ConfigError):
    """Raised when a key is not part of the canonical schema.

    Also raised for dotted ``middleware.property`` keys whose middleware
    was not declared in ``middlewares``.
    """

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Config has invalid value '{key}'")


class UnknownDriverError(ConfigError):
    """Raised when no defaults exist for the requested database driver."""

    def __init__(self, driver):
        self.driver = driver
        super().__init__(f"Config has unknown driver '{driver}'")
