"""`crudapi` - runtime configuration for a REST data-access service.

Subpackages:
- schemas: Configuration defaults, merging, environment overrides, validation
"""

__version__ = "0.1.0"
