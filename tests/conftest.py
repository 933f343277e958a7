"""Root-level pytest fixtures for the crudapi test suite.

Configuration is always resolved against an injected environment so the
developer's shell never leaks into the tests.
"""

import pytest

from crudapi.schemas import resolve_config


@pytest.fixture
def fake_env():
    """Empty, test-owned environment. Add variables by item assignment."""
    return {}


@pytest.fixture
def make_config(fake_env):
    """Factory fixture for resolving configs against ``fake_env``.

    Examples
    --------
    >>> def test_custom_port(make_config):
    ...     config = make_config(port=3307)
    ...     assert config.port == 3307
    """
    def _make(values=None, prefix="CRUD_API", **overrides):
        """Resolve ``values`` (plus keyword overrides) into an InternalConfig."""
        merged = dict(values or {})
        merged.update(overrides)
        return resolve_config(merged, env=fake_env, prefix=prefix)

    return _make


@pytest.fixture
def internal_config(make_config):
    """Fully resolved configuration with no caller values."""
    return make_config()
