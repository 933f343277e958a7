"""Test dotted middleware property routing and execution order."""

import pytest

from crudapi.schemas import InvalidKeyError
from crudapi.schemas.middleware import declared_middlewares, parse_middlewares, split_list


class TestSplitList:

    def test_trims_and_drops_empty_items(self):
        """Whitespace is trimmed and empty items are dropped."""
        assert split_list(" a, b ,, c ") == ["a", "b", "c"]

    def test_preserves_duplicates_and_order(self):
        """Duplicates stay, in input order."""
        assert split_list("b,a,b") == ["b", "a", "b"]

    def test_empty_string(self):
        assert split_list("") == []


class TestParseMiddlewares:
    """parse_middlewares() on merged value maps."""

    def test_reverses_declaration_order(self):
        """Execution order is the reverse of declaration order."""
        parsed = parse_middlewares({"middlewares": "cors,errors,customLog"})

        assert list(parsed["middlewares"]) == ["customLog", "errors", "cors"]

    def test_routes_dotted_key(self):
        """A dotted key lands in its middleware's properties."""
        parsed = parse_middlewares({
            "middlewares": "cors,errors",
            "errors.exposedHeaders": "X-Foo",
        })

        assert parsed["middlewares"]["errors"] == {"exposedHeaders": "X-Foo"}
        assert parsed["middlewares"]["cors"] == {}
        assert "errors.exposedHeaders" not in parsed

    def test_undeclared_middleware_rejected(self):
        """A dotted key naming an undeclared middleware is an invalid key."""
        with pytest.raises(InvalidKeyError) as exc_info:
            parse_middlewares({"middlewares": "cors,errors", "bogus.prop": "x"})

        assert exc_info.value.key == "bogus.prop"
        assert str(exc_info.value) == "Config has invalid value 'bogus.prop'"

    def test_splits_on_first_dot_only(self):
        """Property names may contain dots."""
        parsed = parse_middlewares({"middlewares": "cors", "cors.a.b": "1"})

        assert parsed["middlewares"]["cors"] == {"a.b": "1"}

    def test_plain_keys_copied(self):
        """Keys without a dot pass through unchanged."""
        parsed = parse_middlewares({"middlewares": "cors", "port": 3306, "debug": True})

        assert parsed["port"] == 3306
        assert parsed["debug"] is True

    def test_duplicate_declaration_collapses(self):
        """Repeated names become one entry at the first declared position."""
        parsed = parse_middlewares({"middlewares": "cors,errors,cors"})

        assert list(parsed["middlewares"]) == ["errors", "cors"]

    def test_whitespace_in_declaration(self):
        """Declared names are trimmed."""
        parsed = parse_middlewares({"middlewares": " cors , errors ", "cors.x": "1"})

        assert parsed["middlewares"] == {"errors": {}, "cors": {"x": "1"}}

    def test_resolved_registry_kept_in_order(self):
        """An already resolved mapping is not reversed a second time."""
        parsed = parse_middlewares({
            "middlewares": {"errors": {}, "cors": {"allowedOrigins": "*"}},
            "errors.debug": "true",
        })

        assert list(parsed["middlewares"]) == ["errors", "cors"]
        assert parsed["middlewares"]["errors"] == {"debug": "true"}
        assert parsed["middlewares"]["cors"] == {"allowedOrigins": "*"}

    def test_input_not_mutated(self):
        """The registry copy does not alias the caller's property maps."""
        registry = {"cors": {}}
        parse_middlewares({"middlewares": registry, "cors.x": "1"})

        assert registry == {"cors": {}}


class TestDeclaredMiddlewares:

    def test_string_declaration(self):
        assert declared_middlewares("cors,errors") == {"cors": {}, "errors": {}}

    def test_empty_declaration(self):
        """No middlewares at all is allowed."""
        assert declared_middlewares("") == {}


class TestMiddlewareResolution:
    """Middleware registry in the resolved configuration."""

    def test_default_middlewares(self, internal_config):
        """Defaults declare cors,errors; execution order is errors, cors."""
        assert internal_config.middleware_names() == ["errors", "cors"]

    def test_resolved_properties(self, make_config):
        """Resolved registry exposes properties per middleware."""
        config = make_config({
            "middlewares": "cors,errors",
            "errors.exposedHeaders": "X-Foo",
        })

        assert config.middleware_map()["errors"]["exposedHeaders"] == "X-Foo"
        assert config.get_middleware("errors").properties == {"exposedHeaders": "X-Foo"}
        assert config.get_middleware("missing") is None

    def test_bogus_middleware_with_none_value_rejected(self, make_config):
        """A None value does not hide a dotted key for an undeclared middleware."""
        with pytest.raises(InvalidKeyError) as exc_info:
            make_config({"bogus.prop": None})

        assert exc_info.value.key == "bogus.prop"

    def test_declared_middleware_with_none_value_skipped(self, make_config):
        """A None property of a declared middleware is not supplied."""
        config = make_config({"cors.allowedOrigins": None})

        assert config.middleware_map()["cors"] == {}

    def test_dotted_keys_checked_against_environment_list(self, make_config, fake_env):
        """Dotted keys must match the list from <PREFIX>_MIDDLEWARES."""
        fake_env["CRUD_API_MIDDLEWARES"] = "errors"

        with pytest.raises(InvalidKeyError, match="cors.allowedOrigins"):
            make_config({"cors.allowedOrigins": None})

    def test_scalar_properties_stringified(self, make_config):
        """Non-string property values are stored as strings."""
        config = make_config({
            "middlewares": "cors",
            "cors.maxAge": 1728000,
            "cors.allowCredentials": True,
        })

        assert config.middleware_map()["cors"] == {
            "maxAge": "1728000",
            "allowCredentials": "true",
        }

    def test_bogus_middleware_rejected(self, make_config):
        """Resolution fails on a dotted key for an undeclared middleware."""
        with pytest.raises(InvalidKeyError, match="bogus.prop"):
            make_config({"middlewares": "cors,errors", "bogus.prop": "x"})

    def test_middleware_map_is_a_copy(self, make_config):
        """Mutating the returned map does not touch the resolved config."""
        config = make_config({"middlewares": "cors", "cors.x": "1"})
        config.middleware_map()["cors"]["x"] = "2"

        assert config.middleware_map()["cors"]["x"] == "1"

    def test_middleware_list_accepted(self, make_config):
        """A list of names declares middlewares like a comma string."""
        config = make_config(middlewares=["cors", "errors", "customLog"])

        assert config.middleware_names() == ["customLog", "errors", "cors"]
