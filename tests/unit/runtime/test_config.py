"""Unit tests for configuration loading and the context override system."""

from pathlib import Path

import pytest

from src.bookshelf.runtime.config.config_data import (
    AppConfig,
    AuthConfig,
    ConfigData,
    DatabaseConfig,
)
from src.bookshelf.runtime.config.config_template import (
    load_config,
    load_templated_yaml,
    substitute_env_vars,
)
from src.bookshelf.runtime.context import (
    AppContext,
    get_config,
    get_context,
    with_context,
)


class TestConfigData:
    """Defaults and validation of the configuration models."""

    def test_defaults(self):
        config = ConfigData()

        assert config.app.port == 5000
        assert config.app.graphql_path == "/gql"
        assert config.database.url == "mongodb://localhost:27017"
        assert config.database.id_prefix == "book_"
        assert config.auth.protected_operations == ["bookCreate"]
        assert config.client.notification_life_seconds == 3.0

    def test_blank_token_is_unset(self):
        assert AuthConfig(token="").token is None
        assert AuthConfig(token="  ").token is None

    def test_unknown_protected_operation_is_rejected(self):
        with pytest.raises(ValueError):
            AuthConfig(protected_operations=["bookPurge"])

    def test_pool_bounds(self):
        with pytest.raises(ValueError):
            DatabaseConfig(min_pool_size=10, max_pool_size=5)

    def test_graphql_path_gets_leading_slash(self):
        assert AppConfig(graphql_path="graphql").graphql_path == "/graphql"

    def test_introspection_disabled_in_production(self):
        assert AppConfig(environment="development").introspection
        assert not AppConfig(environment="production").introspection


class TestTemplatedYaml:
    """config.yaml loading with environment substitution."""

    def test_substitute_defaults_and_values(self, monkeypatch):
        monkeypatch.setenv("MONGO_DB", "library")
        monkeypatch.delenv("PORT", raising=False)

        assert substitute_env_vars("${MONGO_DB:-bookshelf}:${PORT:-5000}") == "library:5000"

    def test_required_variable_missing(self, monkeypatch):
        monkeypatch.delenv("MONGO_URI", raising=False)

        with pytest.raises(ValueError, match="MONGO_URI"):
            substitute_env_vars("${MONGO_URI:?set the connection string}")

    def test_load_templated_yaml(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("MONGO_URI", "mongodb://db.example:27017")
        monkeypatch.setenv("AUTH_TOKEN", "s3cret")
        monkeypatch.delenv("APP_ENVIRONMENT", raising=False)
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "config:\n"
            "  database:\n"
            "    url: ${MONGO_URI:-mongodb://localhost:27017}\n"
            "  auth:\n"
            "    token: \"${AUTH_TOKEN:-}\"\n"
            "    protected_operations: [bookCreate, bookDelete]\n"
        )

        config = load_templated_yaml(config_file)

        assert config.database.url == "mongodb://db.example:27017"
        assert config.auth.token == "s3cret"
        assert config.auth.protected_operations == ["bookCreate", "bookDelete"]
        assert config.app.port == 5000

    def test_environment_prefixed_overrides(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("APP_ENVIRONMENT", "test")
        monkeypatch.setenv("TEST_MONGO_DB", "bookshelf_ci")
        monkeypatch.setenv("MONGO_DB", "bookshelf")
        config_file = tmp_path / "config.yaml"
        config_file.write_text("config:\n  database:\n    name: ${MONGO_DB:-bookshelf}\n")

        assert load_templated_yaml(config_file).database.name == "bookshelf_ci"

    def test_invalid_config_raises_value_error(self, tmp_path: Path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("config:\n  app:\n    port: not-a-port\n")

        with pytest.raises(ValueError, match="Invalid configuration"):
            load_templated_yaml(config_file)

    def test_missing_file_falls_back_to_defaults(self, tmp_path: Path):
        assert load_config(tmp_path / "absent.yaml") == ConfigData()


class TestContextManager:
    """Test the context override functionality."""

    def test_default_context_available(self):
        context = get_context()

        assert isinstance(context, AppContext)
        assert context.config is get_config()

    def test_with_context_merges_partial_override(self):
        original = get_config()

        with with_context(ConfigData(auth=AuthConfig(token="override"))):
            config = get_config()
            assert config.auth.token == "override"
            assert config.database == original.database

        assert get_config() is original

    def test_nested_overrides(self):
        original_token = get_config().auth.token

        with with_context(ConfigData(app=AppConfig(port=6000))):
            with with_context(ConfigData(auth=AuthConfig(token="inner"))):
                assert get_config().app.port == 6000
                assert get_config().auth.token == "inner"
            assert get_config().app.port == 6000
            assert get_config().auth.token == original_token

    def test_none_override_is_noop(self):
        original = get_config()

        with with_context(None):
            assert get_config() is original

    def test_rejects_wrong_type(self):
        with pytest.raises(ValueError):
            with with_context({"app": {}}):
                pass
