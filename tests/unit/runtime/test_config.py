"""Unit tests for configuration loading and the application context."""

import os
import textwrap
from pathlib import Path
from unittest.mock import patch

import pytest

from src.account_admin.runtime.config.config_data import ConfigData
from src.account_admin.runtime.config.config_template import (
    load_templated_yaml,
    substitute_env_vars,
    validate_config_env_vars,
)
from src.account_admin.runtime.context import (
    AppContext,
    get_config,
    get_context,
    with_context,
)


class TestSubstituteEnvVars:
    def test_default_used_when_unset(self):
        with patch.dict(os.environ, {}, clear=True):
            assert substitute_env_vars("${DB:-sqlite:///x.db}") == "sqlite:///x.db"

    def test_environment_wins_over_default(self):
        with patch.dict(os.environ, {"DB": "postgresql://db"}, clear=True):
            assert substitute_env_vars("${DB:-sqlite:///x.db}") == "postgresql://db"

    def test_required_variable_missing(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValueError, match="KEYCLOAK_URL"):
                substitute_env_vars("${KEYCLOAK_URL}")

    def test_custom_error_message(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValueError, match="set the admin password"):
                substitute_env_vars("${KC_PASS:?set the admin password}")


class TestLoadTemplatedYaml:
    def test_loads_config_section(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            textwrap.dedent(
                """
                config:
                  identity_provider:
                    base_url: ${KC_URL:-http://kc.local}
                    timeout_seconds: 2.5
                  accounts:
                    min_password_length: ${MIN_PW:-8}
                """
            )
        )

        with patch.dict(os.environ, {"APP_ENVIRONMENT": "development"}, clear=True):
            config = load_templated_yaml(config_file)

        assert config.identity_provider.base_url == "http://kc.local"
        assert config.identity_provider.timeout_seconds == 2.5
        assert config.accounts.min_password_length == 8
        assert config.database.url == "sqlite:///./database.db"

    def test_environment_prefixed_overrides(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("config:\n  database:\n    url: ${DATABASE_URL:-sqlite://}\n")

        env = {
            "APP_ENVIRONMENT": "production",
            "PRODUCTION_DATABASE_URL": "postgresql://prod/db",
        }
        with patch.dict(os.environ, env, clear=True):
            config = load_templated_yaml(config_file)

        assert config.database.url == "postgresql://prod/db"
        assert config.database.is_sqlite is False

    def test_placeholders_in_comments_are_ignored(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "# Reference a variable as ${VAR}\n"
            "config:\n"
            "  accounts:\n"
            "    # ${MIN_PW:?must be set}\n"
            "    min_password_length: 9\n"
        )

        with patch.dict(os.environ, {}, clear=True):
            config = load_templated_yaml(config_file)

        assert config.accounts.min_password_length == 9

    def test_shipped_config_loads_with_defaults(self):
        config_file = Path(__file__).resolve().parents[3] / "config.yaml"

        with patch.dict(os.environ, {}, clear=True):
            config = load_templated_yaml(config_file)

        assert config.app.environment == "development"
        assert config.database.url == "sqlite:///./database.db"
        assert config.identity_provider.base_url == "http://localhost:8080"
        assert config.identity_provider.timeout_seconds == 10
        assert config.accounts.min_password_length == 6

    def test_invalid_values_rejected(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("config:\n  logging:\n    format: xml\n")

        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValueError, match="Invalid configuration"):
                load_templated_yaml(config_file)


def test_validate_config_env_vars_reports_missing():
    with patch.dict(os.environ, {"KEYCLOAK_ADMIN_USERNAME": "admin"}, clear=True):
        missing = validate_config_env_vars()

    assert list(missing) == ["KEYCLOAK_ADMIN_PASSWORD"]


class TestContext:
    def test_default_context_available(self):
        context = get_context()

        assert isinstance(context, AppContext)
        assert context.config is get_config()

    def test_override_is_scoped_and_merged(self):
        original = get_config()
        override = ConfigData()
        override.accounts.min_password_length = 12

        with with_context(override):
            config = get_config()
            assert config.accounts.min_password_length == 12
            assert config.identity_provider.realm == original.identity_provider.realm

        assert get_config() is original

    def test_nested_overrides(self):
        outer = ConfigData()
        outer.identity_provider.realm = "outer"
        inner = ConfigData()
        inner.accounts.min_password_length = 20

        with with_context(outer):
            with with_context(inner):
                config = get_config()
                assert config.identity_provider.realm == "outer"
                assert config.accounts.min_password_length == 20
            assert get_config().accounts.min_password_length == outer.accounts.min_password_length

    def test_rejects_non_config_override(self):
        with pytest.raises(ValueError):
            with with_context({"accounts": {}}):
                pass
