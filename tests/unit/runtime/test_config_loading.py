"""Unit tests for configuration loading and context overrides."""

import asyncio
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from src.signin.runtime.config.config_data import (
    AuthConfig,
    ConfigData,
    RedisConfig,
    SamlConfig,
)
from src.signin.runtime.config.config_template import (
    apply_environment_overrides,
    load_templated_yaml,
    substitute_env_vars,
)
from src.signin.runtime.context import get_config, with_context

REPOSITORY_CONFIG = Path(__file__).parents[3] / "config.yaml"


class TestSubstituteEnvVars:
    def test_substitute_simple_env_var(self):
        with patch.dict(os.environ, {"TEST_VAR": "test_value"}):
            assert substitute_env_vars("${TEST_VAR}") == "test_value"

    def test_default_used_when_missing(self):
        with patch.dict(os.environ, {}, clear=True):
            assert substitute_env_vars("${MISSING_VAR:-fallback}") == "fallback"

    def test_required_with_message(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValueError, match="set the LDAP password"):
                substitute_env_vars("${LDAP_PASS:?set the LDAP password}")

    def test_required_missing(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValueError, match="MISSING_VAR not set"):
                substitute_env_vars("${MISSING_VAR}")

    def test_environment_prefix_overrides(self):
        with patch.dict(os.environ, {"PRODUCTION_LOG_LEVEL": "WARNING"}, clear=True):
            apply_environment_overrides("production")
            assert os.environ["LOG_LEVEL"] == "WARNING"


def _write(tmp_path: Path, body: str) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(body)
    return path


class TestLoadTemplatedYaml:
    def test_loads_sections(self, tmp_path: Path):
        path = _write(
            tmp_path,
            """
config:
  app:
    environment: test
    home_url: ${HOME_URL:-/dashboard}
  auth:
    method: ldap
  saml:
    enabled: true
    logout_url: https://idp.test/slo
  ldap:
    user_to_groups: true
    remove_from_groups: true
""",
        )

        with patch.dict(os.environ, {}, clear=True):
            config = load_templated_yaml(path)

        assert config.app.environment == "test"
        assert config.app.home_url == "/dashboard"
        assert config.auth.method == "ldap"
        assert config.saml.logout_url == "https://idp.test/slo"
        assert config.ldap.remove_from_groups is True
        assert config.auth.registration_role == "viewer"

    def test_disabled_social_drivers_are_dropped(self, tmp_path: Path):
        path = _write(
            tmp_path,
            """
config:
  social:
    github:
      label: GitHub
      enabled: true
    google:
      label: Google
      enabled: false
""",
        )

        config = load_templated_yaml(path)

        assert list(config.social) == ["github"]

    def test_insecure_saml_logout_rejected_in_production(self, tmp_path: Path):
        path = _write(
            tmp_path,
            """
config:
  app:
    environment: production
  saml:
    enabled: true
    logout_url: http://idp.test/slo
""",
        )

        with pytest.raises(ValueError, match="saml.logout_url"):
            load_templated_yaml(path)

    def test_invalid_values_rejected(self, tmp_path: Path):
        path = _write(tmp_path, "config:\n  auth:\n    method: kerberos\n")

        with pytest.raises(ValueError, match="Invalid configuration"):
            load_templated_yaml(path)

    def test_empty_file_rejected(self, tmp_path: Path):
        with pytest.raises(ValueError, match="Failed to parse YAML"):
            load_templated_yaml(_write(tmp_path, ""))

    def test_repository_config_loads_with_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = load_templated_yaml(REPOSITORY_CONFIG)

        assert config.app.environment == "development"
        assert config.auth.method == "standard"
        assert config.database.url == "sqlite:///./signin.db"
        assert config.social == {}
        assert "{identifier}" in config.ldap.user_filter
        assert "{hash}" in config.avatar.url_template

    def test_repository_config_honours_environment(self):
        env = {"AUTH_METHOD": "ldap", "GITHUB_LOGIN_ENABLED": "true"}
        with patch.dict(os.environ, env, clear=True):
            config = load_templated_yaml(REPOSITORY_CONFIG)

        assert config.auth.method == "ldap"
        assert list(config.social) == ["github"]


class TestConfigData:
    def test_defaults(self):
        config = ConfigData()

        assert config.auth.method == "standard"
        assert config.saml.enabled is False
        assert config.security.session_cookie_name == "session_id"
        assert config.app.base_url == "http://localhost:8000"

    def test_redis_connection_string_embeds_password(self):
        redis = RedisConfig(url="redis://cache:6379/0", password="pw")

        assert redis.connection_string == "redis://:pw@cache:6379/0"


class TestWithContext:
    def test_override_is_scoped(self):
        original = get_config()

        with with_context(ConfigData(saml=SamlConfig(enabled=True))):
            assert get_config().saml.enabled is True
            assert get_config().auth.method == original.auth.method

        assert get_config() is original

    def test_nested_overrides_merge(self):
        with with_context(ConfigData(auth=AuthConfig(method="ldap"))):
            outer = get_config()
            with with_context(ConfigData(saml=SamlConfig(enabled=True))):
                config = get_config()
                assert config.auth.method == "ldap"
                assert config.saml.enabled is True
            assert get_config() is outer

    def test_attribute_assignment_counts_as_override(self):
        override = ConfigData()
        override.app.logged_out_url = "/goodbye"

        with with_context(override):
            assert get_config().app.logged_out_url == "/goodbye"

    def test_rejects_non_config(self):
        with pytest.raises(ValueError, match="must be ConfigData"):
            with with_context({"app": {}}):  # type: ignore[arg-type]
                pass

    @pytest.mark.asyncio
    async def test_tasks_are_isolated(self):
        async def read_method(method: str) -> str:
            with with_context(ConfigData(auth=AuthConfig(method=method))):
                await asyncio.sleep(0)
                return get_config().auth.method

        results = await asyncio.gather(read_method("ldap"), read_method("standard"))

        assert results == ["ldap", "standard"]
