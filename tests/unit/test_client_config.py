"""Tests for ClientConfig and CLIConfig."""

from __future__ import annotations

import pytest

from structurizr_client.config import (
    CLIConfig,
    ClientConfig,
    ConfigurationError,
    ConfigValidationError,
    ConfigValidationResult,
    Configuration,
)
from structurizr_client.config.client import parse_bool
from structurizr_client.constants import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT


@pytest.fixture
def clean_env(monkeypatch):
    for name in (
        "STRUCTURIZR_HOST",
        "STRUCTURIZR_ADMIN_API_KEY",
        "STRUCTURIZR_TLS_INSECURE",
        "STRUCTURIZR_TIMEOUT",
        "STRUCTURIZR_CLI_DIR",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestValidationFramework:
    def test_configuration_is_abstract(self):
        with pytest.raises(TypeError):
            Configuration()

    def test_result_states(self):
        result = ConfigValidationResult.success_result()
        assert result.is_valid
        result.add_error("broken")
        assert not result.is_valid
        assert result.error_count == 1

        failure = ConfigValidationResult.failure_result(["a", "b"])
        assert failure.errors == ["a", "b"]

    def test_validation_error_is_configuration_error(self):
        assert issubclass(ConfigValidationError, ConfigurationError)


class TestClientConfig:
    def test_valid(self):
        config = ClientConfig(base_url="https://structurizr.example.com", admin_api_key="admin")

        assert config.is_valid()
        assert config.tls_insecure is False
        assert config.timeout == DEFAULT_TIMEOUT
        assert config.user_agent == DEFAULT_USER_AGENT

    def test_collects_every_error(self):
        result = ClientConfig(base_url="ftp://host", timeout=0).validate()

        assert result.error_count == 3
        assert any("http://" in error for error in result.errors)
        assert any("Admin API key" in error for error in result.errors)
        assert any("Timeout" in error for error in result.errors)

    def test_admin_key_optional_for_workspace_credentials(self):
        config = ClientConfig(base_url="https://structurizr.example.com")

        assert config.validate(require_admin_key=False).is_valid
        assert not config.validate().is_valid

    def test_missing_hostname(self):
        result = ClientConfig(base_url="https://", admin_api_key="admin").validate()

        assert result.errors == ["Base URL must specify a hostname (e.g., 'https://structurizr.example.com')"]

    def test_validate_or_raise_lists_errors(self):
        with pytest.raises(ConfigValidationError) as exc_info:
            ClientConfig().validate_or_raise()

        message = str(exc_info.value)
        assert message.startswith("Configuration validation failed:")
        assert "  - Base URL is required" in message

    def test_to_dict_masks_key(self):
        data = ClientConfig(base_url="https://h.example.com", admin_api_key="admin").to_dict()

        assert data["admin_api_key"] == "***"
        assert ClientConfig.from_dict({**data, "admin_api_key": "admin"}).admin_api_key == "admin"

    def test_from_environment(self, clean_env):
        clean_env.setenv("STRUCTURIZR_HOST", "https://env.example.com")
        clean_env.setenv("STRUCTURIZR_ADMIN_API_KEY", "env-key")
        clean_env.setenv("STRUCTURIZR_TLS_INSECURE", "true")
        clean_env.setenv("STRUCTURIZR_TIMEOUT", "12.5")

        config = ClientConfig.from_environment()

        assert config.base_url == "https://env.example.com"
        assert config.admin_api_key == "env-key"
        assert config.tls_insecure is True
        assert config.timeout == 12.5

    def test_explicit_values_take_precedence(self, clean_env):
        clean_env.setenv("STRUCTURIZR_HOST", "https://env.example.com")
        clean_env.setenv("STRUCTURIZR_TLS_INSECURE", "true")

        config = ClientConfig.from_environment(base_url="https://explicit.example.com", tls_insecure=False)

        assert config.base_url == "https://explicit.example.com"
        assert config.tls_insecure is False

    def test_defaults_from_empty_environment(self, clean_env):
        config = ClientConfig.from_environment()

        assert config.base_url is None
        assert config.tls_insecure is False
        assert config.timeout == DEFAULT_TIMEOUT

    def test_unparseable_tls_flag(self, clean_env):
        clean_env.setenv("STRUCTURIZR_TLS_INSECURE", "sometimes")

        with pytest.raises(ConfigurationError, match="STRUCTURIZR_TLS_INSECURE"):
            ClientConfig.from_environment()

    def test_unparseable_timeout(self, clean_env):
        clean_env.setenv("STRUCTURIZR_TIMEOUT", "soon")

        with pytest.raises(ConfigurationError, match="STRUCTURIZR_TIMEOUT"):
            ClientConfig.from_environment()


@pytest.mark.parametrize(
    "value,expected",
    [("1", True), ("TRUE", True), (" yes ", True), ("on", True), ("0", False), ("false", False), ("", False)],
)
def test_parse_bool(value, expected):
    assert parse_bool(value, "FLAG") is expected


class TestCLIConfig:
    def test_valid(self, tmp_path):
        config = CLIConfig(base_url="https://h.example.com", working_dir=str(tmp_path), platform="linux")

        assert config.is_valid()
        assert config.is_windows is False

    def test_windows_platform(self):
        assert CLIConfig(platform="win32").is_windows is True

    def test_missing_working_dir(self, tmp_path):
        result = CLIConfig(base_url="https://h.example.com", working_dir=str(tmp_path / "missing")).validate()

        assert result.errors == [f"CLI working directory does not exist: {tmp_path / 'missing'}"]

    def test_from_environment(self, clean_env, tmp_path):
        clean_env.setenv("STRUCTURIZR_HOST", "https://env.example.com")
        clean_env.setenv("STRUCTURIZR_CLI_DIR", str(tmp_path))

        config = CLIConfig.from_environment()

        assert config.base_url == "https://env.example.com"
        assert config.working_dir == str(tmp_path)
        assert CLIConfig.from_dict(config.to_dict()).working_dir == str(tmp_path)
