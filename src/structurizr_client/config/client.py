"""Configuration for the workspace API client and the content push CLI.

Values are resolved with explicit parameters taking precedence over environment
variables:

- ``STRUCTURIZR_HOST``: base address of the Structurizr server (required)
- ``STRUCTURIZR_ADMIN_API_KEY``: admin API key (required for the API client)
- ``STRUCTURIZR_TLS_INSECURE``: disable TLS verification for self-signed hosts
- ``STRUCTURIZR_TIMEOUT``: per-request timeout in seconds
- ``STRUCTURIZR_CLI_DIR``: directory holding ``structurizr.sh``/``structurizr.bat``

Example usage:
    config = ClientConfig.from_environment()
    config.validate_or_raise()
"""

from __future__ import annotations

import os
import sys
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from ..constants import (
    DEFAULT_TIMEOUT,
    DEFAULT_USER_AGENT,
    ENV_ADMIN_API_KEY,
    ENV_CLI_DIR,
    ENV_HOST,
    ENV_TIMEOUT,
    ENV_TLS_INSECURE,
)
from .base import ConfigurationError, ConfigValidationResult, Configuration

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def parse_bool(value: str, name: str) -> bool:
    """Parse a boolean environment value.

    Raises:
        ConfigurationError: If the value is not a recognised boolean
    """
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"Unable to parse {name} environment variable: {value!r} is not a boolean")


def _validate_base_url(url: Optional[str], result: ConfigValidationResult) -> None:
    if not url or not url.strip():
        result.add_error(f"Base URL is required (set it explicitly or use the {ENV_HOST} environment variable)")
        return

    if not (url.startswith("http://") or url.startswith("https://")):
        result.add_error("Base URL must start with 'http://' or 'https://' (e.g., 'https://structurizr.example.com')")
        return

    if not urlparse(url).netloc:
        result.add_error("Base URL must specify a hostname (e.g., 'https://structurizr.example.com')")


class ClientConfig(Configuration):
    """Settings for the workspace REST client.

    Attributes:
        base_url: Fully qualified server address, e.g. ``https://structurizr.example.com``
        admin_api_key: Admin API key sent with list/create/delete requests
        tls_insecure: Skip TLS certificate verification on the connection
        user_agent: Value of the ``User-Agent`` header
        timeout: Per-request timeout in seconds
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        admin_api_key: Optional[str] = None,
        tls_insecure: bool = False,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.base_url = base_url
        self.admin_api_key = admin_api_key
        self.tls_insecure = tls_insecure
        self.user_agent = user_agent
        self.timeout = timeout

    def validate(self, require_admin_key: bool = True) -> ConfigValidationResult:
        """Check all settings.

        ``require_admin_key`` is False for clients signing with workspace
        credentials instead of the admin key.
        """
        result = ConfigValidationResult.success_result()
        _validate_base_url(self.base_url, result)

        if require_admin_key and not self.admin_api_key:
            result.add_error(
                f"Admin API key is required (set it explicitly or use the {ENV_ADMIN_API_KEY} environment variable)"
            )

        if self.timeout is None or self.timeout <= 0:
            result.add_error("Timeout must be a positive number of seconds")

        if not self.user_agent:
            result.add_error("User agent cannot be empty")

        return result

    def to_dict(self) -> Dict[str, Any]:
        return {
            "base_url": self.base_url,
            "admin_api_key": "***" if self.admin_api_key else None,
            "tls_insecure": self.tls_insecure,
            "user_agent": self.user_agent,
            "timeout": self.timeout,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ClientConfig:
        return cls(
            base_url=data.get("base_url"),
            admin_api_key=data.get("admin_api_key"),
            tls_insecure=bool(data.get("tls_insecure", False)),
            user_agent=data.get("user_agent") or DEFAULT_USER_AGENT,
            timeout=float(data.get("timeout", DEFAULT_TIMEOUT)),
        )

    @classmethod
    def from_environment(
        cls,
        base_url: Optional[str] = None,
        admin_api_key: Optional[str] = None,
        tls_insecure: Optional[bool] = None,
        timeout: Optional[float] = None,
    ) -> ClientConfig:
        """Build a configuration from explicit values, falling back to the environment.

        Raises:
            ConfigurationError: If a boolean or numeric variable cannot be parsed
        """
        if tls_insecure is None:
            tls_insecure = parse_bool(os.environ.get(ENV_TLS_INSECURE, ""), ENV_TLS_INSECURE)

        if timeout is None:
            raw_timeout = os.environ.get(ENV_TIMEOUT)
            if raw_timeout:
                try:
                    timeout = float(raw_timeout)
                except ValueError as exc:
                    raise ConfigurationError(
                        f"Unable to parse {ENV_TIMEOUT} environment variable: {raw_timeout!r} is not a number"
                    ) from exc
            else:
                timeout = DEFAULT_TIMEOUT

        return cls(
            base_url=base_url or os.environ.get(ENV_HOST),
            admin_api_key=admin_api_key or os.environ.get(ENV_ADMIN_API_KEY),
            tls_insecure=tls_insecure,
            timeout=timeout,
        )


class CLIConfig(Configuration):
    """Settings for the external Structurizr CLI used to push workspace content.

    Attributes:
        base_url: Server address passed to the CLI (``/api`` is appended)
        working_dir: Directory containing the CLI launcher scripts
        platform: Platform identifier used to pick the launcher, defaults to ``sys.platform``
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        working_dir: Optional[str] = None,
        platform: Optional[str] = None,
    ):
        self.base_url = base_url
        self.working_dir = working_dir
        self.platform = platform or sys.platform

    @property
    def is_windows(self) -> bool:
        return self.platform.startswith("win")

    def validate(self) -> ConfigValidationResult:
        result = ConfigValidationResult.success_result()
        _validate_base_url(self.base_url, result)

        if not self.working_dir:
            result.add_error(
                f"CLI working directory is required (set it explicitly or use the {ENV_CLI_DIR} environment variable)"
            )
        elif not os.path.isdir(self.working_dir):
            result.add_error(f"CLI working directory does not exist: {self.working_dir}")

        return result

    def to_dict(self) -> Dict[str, Any]:
        return {"base_url": self.base_url, "working_dir": self.working_dir, "platform": self.platform}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> CLIConfig:
        return cls(
            base_url=data.get("base_url"),
            working_dir=data.get("working_dir"),
            platform=data.get("platform"),
        )

    @classmethod
    def from_environment(cls, base_url: Optional[str] = None, working_dir: Optional[str] = None) -> CLIConfig:
        return cls(
            base_url=base_url or os.environ.get(ENV_HOST),
            working_dir=working_dir or os.environ.get(ENV_CLI_DIR),
        )
