"""Configuration helpers for the Structurizr workspace client."""

from .base import ConfigurationError, ConfigValidationError, ConfigValidationResult, Configuration
from .client import CLIConfig, ClientConfig, parse_bool

__all__ = [
    "CLIConfig",
    "ClientConfig",
    "ConfigValidationError",
    "ConfigValidationResult",
    "Configuration",
    "ConfigurationError",
    "parse_bool",
]
