"""Base configuration classes and validation framework.

Every configuration object in this package implements :class:`Configuration`:

- ``validate()`` returns a :class:`ConfigValidationResult` listing every problem
  instead of stopping at the first one
- ``to_dict()``/``from_dict()`` give a JSON-compatible form for debugging;
  secrets are masked in ``to_dict()``
- ``validate_or_raise()`` turns a failed result into :class:`ConfigValidationError`
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List


class ConfigurationError(Exception):
    """Base exception for all configuration-related errors."""

    pass


class ConfigValidationError(ConfigurationError):
    """Raised when a configuration fails validation."""

    pass


@dataclass
class ConfigValidationResult:
    """Result of configuration validation.

    Attributes:
        success: True if validation passed, False otherwise
        errors: Messages describing each validation failure
    """

    success: bool
    errors: List[str]

    @property
    def is_valid(self) -> bool:
        return self.success

    @property
    def error_count(self) -> int:
        return len(self.errors)

    def add_error(self, error: str) -> None:
        """Record an error and mark the result as failed."""
        self.errors.append(error)
        self.success = False

    @classmethod
    def success_result(cls) -> ConfigValidationResult:
        return cls(success=True, errors=[])

    @classmethod
    def failure_result(cls, errors: List[str]) -> ConfigValidationResult:
        return cls(success=False, errors=errors.copy())


class Configuration(ABC):
    """Abstract base class for client configuration types."""

    @abstractmethod
    def validate(self) -> ConfigValidationResult:
        """Check all values and return every problem found."""
        pass

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-compatible dictionary with secrets masked."""
        pass

    @classmethod
    @abstractmethod
    def from_dict(cls, data: Dict[str, Any]) -> Configuration:
        """Create a configuration from dictionary data."""
        pass

    def is_valid(self) -> bool:
        return self.validate().success

    def validate_or_raise(self, **kwargs: Any) -> None:
        """Validate and raise :class:`ConfigValidationError` on failure.

        Keyword arguments are passed through to :meth:`validate`.
        """
        result = self.validate(**kwargs)
        if not result.success:
            error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {error}" for error in result.errors)
            raise ConfigValidationError(error_msg)
