"""
Configuration type definitions and exceptions for terrain-sprites.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class ConfigVersion(Enum):
    """Stored configuration layout versions."""
    V1_0 = "1.0"
    CURRENT = V1_0


class ConfigError(Exception):
    """Raised when the configuration cannot be used to build the service."""


@dataclass
class ValidationResult:
    """Problems found in the configuration.

    Errors make the configuration unusable; warnings are only reported.
    """
    errors: List[str] = field(default_factory=lambda: [])
    warnings: List[str] = field(default_factory=lambda: [])

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def error(self, message: str) -> None:
        self.errors.append(message)

    def warn(self, message: str) -> None:
        self.warnings.append(message)
