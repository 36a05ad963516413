"""
Persistent configuration for terrain-sprites.

Settings are kept in QSettings (native store or an INI file) and grouped
into subsystems: ``paths``, ``sprites`` and ``logging``.

Usage:
    from terrain_sprites.settings import AppSettings

    settings = AppSettings(settings_file="terrain_sprites.ini")
    if not settings.validate().is_valid:
        ...
"""

from .core import AppSettings
from .types import ConfigVersion, ConfigError, ValidationResult
from .sprites import SpriteSettings

__all__ = [
    "AppSettings",
    "ConfigVersion",
    "ConfigError",
    "ValidationResult",
    "SpriteSettings",
]
