"""
Core settings management for terrain-sprites.
"""

import logging
from pathlib import Path
from typing import Any, Optional, Union

from PySide6.QtCore import QSettings

from .base import SettingsGroup
from .logging import LoggingSettings
from .migration import SettingsMigrator
from .paths import PathSettings
from .sprites import SpriteSettings
from .types import ConfigVersion, ValidationResult
from .validation import SettingsValidator

logger = logging.getLogger(__name__)

ORGANIZATION = "terrain_sprites"
APPLICATION = "terrain_sprites"


def _delegate(subsystem: str, name: str, read_only: bool = False) -> property:
    """Expose ``self.<subsystem>.<name>`` directly on ``AppSettings``."""

    def getter(self: "AppSettings") -> Any:
        return getattr(getattr(self, subsystem), name)

    def setter(self: "AppSettings", value: Any) -> None:
        setattr(getattr(self, subsystem), name, value)

    doc = f"Shortcut for ``{subsystem}.{name}``."
    return property(getter, None if read_only else setter, doc=doc)


class AppSettings:
    """
    Application configuration on top of QSettings.

    Values live in the native store of the platform, or in an INI file when
    ``settings_file`` is given (used by the CLI ``--settings`` option and by
    tests). Each profile is a separate top-level group.
    """

    def __init__(
        self,
        profile: str = "default",
        settings_file: Optional[Union[str, Path]] = None,
    ):
        """Open the settings store and migrate it if needed.

        Args:
            profile: Settings profile name (default: "default")
            settings_file: INI file to use instead of the native store (optional)
        """
        if settings_file is not None:
            self.settings = QSettings(str(settings_file), QSettings.Format.IniFormat)
        else:
            self.settings = QSettings(ORGANIZATION, APPLICATION)
        self.profile = profile
        self.settings.beginGroup(profile)

        self._app = SettingsGroup(self.settings)
        self.paths = PathSettings(self.settings)
        self.sprites = SpriteSettings(self.settings)
        self.logging = LoggingSettings(self.settings)

        SettingsMigrator(self.settings).ensure_version()
        self._validator = SettingsValidator(self)

        logger.debug(
            f"Settings initialized for profile '{profile}', stored at: {self.settings.fileName()}"
        )

    # Paths
    asset_root = _delegate("paths", "asset_root")
    palette_file = _delegate("paths", "palette_file")

    # Sprites
    sprite_size = _delegate("sprites", "sprite_size")
    none_policy = _delegate("sprites", "none_policy")
    preload_workers = _delegate("sprites", "preload_workers")

    # Logging
    console_logging = _delegate("logging", "console_logging")
    console_log_level = _delegate("logging", "console_log_level")
    console_use_colors = _delegate("logging", "console_use_colors")
    file_logging = _delegate("logging", "file_logging")
    log_file_path = _delegate("logging", "log_file_path", read_only=True)

    @property
    def is_first_run(self) -> bool:
        return self._app.get_bool("app/first_run", True)

    def set_first_run_complete(self) -> None:
        self._app.store("app/first_run", False)

    @property
    def version(self) -> str:
        """Configuration layout version."""
        return self._app.get_str("app/version", ConfigVersion.CURRENT.value)

    def validate(self, asset_root: Optional[Union[str, Path]] = None) -> ValidationResult:
        """Validate the configuration, optionally for an overriding asset directory."""
        return self._validator.validate(Path(asset_root) if asset_root else None)

    def get_settings_file_path(self) -> str:
        """Get the file path where settings are stored."""
        return self.settings.fileName()

    def sync(self) -> None:
        self.settings.sync()
