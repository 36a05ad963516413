"""
Logging-related settings for terrain-sprites.
"""

import logging

from .base import SettingsGroup

logger = logging.getLogger(__name__)

LOG_FILE_PATH = "logs/terrain_sprites.csv"
VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class LoggingSettings(SettingsGroup):
    """Console and CSV file logging switches."""

    group = "logging"

    @property
    def console_logging(self) -> bool:
        return self.get_bool("console_enabled", True)

    @console_logging.setter
    def console_logging(self, value: bool) -> None:
        self.store("console_enabled", bool(value))

    @property
    def console_log_level(self) -> str:
        """Minimum level shown on the console (WARNING by default)."""
        return self.get_str("console_level", "WARNING").upper()

    @console_log_level.setter
    def console_log_level(self, value: str) -> None:
        level = value.upper()
        if level not in VALID_LEVELS:
            logger.warning(
                f"Invalid console log level: {value}, keeping current: {self.console_log_level}"
            )
            return
        self.store("console_level", level)

    @property
    def console_use_colors(self) -> bool:
        return self.get_bool("console_use_colors", True)

    @console_use_colors.setter
    def console_use_colors(self, value: bool) -> None:
        self.store("console_use_colors", bool(value))

    @property
    def file_logging(self) -> bool:
        """Whether the CSV log file is written (off by default)."""
        return self.get_bool("file_enabled", False)

    @file_logging.setter
    def file_logging(self, value: bool) -> None:
        self.store("file_enabled", bool(value))

    @property
    def log_file_path(self) -> str:
        """Log file location relative to the working directory (fixed)."""
        return LOG_FILE_PATH
