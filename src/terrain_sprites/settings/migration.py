"""
Upgrades stored settings written by older versions.
"""

import logging
from typing import TYPE_CHECKING, Callable, Dict, Tuple

from .types import ConfigVersion

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings

logger = logging.getLogger(__name__)


# Stored version -> (next version, step). Add an entry when the stored layout changes.
MIGRATIONS: Dict[str, Tuple[str, Callable[["QSettings"], None]]] = {}


class SettingsMigrator:
    """Brings the stored configuration up to ``ConfigVersion.CURRENT``."""

    def __init__(self, settings: "QSettings"):
        self.settings = settings

    def ensure_version(self) -> None:
        """Mark a first run, or migrate an older configuration step by step."""
        stored = str(self.settings.value("app/version", "") or "")
        target = ConfigVersion.CURRENT.value

        if not stored:
            self.settings.setValue("app/version", target)
            self.settings.setValue("app/first_run", True)
            self.settings.sync()
            logger.info("First run detected, initializing configuration")
            return

        version = stored
        while version != target:
            step = MIGRATIONS.get(version)
            if step is None:
                logger.warning(f"No migration path from configuration version {version}, keeping values")
                break
            next_version, migrate = step
            logger.info(f"Migrating configuration from {version} to {next_version}")
            migrate(self.settings)
            version = next_version

        if version != stored:
            self.settings.setValue("app/version", version)
            self.settings.setValue("app/migrated_from", stored)
            self.settings.sync()
