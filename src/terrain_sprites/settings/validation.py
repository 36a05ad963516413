"""
Settings validation system for terrain-sprites.
"""

import logging
from pathlib import Path
from typing import Optional, TYPE_CHECKING

import orjson

from .types import ValidationResult

if TYPE_CHECKING:
    from .core import AppSettings

logger = logging.getLogger(__name__)


class SettingsValidator:
    """Checks that configured paths can be used by the sprite service."""

    def __init__(self, settings: "AppSettings"):
        self.settings = settings

    def validate(self, asset_root: Optional[Path] = None) -> ValidationResult:
        """Check the configuration.

        Args:
            asset_root: Asset directory used instead of the stored one (optional)
        """
        result = ValidationResult()
        self._check_asset_root(asset_root or self.settings.paths.asset_root, result)

        palette_file = self.settings.paths.palette_file
        if palette_file is not None:
            self._check_palette(palette_file, result)

        logger.debug(
            f"Configuration validated: {len(result.errors)} error(s), "
            f"{len(result.warnings)} warning(s)"
        )
        return result

    @staticmethod
    def _check_asset_root(asset_root: Path, result: ValidationResult) -> None:
        # Every lookup then falls back to palette colors; usable, but worth reporting
        if not asset_root.exists():
            result.warn(f"Sprite asset directory does not exist: {asset_root}")
        elif not asset_root.is_dir():
            result.error(f"Sprite asset path is not a directory: {asset_root}")

    @staticmethod
    def _check_palette(palette_file: Path, result: ValidationResult) -> None:
        if not palette_file.is_file():
            result.error(f"Palette file does not exist: {palette_file}")
            return
        try:
            data = orjson.loads(palette_file.read_bytes())
        except (OSError, orjson.JSONDecodeError) as e:
            result.error(f"Palette file is not readable JSON: {palette_file} ({e})")
            return
        if not isinstance(data, dict):
            result.error(f"Palette file must contain a JSON object: {palette_file}")
