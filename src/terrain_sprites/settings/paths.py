"""
Filesystem locations used by sprite resolution.
"""

from pathlib import Path
from typing import Optional, Union

from .base import SettingsGroup

DEFAULT_ASSET_ROOT = "assets/sprites"


class PathSettings(SettingsGroup):
    """Asset directory and optional palette override."""

    group = "paths"

    @property
    def asset_root(self) -> Path:
        """Directory holding sprite PNG files."""
        return Path(self.get_str("asset_root") or DEFAULT_ASSET_ROOT)

    @asset_root.setter
    def asset_root(self, value: Union[str, Path]) -> None:
        self.store("asset_root", Path(value).as_posix())

    @property
    def palette_file(self) -> Optional[Path]:
        """Palette JSON replacing the packaged one, or None."""
        path_str = self.get_str("palette_file")
        return Path(path_str) if path_str else None

    @palette_file.setter
    def palette_file(self, value: Optional[Union[str, Path]]) -> None:
        self.store("palette_file", Path(value).as_posix() if value else "")
