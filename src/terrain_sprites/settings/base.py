"""
Typed access to one QSettings key group.
"""

from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings

TRUE_STRINGS = ("true", "1", "yes", "on")


class SettingsGroup:
    """Base for settings subsystems stored under a common key prefix.

    QSettings returns strings for everything read back from INI files and
    native types for values written in the same session, so every getter
    normalizes both.
    """

    #: Key prefix, e.g. "sprites" for "sprites/size"
    group = ""

    def __init__(self, settings: "QSettings"):
        self.settings = settings

    def key(self, name: str) -> str:
        return f"{self.group}/{name}" if self.group else name

    def raw(self, name: str, default: Any = None) -> Any:
        return self.settings.value(self.key(name), default)

    def store(self, name: str, value: Any) -> None:
        """Write a value and flush it to storage."""
        self.settings.setValue(self.key(name), value)
        self.settings.sync()

    def get_str(self, name: str, default: str = "") -> str:
        value = self.raw(name, default)
        return default if value is None else str(value)

    def get_bool(self, name: str, default: bool = False) -> bool:
        value = self.raw(name, default)
        if value is None:
            return default
        if isinstance(value, str):
            return value.strip().lower() in TRUE_STRINGS
        return bool(value)

    def get_int(
        self,
        name: str,
        default: int = 0,
        minimum: Optional[int] = None,
        maximum: Optional[int] = None,
    ) -> int:
        """Read an integer, falling back to ``default`` and clamping to the bounds."""
        try:
            value = int(self.raw(name, default))
        except (TypeError, ValueError):
            value = default
        return clamp(value, minimum, maximum)


def clamp(value: int, minimum: Optional[int] = None, maximum: Optional[int] = None) -> int:
    if minimum is not None:
        value = max(minimum, value)
    if maximum is not None:
        value = min(maximum, value)
    return value
