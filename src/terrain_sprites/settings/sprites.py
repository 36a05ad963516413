"""
Sprite resolution settings for terrain-sprites.
"""

import logging
from typing import Union

from ..sprites.naming import NonePolicy
from .base import SettingsGroup, clamp

logger = logging.getLogger(__name__)

MAX_SPRITE_SIZE = 4096
MAX_PRELOAD_WORKERS = 32
DEFAULT_PRELOAD_WORKERS = 4


class SpriteSettings(SettingsGroup):
    """Sprite size, vegetation 'none' policy and preload parallelism."""

    group = "sprites"

    @property
    def sprite_size(self) -> int:
        """Edge length sprites are resized to; 0 keeps the native size."""
        return self.get_int("size", 0, 0, MAX_SPRITE_SIZE)

    @sprite_size.setter
    def sprite_size(self, value: int) -> None:
        self.store("size", clamp(value, 0, MAX_SPRITE_SIZE))

    @property
    def none_policy(self) -> NonePolicy:
        """How vegetation 'none' is treated in sprite names."""
        value = self.get_str("none_policy", NonePolicy.LITERAL.value)
        try:
            return NonePolicy(value.lower())
        except ValueError:
            logger.warning(f"Unknown vegetation 'none' policy in settings: {value}, using literal")
            return NonePolicy.LITERAL

    @none_policy.setter
    def none_policy(self, value: Union[str, NonePolicy]) -> None:
        try:
            policy = NonePolicy(str(getattr(value, "value", value)).lower())
        except ValueError:
            logger.warning(
                f"Invalid vegetation 'none' policy: {value}, keeping current: {self.none_policy.value}"
            )
            return
        self.store("none_policy", policy.value)

    @property
    def preload_workers(self) -> int:
        """Threads used to preload every attribute combination."""
        return self.get_int(
            "preload_workers", DEFAULT_PRELOAD_WORKERS, 1, MAX_PRELOAD_WORKERS
        )

    @preload_workers.setter
    def preload_workers(self, value: int) -> None:
        self.store("preload_workers", clamp(value, 1, MAX_PRELOAD_WORKERS))
