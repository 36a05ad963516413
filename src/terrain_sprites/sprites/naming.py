"""
Sprite naming convention.

Candidates map to files in a flat asset directory:
``forest-hot-mountains`` -> ``forest-hot-mountains.png``,
``forest`` -> ``forest.png`` and so on.
"""

from enum import Enum

from .models import Candidate, Vegetation

SPRITE_EXTENSION = ".png"


class NonePolicy(str, Enum):
    """How vegetation ``none`` is treated in filenames."""
    # Use "none" as an ordinary filename segment (none-hot-mountains.png)
    LITERAL = "literal"
    # Never look up candidates that start with the "none" vegetation segment
    SKIP = "skip"


class SpriteNaming:
    """Maps candidates to sprite filenames."""

    def __init__(self, none_policy: NonePolicy = NonePolicy.LITERAL):
        self.none_policy = NonePolicy(none_policy)

    def filename(self, candidate: Candidate) -> str:
        """Return the flat filename for a real candidate."""
        if candidate.is_fallback:
            raise ValueError("Fallback sentinel has no sprite filename")
        return f"{candidate.name}{SPRITE_EXTENSION}"

    def is_attemptable(self, candidate: Candidate) -> bool:
        """Whether the candidate should be handed to a loader at all.

        Only vegetation-prefixed candidates are affected by ``NonePolicy.SKIP``.
        The single ``none`` candidate is vegetation-prefixed; ``height`` and
        ``climate`` candidates never start with a vegetation value.
        """
        if candidate.is_fallback:
            return False
        if self.none_policy is NonePolicy.SKIP:
            return candidate.segments[0] != Vegetation.NONE.value
        return True
