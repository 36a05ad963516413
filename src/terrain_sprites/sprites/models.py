"""
Data models for terrain sprite resolution.

Contains the attribute vocabulary, candidate identities and the result
types exchanged between the cache, loaders and fallback providers.
Each model is intentionally lightweight: no file-system or service logic.
"""

import itertools
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Tuple, Union

from PIL import Image


# =============================================================================
# Attribute vocabulary
# =============================================================================

class Vegetation(str, Enum):
    """Surface layer of a terrain tile."""
    NONE = "none"
    GRASSLAND = "grassland"
    FOREST = "forest"
    DESERT = "desert"
    TUNDRA = "tundra"
    SWAMP = "swamp"


class Climate(str, Enum):
    """Temperature layer of a terrain tile."""
    HOT = "hot"
    MODERATE = "moderate"
    COLD = "cold"


class Height(str, Enum):
    """Elevation layer of a terrain tile."""
    DEEP_WATER = "deep_water"
    SHALLOW_WATER = "shallow_water"
    LOWLANDS = "lowlands"
    HILLS = "hills"
    MOUNTAINS = "mountains"

    @property
    def is_water(self) -> bool:
        return self in (Height.DEEP_WATER, Height.SHALLOW_WATER)


@dataclass(frozen=True)
class TerrainAttributes:
    """Attribute triple describing one terrain tile.

    Instances are hashable values and are used directly as cache keys.
    """
    vegetation: Vegetation
    climate: Climate
    height: Height

    @classmethod
    def from_ids(cls, vegetation: str, climate: str, height: str) -> "TerrainAttributes":
        """Create attributes from raw string ids.

        Args:
            vegetation: Vegetation id (e.g. "forest")
            climate: Climate id (e.g. "hot")
            height: Height id (e.g. "mountains")

        Returns:
            TerrainAttributes instance

        Raises:
            ValueError: If any id is not part of the vocabulary
        """
        return cls(
            vegetation=Vegetation(vegetation),
            climate=Climate(climate),
            height=Height(height),
        )

    @classmethod
    def all_combinations(cls) -> Iterator["TerrainAttributes"]:
        """Yield every attribute triple of the vocabulary."""
        for vegetation, climate, height in itertools.product(Vegetation, Climate, Height):
            yield cls(vegetation=vegetation, climate=climate, height=height)

    def __str__(self) -> str:
        return f"{self.vegetation.value}/{self.climate.value}/{self.height.value}"


# =============================================================================
# Candidates
# =============================================================================

CANDIDATE_SEPARATOR = "-"


@dataclass(frozen=True)
class Candidate:
    """One sprite identity considered during resolution.

    A candidate is an ordered composition of attribute values. The terminal
    sentinel has no segments and means "use the fallback presentation".
    """
    segments: Tuple[str, ...] = ()

    @property
    def is_fallback(self) -> bool:
        return not self.segments

    @property
    def name(self) -> str:
        return CANDIDATE_SEPARATOR.join(self.segments)

    def __str__(self) -> str:
        return self.name if self.segments else "<fallback>"


FALLBACK_CANDIDATE = Candidate()

CandidateList = Tuple[Candidate, ...]


# =============================================================================
# Loader results
# =============================================================================

class FailureReason(Enum):
    """Why a single candidate could not be materialized."""
    NOT_FOUND = "not_found"
    UNDECODABLE = "undecodable"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class LoadSuccess:
    """Candidate image was found and decoded."""
    candidate: Candidate
    image: Image.Image
    path: str


@dataclass(frozen=True)
class LoadFailure:
    """Candidate image could not be used; resolution moves on."""
    candidate: Candidate
    reason: FailureReason
    path: str
    detail: Optional[str] = None


LoadResult = Union[LoadSuccess, LoadFailure]


# =============================================================================
# Resolution results
# =============================================================================

RGBA = Tuple[int, int, int, int]


@dataclass(frozen=True)
class ResolvedSprite:
    """A sprite image chosen for an attribute triple.

    The image is owned by the cache and shared between callers; treat it as
    read-only (copy before drawing on it).
    """
    attributes: TerrainAttributes
    candidate: Candidate
    image: Image.Image
    path: str

    @property
    def is_fallback(self) -> bool:
        return False


@dataclass(frozen=True)
class FallbackMarker:
    """No candidate loaded: draw a flat color instead."""
    attributes: TerrainAttributes
    color: str

    @property
    def is_fallback(self) -> bool:
        return True

    @property
    def rgba(self) -> RGBA:
        """Color as an RGBA tuple (opaque)."""
        value = self.color.lstrip("#")
        return (int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16), 255)

    def to_image(self, size: int) -> Image.Image:
        """Render the fallback as a flat square RGBA image."""
        return Image.new("RGBA", (size, size), self.rgba)


ResolutionResult = Union[ResolvedSprite, FallbackMarker]
