"""
Fallback presentation for tiles without a sprite.

When every candidate fails the cache asks a fallback provider for a flat
color. ``PaletteFallbackProvider`` derives that color from the layered
terrain palette: water uses the height color, land uses the vegetation
color tinted by climate and lightened by elevation.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Tuple, Union, cast

import orjson

from ..resources import get_default_palette_bytes
from .models import FallbackMarker, TerrainAttributes

logger = logging.getLogger(__name__)

DEFAULT_COLOR = "#cccccc"
# Share of the climate tint mixed into the vegetation color
TINT_WEIGHT = 0.2
# Per-channel lightening per elevation step above lowlands
ELEVATION_LIGHTEN = 15

_HEX_COLOR = re.compile(r"^#?([a-f\d]{2})([a-f\d]{2})([a-f\d]{2})$", re.IGNORECASE)


def hex_to_rgb(value: Optional[str]) -> Optional[Tuple[int, int, int]]:
    """Parse ``#rrggbb`` (leading ``#`` optional). Returns None if unparsable."""
    if not value:
        return None
    match = _HEX_COLOR.match(value)
    if not match:
        return None
    return cast(Tuple[int, int, int], tuple(int(part, 16) for part in match.groups()))


def rgb_to_hex(r: float, g: float, b: float) -> str:
    """Format channels as lowercase ``#rrggbb``, rounding half up."""
    return "#" + "".join(f"{int(channel + 0.5):02x}" for channel in (r, g, b))


def blend_colors(base_color: Optional[str], tint: Optional[str], elevation: int) -> str:
    """Blend a base color with an optional climate tint and elevation lightening.

    Args:
        base_color: Vegetation base color
        tint: Climate tint color, or None for no tint
        elevation: Height elevation (-2..2); only positive values lighten

    Returns:
        Blended ``#rrggbb`` color
    """
    if not base_color:
        return DEFAULT_COLOR
    base = hex_to_rgb(base_color)
    if base is None:
        return DEFAULT_COLOR

    r, g, b = (float(channel) for channel in base)

    tint_rgb = hex_to_rgb(tint)
    if tint_rgb:
        keep = 1.0 - TINT_WEIGHT
        r = float(int(r * keep + tint_rgb[0] * TINT_WEIGHT + 0.5))
        g = float(int(g * keep + tint_rgb[1] * TINT_WEIGHT + 0.5))
        b = float(int(b * keep + tint_rgb[2] * TINT_WEIGHT + 0.5))

    if elevation > 0:
        lighten = elevation * ELEVATION_LIGHTEN
        r = min(255.0, r + lighten)
        g = min(255.0, g + lighten)
        b = min(255.0, b + lighten)

    return rgb_to_hex(r, g, b)


@dataclass
class TerrainPalette:
    """Colors per attribute value, as used for flat-color fallbacks."""

    # height id -> base color (None means "use vegetation color")
    height_colors: Dict[str, Optional[str]] = field(default_factory=lambda: {})
    # height id -> elevation step
    elevations: Dict[str, int] = field(default_factory=lambda: {})
    # climate id -> tint color
    climate_tints: Dict[str, Optional[str]] = field(default_factory=lambda: {})
    # vegetation id -> base color
    vegetation_colors: Dict[str, Optional[str]] = field(default_factory=lambda: {})
    default_color: str = DEFAULT_COLOR

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TerrainPalette":
        """Create a palette from its JSON structure.

        Args:
            data: Dict with ``height``, ``climate`` and ``vegetation`` sections

        Returns:
            TerrainPalette instance
        """
        heights = cast(Dict[str, Dict[str, Any]], data.get("height") or {})
        climates = cast(Dict[str, Dict[str, Any]], data.get("climate") or {})
        vegetation = cast(Dict[str, Dict[str, Any]], data.get("vegetation") or {})
        return cls(
            height_colors={k: v.get("base_color") for k, v in heights.items()},
            elevations={k: int(v.get("elevation", 0) or 0) for k, v in heights.items()},
            climate_tints={k: v.get("color_tint") for k, v in climates.items()},
            vegetation_colors={k: v.get("base_color") for k, v in vegetation.items()},
            default_color=str(data.get("default") or DEFAULT_COLOR),
        )

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "TerrainPalette":
        """Load a palette JSON file."""
        with open(path, "rb") as f:
            data = orjson.loads(f.read())
        if not isinstance(data, dict):
            raise ValueError(f"Palette file must contain a JSON object: {path}")
        return cls.from_dict(cast(Dict[str, Any], data))

    @classmethod
    def default(cls) -> "TerrainPalette":
        """Return the packaged default palette."""
        return cls.from_dict(orjson.loads(get_default_palette_bytes()))

    def color_for(self, attributes: TerrainAttributes) -> str:
        """Compute the flat color for an attribute triple."""
        height = attributes.height
        if height.is_water:
            color = self.height_colors.get(height.value)
            return color if hex_to_rgb(color) else self.default_color
        base_color = self.vegetation_colors.get(attributes.vegetation.value)
        if not hex_to_rgb(base_color):
            return self.default_color
        return blend_colors(
            base_color,
            self.climate_tints.get(attributes.climate.value),
            self.elevations.get(height.value, 0),
        )


class FallbackProvider(Protocol):
    """Supplies the presentation used when no candidate loads. Must not fail."""

    def fallback_for(self, attributes: TerrainAttributes) -> FallbackMarker:
        ...


class ConstantFallbackProvider:
    """Same flat color for every attribute triple."""

    def __init__(self, color: str = DEFAULT_COLOR):
        rgb = hex_to_rgb(color)
        if rgb is None:
            raise ValueError(f"Invalid fallback color: {color!r}")
        self.color = rgb_to_hex(*rgb)

    def fallback_for(self, attributes: TerrainAttributes) -> FallbackMarker:
        return FallbackMarker(attributes=attributes, color=self.color)


class PaletteFallbackProvider:
    """Per-attribute flat colors derived from a terrain palette."""

    def __init__(self, palette: Optional[TerrainPalette] = None):
        self.palette = palette or TerrainPalette.default()

    def fallback_for(self, attributes: TerrainAttributes) -> FallbackMarker:
        return FallbackMarker(attributes=attributes, color=self.palette.color_for(attributes))
