"""
terrain-sprites: sprite resolution for layered terrain tiles

Picks the most specific sprite available for a (vegetation, climate, height)
tile and caches the choice for every later or concurrent lookup.
"""

__version__ = "0.1.0"
__author__ = "terrain-sprites Contributors"

# Core service imports
from .sprites import SpriteService, SpriteCache, AsyncSpriteCache
from .utils.logging_config import setup_logging

# Main data models
from .sprites.models import (
    TerrainAttributes, Vegetation, Climate, Height,
    ResolvedSprite, FallbackMarker
)

__all__ = [
    # Services
    'SpriteService',
    'SpriteCache',
    'AsyncSpriteCache',

    # Logging
    'setup_logging',

    # Data models
    'TerrainAttributes',
    'Vegetation',
    'Climate',
    'Height',
    'ResolvedSprite',
    'FallbackMarker',
]
