"""
Terrain sprite resolution.

Provides hierarchical sprite lookup for terrain tiles (vegetation, climate,
height), loaders, flat-color fallbacks and single-flight caches for threads
and asyncio.
"""

from .models import (
    Vegetation, Climate, Height, TerrainAttributes, Candidate, FALLBACK_CANDIDATE,
    FailureReason, LoadSuccess, LoadFailure, ResolvedSprite, FallbackMarker
)
from .candidates import generate_candidates, validate_candidates, MalformedCandidateListError
from .naming import NonePolicy, SpriteNaming
from .loaders import FileSpriteLoader, AsyncLoaderAdapter
from .fallback import ConstantFallbackProvider, PaletteFallbackProvider, TerrainPalette
from .cache import SpriteCache, CacheStats
from .async_cache import AsyncSpriteCache
from .service import SpriteService, PreloadReport

__all__ = [
    # Main service
    'SpriteService',
    'PreloadReport',

    # Caches
    'SpriteCache',
    'AsyncSpriteCache',
    'CacheStats',

    # Candidates and naming
    'generate_candidates',
    'validate_candidates',
    'MalformedCandidateListError',
    'NonePolicy',
    'SpriteNaming',

    # Loaders and fallbacks
    'FileSpriteLoader',
    'AsyncLoaderAdapter',
    'ConstantFallbackProvider',
    'PaletteFallbackProvider',
    'TerrainPalette',

    # Data models
    'Vegetation',
    'Climate',
    'Height',
    'TerrainAttributes',
    'Candidate',
    'FALLBACK_CANDIDATE',
    'FailureReason',
    'LoadSuccess',
    'LoadFailure',
    'ResolvedSprite',
    'FallbackMarker',
]
