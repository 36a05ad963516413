"""
Resources for terrain-sprites.

Provides helpers to access packaged data such as the default terrain palette.
"""

from functools import lru_cache
from importlib import resources as importlib_resources

DEFAULT_PALETTE_FILE = "terrain_palette.json"


@lru_cache(maxsize=1)
def get_default_palette_bytes() -> bytes:
    """Return the raw JSON of the packaged terrain palette.

    Uses importlib.resources to resolve the packaged ``terrain_palette.json`` file.
    """
    return importlib_resources.files(__name__).joinpath(DEFAULT_PALETTE_FILE).read_bytes()
