"""
Sprite asset loaders.

A loader materializes one candidate into an image or reports why it could
not. Loaders never retry and never fall through to other candidates; that
is the cache's job.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional, Protocol, Union

from PIL import Image

from .models import Candidate, FailureReason, LoadFailure, LoadResult, LoadSuccess
from .naming import SpriteNaming

logger = logging.getLogger(__name__)

DEFAULT_ASSET_ROOT = "assets/sprites"


class SpriteLoader(Protocol):
    """Synchronous loader interface consumed by ``SpriteCache``."""

    def attempt_load(self, candidate: Candidate) -> LoadResult:
        ...


class AsyncSpriteLoader(Protocol):
    """Coroutine loader interface consumed by ``AsyncSpriteCache``."""

    async def attempt_load(self, candidate: Candidate) -> LoadResult:
        ...


class FileSpriteLoader:
    """Load sprites from a flat directory of PNG files using Pillow.

    Missing files are reported as ``NOT_FOUND``. Files that exist but cannot
    be decoded are reported as ``UNDECODABLE`` so asset pipeline problems can
    be told apart from ordinary misses.
    """

    def __init__(
        self,
        asset_root: Union[str, Path] = DEFAULT_ASSET_ROOT,
        sprite_size: Optional[int] = None,
        naming: Optional[SpriteNaming] = None,
    ):
        """Initialize the loader.

        Args:
            asset_root: Directory holding sprite files
            sprite_size: Resize loaded sprites to a square of this size (optional)
            naming: Candidate to filename mapping (literal naming by default)
        """
        self.asset_root = Path(asset_root)
        self.sprite_size = sprite_size
        self.naming = naming or SpriteNaming()

    def display_path(self, candidate: Candidate) -> str:
        """Path used in diagnostics, relative to how the asset root was given."""
        return f"{self.asset_root.as_posix()}/{self.naming.filename(candidate)}"

    def attempt_load(self, candidate: Candidate) -> LoadResult:
        path = self.asset_root / self.naming.filename(candidate)
        display = self.display_path(candidate)

        if not self.naming.is_attemptable(candidate):
            return LoadFailure(candidate, FailureReason.SKIPPED, display)

        if not path.is_file():
            return LoadFailure(candidate, FailureReason.NOT_FOUND, display)

        try:
            with Image.open(path) as img:
                img.load()
                image = img.convert("RGBA")
        except (OSError, ValueError, Image.DecompressionBombError) as e:
            return LoadFailure(candidate, FailureReason.UNDECODABLE, display, str(e))

        if self.sprite_size and image.size != (self.sprite_size, self.sprite_size):
            image = image.resize((self.sprite_size, self.sprite_size))
        elif image.width != image.height:
            logger.debug(f"Sprite is not square ({image.width}x{image.height}): {display}")

        return LoadSuccess(candidate, image, display)


class AsyncLoaderAdapter:
    """Expose a blocking loader to an event loop.

    Each attempt runs in the default executor so file I/O and decoding do
    not stall the loop.
    """

    def __init__(self, loader: SpriteLoader):
        self.loader = loader

    async def attempt_load(self, candidate: Candidate) -> LoadResult:
        return await asyncio.to_thread(self.loader.attempt_load, candidate)
