"""
High-level service for terrain sprite resolution.

Provides orchestration and public API used by the renderer.
Responsibilities:
    * Build loader, fallback provider and cache from settings
    * Resolve attribute triples to sprites through the shared cache
    * Preload every attribute combination in parallel
    * Drop cached resolutions when sprite assets are hot-reloaded
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, TYPE_CHECKING, Union

from ..settings.types import ConfigError
from .async_cache import AsyncSpriteCache
from .cache import SpriteCache
from .candidates import generate_candidates
from .fallback import FallbackProvider, PaletteFallbackProvider, TerrainPalette
from .loaders import DEFAULT_ASSET_ROOT, AsyncLoaderAdapter, FileSpriteLoader, SpriteLoader
from .models import ResolutionResult, TerrainAttributes
from .naming import NonePolicy, SpriteNaming

if TYPE_CHECKING:
    from ..settings import AppSettings


@dataclass
class PreloadReport:
    """Outcome of preloading a set of attribute triples."""
    results: Dict[TerrainAttributes, ResolutionResult] = field(default_factory=lambda: {})
    errors: Dict[TerrainAttributes, str] = field(default_factory=lambda: {})

    @property
    def sprite_count(self) -> int:
        return sum(1 for r in self.results.values() if not r.is_fallback)

    @property
    def fallback_count(self) -> int:
        return sum(1 for r in self.results.values() if r.is_fallback)


class SpriteService:
    """Facade for sprite resolution.

    One instance is created at render-system startup and handed to whoever
    needs sprites; it owns the resolution cache.
    """

    def __init__(
        self,
        asset_root: Union[str, Path] = DEFAULT_ASSET_ROOT,
        sprite_size: Optional[int] = None,
        none_policy: NonePolicy = NonePolicy.LITERAL,
        palette: Optional[TerrainPalette] = None,
        preload_workers: int = 4,
        loader: Optional[SpriteLoader] = None,
        fallback: Optional[FallbackProvider] = None,
    ):
        """Initialize the service.

        Args:
            asset_root: Directory holding sprite PNG files
            sprite_size: Resize sprites to this square size (None keeps native size)
            none_policy: How vegetation 'none' is treated in sprite names
            palette: Palette for fallback colors (packaged palette if None)
            preload_workers: Thread count used by ``preload``
            loader: Custom loader replacing the file loader (optional)
            fallback: Custom fallback provider replacing the palette one (optional)
        """
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.naming = SpriteNaming(none_policy)
        self.loader: SpriteLoader = loader or FileSpriteLoader(
            asset_root, sprite_size=sprite_size, naming=self.naming
        )
        self.fallback: FallbackProvider = fallback or PaletteFallbackProvider(palette)
        self.preload_workers = max(1, preload_workers)
        self.cache = SpriteCache(self.loader, self.fallback, self.naming)

    @classmethod
    def from_settings(
        cls, settings: "AppSettings", asset_root: Optional[Union[str, Path]] = None
    ) -> "SpriteService":
        """Create a service from validated application settings.

        Args:
            settings: Application settings
            asset_root: Asset directory overriding the configured one (optional)

        Raises:
            ConfigError: If the configuration is invalid
        """
        logger = logging.getLogger(f"{__name__}.{cls.__name__}")
        validation = settings.validate(asset_root)
        for warning in validation.warnings:
            logger.warning(f"  {warning}")
        if not validation.is_valid:
            raise ConfigError("; ".join(validation.errors))

        palette = None
        if settings.palette_file:
            try:
                palette = TerrainPalette.from_json(settings.palette_file)
            except (OSError, ValueError) as e:
                raise ConfigError(f"Could not load palette {settings.palette_file}: {e}") from e

        return cls(
            asset_root=asset_root or settings.asset_root,
            sprite_size=settings.sprite_size or None,
            none_policy=settings.none_policy,
            palette=palette,
            preload_workers=settings.preload_workers,
        )

    def resolve(self, attributes: TerrainAttributes) -> ResolutionResult:
        """Resolve an attribute triple through the shared cache."""
        return self.cache.resolve(attributes)

    def resolve_ids(self, vegetation: str, climate: str, height: str) -> ResolutionResult:
        """Resolve from raw attribute ids (raises ValueError for unknown ids)."""
        return self.resolve(TerrainAttributes.from_ids(vegetation, climate, height))

    def candidate_filenames(self, attributes: TerrainAttributes) -> List[str]:
        """List the filenames that would be tried, in order."""
        return [
            self.naming.filename(candidate)
            for candidate in generate_candidates(attributes)
            if self.naming.is_attemptable(candidate)
        ]

    def preload(
        self, combinations: Optional[Iterable[TerrainAttributes]] = None
    ) -> PreloadReport:
        """Resolve many attribute triples in parallel.

        Args:
            combinations: Triples to resolve (every combination by default)

        Returns:
            PreloadReport with results per triple
        """
        targets = list(
            combinations if combinations is not None else TerrainAttributes.all_combinations()
        )
        report = PreloadReport()
        self.logger.info(f"Preloading {len(targets)} terrain sprite(s)...")

        with ThreadPoolExecutor(max_workers=self.preload_workers) as executor:
            future_to_attributes = {
                executor.submit(self.cache.resolve, attributes): attributes
                for attributes in targets
            }
            for future in as_completed(future_to_attributes):
                attributes = future_to_attributes[future]
                try:
                    report.results[attributes] = future.result()
                except Exception as e:
                    self.logger.error(f"Failed to resolve sprite for {attributes}: {e}")
                    report.errors[attributes] = str(e)

        self.logger.info(
            f"Sprites resolved: {report.sprite_count}/{len(targets)} "
            f"({report.fallback_count} using fallback colors)"
        )
        return report

    def reload_assets(self) -> int:
        """Forget cached resolutions after sprite files changed on disk."""
        return self.cache.invalidate_all()

    def create_async_cache(self) -> AsyncSpriteCache:
        """Create an event-loop cache sharing this service's loader and fallback."""
        return AsyncSpriteCache(AsyncLoaderAdapter(self.loader), self.fallback, self.naming)
