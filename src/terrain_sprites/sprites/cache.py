"""
Resolution cache for terrain sprites.

Memoizes, per attribute triple, the sprite chosen by hierarchical fallback
and coalesces concurrent requests for the same triple into one load
sequence (single-flight). Each key is stored as either ``Pending`` (a shared
future other callers wait on) or ``Done`` (the final result).
"""

import asyncio
import logging
import threading
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Union

from .candidates import generate_candidates, validate_candidates
from .fallback import FallbackProvider, PaletteFallbackProvider
from .loaders import SpriteLoader
from .models import (
    Candidate,
    FailureReason,
    FallbackMarker,
    LoadResult,
    LoadSuccess,
    ResolutionResult,
    ResolvedSprite,
    TerrainAttributes,
)
from .naming import SpriteNaming


@dataclass(frozen=True, eq=False)
class Pending:
    """A load sequence is running; waiters share its future."""
    future: "Union[Future[ResolutionResult], asyncio.Future[ResolutionResult]]"


@dataclass(frozen=True, eq=False)
class Done:
    """Resolution finished; the result never changes for this entry."""
    result: ResolutionResult


CacheEntry = Union[Pending, Done]


@dataclass
class CacheStats:
    """Counters describing cache behaviour since creation.

    ``fallbacks`` counts load sequences that ended in a fallback marker,
    including ones whose result was discarded by an invalidation.
    """
    hits: int = 0
    misses: int = 0
    coalesced: int = 0
    loader_calls: int = 0
    fallbacks: int = 0


def log_load_outcome(logger: logging.Logger, outcome: LoadResult) -> None:
    """Emit the per-candidate diagnostic line.

    Message prefixes are matched by external tooling; keep them stable.
    """
    if isinstance(outcome, LoadSuccess):
        logger.info(f"Loaded sprite: {outcome.path}")
    elif outcome.reason is FailureReason.UNDECODABLE:
        logger.warning(f"Failed to load sprite: {outcome.path} (undecodable: {outcome.detail})")
    else:
        logger.debug(f"Failed to load sprite: {outcome.path}")


class ResolutionSteps:
    """Loader-independent parts of one load sequence, shared by both caches.

    The caches only differ in how they call the loader (blocking or awaited)
    and how they publish the result.
    """

    def __init__(self, naming: SpriteNaming, fallback: FallbackProvider, logger: logging.Logger):
        self.naming = naming
        self.fallback = fallback
        self.logger = logger

    def candidates(self, attributes: TerrainAttributes) -> Iterator[Candidate]:
        """Yield the candidates to hand to the loader, most specific first."""
        candidates = generate_candidates(attributes)
        validate_candidates(candidates)
        for candidate in candidates:
            if candidate.is_fallback:
                return
            if not self.naming.is_attemptable(candidate):
                self.logger.debug(f"Skipped sprite candidate: {candidate.name}")
                continue
            yield candidate

    def accept(
        self, attributes: TerrainAttributes, candidate: Candidate, outcome: LoadResult
    ) -> Optional[ResolvedSprite]:
        """Log a loader outcome; return the resolved sprite if it loaded."""
        log_load_outcome(self.logger, outcome)
        if not isinstance(outcome, LoadSuccess):
            return None
        return ResolvedSprite(
            attributes=attributes,
            candidate=candidate,
            image=outcome.image,
            path=outcome.path,
        )

    def exhausted(self, attributes: TerrainAttributes) -> FallbackMarker:
        marker = self.fallback.fallback_for(attributes)
        self.logger.debug(f"No sprite for {attributes}, using fallback color {marker.color}")
        return marker


class SpriteCache:
    """Thread-safe single-flight sprite resolver.

    Only the entry-creation decision runs under the lock. Loader calls for a
    key happen outside it, on the thread of the first caller; later callers
    for the same key block on the shared future.
    """

    def __init__(
        self,
        loader: SpriteLoader,
        fallback: Optional[FallbackProvider] = None,
        naming: Optional[SpriteNaming] = None,
    ):
        """Initialize the cache.

        Args:
            loader: Loader invoked once per candidate
            fallback: Provider used when every candidate fails
                (palette colors by default)
            naming: Naming policy deciding which candidates are attempted
        """
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.loader = loader
        self.fallback = fallback or PaletteFallbackProvider()
        self.naming = naming or SpriteNaming()

        self._steps = ResolutionSteps(self.naming, self.fallback, self.logger)

        self._entries: Dict[TerrainAttributes, CacheEntry] = {}
        self._stats = CacheStats()
        self._lock = threading.Lock()

    def resolve(
        self, attributes: TerrainAttributes, timeout: Optional[float] = None
    ) -> ResolutionResult:
        """Return the sprite (or fallback marker) for an attribute triple.

        Args:
            attributes: Terrain attribute triple
            timeout: Maximum seconds to wait for a load started by another
                caller. Giving up only abandons this caller's wait; the
                shared load keeps running.

        Returns:
            ResolvedSprite or FallbackMarker

        Raises:
            concurrent.futures.TimeoutError: If ``timeout`` elapses while waiting
        """
        with self._lock:
            entry = self._entries.get(attributes)
            if isinstance(entry, Done):
                self._stats.hits += 1
                return entry.result
            if isinstance(entry, Pending):
                self._stats.coalesced += 1
                waiting_on = entry.future
            else:
                self._stats.misses += 1
                future: "Future[ResolutionResult]" = Future()
                pending = Pending(future)
                self._entries[attributes] = pending
                waiting_on = None

        if waiting_on is not None:
            return waiting_on.result(timeout=timeout)
        return self._run(attributes, pending, future)

    def _run(
        self,
        attributes: TerrainAttributes,
        pending: Pending,
        future: "Future[ResolutionResult]",
    ) -> ResolutionResult:
        """Run the load sequence for a key this thread owns and publish the result."""
        try:
            result = self._load_sequence(attributes)
        except BaseException as e:
            # Drop the entry so the next request retries instead of waiting forever
            with self._lock:
                if self._entries.get(attributes) is pending:
                    del self._entries[attributes]
            future.set_exception(e)
            raise

        with self._lock:
            # An invalidation may have removed our entry meanwhile; do not resurrect it
            if self._entries.get(attributes) is pending:
                self._entries[attributes] = Done(result)
        future.set_result(result)
        return result

    def _load_sequence(self, attributes: TerrainAttributes) -> ResolutionResult:
        for candidate in self._steps.candidates(attributes):
            outcome = self.loader.attempt_load(candidate)
            with self._lock:
                self._stats.loader_calls += 1
            resolved = self._steps.accept(attributes, candidate, outcome)
            if resolved is not None:
                return resolved

        marker = self._steps.exhausted(attributes)
        with self._lock:
            self._stats.fallbacks += 1
        return marker

    def peek(self, attributes: TerrainAttributes) -> Optional[ResolutionResult]:
        """Return a completed result without triggering a load."""
        with self._lock:
            entry = self._entries.get(attributes)
        return entry.result if isinstance(entry, Done) else None

    def invalidate_all(self) -> int:
        """Forget every entry, e.g. after sprite assets were reloaded.

        Loads already running finish and answer their own waiters, but their
        results are not stored.

        Returns:
            Number of entries removed
        """
        with self._lock:
            count = len(self._entries)
            self._entries = {}
        self.logger.info(f"Sprite cache invalidated ({count} entries dropped)")
        return count

    def stats(self) -> CacheStats:
        """Return a snapshot of the cache counters."""
        with self._lock:
            return CacheStats(**vars(self._stats))

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, attributes: object) -> bool:
        with self._lock:
            return attributes in self._entries
