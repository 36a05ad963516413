"""
Single-flight sprite resolution for asyncio event loops.

Mirrors ``SpriteCache`` for cooperatively scheduled callers. The load
sequence for a key runs as its own task; callers await it through
``asyncio.shield`` so a caller that is cancelled (tile scrolled out of view)
gives up only its own wait and the shared load still fills the cache.
"""

import asyncio
import functools
import logging
from typing import Dict, Optional, Set

from .cache import CacheEntry, CacheStats, Done, Pending, ResolutionSteps
from .fallback import FallbackProvider, PaletteFallbackProvider
from .loaders import AsyncSpriteLoader
from .models import ResolutionResult, TerrainAttributes
from .naming import SpriteNaming


class AsyncSpriteCache:
    """Sprite resolver confined to one event loop.

    No lock is needed: the lookup and the insertion of a ``Pending`` entry
    happen without an ``await`` in between.
    """

    def __init__(
        self,
        loader: AsyncSpriteLoader,
        fallback: Optional[FallbackProvider] = None,
        naming: Optional[SpriteNaming] = None,
    ):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.loader = loader
        self.fallback = fallback or PaletteFallbackProvider()
        self.naming = naming or SpriteNaming()
        self._steps = ResolutionSteps(self.naming, self.fallback, self.logger)

        self._entries: Dict[TerrainAttributes, CacheEntry] = {}
        self._stats = CacheStats()
        # Strong references to running loads, including invalidated ones
        self._tasks: Set["asyncio.Task[ResolutionResult]"] = set()

    async def resolve(self, attributes: TerrainAttributes) -> ResolutionResult:
        """Return the sprite (or fallback marker) for an attribute triple."""
        entry = self._entries.get(attributes)
        if isinstance(entry, Done):
            self._stats.hits += 1
            return entry.result

        if isinstance(entry, Pending):
            self._stats.coalesced += 1
            task = entry.future
        else:
            self._stats.misses += 1
            task = asyncio.get_running_loop().create_task(self._load_sequence(attributes))
            pending = Pending(task)
            self._tasks.add(task)
            self._entries[attributes] = pending
            task.add_done_callback(functools.partial(self._on_done, attributes, pending))

        return await asyncio.shield(task)  # type: ignore[arg-type]

    def _on_done(
        self, attributes: TerrainAttributes, pending: Pending, task: "asyncio.Future[ResolutionResult]"
    ) -> None:
        """Publish a finished load, or drop the entry if it failed."""
        self._tasks.discard(task)  # type: ignore[arg-type]
        if self._entries.get(attributes) is not pending:
            # Invalidated while loading; result already went to the waiters
            if not task.cancelled():
                task.exception()
            return

        if task.cancelled() or task.exception() is not None:
            del self._entries[attributes]
            if not task.cancelled():
                self.logger.error(f"Sprite resolution failed for {attributes}: {task.exception()!r}")
            return

        self._entries[attributes] = Done(task.result())

    async def _load_sequence(self, attributes: TerrainAttributes) -> ResolutionResult:
        for candidate in self._steps.candidates(attributes):
            outcome = await self.loader.attempt_load(candidate)
            self._stats.loader_calls += 1
            resolved = self._steps.accept(attributes, candidate, outcome)
            if resolved is not None:
                return resolved

        self._stats.fallbacks += 1
        return self._steps.exhausted(attributes)

    def peek(self, attributes: TerrainAttributes) -> Optional[ResolutionResult]:
        """Return a completed result without triggering a load."""
        entry = self._entries.get(attributes)
        return entry.result if isinstance(entry, Done) else None

    def invalidate_all(self) -> int:
        """Forget every entry; running loads finish for their own waiters only."""
        count = len(self._entries)
        self._entries = {}
        self.logger.info(f"Sprite cache invalidated ({count} entries dropped)")
        return count

    def stats(self) -> CacheStats:
        """Return a snapshot of the cache counters."""
        return CacheStats(**vars(self._stats))

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, attributes: object) -> bool:
        return attributes in self._entries
