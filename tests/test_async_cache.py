"""Tests for the asyncio single-flight sprite cache."""

import asyncio

import pytest

from terrain_sprites.sprites.async_cache import AsyncSpriteCache
from terrain_sprites.sprites.fallback import ConstantFallbackProvider
from terrain_sprites.sprites.loaders import AsyncLoaderAdapter
from terrain_sprites.sprites.models import (
    Candidate,
    FallbackMarker,
    LoadResult,
    ResolvedSprite,
    TerrainAttributes,
)

FOREST_HOT_MOUNTAINS = TerrainAttributes.from_ids("forest", "hot", "mountains")


class GatedAsyncLoader:
    """Async loader that waits on an event before answering."""

    def __init__(self, inner):
        self.inner = inner
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def attempt_load(self, candidate: Candidate) -> LoadResult:
        self.started.set()
        await self.release.wait()
        return await self.inner.attempt_load(candidate)


@pytest.mark.asyncio
async def test_resolves_first_available_candidate(make_async_loader) -> None:
    """Test the async cache returns the first candidate that loads."""
    loader = make_async_loader(available={"forest-hot"})
    result = await AsyncSpriteCache(loader).resolve(FOREST_HOT_MOUNTAINS)

    assert isinstance(result, ResolvedSprite)
    assert loader.calls == ["forest-hot-mountains", "forest-mountains", "forest-hot"]


@pytest.mark.asyncio
async def test_hundred_concurrent_callers_share_one_sequence(make_async_loader) -> None:
    """Test concurrent tasks for one triple run a single load sequence."""
    loader = make_async_loader(delay=0.001)
    cache = AsyncSpriteCache(loader, ConstantFallbackProvider())

    results = await asyncio.gather(*(cache.resolve(FOREST_HOT_MOUNTAINS) for _ in range(100)))

    assert len(loader.calls) == 6
    assert isinstance(results[0], FallbackMarker)
    assert all(result is results[0] for result in results)
    assert cache.stats().misses == 1
    assert cache.stats().coalesced == 99


@pytest.mark.asyncio
async def test_cached_result_needs_no_loader_calls(make_async_loader) -> None:
    """Test a cached triple is answered without calling the loader."""
    loader = make_async_loader(available={"mountains"})
    cache = AsyncSpriteCache(loader)
    first = await cache.resolve(FOREST_HOT_MOUNTAINS)
    calls = len(loader.calls)

    assert await cache.resolve(FOREST_HOT_MOUNTAINS) is first
    assert len(loader.calls) == calls
    assert cache.peek(FOREST_HOT_MOUNTAINS) is first


@pytest.mark.asyncio
async def test_cancelled_caller_does_not_cancel_shared_load(make_async_loader) -> None:
    """Test cancelling one waiter leaves the shared load running for the others."""
    gated = GatedAsyncLoader(make_async_loader(available={"forest-hot-mountains"}))
    cache = AsyncSpriteCache(gated)

    impatient = asyncio.create_task(cache.resolve(FOREST_HOT_MOUNTAINS))
    await gated.started.wait()
    patient = asyncio.create_task(cache.resolve(FOREST_HOT_MOUNTAINS))
    await asyncio.sleep(0)

    impatient.cancel()
    with pytest.raises(asyncio.CancelledError):
        await impatient

    gated.release.set()
    result = await patient
    assert isinstance(result, ResolvedSprite)
    assert cache.peek(FOREST_HOT_MOUNTAINS) is result


@pytest.mark.asyncio
async def test_loader_error_reaches_waiters_and_entry_is_dropped(make_async_loader) -> None:
    """Test a loader error reaches every waiter and a later call retries."""
    inner = make_async_loader(available={"forest"})

    class FlakyLoader:
        failed = False

        async def attempt_load(self, candidate: Candidate) -> LoadResult:
            await asyncio.sleep(0)
            if not self.failed:
                self.failed = True
                raise RuntimeError("disk vanished")
            return await inner.attempt_load(candidate)

    cache = AsyncSpriteCache(FlakyLoader())
    outcomes = await asyncio.gather(
        cache.resolve(FOREST_HOT_MOUNTAINS),
        cache.resolve(FOREST_HOT_MOUNTAINS),
        return_exceptions=True,
    )

    assert all(isinstance(outcome, RuntimeError) for outcome in outcomes)
    assert FOREST_HOT_MOUNTAINS not in cache
    assert isinstance(await cache.resolve(FOREST_HOT_MOUNTAINS), ResolvedSprite)


@pytest.mark.asyncio
async def test_invalidation_during_load_discards_result(make_async_loader) -> None:
    """Test a load finishing after invalidation is not stored."""
    gated = GatedAsyncLoader(make_async_loader(available={"forest-hot-mountains"}))
    cache = AsyncSpriteCache(gated)

    task = asyncio.create_task(cache.resolve(FOREST_HOT_MOUNTAINS))
    await gated.started.wait()
    assert cache.invalidate_all() == 1
    gated.release.set()

    result = await task
    assert isinstance(result, ResolvedSprite)
    assert FOREST_HOT_MOUNTAINS not in cache
    assert len(cache) == 0


@pytest.mark.asyncio
async def test_adapter_runs_blocking_loader(make_loader) -> None:
    """Test a blocking loader can be used through the async adapter.
test_async_cache.py"""
    loader = make_loader(available={"hot"})
    cache = AsyncSpriteCache(AsyncLoaderAdapter(loader))
    result = await cache.resolve(FOREST_HOT_MOUNTAINS)

    assert isinstance(result, ResolvedSprite)
    assert result.candidate.name == "hot"
    assert loader.calls[-1] == "hot"


@pytest.mark.asyncio
async def test_fallback_counted_when_invalidated_mid_load(make_async_loader) -> None:
    """Test a discarded load that ended in a fallback is still counted."""
    gated = GatedAsyncLoader(make_async_loader())
    cache = AsyncSpriteCache(gated, ConstantFallbackProvider())

    task = asyncio.create_task(cache.resolve(FOREST_HOT_MOUNTAINS))
    await gated.started.wait()
    cache.invalidate_all()
    gated.release.set()

    assert isinstance(await task, FallbackMarker)
    assert FOREST_HOT_MOUNTAINS not in cache
    assert cache.stats().fallbacks == 1
