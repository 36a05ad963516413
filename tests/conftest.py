"""Shared fixtures for terrain-sprites tests."""

import asyncio
import logging
import threading
import time
from pathlib import Path
from typing import Callable, Iterable, List

import pytest
from PIL import Image

from terrain_sprites.sprites.models import (
    Candidate,
    FailureReason,
    LoadFailure,
    LoadResult,
    LoadSuccess,
)


class RecordingLoader:
    """In-memory loader that records every candidate it is asked for."""

    def __init__(
        self,
        available: Iterable[str] = (),
        undecodable: Iterable[str] = (),
        delay: float = 0.0,
    ):
        self.available = set(available)
        self.undecodable = set(undecodable)
        self.delay = delay
        self.calls: List[str] = []
        self._lock = threading.Lock()

    def _outcome(self, candidate: Candidate) -> LoadResult:
        path = f"assets/sprites/{candidate.name}.png"
        if candidate.name in self.available:
            return LoadSuccess(candidate, Image.new("RGBA", (4, 4)), path)
        if candidate.name in self.undecodable:
            return LoadFailure(candidate, FailureReason.UNDECODABLE, path, "broken data")
        return LoadFailure(candidate, FailureReason.NOT_FOUND, path)

    def attempt_load(self, candidate: Candidate) -> LoadResult:
        with self._lock:
            self.calls.append(candidate.name)
        if self.delay:
            time.sleep(self.delay)
        return self._outcome(candidate)


class AsyncRecordingLoader(RecordingLoader):
    """Coroutine flavour of ``RecordingLoader``."""

    async def attempt_load(self, candidate: Candidate) -> LoadResult:  # type: ignore[override]
        self.calls.append(candidate.name)
        await asyncio.sleep(self.delay)
        return self._outcome(candidate)


@pytest.fixture
def make_loader() -> Callable[..., RecordingLoader]:
    return RecordingLoader


@pytest.fixture
def make_async_loader() -> Callable[..., AsyncRecordingLoader]:
    return AsyncRecordingLoader


@pytest.fixture
def write_sprite(tmp_path: Path) -> Callable[..., Path]:
    """Write a small RGBA PNG into ``tmp_path`` and return its path."""

    def _write(name: str, size: int = 8, color=(255, 0, 0, 255)) -> Path:
        path = tmp_path / name
        Image.new("RGBA", (size, size), color).save(path)
        return path

    return _write


@pytest.fixture
def restore_logging():
    """Undo handler changes made by ``setup_logging``."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield root_logger
    for handler in list(root_logger.handlers):
        if handler not in handlers:
            root_logger.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root_logger.handlers:
            root_logger.addHandler(handler)
    root_logger.setLevel(level)
