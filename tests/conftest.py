"""Shared fixtures: a small identifier space and a catalog over tmp_path."""

from pathlib import Path

import pytest

from spike_studio.config.constants import STRIKE_PREFIX
from spike_studio.spikes.cache import SpikeCache
from spike_studio.spikes.catalog import SpikeCatalog
from spike_studio.spikes.identifiers import IdentifierSpace
from spike_studio.spikes.storage import SpikeStore


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: float = 0.0):
        self._time = start

    def now(self) -> float:
        return self._time

    def advance(self, seconds: float):
        self._time += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def small_space() -> IdentifierSpace:
    """3 libraries x 3 patterns x 2 styles x 2 languages, strike prefix only."""
    return IdentifierSpace(
        libraries=["bun-elysia", "react", "fastapi"],
        patterns=["worker", "hook", "route"],
        styles=["typed", "basic"],
        languages=["ts", "py"],
        prefixes=[STRIKE_PREFIX],
    )


@pytest.fixture
def store(tmp_path: Path) -> SpikeStore:
    return SpikeStore(tmp_path / "spikes")


@pytest.fixture
def catalog(store: SpikeStore, small_space: IdentifierSpace, clock: FakeClock) -> SpikeCatalog:
    return SpikeCatalog(
        store,
        space=small_space,
        cache=SpikeCache(max_size=50, ttl=300, time_fn=clock.now),
        generated_limit=None,
    )
