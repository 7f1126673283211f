"""Shared fixtures: a controllable clock and isolated trackers."""

from datetime import datetime, timedelta, timezone

import pytest

from japanese_progress.storage.backends import InMemoryStorage, JsonFileStorage
from japanese_progress.storage.progress_store import ProgressStore
from japanese_progress.tracking.tracker import ProgressTracker

START = datetime(2026, 3, 1, 9, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def tracker(clock):
    return ProgressTracker(ProgressStore(InMemoryStorage(), clock=clock))


@pytest.fixture
def file_tracker(tmp_path, clock):
    return ProgressTracker(ProgressStore(JsonFileStorage(tmp_path), clock=clock))
