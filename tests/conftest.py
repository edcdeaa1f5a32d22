import asyncio
from typing import List, Optional

import pytest

from directory_sync.cache.store import LocalCacheStore
from directory_sync.core.kv_store import JsonFileStore
from directory_sync.models.school import SchoolRecord
from directory_sync.refresh.cooldown import CooldownTracker

START_MILLIS = 1_700_000_000_000


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, start: int = START_MILLIS) -> None:
        self.now = start

    def now_millis(self) -> int:
        return self.now

    def advance(self, *, millis: int = 0, minutes: int = 0, hours: int = 0) -> None:
        self.now += millis + minutes * 60_000 + hours * 3_600_000


class FakeSource:
    """Remote source stub returning canned records or raising."""

    def __init__(self, records: Optional[List] = None, error: Optional[Exception] = None) -> None:
        self.records = list(records or [])
        self.error = error
        self.calls = 0

    async def fetch_all(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.records)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return None


class GatedSource(FakeSource):
    """Blocks inside fetch_all until the gate is opened."""

    def __init__(self, records: Optional[List] = None) -> None:
        super().__init__(records)
        self.started = asyncio.Event()
        self.gate = asyncio.Event()

    async def fetch_all(self):
        self.calls += 1
        self.started.set()
        await self.gate.wait()
        return list(self.records)


def make_school(index: int, **overrides) -> SchoolRecord:
    data = {
        "id": f"{index:03d}",
        "schoolNumber": str(index),
        "schoolName": f"উলিপুর সরকারি প্রাথমিক বিদ্যালয় {index}",
        "schoolStatus": "good",
        "unionName": "Ulipur Sadar",
        "latitude": 25.7743 + index / 1000,
        "longitude": 89.6441,
        "maleStudents": 200,
        "femaleStudents": 180,
        "totalStudents": 380,
        "dailyAttendance": 350,
        "headmasterName": "Md. Abdul Hamid",
        "headmasterMobile": "01712345678",
        "lastUpdated": "2024-01-12",
    }
    data.update(overrides)
    return SchoolRecord.from_dict(data)


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def cache_store(tmp_path, clock):
    return LocalCacheStore(JsonFileStore(tmp_path / "schools_cache.json"), clock=clock)


@pytest.fixture
def cooldown(tmp_path, clock):
    return CooldownTracker(JsonFileStore(tmp_path / "sync_cooldown.json"), clock=clock)


@pytest.fixture
def schools():
    return [make_school(i) for i in range(1, 4)]
