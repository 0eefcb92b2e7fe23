"""
Shared fixtures for project listing tests.
"""

import fnmatch
import time
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

import pytest

from shared.errors import CacheUnavailableError, DataUnavailableError


class FakeDataSource:
    """In-memory data source that records every call."""

    def __init__(self, rows: Optional[List[Dict[str, Any]]] = None):
        self.rows = rows or []
        self.count_calls = 0
        self.find_calls: List[Tuple[Any, int, int]] = []
        self.fail_count = False
        self.fail_find = False

    @property
    def calls(self) -> int:
        return self.count_calls + len(self.find_calls)

    async def count(self, project_filter) -> int:
        self.count_calls += 1
        if self.fail_count:
            raise DataUnavailableError("count failed")
        return len(self.rows)

    async def find(self, project_filter, page: int, per_page: int) -> List[Dict[str, Any]]:
        self.find_calls.append((project_filter, page, per_page))
        if self.fail_find:
            raise DataUnavailableError("find failed")
        offset = (page - 1) * per_page
        return self.rows[offset:offset + per_page]


class FakeCacheStore:
    """In-memory cache store with TTL bookkeeping and failure switches."""

    def __init__(self):
        self.entries: Dict[str, Tuple[bytes, float]] = {}
        self.reads = 0
        self.writes: List[Tuple[str, bytes, int]] = []
        self.fail_get = False
        self.fail_set = False
        self.refuse_set = False
        self.fail_delete = False

    async def get(self, key: str) -> Optional[bytes]:
        self.reads += 1
        if self.fail_get:
            raise CacheUnavailableError("get failed")
        entry = self.entries.get(key)
        if entry is None or entry[1] < time.monotonic():
            return None
        return entry[0]

    async def set(self, key: str, value: bytes, ttl_seconds: int) -> bool:
        if self.fail_set:
            raise CacheUnavailableError("set failed")
        if self.refuse_set:
            return False
        self.writes.append((key, value, ttl_seconds))
        self.entries[key] = (value, time.monotonic() + ttl_seconds)
        return True

    async def delete_pattern(self, pattern: str) -> int:
        if self.fail_delete:
            raise CacheUnavailableError("delete failed")
        matching = [key for key in self.entries if fnmatch.fnmatchcase(key, pattern)]
        for key in matching:
            del self.entries[key]
        return len(matching)


def make_rows(count: int) -> List[Dict[str, Any]]:
    """Build data source rows shaped like the PostgreSQL page query output."""
    base = datetime(2024, 2, 1, 12, 0, tzinfo=timezone.utc)
    rows = []
    for index in range(1, count + 1):
        rows.append({
            "id": index,
            "name": f"Project {index}",
            "budget_amount": 100 * index,
            "budget_currency": "USD",
            "published_at": base - timedelta(hours=index),
            "employer_login": f"employer{index}",
            "employer_first_name": "Test",
            "employer_last_name": None,
            "skills": "PHP,MySQL",
        })
    return rows


@pytest.fixture
def data_source():
    return FakeDataSource(make_rows(6))


@pytest.fixture
def cache_store():
    return FakeCacheStore()


@pytest.fixture(autouse=True)
def cache_enabled_env(monkeypatch):
    """Run every test with the cache switched on unless a test overrides it."""
    monkeypatch.setenv("BOARD_CACHE_ENABLED", "yes")
