"""
Pytest configuration and shared fixtures.
"""

import json
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional

import httpx
import pytest

from datamuse_backfill.datamuse_client import Found, FrequencyLookupClient, FrequencyResult, NotFound
from datamuse_backfill.word_store import StorageError

FETCHED_AT = "2025-01-01T00:00:00.000Z"


class InMemoryWordStore:
    """Dictionary table stand-in with the same interface as WordStore."""

    def __init__(
        self,
        words: Iterable[str] = (),
        failing_updates: Iterable[str] = (),
        select_failures: int = 0,
    ):
        start = datetime(2024, 1, 1)
        self.rows: List[Dict[str, Any]] = [
            {"word": word, "created_at": start + timedelta(minutes=i), "info": None}
            for i, word in enumerate(words)
        ]
        self.failing_updates = set(failing_updates)
        self.select_failures = select_failures
        self.select_calls = 0
        self.update_calls: List[str] = []

    async def select_pending(self, limit: int) -> List[str]:
        self.select_calls += 1
        if self.select_failures > 0:
            self.select_failures -= 1
            raise StorageError("connection refused")
        pending = sorted(
            (row for row in self.rows if row["info"] is None),
            key=lambda row: row["created_at"],
        )
        return [row["word"] for row in pending[:limit]]

    async def count_pending(self) -> int:
        return sum(1 for row in self.rows if row["info"] is None)

    async def update_info(self, word: str, info: Dict[str, Any]) -> bool:
        self.update_calls.append(word)
        if word in self.failing_updates:
            raise StorageError(f"could not write {word}")
        updated = False
        for row in self.rows:
            if row["word"] == word:
                row["info"] = json.dumps(info)
                updated = True
        return updated

    def info_for(self, word: str) -> Optional[Dict[str, Any]]:
        for row in self.rows:
            if row["word"] == word and row["info"] is not None:
                return json.loads(row["info"])
        return None


class FakeLookupClient:
    """Returns canned results; unknown words come back as found."""

    def __init__(self, results: Optional[Dict[str, FrequencyResult]] = None, reachable: bool = True):
        self.results = results or {}
        self.reachable = reachable
        self.calls: List[str] = []

    async def lookup(self, word: str) -> FrequencyResult:
        self.calls.append(word)
        return self.results.get(word, FrequencyResult(Found("12.5", 1000), FETCHED_AT))

    async def test_connection(self) -> bool:
        return self.reachable


class RecordingPacer:
    """Pacer that never sleeps but counts how often it was asked to."""

    def __init__(self):
        self.waits = 0

    async def wait(self) -> None:
        self.waits += 1


@pytest.fixture
def not_found_result() -> FrequencyResult:
    return FrequencyResult(NotFound(), FETCHED_AT)


@pytest.fixture
def recording_pacer() -> RecordingPacer:
    return RecordingPacer()


def mock_datamuse_client() -> FrequencyLookupClient:
    """Real lookup client whose HTTP layer answers every word as found."""

    def handler(request: httpx.Request) -> httpx.Response:
        word = request.url.params["sp"]
        return httpx.Response(200, json=[{"word": word, "score": 100, "tags": ["f:2.5"]}])

    return FrequencyLookupClient(
        base_url="https://api.datamuse.test",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        clock=lambda: FETCHED_AT,
    )
