# tests/conftest.py

"""Pytest configuration, fakes and fixtures."""

import itertools
from datetime import datetime, timezone
from typing import Dict, List, Optional

import pytest

from rankbot.data_models.standings import PlayerStanding, ThresholdConfig, UNRANKED
from rankbot.database.database import Database
from rankbot.database.ranking_store import RankingStore
from rankbot.services.rank_sync import RankSyncEngine
from rankbot.services.thresholds import ThresholdService
from rankbot.utils.exceptions import (
    ConfigFetchError,
    MessageDeliveryError,
    StaleReferenceError,
    TransientFetchError,
)

FIXED_NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_standing(
    steam_id: str,
    name: str,
    rating: int,
    games_played: int = 20,
    nationality: Optional[str] = None,
    absolute_rank: int = 1,
    display_rank=1,
) -> PlayerStanding:
    return PlayerStanding(
        steam_id=steam_id,
        name=name,
        rating=rating,
        nationality=nationality,
        games_played=games_played,
        absolute_rank=absolute_rank,
        display_rank=display_rank,
    )


# =============================================================================
# Fakes
# =============================================================================


class FakeGateway:
    """In-memory stand-in for ChannelGateway."""

    def __init__(self, bot_user_id: int = 999):
        self.bot_user_id = bot_user_id
        self._ids = itertools.count(1000)
        # channel_id -> list of (message_id, author_id, content), oldest first
        self.history: Dict[int, List[list]] = {}
        self.sends: List[tuple] = []
        self.edits: List[tuple] = []
        self.missing_channels: set = set()
        self.failing_edits: set = set()

    def add_history(self, channel_id: int, message_id: int, author_id: int, content: str = ""):
        self.history.setdefault(channel_id, []).append([message_id, author_id, content])

    def delete_message(self, channel_id: int, message_id: int):
        self.history[channel_id] = [m for m in self.history.get(channel_id, []) if m[0] != message_id]

    def content_of(self, channel_id: int, message_id: int) -> Optional[str]:
        for m in self.history.get(channel_id, []):
            if m[0] == message_id:
                return m[2]
        return None

    async def send_message(self, channel_id: int, content: str) -> int:
        if channel_id in self.missing_channels:
            raise MessageDeliveryError(channel_id, "channel not found")
        message_id = next(self._ids)
        self.add_history(channel_id, message_id, self.bot_user_id, content)
        self.sends.append((channel_id, message_id, content))
        return message_id

    async def edit_message(self, channel_id: int, message_id: int, content: str):
        if channel_id in self.missing_channels:
            raise MessageDeliveryError(channel_id, "channel not found")
        if message_id in self.failing_edits:
            raise StaleReferenceError(channel_id, message_id, "forbidden")
        for m in self.history.get(channel_id, []):
            if m[0] == message_id and m[1] == self.bot_user_id:
                m[2] = content
                self.edits.append((channel_id, message_id, content))
                return
        raise StaleReferenceError(channel_id, message_id, "Unknown Message")

    async def find_own_message(self, channel_id: int, limit: int) -> Optional[int]:
        if channel_id in self.missing_channels:
            raise MessageDeliveryError(channel_id, "channel not found")
        recent = list(reversed(self.history.get(channel_id, [])))[:limit]
        for message_id, author_id, _ in recent:
            if author_id == self.bot_user_id:
                return message_id
        return None


class FakeRankingStore:
    """Serves a fixed snapshot; can be told to fail."""

    def __init__(self, snapshot: Optional[List[PlayerStanding]] = None):
        self.snapshot = snapshot or []
        self.fail = False
        self.calls = 0
        self.thresholds_seen: List[ThresholdConfig] = []

    async def fetch_leaderboard(self, thresholds: ThresholdConfig, limit: int) -> List[PlayerStanding]:
        self.calls += 1
        self.thresholds_seen.append(thresholds)
        if self.fail:
            raise TransientFetchError("ranking store", "connection refused")
        return self.snapshot[:limit]


class FakeBackendClient:
    """Returns queued config documents or raises ConfigFetchError."""

    def __init__(self, documents=None):
        self.documents = list(documents or [])
        self.fetches = 0

    async def fetch_threshold_config(self):
        self.fetches += 1
        if not self.documents:
            raise ConfigFetchError("backend unreachable")
        document = self.documents.pop(0)
        if isinstance(document, Exception):
            raise document
        return document


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def snapshot() -> List[PlayerStanding]:
    return [
        make_standing("76561190000000001", "Alpha", 2300, games_played=20, absolute_rank=1, display_rank=1),
        make_standing("76561190000000002", "Bravo", 2200, games_played=2, absolute_rank=2, display_rank=UNRANKED),
        make_standing("76561190000000003", "Charlie", 2100, games_played=10, absolute_rank=3, display_rank=2),
    ]


@pytest.fixture
def ranking_store(snapshot) -> FakeRankingStore:
    return FakeRankingStore(snapshot)


@pytest.fixture
def backend_client() -> FakeBackendClient:
    return FakeBackendClient()


@pytest.fixture
def threshold_service(backend_client) -> ThresholdService:
    return ThresholdService(backend_client)


@pytest.fixture
def engine(gateway, ranking_store, threshold_service) -> RankSyncEngine:
    return RankSyncEngine(
        gateway,
        ranking_store,
        threshold_service,
        [111, 222],
        leaderboard_limit=30,
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
async def database(tmp_path):
    """File-backed SQLite ranking store, one per test."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'rankings.db'}")
    await db.initialize()
    yield db
    await db.close()


@pytest.fixture
def store(database) -> RankingStore:
    return RankingStore(database.session_factory)
