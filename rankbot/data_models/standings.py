"""
Ranking data models.

Immutable data transfer objects shared by the ranking store, the leaderboard
renderer and the sync engine.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Union

from rankbot.constants import ThresholdDefaults

UNRANKED = "unranked"


@dataclass(frozen=True)
class PlayerStanding:
    """Latest known standing of one player."""
    steam_id: str
    name: str
    rating: int
    nationality: Optional[str]
    games_played: int
    absolute_rank: int
    display_rank: Union[int, str]

    @property
    def is_ranked(self) -> bool:
        return self.display_rank != UNRANKED


@dataclass(frozen=True)
class ThresholdConfig:
    """Eligibility and tiering parameters published by the rating backend."""
    min_games_for_rank: int = ThresholdDefaults.MIN_GAMES_FOR_RANK
    min_games_for_tier2: int = ThresholdDefaults.MIN_GAMES_FOR_TIER2
    tier_k_values: Mapping[str, int] = field(default_factory=lambda: {
        'tier1': ThresholdDefaults.TIER1_K,
        'tier2': ThresholdDefaults.TIER2_K,
        'tier3': ThresholdDefaults.TIER3_K,
    })
    rating_floor: int = ThresholdDefaults.RATING_FLOOR

    def __post_init__(self):
        # Read-only copy so a shared config cannot be changed in place
        object.__setattr__(self, 'tier_k_values', MappingProxyType(dict(self.tier_k_values)))


@dataclass(frozen=True)
class TierInfo:
    """Games-played bracket of a single player."""
    tier: str
    label: str
    k_value: int


class UpdateKind(str, Enum):
    MATCH_RESULT = "match-result"
    REFRESH = "refresh"


@dataclass(frozen=True)
class PendingUpdate:
    """An externally triggered update request."""
    kind: UpdateKind
    payload: Optional[Dict[str, Any]] = None


class SyncOutcome(str, Enum):
    EDITED = "edited"
    CREATED = "created"


@dataclass
class SyncReport:
    """Aggregate result of syncing every configured destination."""
    succeeded: List[int] = field(default_factory=list)
    failed: List[int] = field(default_factory=list)

    @property
    def all_succeeded(self) -> bool:
        return not self.failed


@dataclass(frozen=True)
class BackendResult:
    """Opaque outcome of a backend admin action."""
    success: bool
    message: str


def classify_tier(games_played: int, thresholds: ThresholdConfig) -> TierInfo:
    """Classify a player into the games-played bracket that sets their K-value."""
    if games_played < thresholds.min_games_for_rank:
        return TierInfo('tier1', 'New', thresholds.tier_k_values['tier1'])
    if games_played < thresholds.min_games_for_tier2:
        return TierInfo('tier2', 'Developing', thresholds.tier_k_values['tier2'])
    return TierInfo('tier3', 'Established', thresholds.tier_k_values['tier3'])
