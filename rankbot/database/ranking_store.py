"""
Ranking store adapter.

Reads player standings from the append-only rankings table. Every read goes
through the same "latest row per player, rating descending" query so a player
looked up on their own always matches what the full leaderboard shows.
"""

import time
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, List, Optional, Sequence

from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from rankbot.data_models.standings import PlayerStanding, ThresholdConfig, UNRANKED
from rankbot.database.models import RankingRecord
from rankbot.utils.exceptions import TransientFetchError

logger = logging.getLogger(__name__)


def build_standings(rows: Sequence, thresholds: ThresholdConfig) -> List[PlayerStanding]:
    """
    Turn rating-ordered rows into standings.

    Rows must already be ordered by rating descending. Display ranks are dense
    and count only players with enough games; everyone else is unranked.
    """
    standings = []
    next_rank = 1
    for row in rows:
        if row.games_played >= thresholds.min_games_for_rank:
            display_rank = next_rank
            next_rank += 1
        else:
            display_rank = UNRANKED

        standings.append(PlayerStanding(
            steam_id=row.steam_id,
            name=row.name,
            rating=row.rating,
            nationality=row.nationality,
            games_played=row.games_played or 0,
            absolute_rank=row.absolute_rank,
            display_rank=display_rank
        ))
    return standings


class RankingStore:
    """Queries against the rankings table."""

    def __init__(self, session_factory):
        self.session_factory = session_factory

    @asynccontextmanager
    async def _session(self) -> AsyncGenerator[AsyncSession, None]:
        """Session scope that reports store failures as TransientFetchError."""
        session = self.session_factory()
        try:
            yield session
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"Ranking store query failed: {e}")
            raise TransientFetchError("ranking store", str(e)) from e
        finally:
            await session.close()

    @staticmethod
    def _standings_query(limit: Optional[int] = None):
        latest = select(
            RankingRecord.steam_id.label('steam_id'),
            RankingRecord.name.label('name'),
            RankingRecord.rating.label('rating'),
            RankingRecord.nationality.label('nationality'),
            RankingRecord.games_played.label('games_played'),
            func.row_number().over(
                partition_by=RankingRecord.steam_id,
                order_by=RankingRecord.timestamp.desc()
            ).label('rn')
        ).subquery('latest')

        query = (
            select(
                latest.c.steam_id,
                latest.c.name,
                latest.c.rating,
                latest.c.nationality,
                latest.c.games_played,
                func.rank().over(order_by=latest.c.rating.desc()).label('absolute_rank')
            )
            .where(latest.c.rn == 1)
            .order_by(latest.c.rating.desc())
        )
        if limit is not None:
            query = query.limit(limit)
        return query

    async def fetch_leaderboard(self, thresholds: ThresholdConfig, limit: int) -> List[PlayerStanding]:
        """Top `limit` players by rating, one row per player."""
        async with self._session() as session:
            result = await session.execute(self._standings_query(limit))
            rows = result.all()
        logger.debug(f"Fetched leaderboard snapshot with {len(rows)} rows")
        return build_standings(rows, thresholds)

    async def fetch_all_standings(self, thresholds: ThresholdConfig) -> List[PlayerStanding]:
        """Every player's latest standing, rating descending."""
        async with self._session() as session:
            result = await session.execute(self._standings_query())
            rows = result.all()
        return build_standings(rows, thresholds)

    async def fetch_player_standing(self, steam_id: str, thresholds: ThresholdConfig) -> Optional[PlayerStanding]:
        """Look up one player by Steam ID from the full standings set."""
        standings = await self.fetch_all_standings(thresholds)
        return next((s for s in standings if s.steam_id == steam_id), None)

    async def find_player_by_name(self, name: str, thresholds: ThresholdConfig) -> Optional[PlayerStanding]:
        """Highest rated player whose name contains `name` (case-insensitive)."""
        needle = name.lower()
        standings = await self.fetch_all_standings(thresholds)
        return next((s for s in standings if needle in s.name.lower()), None)

    async def update_nationality(self, steam_id: str, nationality: Optional[str]) -> bool:
        """
        Record a new nationality tag for a player.

        The latest row is copied with the new tag and a newer timestamp, so the
        change becomes the player's current standing. Passing "null" (any case)
        or None clears the tag.

        Returns:
            False if the player has no rows in the store
        """
        if nationality is not None and nationality.lower() == "null":
            nationality = None

        async with self._session() as session:
            result = await session.execute(
                select(RankingRecord)
                .where(RankingRecord.steam_id == steam_id)
                .order_by(RankingRecord.timestamp.desc())
                .limit(1)
            )
            latest = result.scalar_one_or_none()
            if latest is None:
                return False

            session.add(RankingRecord(
                steam_id=latest.steam_id,
                name=latest.name,
                rating=latest.rating,
                games_played=latest.games_played,
                nationality=nationality,
                timestamp=max(int(time.time()), latest.timestamp + 1)
            ))

        logger.info(f"Switched nationality of {steam_id} to {nationality}")
        return True
