"""
Rank sync engine.

Keeps one live leaderboard message per ranks channel in step with the ranking
store. Every trigger (scheduled tick, backend webhook, manual command, admin
action) goes through sync_destination(), which edits the cached message in
place and only posts a new one when there is nothing to edit.
"""

import asyncio
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, Optional

from rankbot.config import Config
from rankbot.data_models.standings import SyncOutcome, SyncReport
from rankbot.services.message_state import MessageStateCache
from rankbot.utils.exceptions import RankBotException, StaleReferenceError
from rankbot.utils.leaderboard_render import render_leaderboard
from rankbot.utils.logger import setup_logger

logger = setup_logger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RankSyncEngine:
    """Edit-in-place leaderboard sync across all ranks channels."""

    def __init__(
        self,
        gateway,
        ranking_store,
        threshold_service,
        destinations: Iterable[int],
        *,
        leaderboard_limit: Optional[int] = None,
        clock: Callable[[], datetime] = utc_now
    ):
        self.gateway = gateway
        self.ranking_store = ranking_store
        self.threshold_service = threshold_service
        self._destinations: List[int] = list(destinations)
        self.leaderboard_limit = leaderboard_limit or Config.LEADERBOARD_LIMIT
        self.clock = clock
        self.message_cache = MessageStateCache()
        self._locks: Dict[int, asyncio.Lock] = {}

    @property
    def destinations(self) -> List[int]:
        return list(self._destinations)

    def _lock_for(self, channel_id: int) -> asyncio.Lock:
        lock = self._locks.get(channel_id)
        if lock is None:
            lock = self._locks[channel_id] = asyncio.Lock()
        return lock

    async def render_current(self) -> str:
        """Fetch the current snapshot and render it with the cached thresholds."""
        thresholds = self.threshold_service.current
        snapshot = await self.ranking_store.fetch_leaderboard(thresholds, self.leaderboard_limit)
        return render_leaderboard(snapshot, thresholds, self.clock())

    async def sync_destination(self, channel_id: int) -> SyncOutcome:
        """
        Bring one channel's leaderboard message up to date.

        Edits the cached message when there is one. If that message is gone or
        no longer editable the reference is dropped and a single replacement is
        posted in the same call.

        Raises:
            TransientFetchError: If the snapshot could not be fetched
            MessageDeliveryError: If a new message could not be posted
        """
        async with self._lock_for(channel_id):
            content = await self.render_current()

            message_id = self.message_cache.get(channel_id)
            if message_id is not None:
                try:
                    await self.gateway.edit_message(channel_id, message_id, content)
                    logger.info(f"Updated ranks in channel {channel_id}")
                    return SyncOutcome.EDITED
                except StaleReferenceError as e:
                    logger.info(f"Could not edit previous message, creating new one: {e}")
                    self.message_cache.clear(channel_id)

            new_message_id = await self.gateway.send_message(channel_id, content)
            self.message_cache.set(channel_id, new_message_id)
            logger.info(f"Sent new ranks message {new_message_id} to channel {channel_id}")
            return SyncOutcome.CREATED

    async def sync_all(self) -> SyncReport:
        """Sync every ranks channel; one channel failing never stops the rest."""
        report = SyncReport()
        for channel_id in self._destinations:
            try:
                await self.sync_destination(channel_id)
                report.succeeded.append(channel_id)
            except RankBotException as e:
                logger.error(f"Error updating ranks in channel {channel_id}: {e}")
                report.failed.append(channel_id)
            except Exception as e:
                logger.error(f"Unexpected error updating ranks in channel {channel_id}: {e}", exc_info=True)
                report.failed.append(channel_id)

        if report.failed:
            logger.warning(
                f"Rank sync finished with {len(report.failed)} failed channel(s): {report.failed}"
            )
        return report

    async def recover_messages(self, scan_limit: Optional[int] = None) -> int:
        """
        Seed the message cache from channel history after a restart.

        For each ranks channel the newest message written by the bot among the
        last `scan_limit` messages becomes the edit target.

        Returns:
            Number of channels whose message was recovered
        """
        scan_limit = scan_limit or Config.RECOVERY_SCAN_LIMIT
        recovered = 0
        for channel_id in self._destinations:
            async with self._lock_for(channel_id):
                if channel_id in self.message_cache:
                    continue
                try:
                    message_id = await self.gateway.find_own_message(channel_id, scan_limit)
                except Exception as e:
                    logger.error(f"Error fetching existing messages in channel {channel_id}: {e}")
                    continue

                if message_id is not None:
                    self.message_cache.set(channel_id, message_id)
                    recovered += 1
                    logger.info(f"Found existing bot message in channel {channel_id}: {message_id}")
        return recovered
