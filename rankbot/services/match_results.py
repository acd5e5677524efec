"""
Match result relay and update processing.

A backend notification optionally carries the result of the match that caused
the ratings to change. The result is posted to every match-results channel,
then every ranks channel is resynced. The resync happens even when the result
could not be formatted or delivered.
"""

import logging
from typing import Any, Dict, Iterable, List

from rankbot.data_models.standings import PendingUpdate, UpdateKind, SyncReport
from rankbot.utils.match_format import format_match_results

logger = logging.getLogger(__name__)


class MatchResultService:
    """Posts match results and drives the follow-up rank sync."""

    def __init__(self, gateway, threshold_service, sync_engine, results_channels: Iterable[int]):
        self.gateway = gateway
        self.threshold_service = threshold_service
        self.sync_engine = sync_engine
        self.results_channels: List[int] = list(results_channels)

    async def send_match_results(self, match_data: Dict[str, Any]) -> int:
        """
        Post a formatted match result to every results channel.

        Returns:
            Number of channels the result was delivered to
        """
        try:
            content = format_match_results(match_data, self.threshold_service.current)
        except ValueError as e:
            logger.error(f"Error formatting match results: {e}")
            return 0
        except Exception as e:
            logger.error(f"Malformed match payload, skipping results post: {e}", exc_info=True)
            return 0

        delivered = 0
        for channel_id in self.results_channels:
            try:
                await self.gateway.send_message(channel_id, content)
                delivered += 1
                logger.info(f"Sent match results to channel {channel_id}")
            except Exception as e:
                logger.error(f"Error sending match results to channel {channel_id}: {e}")
        return delivered

    async def process_update(self, update: PendingUpdate) -> SyncReport:
        """Handle one update request: relay the match (if any), then resync all ranks."""
        if update.kind == UpdateKind.MATCH_RESULT and update.payload:
            logger.info("Processing match data")
            try:
                await self.send_match_results(update.payload)
            except Exception as e:
                logger.error(f"Error relaying match results: {e}", exc_info=True)
        return await self.sync_engine.sync_all()
