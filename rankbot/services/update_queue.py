"""
Admission queue for update requests that arrive before the bot is ready.

The backend can notify the bot while it is still logging in and recovering
its leaderboard messages. Those requests are held here in arrival order and
replayed one at a time once the bot is ready. Anything queued when the process
dies is lost.
"""

import asyncio
from collections import deque
from typing import Awaitable, Callable, Deque

from rankbot.data_models.standings import PendingUpdate
from rankbot.utils.logger import setup_logger

logger = setup_logger(__name__)

UpdateProcessor = Callable[[PendingUpdate], Awaitable[None]]


class UpdateAdmissionQueue:
    """Single-consumer FIFO buffer gated by a readiness event."""

    def __init__(self, processor: UpdateProcessor):
        self.processor = processor
        self._pending: Deque[PendingUpdate] = deque()
        self._ready = asyncio.Event()
        self._draining = False

    @property
    def is_ready(self) -> bool:
        return self._ready.is_set()

    @property
    def pending(self) -> int:
        return len(self._pending)

    async def wait_ready(self):
        await self._ready.wait()

    async def submit(self, update: PendingUpdate) -> bool:
        """
        Process an update now, or queue it if the bot is not ready yet.

        Returns:
            True if the update was processed, False if it was queued
        """
        if not self.is_ready:
            self._pending.append(update)
            logger.info(f"Bot not ready, queued {update.kind.value} update ({len(self._pending)} pending)")
            return False

        await self.processor(update)
        return True

    async def mark_ready(self):
        """
        Drain everything queued so far, then open the gate.

        Items are processed strictly in order, each finishing (or failing) before
        the next starts. Updates submitted during the drain join the back of the
        queue, so nothing overtakes an earlier request. Later calls are no-ops.
        """
        if self.is_ready or self._draining:
            return

        self._draining = True
        try:
            if self._pending:
                logger.info(f"Found {len(self._pending)} queued updates, processing now")
            while self._pending:
                update = self._pending.popleft()
                try:
                    await self.processor(update)
                except Exception as e:
                    logger.error(f"Error processing queued update: {e}", exc_info=True)
            self._ready.set()
        finally:
            self._draining = False
        logger.info("Update queue is ready, new updates are processed immediately")
