"""
HTTP listener for health checks and backend update notifications.

GET /                 liveness probe
POST /update-rankings optional match result JSON; queues the update while the
                      bot is starting, otherwise processes it before replying
"""

import json
import logging
from typing import Optional

from aiohttp import web

from rankbot.data_models.standings import PendingUpdate, UpdateKind

logger = logging.getLogger(__name__)

UPDATE_QUEUE_KEY = web.AppKey("update_queue", object)


async def health(request: web.Request) -> web.Response:
    return web.Response(text="Discord bot is running!")


async def _read_match_payload(request: web.Request) -> Optional[dict]:
    """Match data from the request body, or None for an empty/non-object body."""
    if not request.can_read_body:
        return None
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.warning("Ignoring update request body that is not valid JSON")
        return None
    if isinstance(body, dict) and body:
        return body
    return None


async def update_rankings(request: web.Request) -> web.Response:
    logger.info("Received update request from backend server")
    update_queue = request.app[UPDATE_QUEUE_KEY]

    match_data = await _read_match_payload(request)
    update = PendingUpdate(
        kind=UpdateKind.MATCH_RESULT if match_data else UpdateKind.REFRESH,
        payload=match_data
    )

    try:
        processed = await update_queue.submit(update)
    except Exception as e:
        logger.error(f"Error handling update request: {e}", exc_info=True)
        return web.Response(status=500, text="Error updating rankings")

    if not processed:
        return web.Response(status=202, text="Update queued, bot is initializing")
    return web.Response(status=200, text="Rankings updated successfully")


def create_app(update_queue) -> web.Application:
    app = web.Application()
    app[UPDATE_QUEUE_KEY] = update_queue
    app.router.add_get('/', health)
    app.router.add_post('/update-rankings', update_rankings)
    return app


class WebhookServer:
    """Runs the aiohttp app alongside the Discord client on the same loop."""

    def __init__(self, update_queue, port: int, host: str = '0.0.0.0'):
        self.app = create_app(update_queue)
        self.port = port
        self.host = host
        self._runner: Optional[web.AppRunner] = None

    async def start(self):
        self._runner = web.AppRunner(self.app)
        await self._runner.setup()
        site = web.TCPSite(self._runner, self.host, self.port)
        await site.start()
        logger.info(f"Server running on port {self.port}")

    async def stop(self):
        if self._runner:
            await self._runner.cleanup()
            self._runner = None
