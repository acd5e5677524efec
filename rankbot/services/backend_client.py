"""
HTTP client for the rating backend.

The backend owns the rating math. The bot only reads the published threshold
config and forwards admin actions, authenticating with a shared secret header.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import aiohttp

from rankbot.config import Config
from rankbot.data_models.standings import BackendResult
from rankbot.utils.exceptions import BackendError, ConfigFetchError

logger = logging.getLogger(__name__)

SECRET_HEADER = 'X-Bot-Secret'


class BackendClient:
    """aiohttp client for the backend's internal endpoints."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        secret: Optional[str] = None,
        timeout: Optional[float] = None
    ):
        self.base_url = (base_url if base_url is not None else Config.BACKEND_URL).rstrip('/')
        self.secret = secret if secret is not None else Config.BOT_INTERNAL_SECRET
        self.timeout = aiohttp.ClientTimeout(total=timeout or Config.BACKEND_TIMEOUT_SECONDS)
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    def _headers(self) -> Dict[str, str]:
        return {SECRET_HEADER: self.secret} if self.secret else {}

    async def close(self):
        if self._session and not self._session.closed:
            await self._session.close()

    async def fetch_threshold_config(self) -> Dict[str, Any]:
        """Raw threshold config document from the backend."""
        if not self.base_url:
            raise ConfigFetchError("BACKEND_URL is not configured")

        session = await self._get_session()
        try:
            async with session.get(f"{self.base_url}/internal/config", headers=self._headers()) as resp:
                resp.raise_for_status()
                data = await resp.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise ConfigFetchError(str(e)) from e

        if not isinstance(data, dict):
            raise ConfigFetchError(f"expected a JSON object, got {type(data).__name__}")
        return data

    async def _post_admin(self, path: str, payload: Dict[str, Any]) -> BackendResult:
        """POST an admin action; the backend answers with plain text."""
        if not self.base_url:
            raise BackendError("BACKEND_URL not configured in environment variables")
        if not self.secret:
            raise BackendError("BOT_INTERNAL_SECRET not configured in environment variables")

        session = await self._get_session()
        try:
            async with session.post(f"{self.base_url}{path}", json=payload, headers=self._headers()) as resp:
                text = await resp.text()
                return BackendResult(success=resp.status == 200, message=text)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Error calling backend endpoint {path}: {e}")
            return BackendResult(success=False, message=str(e))

    async def reset_ranks(self, default_elo: int) -> BackendResult:
        return await self._post_admin('/internal/reset-ranks', {'default_elo': default_elo})

    async def zero_player(self, steam_id: str) -> BackendResult:
        return await self._post_admin('/internal/zero-player', {'steamid': steam_id})

    async def set_player(self, steam_id: str, elo: int, games: int) -> BackendResult:
        return await self._post_admin('/internal/set-player', {
            'steamid': steam_id,
            'elo': elo,
            'games': games
        })
