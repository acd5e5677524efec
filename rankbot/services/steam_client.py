"""
Steam Web API lookup for player avatars shown by /rank.
"""

import asyncio
import logging
from typing import Optional

import aiohttp

from rankbot.config import Config

logger = logging.getLogger(__name__)

PLAYER_SUMMARIES_URL = "https://api.steampowered.com/ISteamUser/GetPlayerSummaries/v2/"
STEAM_ID64_PREFIX = "7656"


async def get_steam_avatar(steam_id: str, api_key: Optional[str] = None) -> Optional[str]:
    """Medium avatar URL for a SteamID64, or None when unavailable."""
    api_key = api_key or Config.STEAM_API_KEY
    if not api_key:
        logger.debug("STEAM_API_KEY not set, skipping avatar lookup")
        return None

    if not steam_id.startswith(STEAM_ID64_PREFIX):
        logger.warning(f"SteamID {steam_id} is not in steamId64 format, skipping avatar")
        return None

    timeout = aiohttp.ClientTimeout(total=8)
    try:
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.get(
                PLAYER_SUMMARIES_URL,
                params={'key': api_key, 'steamids': steam_id}
            ) as resp:
                resp.raise_for_status()
                data = await resp.json()
    except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
        logger.error(f"Error fetching Steam avatar: {e}")
        return None

    players = data.get('response', {}).get('players', [])
    if not players:
        return None
    return players[0].get('avatarmedium') or players[0].get('avatar')
