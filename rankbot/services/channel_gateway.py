"""
Thin wrapper around the discord.py client for the handful of channel
operations the sync engine needs. Keeping them behind one object lets the
engine be exercised with an in-memory fake.
"""

import logging
from typing import Optional

import discord

from rankbot.utils.exceptions import MessageDeliveryError, StaleReferenceError

logger = logging.getLogger(__name__)


class ChannelGateway:
    """Channel operations backed by a connected discord.py client."""

    def __init__(self, client: discord.Client):
        self.client = client

    async def fetch_channel(self, channel_id: int) -> discord.abc.Messageable:
        """Resolve a channel from cache, falling back to the API."""
        channel = self.client.get_channel(channel_id)
        if channel is not None:
            return channel
        try:
            return await self.client.fetch_channel(channel_id)
        except (discord.NotFound, discord.Forbidden, discord.HTTPException) as e:
            raise MessageDeliveryError(channel_id, f"channel not found: {e}") from e

    async def send_message(self, channel_id: int, content: str) -> int:
        """Post a new message and return its ID."""
        channel = await self.fetch_channel(channel_id)
        try:
            message = await channel.send(content)
        except discord.HTTPException as e:
            raise MessageDeliveryError(channel_id, str(e)) from e
        return message.id

    async def edit_message(self, channel_id: int, message_id: int, content: str):
        """Replace the content of one of our messages."""
        channel = await self.fetch_channel(channel_id)
        try:
            await channel.get_partial_message(message_id).edit(content=content)
        except (discord.NotFound, discord.Forbidden, discord.HTTPException) as e:
            raise StaleReferenceError(channel_id, message_id, str(e)) from e

    async def find_own_message(self, channel_id: int, limit: int) -> Optional[int]:
        """Newest message authored by this bot among the last `limit` messages."""
        channel = await self.fetch_channel(channel_id)
        own_id = self.client.user.id if self.client.user else None
        try:
            async for message in channel.history(limit=limit):
                if message.author.id == own_id:
                    return message.id
        except discord.HTTPException as e:
            raise MessageDeliveryError(channel_id, f"history unavailable: {e}") from e
        return None
