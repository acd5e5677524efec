"""
In-memory record of which message currently shows the leaderboard in each
ranks channel. Lost on restart and rebuilt by the startup history scan.
"""

from typing import Dict, Optional


class MessageStateCache:
    """channel_id -> message_id of the live leaderboard message."""

    def __init__(self):
        self._messages: Dict[int, int] = {}

    def get(self, channel_id: int) -> Optional[int]:
        return self._messages.get(channel_id)

    def set(self, channel_id: int, message_id: int):
        self._messages[channel_id] = message_id

    def clear(self, channel_id: int):
        self._messages.pop(channel_id, None)

    def snapshot(self) -> Dict[int, int]:
        return self._messages.copy()

    def __contains__(self, channel_id: int) -> bool:
        return channel_id in self._messages

    def __len__(self) -> int:
        return len(self._messages)
