"""
Custom exceptions for the rank bot with user-friendly error messages.
"""

from discord import app_commands


class RankBotException(Exception):
    """Base exception for rank bot errors."""
    def __init__(self, message: str, user_message: str = None):
        super().__init__(message)
        self.user_message = user_message or message

class TransientFetchError(RankBotException):
    """Raised when the ranking store or the backend cannot be reached."""
    def __init__(self, source: str, details: str = None):
        super().__init__(
            f"Failed to fetch from {source}: {details}",
            "❌ Could not reach the rankings data right now. Please try again later."
        )
        self.source = source

class StaleReferenceError(RankBotException):
    """Raised when a cached leaderboard message can no longer be edited."""
    def __init__(self, channel_id: int, message_id: int, details: str = None):
        super().__init__(
            f"Message {message_id} in channel {channel_id} is not editable: {details}"
        )
        self.channel_id = channel_id
        self.message_id = message_id

class MessageDeliveryError(RankBotException):
    """Raised when a channel is missing or a message cannot be sent."""
    def __init__(self, channel_id: int, details: str = None):
        super().__init__(
            f"Could not deliver message to channel {channel_id}: {details}",
            "❌ Failed to post to the configured channel."
        )
        self.channel_id = channel_id

class ConfigFetchError(RankBotException):
    """Raised when the backend threshold config cannot be loaded or parsed."""
    def __init__(self, details: str):
        super().__init__(
            f"Threshold config refresh failed: {details}",
            "❌ Could not refresh the ranking thresholds. The previous values are still in use."
        )

class BackendError(RankBotException):
    """Raised when the backend client is not configured for admin actions."""
    def __init__(self, details: str):
        super().__init__(
            f"Backend misconfigured: {details}",
            f"❌ {details}"
        )

class AdminAuthorizationError(app_commands.CheckFailure, RankBotException):
    """Raised when a user without the admin role invokes an admin command."""
    def __init__(self):
        RankBotException.__init__(
            self,
            "Admin role required",
            "❌ You need the admin role to use this command."
        )
