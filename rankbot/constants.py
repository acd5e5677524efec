"""
Bot-wide constants for the rank bot.

Static values shared by the renderer, the sync engine and the cogs. Anything
an operator may want to change lives in rankbot.config instead.
"""

class DiscordLimits:
    """Hard limits imposed by the Discord API."""

    # Maximum characters in a single message body
    MESSAGE_LIMIT = 2000


class ThresholdDefaults:
    """Safe threshold values used until the backend config has loaded."""

    MIN_GAMES_FOR_RANK = 5
    MIN_GAMES_FOR_TIER2 = 10
    TIER1_K = 120  # New players
    TIER2_K = 60   # Developing players
    TIER3_K = 30   # Established players
    RATING_FLOOR = 1000


class AdminDefaults:
    """Defaults for admin actions."""

    RESET_ELO = 2000
    CONFIRMATION_TIMEOUT = 60.0  # seconds


class UIConstants:
    """Constants for Discord UI elements."""

    # Rank lookup embed colors
    GOLD_RANK_COLOR = 0xFFD700    # Top 3
    SILVER_RANK_COLOR = 0xC0C0C0  # Top 10
    BRONZE_RANK_COLOR = 0xCD7F32  # Top 20
    DEFAULT_RANK_COLOR = 0x0099FF

    FOOTER_TEXT = "BPL Rankings"
    TROPHY_EMOJI = "🏆"
    RESET_EMOJI = "🔄"
