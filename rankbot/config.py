import os
from typing import List
from dotenv import load_dotenv

load_dotenv()


def parse_id_list(raw: str) -> List[int]:
    """Parse a comma-separated list of Discord snowflakes."""
    if not raw:
        return []
    try:
        return [int(item.strip()) for item in raw.split(',') if item.strip()]
    except ValueError:
        raise ValueError(f"Expected comma-separated integers, got: {raw!r}")


class Config:
    """Bot configuration settings"""

    # Discord settings
    DISCORD_TOKEN = os.getenv('DISCORD_TOKEN')
    COMMAND_PREFIX = os.getenv('COMMAND_PREFIX', '!')
    ADMIN_ROLE_ID = int(os.getenv('ADMIN_ROLE_ID', 0))

    # Channel routing (comma-separated channel IDs)
    RANKS_CHANNEL_IDS = os.getenv('RANKS_CHANNEL_IDS', '')
    CONFIG_CHANNEL_IDS = os.getenv('CONFIG_CHANNEL_IDS', '')
    MATCH_RESULTS_CHANNEL_IDS = os.getenv('MATCH_RESULTS_CHANNEL_IDS', '')

    # Ranking store
    RANKINGS_DATABASE_URL = os.getenv('RANKINGS_DATABASE_URL', 'sqlite+aiosqlite:///rankings.db')
    LEADERBOARD_LIMIT = int(os.getenv('LEADERBOARD_LIMIT', 30))

    # Sync settings
    UPDATE_PERIOD = int(os.getenv('UPDATE_PERIOD', 150))  # seconds
    THRESHOLD_REFRESH_MINUTES = int(os.getenv('THRESHOLD_REFRESH_MINUTES', 10))
    RECOVERY_SCAN_LIMIT = int(os.getenv('RECOVERY_SCAN_LIMIT', 10))

    # Rating backend
    BACKEND_URL = os.getenv('BACKEND_URL', '').rstrip('/')
    BOT_INTERNAL_SECRET = os.getenv('BOT_INTERNAL_SECRET')
    BACKEND_TIMEOUT_SECONDS = float(os.getenv('BACKEND_TIMEOUT_SECONDS', 15))

    # Optional Steam Web API key for avatars in /rank
    STEAM_API_KEY = os.getenv('STEAM_API_KEY')

    # Health/webhook listener
    PORT = int(os.getenv('PORT', 8080))

    DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'

    # Directory for daily log files; empty disables file logging
    LOG_DIR = os.getenv('LOG_DIR', 'logs')

    @classmethod
    def get_ranks_channel_ids(cls) -> List[int]:
        """Channels that host a live leaderboard message"""
        return parse_id_list(cls.RANKS_CHANNEL_IDS)

    @classmethod
    def get_config_channel_ids(cls) -> List[int]:
        """Channels where plain-text admin commands are accepted"""
        return parse_id_list(cls.CONFIG_CHANNEL_IDS)

    @classmethod
    def get_match_results_channel_ids(cls) -> List[int]:
        """Channels that receive match result posts"""
        return parse_id_list(cls.MATCH_RESULTS_CHANNEL_IDS)

    @classmethod
    def validate(cls):
        """Validate that required configuration is present"""
        if not cls.DISCORD_TOKEN:
            raise ValueError("DISCORD_TOKEN is required")
        if not cls.get_ranks_channel_ids():
            raise ValueError("RANKS_CHANNEL_IDS must list at least one channel")
        if cls.UPDATE_PERIOD <= 0:
            raise ValueError("UPDATE_PERIOD must be a positive number of seconds")
