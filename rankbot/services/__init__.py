"""
Services package for the rank bot.

Leaderboard sync, update admission, threshold caching and the outbound
backend/Discord/Steam clients.
"""

from .message_state import MessageStateCache
from .rank_sync import RankSyncEngine
from .thresholds import ThresholdService
from .update_queue import UpdateAdmissionQueue

__all__ = ['MessageStateCache', 'RankSyncEngine', 'ThresholdService', 'UpdateAdmissionQueue']
