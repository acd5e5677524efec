"""
Threshold configuration service for the rank bot.

Caches the eligibility and tiering parameters published by the rating backend.
The cached value is only ever replaced as a whole, and a failed refresh keeps
the last good value, so readers always see a complete config.
"""

import logging
from typing import Any, Dict

from rankbot.data_models.standings import ThresholdConfig, TierInfo, classify_tier
from rankbot.utils.exceptions import ConfigFetchError

logger = logging.getLogger(__name__)

K_VALUE_KEYS = ('tier1', 'tier2', 'tier3')


def parse_threshold_config(data: Dict[str, Any], previous: ThresholdConfig) -> ThresholdConfig:
    """
    Build a ThresholdConfig from the backend document.

    Keys missing from the document keep their previous value. Any value that is
    not an integer rejects the whole document.

    Raises:
        ConfigFetchError: If a present value is not an integer
    """
    def as_int(key: str, value: Any) -> int:
        # bool is an int subclass but never a valid threshold
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigFetchError(f"'{key}' must be an integer, got {value!r}")
        return value

    k_values = dict(previous.tier_k_values)
    raw_k_values = data.get('k_values', {})
    if not isinstance(raw_k_values, dict):
        raise ConfigFetchError(f"'k_values' must be an object, got {raw_k_values!r}")
    for tier in K_VALUE_KEYS:
        if tier in raw_k_values:
            k_values[tier] = as_int(f"k_values.{tier}", raw_k_values[tier])

    fields = {}
    for key in ('min_games_for_rank', 'min_games_for_tier2', 'rating_floor'):
        fields[key] = as_int(key, data[key]) if key in data else getattr(previous, key)

    return ThresholdConfig(tier_k_values=k_values, **fields)


class ThresholdService:
    """Process-wide threshold cache with last-known-good fallback."""

    def __init__(self, backend_client):
        """
        Initialize threshold service.

        Args:
            backend_client: BackendClient used to fetch the config document
        """
        self.backend_client = backend_client
        self._current = ThresholdConfig()
        self._loaded = False

    @property
    def current(self) -> ThresholdConfig:
        """Current thresholds (hardcoded defaults until the first successful refresh)."""
        return self._current

    @property
    def loaded(self) -> bool:
        return self._loaded

    async def refresh(self) -> bool:
        """
        Fetch thresholds from the backend and swap them in.

        Returns:
            True if the cache was replaced, False if the previous value was kept
        """
        try:
            data = await self.backend_client.fetch_threshold_config()
            new_config = parse_threshold_config(data, self._current)
        except ConfigFetchError as e:
            logger.warning(f"{e}; keeping previous thresholds")
            return False
        except Exception as e:
            logger.error(f"Unexpected error refreshing thresholds: {e}", exc_info=True)
            return False

        self._current = new_config
        self._loaded = True
        logger.info(
            f"Loaded thresholds: min games {new_config.min_games_for_rank}, "
            f"tier2 at {new_config.min_games_for_tier2}, floor {new_config.rating_floor}, "
            f"K {dict(new_config.tier_k_values)}"
        )
        return True

    def classify(self, games_played: int) -> TierInfo:
        """Tier of a player with `games_played` games under the current thresholds."""
        return classify_tier(games_played, self._current)
