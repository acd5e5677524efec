"""
Plain-text leaderboard rendering.

The leaderboard lives in a single Discord message that is edited in place, so
the rendered document must always fit within one message.
"""

from datetime import datetime
from typing import List, Sequence

from rankbot.constants import DiscordLimits
from rankbot.data_models.standings import PlayerStanding, ThresholdConfig


def discord_timestamp(moment: datetime, style: str = "R") -> str:
    """Discord timestamp markup, rendered client-side in the reader's timezone."""
    return f"<t:{int(moment.timestamp())}:{style}>"


def format_row(rank: int, standing: PlayerStanding) -> str:
    prefix = f"{standing.nationality} " if standing.nationality else ""
    return f"{rank}. {prefix}{standing.name} {standing.rating}"


def render_leaderboard(
    snapshot: Sequence[PlayerStanding],
    thresholds: ThresholdConfig,
    as_of: datetime,
    max_length: int = DiscordLimits.MESSAGE_LIMIT
) -> str:
    """
    Render a rating-ordered snapshot as the leaderboard message.

    Players below the minimum game count are left out entirely. Ranks are
    recounted here (dense, 1-based) over the eligible players only, and rows
    are dropped from the bottom if the message would exceed `max_length`.
    """
    header = f"The Ranks, as of {discord_timestamp(as_of)}.\n"
    footer = (
        f"\nPlayers need {thresholds.min_games_for_rank}+ games to be ranked. "
        f"Ratings never drop below {thresholds.rating_floor}.\n"
        f"Message an admin to change your emoji."
    )

    budget = max_length - len(header) - len(footer)
    rows: List[str] = []
    rank = 0
    for standing in snapshot:
        if standing.games_played < thresholds.min_games_for_rank:
            continue
        rank += 1
        line = format_row(rank, standing) + "\n"
        if len(line) > budget:
            break
        rows.append(line)
        budget -= len(line)

    return header + "".join(rows) + footer
