"""
Shared embed builders for rank lookups.
"""

import discord
from datetime import datetime, timezone
from typing import Optional

from rankbot.constants import UIConstants
from rankbot.data_models.standings import PlayerStanding, TierInfo


def get_rank_color(rank: int) -> int:
    """Embed color for an absolute rank."""
    if rank <= 3:
        return UIConstants.GOLD_RANK_COLOR
    if rank <= 10:
        return UIConstants.SILVER_RANK_COLOR
    if rank <= 20:
        return UIConstants.BRONZE_RANK_COLOR
    return UIConstants.DEFAULT_RANK_COLOR


def format_display_rank(standing: PlayerStanding) -> str:
    return f"#{standing.display_rank}" if standing.is_ranked else "Unranked"


def build_rank_embed(standing: PlayerStanding, tier: TierInfo, avatar_url: Optional[str] = None) -> discord.Embed:
    """
    Build the /rank embed for one player.

    Args:
        standing: The player's current standing
        tier: Games-played bracket under the current thresholds
        avatar_url: Optional Steam avatar for the thumbnail
    """
    prefix = f"{standing.nationality} " if standing.nationality else ""
    embed = discord.Embed(
        title=f"{prefix}{standing.name}'s Ranking Stats",
        description=f"Current ranking information for {standing.name}",
        color=get_rank_color(standing.absolute_rank),
        timestamp=datetime.now(timezone.utc)
    )
    embed.add_field(name="Rank", value=format_display_rank(standing), inline=True)
    embed.add_field(name="ELO", value=str(standing.rating), inline=True)
    embed.add_field(name="Games", value=str(standing.games_played), inline=True)
    embed.add_field(name="Tier", value=f"{tier.label} (K={tier.k_value})", inline=True)
    embed.add_field(name="Steam ID", value=standing.steam_id, inline=False)
    embed.set_footer(text=UIConstants.FOOTER_TEXT)

    if avatar_url:
        embed.set_thumbnail(url=avatar_url)
    return embed


def format_rank_text(standing: PlayerStanding) -> str:
    """Plain-text fallback for when the embed cannot be sent."""
    if standing.is_ranked:
        return f"{standing.name} is ranked #{standing.display_rank} with {standing.rating} ELO."
    return f"{standing.name} is unranked with {standing.rating} ELO ({standing.games_played} games)."
