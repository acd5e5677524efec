"""
Centralized error embeds for consistent error handling across the rank bot.
"""

import discord
from typing import Optional


class ErrorEmbeds:
    """Centralized error embed factory for consistent error handling."""

    @staticmethod
    def player_not_found(steam_id: Optional[str] = None, name: Optional[str] = None,
                         username: Optional[str] = None) -> discord.Embed:
        """Create embed for a /rank lookup that matched nobody."""
        if steam_id:
            description = f"Could not find a player with Steam ID: {steam_id} in the rankings."
        elif name:
            description = f"Could not find a player with name matching \"{name}\" in the rankings."
        elif username:
            description = f"Could not match your Discord username ({username}) to any player in the rankings."
        else:
            description = "Player not found in the rankings. They may not have played any ranked matches yet."

        return discord.Embed(
            title="Player Not Found",
            description=description,
            color=discord.Color.red()
        )

    @staticmethod
    def command_error(error: str) -> discord.Embed:
        """Create embed for general command errors."""
        return discord.Embed(
            title="Command Error",
            description=f"An error occurred: {error}\n\nPlease try again or contact an administrator.",
            color=discord.Color.red()
        )

    @staticmethod
    def permission_denied(message: Optional[str] = None) -> discord.Embed:
        """Create embed for permission errors."""
        return discord.Embed(
            title="Permission Denied",
            description=message or "You don't have permission to perform this action.",
            color=discord.Color.red()
        )

    @staticmethod
    def backend_failure(action: str, message: str) -> discord.Embed:
        """Create embed for a rejected or failed backend admin action."""
        return discord.Embed(
            title=f"{action} Failed",
            description=f"Error: {message or 'No response from backend'}",
            color=discord.Color.red()
        )
