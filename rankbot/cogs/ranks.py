"""
Ranks Cog - Scheduled Leaderboard Sync & Rank Lookups

Runs the periodic leaderboard sync and threshold refresh, handles the
plain-text commands posted in config channels, and provides /rank.
"""

import discord
from discord import app_commands
from discord.ext import commands, tasks
from typing import List, Optional

from rankbot.config import Config
from rankbot.services.steam_client import get_steam_avatar
from rankbot.utils.command_parser import ConfigCommand, ConfigCommandType, parse_config_command
from rankbot.utils.embeds import build_rank_embed, format_rank_text
from rankbot.utils.error_embeds import ErrorEmbeds
from rankbot.utils.exceptions import RankBotException, TransientFetchError
from rankbot.utils.logger import setup_logger

logger = setup_logger(__name__)


class RanksCog(commands.Cog):
    """Live leaderboard upkeep and player rank lookups"""

    def __init__(self, bot):
        self.bot = bot
        self.config_channels: List[int] = Config.get_config_channel_ids()
        self.logger = logger

    async def cog_load(self):
        self.scheduled_rank_update.start()
        self.refresh_thresholds.start()
        self.logger.info("RanksCog: Background tasks started")

    async def cog_unload(self):
        """Stop background tasks when cog is unloaded"""
        self.scheduled_rank_update.cancel()
        self.refresh_thresholds.cancel()
        self.logger.info("RanksCog: Background tasks stopped")

    @tasks.loop(seconds=Config.UPDATE_PERIOD)
    async def scheduled_rank_update(self):
        """Resync every ranks channel on a fixed period"""
        self.logger.info("Running scheduled rank updates")
        try:
            await self.bot.sync_engine.sync_all()
        except Exception as e:
            self.logger.error(f"Error in scheduled rank update: {e}", exc_info=True)

    @scheduled_rank_update.before_loop
    async def before_scheduled_rank_update(self):
        """Hold the first tick until startup recovery and the queue drain are done"""
        await self.bot.update_queue.wait_ready()

    @tasks.loop(minutes=Config.THRESHOLD_REFRESH_MINUTES)
    async def refresh_thresholds(self):
        """Pick up threshold changes published by the backend"""
        await self.bot.threshold_service.refresh()

    @refresh_thresholds.before_loop
    async def before_refresh_thresholds(self):
        await self.bot.wait_until_ready()

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message):
        """Handle plain-text staff commands in config channels"""
        if message.author.bot or message.channel.id not in self.config_channels:
            return

        command = parse_config_command(message.content)
        if command is None:
            return

        try:
            await self.handle_config_command(message.channel, command)
        except Exception as e:
            self.logger.error(f"Error handling config command {command.type.value}: {e}", exc_info=True)
            await message.channel.send(f"Exceptions happening: {e}")

    async def handle_config_command(self, channel: discord.abc.Messageable, command: ConfigCommand):
        if command.type == ConfigCommandType.UPDATE_NOW:
            report = await self.bot.sync_engine.sync_all()
            if report.all_succeeded:
                await channel.send("Update made in all ranks channels.")
            else:
                failed = ", ".join(str(channel_id) for channel_id in report.failed)
                await channel.send(
                    f"Update made in {len(report.succeeded)} ranks channel(s). Failed: {failed}"
                )

        elif command.type == ConfigCommandType.CHANGE_NATIONALITY:
            self.logger.info(f"Trying to switch nationality of {command.steam_id} to {command.nationality}")
            updated = await self.bot.ranking_store.update_nationality(command.steam_id, command.nationality)
            if not updated:
                await channel.send(f"Steamid {command.steam_id} not in database.")
                return
            await channel.send(f"Switched nationality for steamid {command.steam_id} to {command.nationality}.")
            await self.bot.sync_engine.sync_all()

        elif command.type == ConfigCommandType.REFRESH_CONFIG:
            if await self.bot.threshold_service.refresh():
                await channel.send("Thresholds refreshed from backend.")
            else:
                await channel.send("Threshold refresh failed, keeping previous values.")

        elif command.type == ConfigCommandType.SHOW_CONFIG:
            thresholds = self.bot.threshold_service.current
            k = thresholds.tier_k_values
            live = self.bot.sync_engine.message_cache.snapshot()
            destinations = ", ".join(
                f"{c} (message {live[c]})" if c in live else f"{c} (no message)"
                for c in self.bot.sync_engine.destinations
            )
            await channel.send(
                f"Min games for rank: {thresholds.min_games_for_rank}\n"
                f"Min games for tier 2: {thresholds.min_games_for_tier2}\n"
                f"K-values: {k['tier1']}/{k['tier2']}/{k['tier3']}\n"
                f"Rating floor: {thresholds.rating_floor}\n"
                f"Ranks channels: {destinations}\n"
                f"Update period: {Config.UPDATE_PERIOD}s"
            )

    @app_commands.command(name="rank", description="Check your or another player's rank")
    @app_commands.describe(
        steamid="Steam ID of the player to check (leave empty to check by name)",
        name="Name of the player to check (partial names work)"
    )
    async def rank(
        self,
        interaction: discord.Interaction,
        steamid: Optional[str] = None,
        name: Optional[str] = None
    ):
        """Look up a single player's standing"""
        await interaction.response.defer()

        thresholds = self.bot.threshold_service.current
        store = self.bot.ranking_store
        try:
            if steamid:
                standing = await store.fetch_player_standing(steamid, thresholds)
            elif name:
                standing = await store.find_player_by_name(name, thresholds)
            else:
                standing = await store.find_player_by_name(interaction.user.name, thresholds)
        except TransientFetchError as e:
            await interaction.followup.send(embed=ErrorEmbeds.command_error(e.user_message))
            return
        except RankBotException as e:
            self.logger.error(f"Error in rank command: {e}")
            await interaction.followup.send(embed=ErrorEmbeds.command_error(e.user_message))
            return

        if standing is None:
            await interaction.followup.send(embed=ErrorEmbeds.player_not_found(
                steam_id=steamid, name=name, username=interaction.user.name
            ))
            return

        try:
            avatar_url = await get_steam_avatar(standing.steam_id)
            tier = self.bot.threshold_service.classify(standing.games_played)
            await interaction.followup.send(embed=build_rank_embed(standing, tier, avatar_url))
        except discord.HTTPException as e:
            self.logger.error(f"Error creating rank embed: {e}")
            await interaction.followup.send(content=format_rank_text(standing))


async def setup(bot):
    await bot.add_cog(RanksCog(bot))
