import asyncio
import logging
import traceback
from typing import Optional

import discord
from discord.ext import commands
from discord import app_commands

from rankbot.config import Config
from rankbot.data_models.standings import PendingUpdate
from rankbot.database.database import Database
from rankbot.database.ranking_store import RankingStore
from rankbot.services.backend_client import BackendClient
from rankbot.services.channel_gateway import ChannelGateway
from rankbot.services.match_results import MatchResultService
from rankbot.services.rank_sync import RankSyncEngine
from rankbot.services.thresholds import ThresholdService
from rankbot.services.update_queue import UpdateAdmissionQueue
from rankbot.services.webhook_server import WebhookServer
from rankbot.utils.error_embeds import ErrorEmbeds
from rankbot.utils.exceptions import AdminAuthorizationError
from rankbot.utils.logger import setup_logger

class RankBot(commands.Bot):
    def __init__(self):
        intents = discord.Intents.default()
        intents.message_content = True
        intents.guilds = True
        intents.guild_messages = True

        super().__init__(
            command_prefix=Config.COMMAND_PREFIX,
            intents=intents,
            help_command=None
        )

        self.tree.on_error = self.on_app_command_error

        self.logger = setup_logger(__name__)
        self.db: Optional[Database] = None
        self.ranking_store: Optional[RankingStore] = None
        self.backend_client = BackendClient()
        self.threshold_service = ThresholdService(self.backend_client)
        self.gateway = ChannelGateway(self)
        self.sync_engine: Optional[RankSyncEngine] = None
        self.match_service: Optional[MatchResultService] = None
        self.update_queue = UpdateAdmissionQueue(self.process_update)
        self.webhook_server = WebhookServer(self.update_queue, Config.PORT)

    async def setup_hook(self):
        """Called when the bot is starting up"""
        self.logger.info("Setting up Rank Bot...")

        # Start listening first so backend notifications during login are queued
        await self.webhook_server.start()

        self.db = Database()
        await self.db.initialize()
        self.ranking_store = RankingStore(self.db.session_factory)

        await self.threshold_service.refresh()

        self.sync_engine = RankSyncEngine(
            self.gateway,
            self.ranking_store,
            self.threshold_service,
            Config.get_ranks_channel_ids()
        )
        self.match_service = MatchResultService(
            self.gateway,
            self.threshold_service,
            self.sync_engine,
            Config.get_match_results_channel_ids()
        )

        await self.load_cogs()
        await self._sync_commands()

        self.logger.info("Rank Bot setup complete!")

    async def process_update(self, update: PendingUpdate):
        await self.match_service.process_update(update)

    async def load_cogs(self):
        """Load all cogs"""
        cogs_to_load = [
            'rankbot.cogs.ranks',
            'rankbot.cogs.admin'
        ]

        for cog in cogs_to_load:
            try:
                await self.load_extension(cog)
                self.logger.info(f"Loaded cog: {cog}")
            except Exception as e:
                self.logger.error(f"Failed to load cog {cog}: {e}", exc_info=True)

    async def _sync_commands(self):
        """Sync global slash commands; admin commands are synced per guild by the admin cog"""
        if not self.tree.get_commands():
            self.logger.warning("No global application commands found to sync. Check for cog loading errors.")
            return

        try:
            self.logger.info("Started refreshing global application (/) commands.")
            synced = await self.tree.sync()
            self.logger.info(f"Successfully synced {len(synced)} command(s) globally")
            for cmd in synced:
                self.logger.info(f"  - {cmd.name}: {cmd.description}")
        except discord.HTTPException as e:
            self.logger.error(f"Failed to sync commands: {e}", exc_info=True)

    async def on_ready(self):
        """Recover leaderboard messages, then release queued updates"""
        self.logger.info(f'Ready! Logged in as {self.user}')
        self.logger.info(f'Bot is in {len(self.guilds)} guilds')

        # on_ready fires again after reconnects; recovery and drain happen once
        if self.update_queue.is_ready:
            return

        recovered = await self.sync_engine.recover_messages()
        self.logger.info(f"Recovered {recovered} existing leaderboard message(s)")

        await self.update_queue.mark_ready()

    async def on_app_command_error(self, interaction: discord.Interaction, error: app_commands.AppCommandError):
        """Global error handler for slash commands"""
        command_name = interaction.command.name if interaction.command else 'Unknown'

        if isinstance(error, AdminAuthorizationError):
            self.logger.info(f"Admin role missing for command '{command_name}' by user {interaction.user}")
            error_embed = ErrorEmbeds.permission_denied(error.user_message)
        elif isinstance(error, app_commands.CheckFailure):
            self.logger.info(f"Permission denied for command '{command_name}' by user {interaction.user}")
            error_embed = ErrorEmbeds.permission_denied()
        else:
            self.logger.error(f"Error in app command '{command_name}': {error}", exc_info=True)
            error_embed = discord.Embed(
                title="❌ An unexpected error occurred",
                description="An error occurred while processing your command. Check the server logs for details.",
                color=discord.Color.red()
            )

        try:
            if interaction.response.is_done():
                await interaction.followup.send(embed=error_embed, ephemeral=True)
            else:
                await interaction.response.send_message(embed=error_embed, ephemeral=True)
        except discord.HTTPException as e:
            self.logger.error(f"Failed to send error response: {e}")

    async def close(self):
        """Cleanup when bot is shutting down"""
        self.logger.info("Shutting down Rank Bot...")

        await self.webhook_server.stop()
        await self.backend_client.close()
        if self.db:
            await self.db.close()

        await super().close()

async def main():
    """Main entry point"""
    Config.validate()

    bot = RankBot()

    try:
        await bot.start(Config.DISCORD_TOKEN)
    except KeyboardInterrupt:
        pass
    except Exception as e:
        logging.error(f"Fatal error: {e}")
        traceback.print_exc()
    finally:
        await bot.close()

def run():
    asyncio.run(main())

if __name__ == "__main__":
    run()
