import discord
from discord.ext import commands
from discord import app_commands
from typing import Awaitable, Callable, Optional

from rankbot.config import Config
from rankbot.constants import AdminDefaults, UIConstants
from rankbot.data_models.standings import BackendResult
from rankbot.ui.admin_confirmation import AdminConfirmationView
from rankbot.utils.error_embeds import ErrorEmbeds
from rankbot.utils.exceptions import AdminAuthorizationError, BackendError
from rankbot.utils.logger import setup_logger

logger = setup_logger(__name__)


def member_has_admin_role(member) -> bool:
    roles = getattr(member, 'roles', None) or []
    return any(role.id == Config.ADMIN_ROLE_ID for role in roles)


def has_admin_role():
    """App command check that rejects members without the admin role"""
    def predicate(interaction: discord.Interaction) -> bool:
        if member_has_admin_role(interaction.user):
            return True
        raise AdminAuthorizationError()
    return app_commands.check(predicate)


class AdminCog(commands.Cog):
    """Backend admin actions, registered only in guilds that have the admin role"""

    def __init__(self, bot):
        self.bot = bot
        self.logger = logger

    async def register_guild_commands(self, guild: discord.Guild):
        """Expose admin commands in `guild` if it has the admin role, otherwise clear them"""
        try:
            if guild.get_role(Config.ADMIN_ROLE_ID):
                self.logger.info(f"Guild {guild.name} has the admin role, registering admin commands")
                for command in self.get_app_commands():
                    self.bot.tree.add_command(command, guild=guild, override=True)
            else:
                self.logger.info(f"Guild {guild.name} does not have the admin role, clearing guild commands")
                self.bot.tree.clear_commands(guild=guild)
            await self.bot.tree.sync(guild=guild)
        except discord.HTTPException as e:
            self.logger.error(f"Error managing guild commands for {guild.name}: {e}", exc_info=True)

    @commands.Cog.listener()
    async def on_ready(self):
        for guild in self.bot.guilds:
            await self.register_guild_commands(guild)

    @commands.Cog.listener()
    async def on_guild_join(self, guild: discord.Guild):
        self.logger.info(f"Joined new guild: {guild.name}")
        await self.register_guild_commands(guild)

    @commands.Cog.listener()
    async def on_guild_role_update(self, before: discord.Role, after: discord.Role):
        if after.id == Config.ADMIN_ROLE_ID:
            self.logger.info(f"Admin role updated in guild {after.guild.name}")
            await self.register_guild_commands(after.guild)

    @commands.Cog.listener()
    async def on_guild_role_create(self, role: discord.Role):
        if role.id == Config.ADMIN_ROLE_ID:
            await self.register_guild_commands(role.guild)

    async def _announce(self, content: str):
        """Post to every config channel"""
        for channel_id in Config.get_config_channel_ids():
            try:
                await self.bot.gateway.send_message(channel_id, content)
            except Exception as e:
                self.logger.error(f"Error sending announcement to channel {channel_id}: {e}")

    async def _confirm_and_run(
        self,
        interaction: discord.Interaction,
        action_label: str,
        warning: str,
        action: Callable[[], Awaitable[BackendResult]],
        success_message: str,
        announcement: Optional[str] = None
    ):
        """
        Ask the invoking admin to confirm, then run the backend action.

        On success the result is shown, the optional announcement is posted to the
        config channels and every ranks channel is resynced.
        """
        embed = discord.Embed(
            title=f"⚠️ Confirm {action_label}",
            description=warning,
            color=discord.Color.dark_red()
        )
        embed.set_footer(text=f"This action is logged • Times out in {int(AdminDefaults.CONFIRMATION_TIMEOUT)} seconds")

        view = AdminConfirmationView(interaction.user.id, action_label)
        await interaction.response.send_message(embed=embed, view=view)
        await view.wait()
        message = await interaction.original_response()

        if view.cancelled:
            return
        if not view.confirmed:
            await message.edit(embed=discord.Embed(
                title="⏰ Confirmation Timeout",
                description=f"{action_label} cancelled due to timeout.",
                color=discord.Color.orange()
            ), view=None)
            return

        try:
            result = await action()
        except BackendError as e:
            self.logger.error(f"{action_label} failed: {e}")
            await message.edit(embed=ErrorEmbeds.backend_failure(action_label, e.user_message), view=None)
            return

        if not result.success:
            await message.edit(embed=ErrorEmbeds.backend_failure(action_label, result.message), view=None)
            return

        await message.edit(embed=discord.Embed(
            title=f"✅ {action_label} Completed",
            description=success_message,
            color=discord.Color.green()
        ), view=None)
        self.logger.info(f"{action_label} by {interaction.user} ({interaction.user.id}): {result.message}")

        if announcement:
            await self._announce(announcement)
        await self.bot.sync_engine.sync_all()

    @app_commands.command(name="reset_ranks", description="Reset all player ranks to a default value (Admin only)")
    @app_commands.describe(default_elo=f"Default ELO value to reset to (default: {AdminDefaults.RESET_ELO})")
    @has_admin_role()
    async def reset_ranks(self, interaction: discord.Interaction, default_elo: Optional[int] = None):
        default_elo = default_elo or AdminDefaults.RESET_ELO
        await self._confirm_and_run(
            interaction,
            action_label="Rank Reset",
            warning=f"This will reset **ALL** player ranks to {default_elo} ELO with 0 past games.",
            action=lambda: self.bot.backend_client.reset_ranks(default_elo),
            success_message=(
                f"{UIConstants.RESET_EMOJI} All player ranks have been reset to {default_elo} ELO "
                f"with 0 past games.\n\nRanks channels will be updated shortly."
            ),
            announcement=(
                f"{UIConstants.RESET_EMOJI} **RANKS RESET**: All player ranks have been reset to "
                f"{default_elo} by {interaction.user}"
            )
        )

    @app_commands.command(name="zero_player", description="Zero one player's rating (Admin only)")
    @app_commands.describe(steamid="Steam ID of the player")
    @has_admin_role()
    async def zero_player(self, interaction: discord.Interaction, steamid: str):
        await self._confirm_and_run(
            interaction,
            action_label="Player Reset",
            warning=f"This will zero the rating of Steam ID `{steamid}`.",
            action=lambda: self.bot.backend_client.zero_player(steamid),
            success_message=f"Rating of `{steamid}` has been zeroed."
        )

    @app_commands.command(name="set_player", description="Set one player's rating and games played (Admin only)")
    @app_commands.describe(
        steamid="Steam ID of the player",
        elo="New rating",
        games="New games played count"
    )
    @has_admin_role()
    async def set_player(
        self,
        interaction: discord.Interaction,
        steamid: str,
        elo: int,
        games: app_commands.Range[int, 0]
    ):
        await self._confirm_and_run(
            interaction,
            action_label="Player Update",
            warning=f"This will set Steam ID `{steamid}` to {elo} ELO with {games} games.",
            action=lambda: self.bot.backend_client.set_player(steamid, elo, games),
            success_message=f"`{steamid}` now has {elo} ELO and {games} games."
        )


async def setup(bot):
    cog = AdminCog(bot)
    await bot.add_cog(cog)
    # Admin commands are guild-scoped, see register_guild_commands
    for command in cog.get_app_commands():
        bot.tree.remove_command(command.name)
