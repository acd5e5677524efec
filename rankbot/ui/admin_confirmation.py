"""
Button confirmation for destructive admin actions.
"""

import discord

from rankbot.constants import AdminDefaults


class AdminConfirmationView(discord.ui.View):
    """Confirm/Cancel buttons that only the invoking admin may press"""

    def __init__(self, admin_discord_id: int, action_label: str, timeout: float = AdminDefaults.CONFIRMATION_TIMEOUT):
        super().__init__(timeout=timeout)
        self.admin_discord_id = admin_discord_id
        self.action_label = action_label
        self.confirmed = False
        self.cancelled = False

    async def interaction_check(self, interaction: discord.Interaction) -> bool:
        if interaction.user.id != self.admin_discord_id:
            await interaction.response.send_message(
                "❌ Only the command author can respond to this confirmation.",
                ephemeral=True
            )
            return False
        return True

    def _disable_all(self):
        for child in self.children:
            child.disabled = True

    @discord.ui.button(label="Confirm", style=discord.ButtonStyle.danger, emoji="⚠️")
    async def confirm(self, interaction: discord.Interaction, button: discord.ui.Button):
        self.confirmed = True
        self._disable_all()
        self.stop()
        await interaction.response.edit_message(
            embed=discord.Embed(
                title=f"🔄 Processing {self.action_label}...",
                description="This may take a moment. Please wait...",
                color=discord.Color.orange()
            ),
            view=self
        )

    @discord.ui.button(label="Cancel", style=discord.ButtonStyle.secondary)
    async def cancel(self, interaction: discord.Interaction, button: discord.ui.Button):
        self.cancelled = True
        self.stop()
        await interaction.response.edit_message(
            embed=discord.Embed(
                title=f"❌ {self.action_label} Cancelled",
                description="Operation cancelled by admin.",
                color=discord.Color.red()
            ),
            view=None
        )

    async def on_timeout(self):
        self._disable_all()
