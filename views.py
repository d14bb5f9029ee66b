"""
Discord rendering for the veto flow.

Select menus built here feed the user's choice back into the VetoController
attached to the bot; DiscordPresenter is what the controller talks to when it
needs to prompt someone or announce something in a channel.
"""
import logging
from io import BytesIO
from typing import Iterable, Optional

import discord

from config import CONFIG
from controller import COINFLIP_SIDE, MATCH_FORMAT
from errors import VetoError
from veto import BAN, MATCH_FORMATS, PICK_MAP, PICK_SIDE

logger = logging.getLogger(__name__)

PLACEHOLDERS = {
    COINFLIP_SIDE: "Pick Heads or Tails",
    MATCH_FORMAT:  "Choose match format",
    BAN:           "Select a map to ban",
    PICK_MAP:      "Select a map to pick",
    PICK_SIDE:     "Pick a side",
}

GENERIC_FAILURE = "⚠️ Something went wrong handling that choice. Please try again."


async def send_ephemeral(interaction: discord.Interaction, content: str) -> None:
    if interaction.response.is_done():
        await interaction.followup.send(content, ephemeral=True)
    else:
        await interaction.response.send_message(content, ephemeral=True)


class ChoiceSelect(discord.ui.Select):
    """Single-choice dropdown for one prompt; the parent ChoiceView knows who it waits for."""

    def __init__(self, kind: str, options: Iterable[str]):
        super().__init__(
            placeholder=PLACEHOLDERS.get(kind, "Choose"),
            min_values=1,
            max_values=1,
            options=[
                discord.SelectOption(label=MATCH_FORMATS.get(o, o), value=o)
                for o in options
            ],
        )
        self.kind = kind

    async def callback(self, interaction: discord.Interaction):
        view: ChoiceView = self.view
        controller = interaction.client.controller
        ch = interaction.channel_id
        user_id = interaction.user.id
        value = self.values[0]

        await interaction.response.defer()
        try:
            if self.kind == COINFLIP_SIDE:
                await controller.choose_coinflip_side(ch, view.actor_id, view.opponent_id, user_id, value)
            elif self.kind == MATCH_FORMAT:
                await controller.choose_format(ch, user_id, value)
            else:
                await controller.submit_choice(ch, user_id, value, self.kind)
        except VetoError as e:
            logger.debug("Channel %s: rejected %s=%s from %s: %s", ch, self.kind, value, user_id, type(e).__name__)
            return await send_ephemeral(interaction, e.message)

        view.stop()
        await interaction.edit_original_response(view=None)


class ChoiceView(discord.ui.View):
    def __init__(
        self,
        kind: str,
        actor_id: int,
        options: Iterable[str],
        opponent_id: Optional[int] = None,
    ):
        # Same idle limit as the session sweep
        super().__init__(timeout=CONFIG["session_max_age_minutes"] * 60)
        self.kind = kind
        self.actor_id = actor_id
        self.opponent_id = opponent_id
        self.message: Optional[discord.Message] = None
        self.add_item(ChoiceSelect(kind, options))

    async def on_timeout(self):
        if self.message is None:
            return
        try:
            await self.message.edit(view=None)
        except discord.NotFound:
            logger.debug("Prompt message %s already deleted", self.message.id)

    async def on_error(self, interaction: discord.Interaction, error: Exception, item: discord.ui.Item):
        logger.exception("Unhandled error in %s prompt for channel %s", self.kind, interaction.channel_id, exc_info=error)
        await send_ephemeral(interaction, GENERIC_FAILURE)


class DiscordPresenter:
    """Presenter backed by the bot's channel cache."""

    def __init__(self, bot: discord.Client):
        self.bot = bot

    def _channel(self, channel_id: int):
        channel = self.bot.get_channel(channel_id)
        if channel is None:
            logger.warning("Channel %s is not cached; dropping message", channel_id)
        return channel

    async def prompt_choice(
        self,
        channel_id: int,
        actor_id: int,
        options: Iterable[str],
        label: str,
        kind: str,
        opponent_id: Optional[int] = None,
    ) -> None:
        channel = self._channel(channel_id)
        if not channel:
            return
        view = ChoiceView(kind, actor_id, options, opponent_id=opponent_id)
        view.message = await channel.send(content=label, view=view)

    async def announce(self, channel_id: int, text: str, image: Optional[BytesIO] = None) -> None:
        channel = self._channel(channel_id)
        if not channel:
            return
        if image is None:
            await channel.send(text)
        else:
            await channel.send(text, file=discord.File(image, filename="veto_summary.png"))

    async def team_name(self, channel_id: int, user_id: int) -> Optional[str]:
        """Name of the member's highest role, or None if they only have @everyone."""
        channel = self._channel(channel_id)
        guild = getattr(channel, "guild", None)
        if guild is None:
            return None
        member = guild.get_member(user_id)
        if member is None:
            try:
                member = await guild.fetch_member(user_id)
            except discord.NotFound:
                logger.debug("Member %s not found in guild %s", user_id, guild.id)
                return None
        role = member.top_role
        if role is None or role.is_default():
            return None
        return role.name
