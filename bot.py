import logging
from typing import Optional

import discord
from discord import app_commands
from discord.ext import commands, tasks

from config import CONFIG
from controller import VetoController
from errors import VetoError
from state import SessionStore
from views import DiscordPresenter, GENERIC_FAILURE, send_ephemeral

logger = logging.getLogger(__name__)


class VetoBot(commands.Bot):
    """Discord client owning the session store, the controller and the idle-session sweep."""

    def __init__(self, store: Optional[SessionStore] = None, **kwargs):
        intents = discord.Intents.default()
        intents.guilds = True
        super().__init__(command_prefix="!", intents=intents, **kwargs)
        self.store = store if store is not None else SessionStore()
        self.controller = VetoController(self.store, DiscordPresenter(self))
        self.tree.on_error = self.on_app_command_error

    async def setup_hook(self) -> None:
        self.sweep_sessions.change_interval(minutes=CONFIG["sweep_interval_minutes"])
        self.sweep_sessions.start()

        guild_id = CONFIG["guild_id"]
        if guild_id:
            guild = discord.Object(id=int(guild_id))
            self.tree.copy_global_to(guild=guild)
            synced = await self.tree.sync(guild=guild)
        else:
            synced = await self.tree.sync()
        logger.info("Synced %d commands", len(synced))

    async def close(self) -> None:
        self.sweep_sessions.cancel()
        await super().close()

    async def on_ready(self):
        logger.info("Logged in as %s (ID: %s)", self.user, self.user.id)

    # ─── Idle session sweep ──────────────────────────────────────────────────
    @tasks.loop(minutes=30)
    async def sweep_sessions(self):
        self.controller.sweep(CONFIG["session_max_age_minutes"] * 60)

    @sweep_sessions.before_loop
    async def _before_sweep(self):
        await self.wait_until_ready()

    # ─── Errors ──────────────────────────────────────────────────────────────
    async def on_app_command_error(
        self,
        interaction: discord.Interaction,
        error: app_commands.AppCommandError
    ) -> None:
        original = getattr(error, "original", error)
        if isinstance(original, discord.errors.NotFound):
            return
        if isinstance(original, VetoError):
            return await send_ephemeral(interaction, original.message)
        logger.exception("Unhandled error in /%s", getattr(interaction.command, "name", "?"), exc_info=error)
        await send_ephemeral(interaction, GENERIC_FAILURE)
