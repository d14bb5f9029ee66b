import logging
import discord
from discord import app_commands
from errors import VetoError

logger = logging.getLogger(__name__)

@app_commands.command(
    name="coinflip",
    description="Flip a coin to decide who picks the match format"
)
@app_commands.describe(opponent="The opposing team captain")
async def coinflip(
    interaction: discord.Interaction,
    opponent: discord.Member
) -> None:
    """Open the Heads/Tails prompt for the initiator; the session starts once the coin lands."""
    controller = interaction.client.controller
    channel_id = interaction.channel_id
    opponent_id = opponent.id

    try:
        await controller.start_coinflip(channel_id, interaction.user.id, opponent_id)
    except VetoError as e:
        return await interaction.response.send_message(e.message, ephemeral=True)

    logger.info("Channel %s: coinflip opened by %s against %s", channel_id, interaction.user.id, opponent_id)
    await interaction.response.send_message("🪙 Coinflip started.", ephemeral=True, delete_after=15)
