import discord
from discord import app_commands
from errors import VetoError

@app_commands.command(
    name="endveto",
    description="Force end an active veto session in the current channel"
)
async def endveto(interaction: discord.Interaction) -> None:
    try:
        await interaction.client.controller.force_end(interaction.channel_id)
    except VetoError as e:
        return await interaction.response.send_message(e.message, ephemeral=True)
    await interaction.response.send_message("Veto session cleared.", ephemeral=True, delete_after=15)
