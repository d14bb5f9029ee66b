import logging
import discord
from config import CONFIG, require_token
from bot import VetoBot

# Register commands
from commands.coinflip import coinflip
from commands.endveto import endveto

logging.basicConfig(
    level=getattr(logging, str(CONFIG["log_level"]).upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(),
        logging.FileHandler(CONFIG["log_file"], mode="a")
    ]
)
logger = logging.getLogger("veto")


def create_bot() -> VetoBot:
    bot = VetoBot()
    bot.tree.add_command(coinflip)
    bot.tree.add_command(endveto)
    return bot


def main():
    token = require_token()
    try:
        logger.info("Starting bot...")
        create_bot().run(token, log_handler=None)
    except discord.errors.LoginFailure:
        logger.error("Invalid Discord token. Please check DISCORD_TOKEN in your .env file.")


if __name__ == "__main__":
    main()
