import os
from dotenv import load_dotenv
from PIL import ImageFont

load_dotenv()
DISCORD_TOKEN = os.getenv("DISCORD_TOKEN")

CONFIG = {
    # Idle sessions older than this are swept
    "session_max_age_minutes": float(os.getenv("SESSION_MAX_AGE_MINUTES", "30")),
    "sweep_interval_minutes":  float(os.getenv("SWEEP_INTERVAL_MINUTES", "30")),
    "user_timezone": os.getenv("USER_TIMEZONE", "America/New_York"),
    "guild_id":      os.getenv("DISCORD_GUILD_ID"),
    "log_level":     os.getenv("LOG_LEVEL", "INFO"),
    "log_file":      os.getenv("LOG_FILE", "bot.log"),
    # Summary image
    "font_paths": [
        "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
        "./assets/fonts/DejaVuSans-Bold.ttf",
        "DejaVuSans-Bold.ttf",
    ],
    "font_size_h": 24,
    "font_size":   18,
}


def require_token() -> str:
    if not DISCORD_TOKEN:
        raise RuntimeError("DISCORD_TOKEN not set in environment")
    return DISCORD_TOKEN


# Preload fonts once
def load_fonts():
    for path in CONFIG["font_paths"]:
        if os.path.isfile(path):
            return (
                ImageFont.truetype(path, CONFIG["font_size_h"]),
                ImageFont.truetype(path, CONFIG["font_size"]),
            )
    default = ImageFont.load_default()
    return default, default

HDR_FONT, ROW_FONT = load_fonts()
