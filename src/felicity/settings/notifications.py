from decouple import config

DISCORD_WEBHOOK_URL: str = config("DISCORD_WEBHOOK_URL", default="")
DISCORD_WEBHOOK_TIMEOUT: float = config("DISCORD_WEBHOOK_TIMEOUT", default=5.0, cast=float)
