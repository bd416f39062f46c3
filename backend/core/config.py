import os
import logging
from dataclasses import dataclass, field
from typing import Optional

logger = logging.getLogger(__name__)


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw_value = os.getenv(name, "").strip()
    if not raw_value:
        return default
    try:
        return int(raw_value)
    except ValueError:
        logger.warning("Invalid %s='%s'. Falling back to %s.", name, raw_value, default)
        return default


def _env_float(name: str, default: float) -> float:
    raw_value = os.getenv(name, "").strip()
    if not raw_value:
        return default
    try:
        return max(0.1, float(raw_value))
    except ValueError:
        logger.warning("Invalid %s='%s'. Falling back to %s.", name, raw_value, default)
        return default


@dataclass(frozen=True)
class Settings:
    """Runtime settings read from the environment (.env is loaded in main)."""

    # Discord OAuth2
    discord_client_id: str = ""
    discord_client_secret: str = ""
    redirect_uri: str = "http://localhost:5173/callback"
    frontend_url: str = "http://localhost:5173"

    # Gateway
    bot_token: str = ""

    # Server
    host: str = "0.0.0.0"
    port: int = 3001
    cors_origins: tuple[str, ...] = field(default=("*",))
    log_level: str = "INFO"

    # Data
    leaderboard_file: str = "levels.json"
    synthetic_activity: bool = True

    # Outbound calls to Discord, in seconds
    http_timeout: float = 10.0


def load_settings() -> Settings:
    origins = tuple(o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip())
    return Settings(
        discord_client_id=os.getenv("DISCORD_CLIENT_ID", ""),
        discord_client_secret=os.getenv("DISCORD_CLIENT_SECRET", ""),
        redirect_uri=os.getenv("REDIRECT_URI", "http://localhost:5173/callback"),
        frontend_url=os.getenv("FRONTEND_URL", "http://localhost:5173"),
        bot_token=os.getenv("DISCORD_BOT_TOKEN", ""),
        host=os.getenv("HOST", "0.0.0.0"),
        port=_env_int("PORT", 3001),
        cors_origins=origins or ("*",),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        leaderboard_file=os.getenv("LEADERBOARD_FILE", "levels.json"),
        synthetic_activity=_env_bool("SYNTHETIC_ACTIVITY", "true"),
        http_timeout=_env_float("DISCORD_HTTP_TIMEOUT", 10.0),
    )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def log_config_status(settings: Settings) -> None:
    # Presence only, never the values
    def mark(value: str) -> str:
        return "configured" if value else "MISSING"

    logger.info(f"PORT: {settings.port}")
    logger.info(f"DISCORD_CLIENT_ID: {mark(settings.discord_client_id)}")
    logger.info(f"DISCORD_CLIENT_SECRET: {mark(settings.discord_client_secret)}")
    logger.info(f"DISCORD_BOT_TOKEN: {mark(settings.bot_token)}")
    logger.info(f"Leaderboard file: {settings.leaderboard_file}")
