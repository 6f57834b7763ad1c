import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from discord_forum_mcp.pagination import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_MAX_BATCHES,
    MAX_BATCH_SIZE,
)


@dataclass(frozen=True)
class Settings:
    discord_token: str
    default_guild: Optional[str] = None
    archive_max_batches: int = DEFAULT_MAX_BATCHES
    archive_batch_size: int = DEFAULT_BATCH_SIZE
    log_level: str = "INFO"


def _int_env(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Read settings from ``environ`` (default: the process env plus ``.env``)."""
    if environ is None:
        load_dotenv()
        environ = os.environ

    token = environ.get("DISCORD_TOKEN")
    if not token:
        raise ValueError("DISCORD_TOKEN environment variable is required")

    default_guild = (
        environ.get("DISCORD_DEFAULT_GUILD")
        or environ.get("DEFAULT_GUILD_ID")
        or environ.get("DISCORD_GUILD_ID")
        or None
    )
    max_batches = max(1, _int_env(environ, "DISCORD_ARCHIVE_MAX_BATCHES", DEFAULT_MAX_BATCHES))
    batch_size = _int_env(environ, "DISCORD_ARCHIVE_BATCH_SIZE", DEFAULT_BATCH_SIZE)

    return Settings(
        discord_token=token,
        default_guild=default_guild,
        archive_max_batches=max_batches,
        archive_batch_size=max(1, min(batch_size, MAX_BATCH_SIZE)),
        log_level=environ.get("DISCORD_MCP_LOG_LEVEL", "INFO").upper(),
    )
