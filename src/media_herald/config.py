"""Configuration: process settings and guild notification config stores.

``Settings`` holds process-wide options read from the environment.
Guild configs live behind the small :class:`ConfigStore` protocol; the
JSON-backed store keeps guild_id → config mappings on disk.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, ValidationError

from media_herald.models import GuildConfig

logger = logging.getLogger("media_herald.config")


# ---------------------------------------------------------------------------
# Process settings
# ---------------------------------------------------------------------------


class Settings(BaseModel):
    """Process settings.

    Every field can be set through an environment variable; see
    :meth:`from_env` for the names.
    """

    discord_token: str | None = None
    tmdb_api_key: str | None = None
    omdb_api_key: str | None = None
    host: str = "0.0.0.0"
    port: int = 8282
    config_path: Path = Path("data/guilds.json")
    debounce_seconds: float = 30.0
    suppression_seconds: float = 24 * 60 * 60
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        names = {
            "discord_token": "DISCORD_TOKEN",
            "tmdb_api_key": "TMDB_API_KEY",
            "omdb_api_key": "OMDB_API_KEY",
            "host": "HERALD_HOST",
            "port": "HERALD_PORT",
            "config_path": "HERALD_CONFIG_PATH",
            "debounce_seconds": "HERALD_DEBOUNCE_SECONDS",
            "suppression_seconds": "HERALD_SUPPRESSION_SECONDS",
            "log_level": "HERALD_LOG_LEVEL",
        }
        values = {field: env[var] for field, var in names.items() if env.get(var)}
        return cls.model_validate(values)


# ---------------------------------------------------------------------------
# Guild config stores
# ---------------------------------------------------------------------------


class ConfigStore(Protocol):
    def get(self, guild_id: str) -> GuildConfig | None:
        ...


class InMemoryConfigStore:
    """Dict-backed config store."""

    def __init__(self, configs: list[GuildConfig] | None = None) -> None:
        self._configs: dict[str, GuildConfig] = {c.guild_id: c for c in configs or []}

    def get(self, guild_id: str) -> GuildConfig | None:
        return self._configs.get(guild_id)

    def set(self, config: GuildConfig) -> None:
        self._configs[config.guild_id] = config


class JsonConfigStore(InMemoryConfigStore):
    """Guild configs persisted as a JSON object keyed by guild id.

    Args:
        path: Path to the JSON file. Missing files are treated as empty.
    """

    def __init__(self, path: str | Path) -> None:
        super().__init__()
        self._path = Path(path)

    def load(self) -> None:
        """Load configs from disk. Invalid entries are skipped."""
        if not self._path.exists():
            return
        try:
            raw = json.loads(self._path.read_text("utf-8"))
        except (OSError, ValueError):
            logger.exception("Failed to load guild configs from %s", self._path)
            return
        if not isinstance(raw, dict):
            logger.warning("Ignoring guild config file %s: not an object", self._path)
            return
        for guild_id, data in raw.items():
            if not isinstance(data, dict):
                continue
            try:
                config = GuildConfig.model_validate({**data, "guild_id": str(guild_id)})
            except ValidationError:
                logger.warning("Skipping invalid config for guild %s", guild_id)
                continue
            self._configs[config.guild_id] = config
        logger.debug("Loaded guild configs: %d entries", len(self._configs))

    def save(self) -> None:
        """Save configs to disk."""
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            data = {
                gid: cfg.model_dump(exclude={"guild_id"})
                for gid, cfg in sorted(self._configs.items())
            }
            self._path.write_text(json.dumps(data, indent=2, sort_keys=True) + "\n", "utf-8")
        except OSError:
            logger.exception("Failed to save guild configs to %s", self._path)

    def set(self, config: GuildConfig) -> None:
        """Insert or update a guild config and persist."""
        super().set(config)
        self.save()
