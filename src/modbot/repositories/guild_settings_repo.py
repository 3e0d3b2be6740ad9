"""
Repository for the guild_settings table.

The settings are stored as one JSON document per guild.
"""

from __future__ import annotations

import json

import aiosqlite

from modbot.datatypes.discord_datatypes import GuildID
from modbot.datatypes.guild_settings import GuildSettings
from modbot.util.logger import get_logger

logger = get_logger("guild_settings_repo")


class GuildSettingsRepository:
    """CRUD for the guild_settings table."""

    async def get(
        self, conn: aiosqlite.Connection, guild_id: GuildID
    ) -> GuildSettings | None:
        """Fetch a guild's settings, or None if nothing was stored."""
        async with conn.execute(
            "SELECT config FROM guild_settings WHERE guild_id = ?",
            (guild_id.to_int(),),
        ) as cursor:
            row = await cursor.fetchone()

        if row is None:
            return None
        return GuildSettings.from_dict(json.loads(row[0]))

    async def upsert(
        self, conn: aiosqlite.Connection, guild_id: GuildID, settings: GuildSettings
    ) -> None:
        """Insert or replace a guild's settings."""
        await conn.execute(
            """
            INSERT INTO guild_settings (guild_id, config) VALUES (?, ?)
            ON CONFLICT(guild_id) DO UPDATE SET
                config     = excluded.config,
                updated_at = CURRENT_TIMESTAMP
            """,
            (guild_id.to_int(), json.dumps(settings.to_dict(), sort_keys=True)),
        )
        logger.debug("[GUILD SETTINGS REPO] Upserted settings for guild %s", guild_id)
