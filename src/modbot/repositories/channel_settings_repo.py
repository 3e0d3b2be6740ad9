"""
Repository for the channel_settings table.
"""

from __future__ import annotations

import json
from typing import Dict

import aiosqlite

from modbot.datatypes.channel_settings import ChannelSettings
from modbot.datatypes.discord_datatypes import ChannelID, GuildID
from modbot.util.logger import get_logger

logger = get_logger("channel_settings_repo")


class ChannelSettingsRepository:
    """CRUD for the channel_settings table."""

    async def get_for_guild(
        self, conn: aiosqlite.Connection, guild_id: GuildID
    ) -> Dict[ChannelID, ChannelSettings]:
        """Return all channel settings stored for a guild."""
        async with conn.execute(
            "SELECT channel_id, config FROM channel_settings WHERE guild_id = ? ORDER BY channel_id",
            (guild_id.to_int(),),
        ) as cursor:
            rows = await cursor.fetchall()
        return {
            ChannelID.from_int(row[0]): ChannelSettings.from_dict(json.loads(row[1]))
            for row in rows
        }

    async def upsert(
        self, conn: aiosqlite.Connection, guild_id: GuildID, settings: ChannelSettings
    ) -> None:
        """Insert or replace the settings of one channel."""
        await conn.execute(
            """
            INSERT INTO channel_settings (guild_id, channel_id, config) VALUES (?, ?, ?)
            ON CONFLICT(guild_id, channel_id) DO UPDATE SET
                config     = excluded.config,
                updated_at = CURRENT_TIMESTAMP
            """,
            (
                guild_id.to_int(),
                settings.channel_id.to_int(),
                json.dumps(settings.to_dict(), sort_keys=True),
            ),
        )
        logger.debug("[CHANNEL SETTINGS REPO] Upserted channel %s for guild %s", settings.channel_id, guild_id)
