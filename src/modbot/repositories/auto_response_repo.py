"""
Repository for the auto_responses table.

Rows are keyed by (guild, trigger type, trigger content, trigger flags):
saving a response whose trigger already exists replaces the reply instead
of adding a second row.
"""

from __future__ import annotations

from typing import List

import aiosqlite

from modbot.datatypes.auto_response import AutoResponse
from modbot.datatypes.discord_datatypes import GuildID
from modbot.datatypes.trigger import Trigger, TriggerType
from modbot.util.logger import get_logger

logger = get_logger("auto_response_repo")


class AutoResponseRepository:
    """CRUD for the auto_responses table."""

    async def get_for_guild(
        self, conn: aiosqlite.Connection, guild_id: GuildID
    ) -> List[AutoResponse]:
        """Return all auto-responses of a guild in insertion order."""
        async with conn.execute(
            """
            SELECT trigger_type, trigger_content, trigger_flags, response, global, channels
            FROM auto_responses
            WHERE guild_id = ?
            ORDER BY id
            """,
            (guild_id.to_int(),),
        ) as cursor:
            rows = await cursor.fetchall()

        return [
            AutoResponse(
                trigger=Trigger(TriggerType(row[0]), row[1], row[2] or None),
                response=row[3],
                global_=bool(row[4]),
                channels=tuple(channel for channel in row[5].split(",") if channel),
            )
            for row in rows
        ]

    async def upsert(
        self, conn: aiosqlite.Connection, guild_id: GuildID, response: AutoResponse
    ) -> None:
        """Insert an auto-response, or update the one with the same trigger."""
        await conn.execute(
            """
            INSERT INTO auto_responses (
                guild_id, trigger_type, trigger_content, trigger_flags,
                response, global, channels
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(guild_id, trigger_type, trigger_content, trigger_flags) DO UPDATE SET
                response = excluded.response,
                global   = excluded.global,
                channels = excluded.channels
            """,
            (
                guild_id.to_int(),
                response.trigger.type.value,
                response.trigger.content,
                response.trigger.flags or "",
                response.response,
                1 if response.global_ else 0,
                ",".join(response.channels),
            ),
        )
        logger.debug("[AUTO RESPONSE REPO] Upserted %s trigger for guild %s", response.trigger.type, guild_id)
