"""
Repository for the moderations table.

Bulk inserts skip records whose import key is already stored for the
guild, so a re-imported log does not duplicate entries.
"""

from __future__ import annotations

import time
from typing import List, Sequence

import aiosqlite

from modbot.datatypes.discord_datatypes import GuildID, UserID
from modbot.datatypes.moderation_datatypes import Moderation, ModerationAction
from modbot.util.logger import get_logger

logger = get_logger("moderation_repo")


class ModerationRepository:
    """CRUD for the moderations table."""

    async def bulk_insert(
        self, conn: aiosqlite.Connection, moderations: Sequence[Moderation]
    ) -> int:
        """
        Insert many moderation records with a single executemany.

        Args:
            conn: Open database connection, inside a transaction
            moderations: Records to insert

        Returns:
            Number of rows actually inserted (duplicates excluded)
        """
        if not moderations:
            return 0

        start_time = time.time()
        before = conn.total_changes

        await conn.executemany(
            """
            INSERT INTO moderations (
                guild_id, user_id, action, created, value, expire_time,
                reason, comment, moderator, active, import_key
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(guild_id, import_key) DO NOTHING
            """,
            [
                (
                    moderation.guild_id.to_int(),
                    str(moderation.user_id),
                    moderation.action.value,
                    moderation.created,
                    moderation.value,
                    moderation.expire_time,
                    moderation.reason,
                    moderation.comment,
                    str(moderation.moderator) if moderation.moderator is not None else None,
                    1 if moderation.active else 0,
                    moderation.import_key,
                )
                for moderation in moderations
            ],
        )
        inserted = conn.total_changes - before

        logger.debug(
            "[MODERATION REPO] Bulk inserted %d of %d moderations in %.2fms",
            inserted, len(moderations), (time.time() - start_time) * 1000,
        )
        return inserted

    async def get_for_guild(
        self, conn: aiosqlite.Connection, guild_id: GuildID
    ) -> List[Moderation]:
        """Return a guild's moderation log, oldest first."""
        async with conn.execute(
            """
            SELECT guild_id, user_id, action, created, value, expire_time,
                   reason, comment, moderator, active
            FROM moderations
            WHERE guild_id = ?
            ORDER BY created, id
            """,
            (guild_id.to_int(),),
        ) as cursor:
            rows = await cursor.fetchall()

        return [
            Moderation(
                guild_id=GuildID.from_int(row[0]),
                user_id=UserID(row[1]),
                action=ModerationAction(row[2]),
                created=row[3],
                value=row[4],
                expire_time=row[5],
                reason=row[6],
                comment=row[7],
                moderator=UserID(row[8]) if row[8] is not None else None,
                active=bool(row[9]),
            )
            for row in rows
        ]
