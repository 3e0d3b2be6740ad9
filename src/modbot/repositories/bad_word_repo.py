"""
Repository for the bad_words table.

Keyed like auto_responses, by guild and trigger.
"""

from __future__ import annotations

from typing import List

import aiosqlite

from modbot.datatypes.bad_word import BadWord
from modbot.datatypes.discord_datatypes import GuildID
from modbot.datatypes.trigger import Punishment, PunishmentAction, Trigger, TriggerType
from modbot.util.logger import get_logger

logger = get_logger("bad_word_repo")


class BadWordRepository:
    """CRUD for the bad_words table."""

    async def get_for_guild(
        self, conn: aiosqlite.Connection, guild_id: GuildID
    ) -> List[BadWord]:
        """Return all bad words of a guild, highest priority first."""
        async with conn.execute(
            """
            SELECT trigger_type, trigger_content, trigger_flags, response,
                   punishment_action, punishment_duration, global, channels, priority
            FROM bad_words
            WHERE guild_id = ?
            ORDER BY priority DESC, id
            """,
            (guild_id.to_int(),),
        ) as cursor:
            rows = await cursor.fetchall()

        return [
            BadWord(
                trigger=Trigger(TriggerType(row[0]), row[1], row[2] or None),
                response=row[3],
                punishment=Punishment(PunishmentAction(row[4]), row[5]),
                global_=bool(row[6]),
                channels=tuple(channel for channel in row[7].split(",") if channel),
                priority=row[8],
            )
            for row in rows
        ]

    async def upsert(
        self, conn: aiosqlite.Connection, guild_id: GuildID, bad_word: BadWord
    ) -> None:
        """Insert a bad word, or update the one with the same trigger."""
        await conn.execute(
            """
            INSERT INTO bad_words (
                guild_id, trigger_type, trigger_content, trigger_flags, response,
                punishment_action, punishment_duration, global, channels, priority
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(guild_id, trigger_type, trigger_content, trigger_flags) DO UPDATE SET
                response            = excluded.response,
                punishment_action   = excluded.punishment_action,
                punishment_duration = excluded.punishment_duration,
                global              = excluded.global,
                channels            = excluded.channels,
                priority            = excluded.priority
            """,
            (
                guild_id.to_int(),
                bad_word.trigger.type.value,
                bad_word.trigger.content,
                bad_word.trigger.flags or "",
                bad_word.response,
                bad_word.punishment.action.value,
                bad_word.punishment.duration,
                1 if bad_word.global_ else 0,
                ",".join(bad_word.channels),
                bad_word.priority,
            ),
        )
        logger.debug("[BAD WORD REPO] Upserted %s trigger for guild %s", bad_word.trigger.type, guild_id)
