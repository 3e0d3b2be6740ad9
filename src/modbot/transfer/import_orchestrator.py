"""
Import orchestration.

Persists a validated Snapshot into the destination guild. Five branches
run concurrently on the event loop:

1. guild settings   - one upsert keyed by guild
2. channel settings - each channel resolved against the live guild, then
                      upserted; unresolved channels become None
3. moderations      - one bulk insert in a single transaction
4. auto-responses   - one upsert per record
5. bad words        - one upsert per record

The import is not transactional across branches. When a branch fails the
others still run to completion and stay written; the caller gets a
PersistenceFailure listing every failed branch. Re-running the import is
safe: every write is an upsert or a duplicate-skipping insert.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, replace
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Tuple, TypeVar, Union

from modbot.database.db_connection import ConnectionManager, db_connection
from modbot.datatypes.channel_settings import ChannelSettings
from modbot.datatypes.discord_datatypes import GuildID
from modbot.datatypes.snapshot import Snapshot
from modbot.repositories import (
    AutoResponseRepository,
    BadWordRepository,
    ChannelSettingsRepository,
    GuildSettingsRepository,
    ModerationRepository,
)
from modbot.transfer.errors import PersistenceFailure
from modbot.transfer.runtime import RuntimeContext
from modbot.util.logger import get_logger

logger = get_logger("import_orchestrator")

T = TypeVar("T")

GUILD_SETTINGS = "guild settings"
CHANNELS = "channels"
MODERATIONS = "moderations"
RESPONSES = "responses"
BAD_WORDS = "bad words"


@dataclass(frozen=True)
class ImportResult:
    """What an import wrote.

    Attributes:
        guild_id: Destination guild.
        snapshot: The imported snapshot with ``channels`` resolved: same
            positions as the input, None where the channel was skipped.
        moderations_written: Moderation rows inserted; records already
            present from an earlier import are not counted.
    """

    guild_id: GuildID
    snapshot: Snapshot
    moderations_written: int


class ImportOrchestrator:
    """
    Runs the five import branches of a validated snapshot.

    Repositories and the connection manager can be injected; by default the
    shared ``db_connection`` is used.
    """

    def __init__(
        self,
        connection: ConnectionManager = db_connection,
        guild_settings_repo: Optional[GuildSettingsRepository] = None,
        channel_settings_repo: Optional[ChannelSettingsRepository] = None,
        moderation_repo: Optional[ModerationRepository] = None,
        auto_response_repo: Optional[AutoResponseRepository] = None,
        bad_word_repo: Optional[BadWordRepository] = None,
    ) -> None:
        self._connection = connection
        self._guild_settings_repo = guild_settings_repo or GuildSettingsRepository()
        self._channel_settings_repo = channel_settings_repo or ChannelSettingsRepository()
        self._moderation_repo = moderation_repo or ModerationRepository()
        self._auto_response_repo = auto_response_repo or AutoResponseRepository()
        self._bad_word_repo = bad_word_repo or BadWordRepository()

    async def run(
        self,
        snapshot: Snapshot,
        guild_id: Union[GuildID, int, str],
        runtime: RuntimeContext,
    ) -> ImportResult:
        """
        Persist ``snapshot`` into ``guild_id``.

        The snapshot must come from the snapshot validator; it is not checked
        again here.

        Raises:
            PersistenceFailure: If at least one branch failed. Branches that
                succeeded are not rolled back.
        """
        guild_id = GuildID(guild_id)
        snapshot = _rekey_moderations(snapshot, guild_id)
        branches: List[Tuple[str, Awaitable[Any]]] = [
            (GUILD_SETTINGS, self._import_guild_settings(snapshot, guild_id)),
            (CHANNELS, self._import_channels(snapshot, guild_id, runtime)),
            (MODERATIONS, self._import_moderations(snapshot)),
            (RESPONSES, self._import_responses(snapshot, guild_id)),
            (BAD_WORDS, self._import_bad_words(snapshot, guild_id)),
        ]
        logger.info(
            "[IMPORT] Importing into guild %s: %d channels, %d moderations, %d responses, %d bad words",
            guild_id,
            len(snapshot.channels),
            len(snapshot.moderations),
            len(snapshot.responses),
            len(snapshot.bad_words),
        )

        outcomes = await asyncio.gather(*(branch for _, branch in branches), return_exceptions=True)

        failures: List[Tuple[str, BaseException]] = []
        for (category, _), outcome in zip(branches, outcomes):
            if isinstance(outcome, Exception):
                logger.error("[IMPORT] Importing %s into guild %s failed: %s", category, guild_id, outcome)
                failures.append((category, outcome))
            elif isinstance(outcome, BaseException):
                raise outcome
        if failures:
            raise PersistenceFailure(failures) from failures[0][1]

        _, channels, moderations_written, _, _ = outcomes
        return ImportResult(
            guild_id=guild_id,
            snapshot=snapshot.with_channels(channels),
            moderations_written=moderations_written,
        )

    # ------------------------------------------------------------------
    # Branches
    # ------------------------------------------------------------------

    async def _import_guild_settings(self, snapshot: Snapshot, guild_id: GuildID) -> None:
        await self._write(self._guild_settings_repo.upsert, guild_id, snapshot.guild_settings)

    async def _import_channels(
        self, snapshot: Snapshot, guild_id: GuildID, runtime: RuntimeContext
    ) -> List[Optional[ChannelSettings]]:
        return await self._all(
            self._import_channel(settings, guild_id, runtime) for settings in snapshot.channels
        )

    async def _import_channel(
        self, settings: Optional[ChannelSettings], guild_id: GuildID, runtime: RuntimeContext
    ) -> Optional[ChannelSettings]:
        if settings is None:
            return None
        channel = await runtime.resolve_channel(guild_id, settings.channel_id)
        if channel is None:
            return None
        await self._write(self._channel_settings_repo.upsert, guild_id, settings)
        return settings

    async def _import_moderations(self, snapshot: Snapshot) -> int:
        return await self._write(self._moderation_repo.bulk_insert, snapshot.moderations)

    async def _import_responses(self, snapshot: Snapshot, guild_id: GuildID) -> None:
        await self._all(
            self._write(self._auto_response_repo.upsert, guild_id, response)
            for response in snapshot.responses
        )

    async def _import_bad_words(self, snapshot: Snapshot, guild_id: GuildID) -> None:
        await self._all(
            self._write(self._bad_word_repo.upsert, guild_id, bad_word)
            for bad_word in snapshot.bad_words
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _write(self, operation: Callable[..., Awaitable[T]], *args: Any) -> T:
        """Run one repository write in its own transaction."""
        async with self._connection.transaction() as conn:
            return await operation(conn, *args)

    @staticmethod
    async def _all(writes: Any) -> List[Any]:
        """
        Start every write of a branch together and wait for all of them.

        All writes run even if one fails; the branch then fails with the
        first error.
        """
        outcomes: Sequence[Any] = await asyncio.gather(*writes, return_exceptions=True)
        errors = [outcome for outcome in outcomes if isinstance(outcome, Exception)]
        if errors:
            if len(errors) > 1:
                logger.warning("[IMPORT] %d writes of the same branch failed", len(errors))
            raise errors[0]
        return list(outcomes)



def _rekey_moderations(snapshot: Snapshot, guild_id: GuildID) -> Snapshot:
    """Stamp every moderation with ``guild_id``.

    A no-op for snapshots validated for the same guild, which is the normal case.
    """
    if all(moderation.guild_id == guild_id for moderation in snapshot.moderations):
        return snapshot
    return replace(
        snapshot,
        moderations=tuple(moderation.with_guild(guild_id) for moderation in snapshot.moderations),
    )
