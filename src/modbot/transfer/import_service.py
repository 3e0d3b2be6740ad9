"""
Import service: validate, persist and summarize a guild export.

This is the entry point callers use. It enforces the pipeline order:
nothing is written unless the whole export validated.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional, Union

from modbot.datatypes.discord_datatypes import GuildID
from modbot.transfer.errors import PersistenceFailure, ShapeViolation, ValidationError
from modbot.transfer.import_orchestrator import ImportOrchestrator
from modbot.transfer.runtime import RuntimeContext
from modbot.transfer.snapshot_validator import validate_snapshot
from modbot.transfer.summary import ImportSummary, summarize
from modbot.util.logger import get_logger

logger = get_logger("import_service")


def load_snapshot_file(path: Path) -> Any:
    """
    Read a JSON export from disk.

    Raises:
        ShapeViolation: If the file is not valid JSON.
        OSError: If the file cannot be read.
    """
    try:
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as exc:
        raise ShapeViolation(f"{path.name} is not valid JSON: {exc.msg} (line {exc.lineno})") from exc


class ImportService:
    """Runs an import end to end."""

    def __init__(self, orchestrator: Optional[ImportOrchestrator] = None) -> None:
        self.orchestrator = orchestrator or ImportOrchestrator()

    async def import_data(
        self,
        raw: Any,
        guild_id: Union[GuildID, int, str],
        runtime: RuntimeContext,
    ) -> ImportSummary:
        """
        Import a decoded export into ``guild_id``.

        Args:
            raw: Decoded ``modbot-1.0.0`` JSON export.
            guild_id: Destination guild.
            runtime: Resolves exported channels against the live guild.

        Returns:
            ImportSummary of what was written.

        Raises:
            ValidationError: The export is malformed; nothing was written.
            PersistenceFailure: At least one category failed to import. Other
                categories may already be stored.
        """
        guild_id = GuildID(guild_id)

        try:
            snapshot = validate_snapshot(raw, guild_id)
        except ValidationError as exc:
            logger.warning("[IMPORT SERVICE] Export for guild %s is invalid: %s", guild_id, exc)
            raise

        try:
            result = await self.orchestrator.run(snapshot, guild_id, runtime)
        except PersistenceFailure as exc:
            logger.error(
                "[IMPORT SERVICE] Import failed for guild %s (%s); other categories may already be imported",
                guild_id, ", ".join(exc.categories),
            )
            raise

        summary = summarize(result)
        skipped = len(result.snapshot.channels) - summary.channels_imported
        logger.info(
            "[IMPORT SERVICE] Imported into guild %s: %s (%d channels skipped, %d moderations already present)",
            guild_id,
            summary.as_dict(),
            skipped,
            summary.moderations_imported - result.moderations_written,
        )
        return summary

    async def import_file(
        self,
        path: Path,
        guild_id: Union[GuildID, int, str],
        runtime: RuntimeContext,
    ) -> ImportSummary:
        """Read a JSON export from ``path`` and import it."""
        return await self.import_data(load_snapshot_file(path), guild_id, runtime)
