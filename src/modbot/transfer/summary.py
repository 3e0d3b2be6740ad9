"""
Import summary: per-kind counts of an imported snapshot.

Skipped channels (None placeholders) are not counted. The other counts are
the lengths of the imported collections: a summary is only built after
every branch succeeded.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Union

from modbot.datatypes.snapshot import Snapshot
from modbot.transfer.import_orchestrator import ImportResult


@dataclass(frozen=True, slots=True)
class ImportSummary:
    channels_imported: int
    moderations_imported: int
    responses_imported: int
    bad_words_imported: int

    def as_dict(self) -> Dict[str, int]:
        return {
            "channelsImported": self.channels_imported,
            "moderationsImported": self.moderations_imported,
            "responsesImported": self.responses_imported,
            "badWordsImported": self.bad_words_imported,
        }


def summarize(imported: Union[ImportResult, Snapshot]) -> ImportSummary:
    """Count what an import wrote. Accepts the ImportResult or its snapshot."""
    snapshot = imported.snapshot if isinstance(imported, ImportResult) else imported
    return ImportSummary(
        channels_imported=sum(1 for channel in snapshot.channels if channel is not None),
        moderations_imported=len(snapshot.moderations),
        responses_imported=len(snapshot.responses),
        bad_words_imported=len(snapshot.bad_words),
    )
