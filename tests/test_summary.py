"""Tests for import summaries."""

from conftest import TARGET_GUILD, raw_snapshot

from modbot.datatypes.discord_datatypes import GuildID
from modbot.transfer.import_orchestrator import ImportResult
from modbot.transfer.snapshot_validator import validate_snapshot
from modbot.transfer.summary import ImportSummary, summarize


def test_counts_every_kind():
    snapshot = validate_snapshot(raw_snapshot(), TARGET_GUILD)

    assert summarize(snapshot) == ImportSummary(
        channels_imported=1,
        moderations_imported=1,
        responses_imported=1,
        bad_words_imported=1,
    )


def test_placeholders_are_not_counted():
    snapshot = validate_snapshot(raw_snapshot(), TARGET_GUILD)
    imported = snapshot.with_channels((None, snapshot.channels[0], None))

    assert summarize(imported).channels_imported == 1


def test_accepts_import_result():
    snapshot = validate_snapshot(raw_snapshot(), TARGET_GUILD)
    result = ImportResult(GuildID(TARGET_GUILD), snapshot.with_channels((None,)), moderations_written=0)

    summary = summarize(result)

    assert summary.channels_imported == 0
    assert summary.moderations_imported == 1


def test_as_dict_keys():
    summary = ImportSummary(channels_imported=2, moderations_imported=3, responses_imported=4, bad_words_imported=5)
    assert summary.as_dict() == {
        "channelsImported": 2,
        "moderationsImported": 3,
        "responsesImported": 4,
        "badWordsImported": 5,
    }
