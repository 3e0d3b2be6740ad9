"""Tests for the end-to-end import service."""

import json
from unittest.mock import AsyncMock

import pytest

from conftest import TARGET_GUILD, FakeRuntime, raw_snapshot

from modbot.transfer.errors import PersistenceFailure, ShapeViolation, TypeMismatch
from modbot.transfer.import_orchestrator import ImportOrchestrator
from modbot.transfer.import_service import ImportService, load_snapshot_file


@pytest.fixture
def service(db):
    return ImportService(ImportOrchestrator(connection=db))


class TestImportData:
    async def test_returns_summary(self, service):
        summary = await service.import_data(raw_snapshot(), TARGET_GUILD, FakeRuntime(["300000000000000001"]))

        assert summary.as_dict() == {
            "channelsImported": 1,
            "moderationsImported": 1,
            "responsesImported": 1,
            "badWordsImported": 1,
        }

    async def test_invalid_export_writes_nothing(self, db):
        orchestrator = ImportOrchestrator(connection=db)
        orchestrator.run = AsyncMock()
        service = ImportService(orchestrator)

        with pytest.raises(TypeMismatch):
            await service.import_data(raw_snapshot(channels=[{"id": "x"}]), TARGET_GUILD, FakeRuntime())

        orchestrator.run.assert_not_called()

    async def test_persistence_failure_is_raised(self, db):
        orchestrator = ImportOrchestrator(connection=db)
        orchestrator.run = AsyncMock(side_effect=PersistenceFailure([("moderations", RuntimeError("x"))]))

        with pytest.raises(PersistenceFailure, match="Import failed for: moderations"):
            await ImportService(orchestrator).import_data(raw_snapshot(), TARGET_GUILD, FakeRuntime())


class TestImportFile:
    async def test_imports_json_file(self, service, tmp_path):
        path = tmp_path / "export.json"
        path.write_text(json.dumps(raw_snapshot()), encoding="utf-8")

        summary = await service.import_file(path, TARGET_GUILD, FakeRuntime())

        assert summary.channels_imported == 0
        assert summary.responses_imported == 1

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "export.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ShapeViolation, match="export.json is not valid JSON"):
            load_snapshot_file(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_snapshot_file(tmp_path / "missing.json")
