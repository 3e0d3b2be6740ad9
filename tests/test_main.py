"""Tests for the modbot-import command line entry point."""

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import discord
import pytest

from conftest import TARGET_GUILD, fake_channel, raw_snapshot

from modbot import main as main_module
from modbot.configuration.app_configuration import AppConfig
from modbot.database.db_connection import db_connection
from modbot.database.db_schema import SchemaManager
from modbot.transfer.errors import PersistenceFailure


def make_config(tmp_path):
    config = AppConfig(tmp_path / "config.yml")
    config._data = {"authToken": "token", "database": {"path": str(tmp_path / "modbot.db")}}
    return config


def make_client(channels=()):
    known = {int(channel): fake_channel(channel) for channel in channels}
    client = MagicMock()
    client.login = AsyncMock()
    client.close = AsyncMock()
    client.get_channel = MagicMock(side_effect=known.get)
    client.fetch_channel = AsyncMock(
        side_effect=discord.NotFound(SimpleNamespace(status=404, reason="Not Found"), "unknown channel")
    )
    return client


def write_export(tmp_path, raw):
    path = tmp_path / "export.json"
    path.write_text(json.dumps(raw), encoding="utf-8")
    return path


class TestRunImport:
    async def test_success(self, tmp_path):
        client = make_client(["300000000000000001"])
        path = write_export(tmp_path, raw_snapshot())

        code = await main_module.run_import(TARGET_GUILD, path, make_config(tmp_path), client=client)

        assert code == main_module.EXIT_OK
        client.login.assert_awaited_once_with("token")
        client.close.assert_awaited_once()
        assert not db_connection.is_open

    async def test_invalid_export(self, tmp_path):
        client = make_client()
        path = write_export(tmp_path, raw_snapshot(channels="nope"))

        code = await main_module.run_import(TARGET_GUILD, path, make_config(tmp_path), client=client)

        assert code == main_module.EXIT_INVALID
        client.close.assert_awaited_once()

    async def test_missing_export(self, tmp_path):
        code = await main_module.run_import(
            TARGET_GUILD, tmp_path / "missing.json", make_config(tmp_path), client=make_client()
        )
        assert code == main_module.EXIT_INVALID

    async def test_persistence_failure(self, tmp_path):
        path = write_export(tmp_path, raw_snapshot())
        failure = PersistenceFailure([("moderations", RuntimeError("disk full"))])

        with patch.object(main_module.ImportService, "import_file", AsyncMock(side_effect=failure)):
            code = await main_module.run_import(TARGET_GUILD, path, make_config(tmp_path), client=make_client())

        assert code == main_module.EXIT_FAILED
        assert not db_connection.is_open

    async def test_login_failure(self, tmp_path):
        client = make_client()
        client.login = AsyncMock(side_effect=discord.LoginFailure("Improper token"))

        code = await main_module.run_import(TARGET_GUILD, tmp_path / "x.json", make_config(tmp_path), client=client)

        assert code == main_module.EXIT_INVALID
        client.close.assert_awaited_once()

    async def test_schema_failure_closes_database(self, tmp_path):
        client = make_client()

        with patch.object(SchemaManager, "initialize_schema", AsyncMock(side_effect=RuntimeError("schema"))):
            code = await main_module.run_import(TARGET_GUILD, tmp_path / "x.json", make_config(tmp_path), client=client)

        assert code == main_module.EXIT_INVALID
        assert not db_connection.is_open
        client.login.assert_not_awaited()
        client.close.assert_awaited_once()


class TestMain:
    def test_invalid_guild_id(self):
        with pytest.raises(SystemExit) as exc_info:
            main_module.main(["not-a-guild", "export.json"])
        assert exc_info.value.code == 2

    def test_missing_token(self, tmp_path, monkeypatch):
        monkeypatch.setattr("modbot.configuration.app_configuration.load_dotenv", lambda *args, **kwargs: False)
        monkeypatch.delenv("MODBOT_USE_ENV", raising=False)
        config_path = tmp_path / "config.yml"
        config_path.write_text("database:\n  path: modbot.db\n", encoding="utf-8")

        assert main_module.main([TARGET_GUILD, "export.json", "--config", str(config_path)]) == main_module.EXIT_INVALID

    def test_runs_import(self, tmp_path, monkeypatch):
        monkeypatch.setattr("modbot.configuration.app_configuration.load_dotenv", lambda *args, **kwargs: False)
        monkeypatch.delenv("MODBOT_USE_ENV", raising=False)
        config_path = tmp_path / "config.yml"
        config_path.write_text("authToken: token\n", encoding="utf-8")
        run_import = AsyncMock(return_value=main_module.EXIT_OK)
        monkeypatch.setattr(main_module, "run_import", run_import)

        assert main_module.main([TARGET_GUILD, "export.json", "--config", str(config_path)]) == main_module.EXIT_OK
        guild_id, snapshot_path, config = run_import.await_args.args
        assert str(guild_id) == TARGET_GUILD
        assert snapshot_path.name == "export.json"
        assert config.auth_token == "token"
