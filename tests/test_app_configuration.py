import json
from pathlib import Path

import pytest

from modbot.configuration import app_configuration
from modbot.configuration.app_configuration import AppConfig, emoji_env_name, parse_bool


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(app_configuration, "load_dotenv", lambda *args, **kwargs: False)
    monkeypatch.delenv("MODBOT_USE_ENV", raising=False)


@pytest.fixture()
def config_path(tmp_path: Path) -> Path:
    return tmp_path / "config.yml"


def test_load_parses_yaml(config_path: Path) -> None:
    config_path.write_text(
        "authToken: secret\n"
        "database:\n"
        "  path: /tmp/modbot-test.db\n"
        "debug:\n"
        "  enabled: true\n"
        "  guild: '123'\n"
        "featureWhitelist:\n"
        "  - '456'\n"
        "emoji:\n"
        "  ban: '789'\n",
        encoding="utf-8",
    )

    config = AppConfig(config_path)
    config.load()

    assert config.auth_token == "secret"
    assert config.database_path == Path("/tmp/modbot-test.db")
    assert config.debug_enabled is True
    assert config.debug_guild == "123"
    assert config.feature_whitelist == ["456"]
    assert config.emoji["ban"] == "789"
    assert config.emoji["kick"] is None


def test_load_parses_json(config_path: Path) -> None:
    config_path.write_text(json.dumps({"authToken": "json-token", "googleApiKey": "key"}), encoding="utf-8")

    config = AppConfig(config_path)
    config.load()

    assert config.auth_token == "json-token"
    assert config.google_api_key == "key"


def test_missing_sections_get_defaults(config_path: Path) -> None:
    config_path.write_text("authToken: secret\n", encoding="utf-8")

    config = AppConfig(config_path)
    data = config.load()

    assert data["featureWhitelist"] == []
    assert data["emoji"] == {}
    assert config.google_cloud.vision_enabled is False
    assert config.google_cloud.logging_enabled is False
    assert config.google_cloud.client_email == ""
    assert config.database_path == Path("data/modbot.db")
    assert config.debug_enabled is False
    assert config.google_api_key is None


def test_missing_file_exits(tmp_path: Path) -> None:
    config = AppConfig(tmp_path / "does_not_exist.yml")

    with pytest.raises(SystemExit) as exc_info:
        config.load()

    assert exc_info.value.code == 1


def test_non_mapping_file_exits(config_path: Path) -> None:
    config_path.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(SystemExit):
        AppConfig(config_path).load()


def test_load_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MODBOT_USE_ENV", "1")
    monkeypatch.setenv("MODBOT_AUTH_TOKEN", "env-token")
    monkeypatch.setenv("MODBOT_DATABASE_PATH", "/tmp/env.db")
    monkeypatch.setenv("MODBOT_GOOGLE_CLOUD_VISION_ENABLED", "TRUE")
    monkeypatch.setenv("MODBOT_GOOGLE_CLOUD_LOGGING_ENABLED", "no")
    monkeypatch.setenv("MODBOT_GOOGLE_CLOUD_LOGGING_PROJECT_ID", "project")
    monkeypatch.setenv("MODBOT_DEBUG_ENABLED", "y")
    monkeypatch.setenv("MODBOT_FEATURE_WHITELIST", "1, 2 ,3")
    monkeypatch.setenv("MODBOT_EMOJI_FIRST_PAGE", "42")

    # The settings file is not consulted in environment mode
    config = AppConfig(tmp_path / "does_not_exist.yml")
    config.load()

    assert config.auth_token == "env-token"
    assert config.database_path == Path("/tmp/env.db")
    assert config.google_cloud.vision_enabled is True
    assert config.google_cloud.logging_enabled is False
    assert config.google_cloud.logging_project_id == "project"
    assert config.debug_enabled is True
    assert config.feature_whitelist == ["1", "2", "3"]
    assert config.emoji["firstPage"] == "42"


def test_environment_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MODBOT_USE_ENV", "true")
    monkeypatch.delenv("MODBOT_DATABASE_PATH", raising=False)
    monkeypatch.delenv("MODBOT_FEATURE_WHITELIST", raising=False)

    config = AppConfig()
    config.load()

    assert config.database_path == Path("data/modbot.db")
    assert config.feature_whitelist == []


@pytest.mark.parametrize("value, expected", [("1", True), ("true", True), ("Y", True), ("0", False), ("", False), (None, False)])
def test_parse_bool(value, expected) -> None:
    assert parse_bool(value) is expected


def test_emoji_env_name() -> None:
    assert emoji_env_name("ban") == "MODBOT_EMOJI_BAN"
    assert emoji_env_name("userCreated") == "MODBOT_EMOJI_USER_CREATED"


def test_import_builds_no_shared_instance() -> None:
    # main() builds its own AppConfig from --config
    assert not hasattr(app_configuration, "app_config")
