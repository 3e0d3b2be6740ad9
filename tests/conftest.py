"""
Pytest configuration and fixtures for ModBot importer tests.
"""

import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

# Add src directory to path so imports work
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from modbot.database.db_connection import ConnectionManager  # noqa: E402
from modbot.database.db_schema import SchemaManager  # noqa: E402

SOURCE_GUILD = "100000000000000001"
TARGET_GUILD = "200000000000000002"


def raw_snapshot(**overrides):
    """A valid export with one record of every kind."""
    snapshot = {
        "dataType": "modbot-1.0.0",
        "guildConfig": {
            "logChannel": "300000000000000001",
            "mutedRole": "400000000000000001",
            "protectedRoles": ["400000000000000002"],
            "invites": False,
            "linkCooldown": 30,
            "punishments": {"3": {"action": "mute", "duration": 3600}, "5": {"action": "ban", "duration": None}},
        },
        "channels": [
            {"id": "300000000000000001", "invites": True},
        ],
        "responses": [
            {
                "trigger": {"type": "include", "content": "hello", "flags": None},
                "response": "Hi there!",
                "global": True,
                "channels": [],
            },
        ],
        "badWords": [
            {
                "trigger": {"type": "regex", "content": "bad+", "flags": "i"},
                "punishment": {"action": "strike", "duration": None},
                "response": None,
                "global": False,
                "channels": ["300000000000000001"],
                "priority": 2,
            },
        ],
        "moderations": [
            moderation_record(created=1_600_000_000),
        ],
    }
    snapshot.update(overrides)
    return snapshot


def moderation_record(guild=SOURCE_GUILD, user="500000000000000001", action="strike", created=1_600_000_000, **extra):
    record = {
        "guildid": guild,
        "userid": user,
        "action": action,
        "created": created,
        "value": 1,
        "expireTime": None,
        "reason": "spam",
        "comment": None,
        "moderator": "600000000000000001",
        "active": False,
    }
    record.update(extra)
    return record


def fake_channel(channel_id, guild_id=TARGET_GUILD):
    return SimpleNamespace(id=int(channel_id), guild=SimpleNamespace(id=int(guild_id)))


class FakeRuntime:
    """Resolves the channel ids it was given, in any guild it was given them for."""

    def __init__(self, channels=()):
        self.channels = {str(channel) for channel in channels}
        self.calls = []

    async def resolve_channel(self, guild_id, channel_id):
        self.calls.append((str(guild_id), str(channel_id)))
        if str(channel_id) in self.channels:
            return fake_channel(channel_id, guild_id)
        return None


@pytest.fixture
async def db(tmp_path):
    """A ConnectionManager on a fresh database with the schema applied."""
    manager = ConnectionManager()
    await manager.open(tmp_path / "modbot.db")
    await SchemaManager.initialize_schema(manager.connection)
    yield manager
    await manager.close()
