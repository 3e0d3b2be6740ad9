"""Tests for resolving channels through the Discord client."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from conftest import TARGET_GUILD, fake_channel

from modbot.datatypes.discord_datatypes import ChannelID, GuildID
from modbot.transfer.runtime import DiscordRuntimeContext

CHANNEL = "300000000000000001"


def http_response(status):
    return SimpleNamespace(status=status, reason="error")


def make_client(cached=None, fetched=None, fetch_error=None):
    client = MagicMock()
    client.get_channel = MagicMock(return_value=cached)
    client.fetch_channel = AsyncMock(return_value=fetched, side_effect=fetch_error)
    return client


class TestDiscordRuntimeContext:
    async def test_cached_channel(self):
        channel = fake_channel(CHANNEL)
        client = make_client(cached=channel)

        resolved = await DiscordRuntimeContext(client).resolve_channel(GuildID(TARGET_GUILD), ChannelID(CHANNEL))

        assert resolved is channel
        client.get_channel.assert_called_once_with(int(CHANNEL))
        client.fetch_channel.assert_not_called()

    async def test_falls_back_to_fetch(self):
        channel = fake_channel(CHANNEL)
        client = make_client(fetched=channel)

        resolved = await DiscordRuntimeContext(client).resolve_channel(GuildID(TARGET_GUILD), ChannelID(CHANNEL))

        assert resolved is channel
        client.fetch_channel.assert_awaited_once_with(int(CHANNEL))

    @pytest.mark.parametrize("error_type, status", [(discord.NotFound, 404), (discord.Forbidden, 403)])
    async def test_unreachable_channel_is_none(self, error_type, status):
        client = make_client(fetch_error=error_type(http_response(status), "unknown channel"))

        resolved = await DiscordRuntimeContext(client).resolve_channel(GuildID(TARGET_GUILD), ChannelID(CHANNEL))

        assert resolved is None

    async def test_channel_of_other_guild_is_none(self):
        client = make_client(cached=fake_channel(CHANNEL, guild_id="999"))

        resolved = await DiscordRuntimeContext(client).resolve_channel(GuildID(TARGET_GUILD), ChannelID(CHANNEL))

        assert resolved is None

    async def test_private_channel_is_none(self):
        client = make_client(cached=SimpleNamespace(id=int(CHANNEL)))

        assert await DiscordRuntimeContext(client).resolve_channel(GuildID(TARGET_GUILD), ChannelID(CHANNEL)) is None

    async def test_other_http_errors_propagate(self):
        client = make_client(fetch_error=discord.HTTPException(http_response(500), "server error"))

        with pytest.raises(discord.HTTPException):
            await DiscordRuntimeContext(client).resolve_channel(GuildID(TARGET_GUILD), ChannelID(CHANNEL))
