"""
Runtime context: resolving exported channel ids against the live client.

A channel that was deleted, that the bot cannot see, or that belongs to a
different guild resolves to None. That is not an error: the importer
skips the channel's settings and reports it as not imported.
"""

from __future__ import annotations

from typing import Optional, Protocol

import discord

from modbot.datatypes.discord_datatypes import ChannelID, GuildID
from modbot.util.logger import get_logger

logger = get_logger("runtime_context")


class RuntimeContext(Protocol):
    async def resolve_channel(
        self, guild_id: GuildID, channel_id: ChannelID
    ) -> Optional[discord.abc.GuildChannel]:
        """Return the live channel, or None if it does not exist in ``guild_id``."""
        ...


class DiscordRuntimeContext:
    """RuntimeContext backed by a py-cord client.

    The client's cache is tried first; a cache miss costs one
    ``fetch_channel`` request.
    """

    def __init__(self, client: discord.Client) -> None:
        self.client = client

    async def resolve_channel(
        self, guild_id: GuildID, channel_id: ChannelID
    ) -> Optional[discord.abc.GuildChannel]:
        channel = self.client.get_channel(channel_id.to_int())
        if channel is None:
            try:
                channel = await self.client.fetch_channel(channel_id.to_int())
            except (discord.NotFound, discord.Forbidden):
                logger.debug("[RUNTIME] Channel %s not reachable, skipping", channel_id)
                return None

        guild = getattr(channel, "guild", None)
        if guild is None or GuildID(guild.id) != guild_id:
            logger.debug("[RUNTIME] Channel %s is not part of guild %s, skipping", channel_id, guild_id)
            return None
        return channel
