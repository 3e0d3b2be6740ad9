"""
Validated guild export.

A Snapshot is built once by the snapshot validator, consumed once by the
import orchestrator and then discarded. It is immutable: the importer
derives a new Snapshot (channels resolved against the destination guild)
instead of editing this one.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

from modbot.datatypes.auto_response import AutoResponse
from modbot.datatypes.bad_word import BadWord
from modbot.datatypes.channel_settings import ChannelSettings
from modbot.datatypes.guild_settings import GuildSettings
from modbot.datatypes.moderation_datatypes import Moderation

# Export format understood by the importer
DATA_TYPE = "modbot-1.0.0"


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Everything a guild export contains, typed.

    ``channels`` holds None at positions whose channel did not resolve in the
    destination guild, once the snapshot has gone through an import.
    """

    guild_settings: GuildSettings = field(default_factory=GuildSettings)
    channels: Tuple[Optional[ChannelSettings], ...] = ()
    responses: Tuple[AutoResponse, ...] = ()
    bad_words: Tuple[BadWord, ...] = ()
    moderations: Tuple[Moderation, ...] = ()

    def with_channels(self, channels: Tuple[Optional[ChannelSettings], ...]) -> "Snapshot":
        return replace(self, channels=tuple(channels))
