"""Per-channel configuration exported alongside the guild settings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from modbot.datatypes.discord_datatypes import ChannelID
from modbot.datatypes.field_checks import check_bool, check_id, require_mapping


@dataclass(frozen=True, slots=True)
class ChannelSettings:
    """Settings of one channel, identified by the channel id of the exporting guild.

    Attributes:
        channel_id: Channel the settings apply to. It may not exist in the
            destination guild; the importer skips those.
        invites: Whether invite links are allowed, None to inherit the guild setting.
    """

    channel_id: ChannelID
    invites: Optional[bool] = None

    @staticmethod
    def check_types(raw: Any) -> None:
        settings = require_mapping(raw, "Channel settings")
        check_id(settings, "id")
        check_bool(settings, "invites", nullable=True)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "ChannelSettings":
        return cls(channel_id=ChannelID(raw["id"]), invites=raw.get("invites"))

    def to_dict(self) -> Dict[str, Any]:
        return {"id": str(self.channel_id), "invites": self.invites}
