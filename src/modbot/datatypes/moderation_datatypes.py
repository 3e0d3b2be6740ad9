"""
Moderation history records.

This module defines the ModerationAction enum and the Moderation dataclass
used for every entry of a guild's moderation log. Records keep the wire
field names of the export (``guildid``, ``userid``, ``expireTime``...).
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from modbot.datatypes.discord_datatypes import GuildID, UserID
from modbot.datatypes.field_checks import (
    check_bool,
    check_choice,
    check_id,
    check_int,
    check_str,
    require_mapping,
    value_or,
)

# Wire key that carries the guild of a moderation record
GUILD_KEY = "guildid"


class ModerationAction(Enum):
    """Enumeration of moderation actions that end up in the log."""

    BAN = "ban"
    UNBAN = "unban"
    KICK = "kick"
    MUTE = "mute"
    UNMUTE = "unmute"
    SOFTBAN = "softban"
    STRIKE = "strike"
    PARDON = "pardon"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class Moderation:
    """One entry of a guild's moderation log.

    Attributes:
        guild_id: Guild the action belongs to.
        user_id: Member the action was taken against.
        action: Kind of action.
        created: Unix seconds the action was taken at.
        value: Strike count for strikes and pardons, 0 otherwise.
        expire_time: Unix seconds a temporary action ends at, None if permanent.
        reason: Reason shown to the member.
        comment: Internal note for moderators.
        moderator: Moderator who took the action, None for automatic actions.
        active: Whether a temporary action is still pending expiry.
    """

    guild_id: GuildID
    user_id: UserID
    action: ModerationAction
    created: int
    value: int = 0
    expire_time: Optional[int] = None
    reason: Optional[str] = None
    comment: Optional[str] = None
    moderator: Optional[UserID] = None
    active: bool = True

    @staticmethod
    def check_types(raw: Any) -> None:
        moderation = require_mapping(raw, "Moderation")
        check_id(moderation, GUILD_KEY)
        check_id(moderation, "userid")
        check_choice(moderation, "action", (a.value for a in ModerationAction))
        check_int(moderation, "created", required=True)
        check_int(moderation, "value")
        check_int(moderation, "expireTime", nullable=True)
        check_str(moderation, "reason", nullable=True)
        check_str(moderation, "comment", nullable=True)
        check_id(moderation, "moderator", nullable=True)
        check_bool(moderation, "active")

    @staticmethod
    def rekey(raw: Any, guild_id: GuildID) -> Any:
        """Return a copy of a raw record stamped with ``guild_id``.

        Non-mapping values are returned unchanged so that ``check_types``
        reports them.
        """
        if not isinstance(raw, Mapping):
            return raw
        rekeyed = dict(raw)
        rekeyed[GUILD_KEY] = str(guild_id)
        return rekeyed

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Moderation":
        moderator = raw.get("moderator")
        return cls(
            guild_id=GuildID(raw[GUILD_KEY]),
            user_id=UserID(raw["userid"]),
            action=ModerationAction(raw["action"]),
            created=raw["created"],
            value=value_or(raw, "value", 0),
            expire_time=raw.get("expireTime"),
            reason=raw.get("reason"),
            comment=raw.get("comment"),
            moderator=UserID(moderator) if moderator is not None else None,
            active=value_or(raw, "active", True),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            GUILD_KEY: str(self.guild_id),
            "userid": str(self.user_id),
            "action": self.action.value,
            "created": self.created,
            "value": self.value,
            "expireTime": self.expire_time,
            "reason": self.reason,
            "comment": self.comment,
            "moderator": str(self.moderator) if self.moderator is not None else None,
            "active": self.active,
        }

    def with_guild(self, guild_id: GuildID) -> "Moderation":
        return replace(self, guild_id=GuildID(guild_id))

    @property
    def import_key(self) -> str:
        """Stable identity of this record for duplicate-safe re-imports.

        SHA-256 over guild, target, moderator, creation time and action.
        Two exports of the same log entry produce the same key.
        """
        parts = (
            str(self.guild_id),
            str(self.user_id),
            str(self.moderator) if self.moderator is not None else "",
            str(self.created),
            self.action.value,
        )
        return hashlib.sha256("\x1f".join(parts).encode("utf-8")).hexdigest()
