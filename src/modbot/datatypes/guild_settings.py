"""
Per-guild configuration as carried by a ``modbot-1.0.0`` export.

Every key is optional on the wire; missing keys take the defaults below.
The record is stored as one JSON document keyed by guild id, so unknown
future keys survive a round trip through ``extra``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from modbot.datatypes.field_checks import (
    check_bool,
    check_id,
    check_id_list,
    check_int,
    optional_str,
    require_mapping,
    value_or,
)
from modbot.datatypes.trigger import Punishment
from modbot.transfer.errors import TypeMismatch

_ID_FIELDS = ("logChannel", "messageLogChannel", "joinLogChannel", "mutedRole", "helpcenter")
_BOOL_FIELDS = ("invites", "caps")
_INT_FIELDS = ("linkCooldown", "antiSpam", "similarMessages")
_KNOWN_KEYS = frozenset(_ID_FIELDS + _BOOL_FIELDS + _INT_FIELDS + ("protectedRoles", "punishments", "safeSearch"))


@dataclass(frozen=True, slots=True)
class SafeSearchSettings:
    enabled: bool = False
    strikes: int = 1


@dataclass(frozen=True, slots=True)
class GuildSettings:
    """Persistent per-guild configuration values.

    ``punishments`` maps a strike count to the punishment applied when a
    member reaches it. Integer settings use -1 for "disabled".
    """

    log_channel: Optional[str] = None
    message_log_channel: Optional[str] = None
    join_log_channel: Optional[str] = None
    muted_role: Optional[str] = None
    helpcenter: Optional[str] = None
    protected_roles: Tuple[str, ...] = ()
    invites: bool = True
    caps: bool = False
    link_cooldown: int = -1
    anti_spam: int = -1
    similar_messages: int = -1
    punishments: Dict[int, Punishment] = field(default_factory=dict)
    safe_search: SafeSearchSettings = field(default_factory=SafeSearchSettings)
    extra: Dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def check_types(raw: Any) -> None:
        """Raise TypeMismatch unless ``raw`` is a valid guild settings record."""
        settings = require_mapping(raw, "Guild settings")

        for key in _ID_FIELDS:
            check_id(settings, key, nullable=True)
        check_id_list(settings, "protectedRoles")
        for key in _BOOL_FIELDS:
            check_bool(settings, key)
        for key in _INT_FIELDS:
            check_int(settings, key)

        punishments = settings.get("punishments")
        if punishments is not None:
            punishments = require_mapping(punishments, "punishments")
        for strikes, punishment in (punishments or {}).items():
            # int() rejects non-ASCII digits such as "²"
            if not (isinstance(strikes, str) and strikes.isascii() and strikes.isdecimal()):
                raise TypeMismatch(f"punishments key {strikes!r} must be a strike count")
            Punishment.check_types(punishment, key=f"punishments.{strikes}")

        safe_search = settings.get("safeSearch")
        if safe_search is not None:
            safe_search = require_mapping(safe_search, "safeSearch")
            check_bool(safe_search, "enabled")
            check_int(safe_search, "strikes")

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "GuildSettings":
        safe_search = raw.get("safeSearch") or {}
        return cls(
            log_channel=optional_str(raw.get("logChannel")),
            message_log_channel=optional_str(raw.get("messageLogChannel")),
            join_log_channel=optional_str(raw.get("joinLogChannel")),
            muted_role=optional_str(raw.get("mutedRole")),
            helpcenter=optional_str(raw.get("helpcenter")),
            protected_roles=tuple(str(role) for role in raw.get("protectedRoles") or ()),
            invites=value_or(raw, "invites", True),
            caps=value_or(raw, "caps", False),
            link_cooldown=value_or(raw, "linkCooldown", -1),
            anti_spam=value_or(raw, "antiSpam", -1),
            similar_messages=value_or(raw, "similarMessages", -1),
            punishments={
                int(strikes): Punishment.from_dict(punishment)
                for strikes, punishment in (raw.get("punishments") or {}).items()
            },
            safe_search=SafeSearchSettings(
                enabled=bool(safe_search.get("enabled", False)),
                strikes=value_or(safe_search, "strikes", 1),
            ),
            extra={key: value for key, value in raw.items() if key not in _KNOWN_KEYS},
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = dict(self.extra)
        data.update({
            "logChannel": self.log_channel,
            "messageLogChannel": self.message_log_channel,
            "joinLogChannel": self.join_log_channel,
            "mutedRole": self.muted_role,
            "helpcenter": self.helpcenter,
            "protectedRoles": list(self.protected_roles),
            "invites": self.invites,
            "caps": self.caps,
            "linkCooldown": self.link_cooldown,
            "antiSpam": self.anti_spam,
            "similarMessages": self.similar_messages,
            "punishments": {str(strikes): p.to_dict() for strikes, p in sorted(self.punishments.items())},
            "safeSearch": {"enabled": self.safe_search.enabled, "strikes": self.safe_search.strikes},
        })
        return data
