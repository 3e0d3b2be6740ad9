"""
Chat triggers and punishments.

Auto-responses and bad words share the trigger contract; bad words and the
guild's strike punishments share the punishment contract.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from modbot.datatypes.field_checks import check_choice, check_int, check_str, require_mapping
from modbot.transfer.errors import TypeMismatch


class TriggerType(Enum):
    """How a trigger's content is matched against a message."""

    INCLUDE = "include"
    MATCH = "match"
    REGEX = "regex"

    def __str__(self) -> str:
        return self.value


class PunishmentAction(Enum):
    """Actions a bad word or a strike threshold can apply."""

    BAN = "ban"
    KICK = "kick"
    MUTE = "mute"
    SOFTBAN = "softban"
    STRIKE = "strike"
    DM = "dm"
    NONE = "none"

    def __str__(self) -> str:
        return self.value


# Python's re does not accept the JS global/sticky flags, they are ignored
_REGEX_FLAGS = {"i": re.IGNORECASE, "m": re.MULTILINE, "s": re.DOTALL, "u": 0, "g": 0, "y": 0}


@dataclass(frozen=True, slots=True)
class Trigger:
    type: TriggerType
    content: str
    flags: Optional[str] = None

    @staticmethod
    def check_types(raw: Any) -> None:
        trigger = require_mapping(raw, "trigger")
        check_choice(trigger, "type", (t.value for t in TriggerType))
        check_str(trigger, "content", non_empty=True)
        check_str(trigger, "flags", nullable=True)

        if trigger["type"] == TriggerType.REGEX.value:
            flags = trigger.get("flags") or ""
            unknown = set(flags) - set(_REGEX_FLAGS)
            if unknown:
                raise TypeMismatch(f"trigger.flags contains unknown flags: {''.join(sorted(unknown))}")
            try:
                re.compile(trigger["content"], Trigger._compile_flags(flags))
            except re.error as exc:
                raise TypeMismatch(f"trigger.content is not a valid regex: {exc}") from exc

    @staticmethod
    def _compile_flags(flags: str) -> int:
        compiled = 0
        for flag in flags:
            compiled |= _REGEX_FLAGS.get(flag, 0)
        return compiled

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Trigger":
        return cls(
            type=TriggerType(raw["type"]),
            content=raw["content"],
            flags=raw.get("flags") or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type.value, "content": self.content, "flags": self.flags}


@dataclass(frozen=True, slots=True)
class Punishment:
    action: PunishmentAction
    duration: Optional[int] = None  # seconds, None for permanent or not applicable

    @staticmethod
    def check_types(raw: Any, key: str = "punishment") -> None:
        punishment = require_mapping(raw, key)
        check_choice(punishment, "action", (a.value for a in PunishmentAction))
        check_int(punishment, "duration", nullable=True)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Punishment":
        return cls(action=PunishmentAction(raw["action"]), duration=raw.get("duration"))

    def to_dict(self) -> Dict[str, Any]:
        return {"action": self.action.value, "duration": self.duration}
