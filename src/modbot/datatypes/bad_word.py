"""Banned words: a trigger, an optional reply and the punishment applied on a match."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from modbot.datatypes.chat_feature import channel_ids, check_chat_feature
from modbot.datatypes.field_checks import check_int, check_str, require_mapping, value_or
from modbot.datatypes.trigger import Punishment, PunishmentAction, Trigger


@dataclass(frozen=True, slots=True)
class BadWord:
    """A banned-word rule.

    Higher ``priority`` rules are evaluated first when several match the
    same message.
    """

    trigger: Trigger
    punishment: Punishment = field(default_factory=lambda: Punishment(PunishmentAction.NONE))
    response: Optional[str] = None
    global_: bool = False
    channels: Tuple[str, ...] = ()
    priority: int = 0

    @staticmethod
    def check_types(raw: Any) -> None:
        bad_word = require_mapping(raw, "Bad word")
        check_chat_feature(bad_word)
        check_str(bad_word, "response", nullable=True)
        if bad_word.get("punishment") is not None:
            Punishment.check_types(bad_word["punishment"])
        check_int(bad_word, "priority")

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "BadWord":
        punishment = raw.get("punishment")
        return cls(
            trigger=Trigger.from_dict(raw["trigger"]),
            punishment=Punishment.from_dict(punishment) if punishment else Punishment(PunishmentAction.NONE),
            response=raw.get("response"),
            global_=raw["global"],
            channels=channel_ids(raw),
            priority=value_or(raw, "priority", 0),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "trigger": self.trigger.to_dict(),
            "punishment": self.punishment.to_dict(),
            "response": self.response,
            "global": self.global_,
            "channels": list(self.channels),
            "priority": self.priority,
        }
