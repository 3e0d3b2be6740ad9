"""Automatic replies sent when a message matches a trigger."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Tuple

from modbot.datatypes.chat_feature import channel_ids, check_chat_feature
from modbot.datatypes.field_checks import check_str, require_mapping
from modbot.datatypes.trigger import Trigger


@dataclass(frozen=True, slots=True)
class AutoResponse:
    trigger: Trigger
    response: str
    global_: bool = False
    channels: Tuple[str, ...] = ()

    @staticmethod
    def check_types(raw: Any) -> None:
        response = require_mapping(raw, "Auto-response")
        check_chat_feature(response)
        check_str(response, "response", non_empty=True)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "AutoResponse":
        return cls(
            trigger=Trigger.from_dict(raw["trigger"]),
            response=raw["response"],
            global_=raw["global"],
            channels=channel_ids(raw),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "trigger": self.trigger.to_dict(),
            "response": self.response,
            "global": self.global_,
            "channels": list(self.channels),
        }
