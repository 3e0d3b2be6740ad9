"""
Fields shared by the chat-triggered features (auto-responses and bad words).

A feature either applies guild-wide (``global``) or to an explicit list of
channels; a non-global feature without channels would never fire and is
rejected.
"""

from __future__ import annotations

from typing import Any, Mapping, Tuple

from modbot.datatypes.field_checks import check_bool, check_id_list
from modbot.datatypes.trigger import Trigger
from modbot.transfer.errors import TypeMismatch


def check_chat_feature(raw: Mapping[str, Any]) -> None:
    if "trigger" not in raw:
        raise TypeMismatch("trigger is required")
    Trigger.check_types(raw["trigger"])
    check_bool(raw, "global", required=True)
    check_id_list(raw, "channels")
    if not raw["global"] and not raw.get("channels"):
        raise TypeMismatch("channels must not be empty unless global is set")


def channel_ids(raw: Mapping[str, Any]) -> Tuple[str, ...]:
    return tuple(str(channel) for channel in raw.get("channels") or ())
