"""
Field-level checks shared by the entity kinds.

Every helper raises TypeMismatch with the offending key in the message.
Python's ``bool`` is an ``int`` subclass, so integer checks reject bools
explicitly.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from modbot.datatypes.discord_datatypes import Snowflake
from modbot.transfer.errors import TypeMismatch


def require_mapping(raw: Any, kind: str) -> Mapping[str, Any]:
    if not isinstance(raw, Mapping):
        raise TypeMismatch(f"{kind} must be an object, got {type(raw).__name__}")
    return raw


def is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def check_id(raw: Mapping[str, Any], key: str, *, nullable: bool = False) -> None:
    value = raw.get(key)
    if value is None and nullable:
        return
    if not Snowflake.is_valid(value):
        expected = "a snowflake id or null" if nullable else "a snowflake id"
        raise TypeMismatch(f"{key} must be {expected}")


def check_id_list(raw: Mapping[str, Any], key: str) -> None:
    value = raw.get(key)
    if value is None:
        return
    if not isinstance(value, (list, tuple)):
        raise TypeMismatch(f"{key} must be an array")
    if not all(Snowflake.is_valid(item) for item in value):
        raise TypeMismatch(f"{key} must only contain snowflake ids")


def check_bool(raw: Mapping[str, Any], key: str, *, nullable: bool = False, required: bool = False) -> None:
    if required and key not in raw:
        raise TypeMismatch(f"{key} is required")
    value = raw.get(key)
    if value is None and (nullable or not required):
        return
    if not isinstance(value, bool):
        raise TypeMismatch(f"{key} must be a boolean")


def check_int(raw: Mapping[str, Any], key: str, *, nullable: bool = False, required: bool = False) -> None:
    if required and key not in raw:
        raise TypeMismatch(f"{key} is required")
    value = raw.get(key)
    if value is None and (nullable or not required):
        return
    if not is_int(value):
        raise TypeMismatch(f"{key} must be an integer")


def check_str(raw: Mapping[str, Any], key: str, *, nullable: bool = False, non_empty: bool = False) -> None:
    value = raw.get(key)
    if value is None and nullable:
        return
    if not isinstance(value, str):
        raise TypeMismatch(f"{key} must be a string" + (" or null" if nullable else ""))
    if non_empty and not value.strip():
        raise TypeMismatch(f"{key} must not be empty")


def check_choice(raw: Mapping[str, Any], key: str, choices: Iterable[str]) -> None:
    allowed = tuple(choices)
    if raw.get(key) not in allowed:
        raise TypeMismatch(f"{key} must be one of {', '.join(allowed)}")


def optional_str(value: Any) -> str | None:
    return None if value is None else str(value)


def value_or(raw: Mapping[str, Any], key: str, default: Any) -> Any:
    """``raw[key]``, or ``default`` when the key is missing or null."""
    value = raw.get(key)
    return default if value is None else value
