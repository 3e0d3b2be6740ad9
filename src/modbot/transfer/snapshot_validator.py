"""
Snapshot validation.

Walks a raw export in a fixed order (guild settings, channels, responses,
bad words, moderations) and stops at the first defect. Each collection is
checked to be an array before its records are visited, and each record is
checked by the entity kind registered for its collection.

Moderation records are stamped with the destination guild before their
check runs. The stamping works on copies: the caller's raw export is never
modified, the re-keyed records only exist in the returned Snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from modbot.datatypes.auto_response import AutoResponse
from modbot.datatypes.bad_word import BadWord
from modbot.datatypes.channel_settings import ChannelSettings
from modbot.datatypes.discord_datatypes import GuildID
from modbot.datatypes.guild_settings import GuildSettings
from modbot.datatypes.moderation_datatypes import Moderation
from modbot.datatypes.snapshot import DATA_TYPE, Snapshot
from modbot.transfer.errors import ShapeViolation, TypeMismatch, ValidationError
from modbot.util.logger import get_logger

logger = get_logger("snapshot_validator")

GUILD_SETTINGS_KEYS = ("guildConfig", "guildSettings")


@dataclass(frozen=True)
class CollectionKind:
    """How one array of the export is validated.

    Attributes:
        key: Wire key of the array.
        label: Name used in error messages.
        field: Snapshot attribute the typed records are stored in.
        entity: Entity class providing ``check_types`` and ``from_dict``.
        prepare: Applied to every raw record before its check, if set.
    """

    key: str
    label: str
    field: str
    entity: Any
    prepare: Optional[Callable[[Any, GuildID], Any]] = None


COLLECTIONS: Tuple[CollectionKind, ...] = (
    CollectionKind("channels", "Channels", "channels", ChannelSettings),
    CollectionKind("responses", "Responses", "responses", AutoResponse),
    CollectionKind("badWords", "BadWords", "bad_words", BadWord),
    CollectionKind("moderations", "Moderations", "moderations", Moderation, prepare=Moderation.rekey),
)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of ``check_snapshot``: a Snapshot, or the first defect found."""

    snapshot: Optional[Snapshot] = None
    error: Optional[ValidationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.snapshot is not None

    def unwrap(self) -> Snapshot:
        """Return the snapshot, raising the defect if validation failed."""
        if self.error is not None:
            raise self.error
        if self.snapshot is None:
            raise RuntimeError("ValidationResult holds neither a snapshot nor an error")
        return self.snapshot


def check_snapshot(raw: Any, guild_id: Union[GuildID, int, str]) -> ValidationResult:
    """
    Validate a raw export for import into ``guild_id``.

    Args:
        raw: Decoded JSON export.
        guild_id: Destination guild; every moderation is re-keyed to it.

    Returns:
        ValidationResult holding either the typed Snapshot or the first
        ShapeViolation/TypeMismatch encountered.
    """
    try:
        return ValidationResult(snapshot=_build_snapshot(raw, GuildID(guild_id)))
    except ValidationError as exc:
        logger.info("[VALIDATOR] Snapshot rejected: %s", exc)
        return ValidationResult(error=exc)


def validate_snapshot(raw: Any, guild_id: Union[GuildID, int, str]) -> Snapshot:
    """Like ``check_snapshot`` but raises the first defect."""
    return check_snapshot(raw, guild_id).unwrap()


def _build_snapshot(raw: Any, guild_id: GuildID) -> Snapshot:
    if not isinstance(raw, Mapping):
        raise ShapeViolation(f"Snapshot must be an object, got {type(raw).__name__}")

    data_type = raw.get("dataType")
    if data_type is not None and data_type != DATA_TYPE:
        raise ShapeViolation(f"Unsupported export format {data_type!r}, expected {DATA_TYPE!r}")

    fields: Dict[str, Any] = {"guild_settings": _check_guild_settings(raw)}
    for kind in COLLECTIONS:
        fields[kind.field] = tuple(_check_collection(raw.get(kind.key), kind, guild_id))
    return Snapshot(**fields)


def _check_guild_settings(raw: Mapping[str, Any]) -> GuildSettings:
    settings = next((raw[key] for key in GUILD_SETTINGS_KEYS if raw.get(key) is not None), None)
    try:
        GuildSettings.check_types(settings)
    except TypeMismatch as exc:
        raise exc.located("GuildSettings") from exc
    return GuildSettings.from_dict(settings)


def _check_collection(records: Any, kind: CollectionKind, guild_id: GuildID) -> List[Any]:
    # str is a sequence too, only real arrays are accepted
    if not isinstance(records, (list, tuple)):
        raise ShapeViolation(f"{kind.label} must be an array")

    checked = []
    for index, record in enumerate(records):
        if kind.prepare is not None:
            record = kind.prepare(record, guild_id)
        try:
            kind.entity.check_types(record)
        except TypeMismatch as exc:
            raise exc.located(kind.label, index) from exc
        checked.append(kind.entity.from_dict(record))
    return checked
