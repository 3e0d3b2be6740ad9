"""
Type-safe wrapper classes for Discord identifiers.

Exports carry snowflakes as decimal strings while discord.py hands out
ints. These wrappers normalise both so the importer never compares a
string id with an int id by accident.
"""

from __future__ import annotations

from typing import Union

import discord


class Snowflake:
    """
    Base class for Discord snowflake IDs.

    Snowflakes are 64-bit integers, but exports store them as strings for
    JSON compatibility. Subclasses only differ by name so that a GuildID can
    never be equal to a ChannelID with the same digits.

    Attributes:
        _value (str): The snowflake ID stored as a string for JSON parity.

    Example:
        >>> gid = GuildID("123456789012345678")
        >>> gid.to_int()
        123456789012345678
        >>> gid == 123456789012345678
        True
    """

    __slots__ = ("_value",)

    def __init__(self, value: Union[str, int, "Snowflake"]) -> None:
        """
        Initialize from a string, int, or another wrapper of the same kind.

        Args:
            value: The snowflake ID as a string, int, or wrapper.

        Raises:
            ValueError: If the value cannot be converted to a valid snowflake.
        """
        if isinstance(value, type(self)):
            self._value = value._value
        elif isinstance(value, bool):
            raise ValueError(f"Cannot create {type(self).__name__} from bool: {value}")
        elif isinstance(value, int):
            if value < 0:
                raise ValueError(f"Snowflake must be positive: {value}")
            self._value = str(value)
        elif isinstance(value, str):
            stripped = value.strip()
            if not stripped.isdigit():
                raise ValueError(f"Cannot create {type(self).__name__} from {value!r}")
            self._value = str(int(stripped))
        else:
            raise ValueError(f"Cannot create {type(self).__name__} from {type(value).__name__}: {value}")

    @classmethod
    def from_int(cls, value: int):
        """Create the wrapper from an integer snowflake."""
        return cls(value)

    @classmethod
    def is_valid(cls, value: object) -> bool:
        """Return True if ``value`` could be wrapped without raising."""
        try:
            cls(value)  # type: ignore[arg-type]
        except ValueError:
            return False
        return True

    def to_int(self) -> int:
        """
        Convert to an integer for Discord API calls and SQLite columns.

        Returns:
            int: The snowflake ID as an integer.
        """
        return int(self._value)

    def __int__(self) -> int:
        return int(self._value)

    def __str__(self) -> str:
        """Return the string representation for JSON serialization."""
        return self._value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Snowflake):
            return type(other) is type(self) and self._value == other._value
        if isinstance(other, str):
            return self._value == other
        if isinstance(other, int) and not isinstance(other, bool):
            return self._value == str(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)


class GuildID(Snowflake):
    """Type-safe wrapper for Discord guild snowflake IDs."""

    __slots__ = ()

    @classmethod
    def from_guild(cls, guild: discord.Guild) -> "GuildID":
        """Create a GuildID from a Discord Guild object."""
        return cls(guild.id)


class ChannelID(Snowflake):
    """Type-safe wrapper for Discord channel snowflake IDs."""

    __slots__ = ()

    @classmethod
    def from_channel(cls, channel: discord.abc.Snowflake) -> "ChannelID":
        """Create a ChannelID from any Discord channel object."""
        return cls(channel.id)


class UserID(Snowflake):
    """Type-safe wrapper for Discord user snowflake IDs."""

    __slots__ = ()

    @classmethod
    def from_user(cls, member: Union[discord.Member, discord.User]) -> "UserID":
        """Create a UserID from a Discord Member or User object."""
        return cls(member.id)
