"""Repository layer: one repository per entity kind, no transactions of their own."""
from modbot.repositories.guild_settings_repo import GuildSettingsRepository
from modbot.repositories.channel_settings_repo import ChannelSettingsRepository
from modbot.repositories.auto_response_repo import AutoResponseRepository
from modbot.repositories.bad_word_repo import BadWordRepository
from modbot.repositories.moderation_repo import ModerationRepository

__all__ = [
    "GuildSettingsRepository",
    "ChannelSettingsRepository",
    "AutoResponseRepository",
    "BadWordRepository",
    "ModerationRepository",
]
