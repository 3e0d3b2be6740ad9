"""
ModBot guild import
===================

Command line entry point that imports a ``modbot-1.0.0`` export into a
guild::

    modbot-import GUILD_ID SNAPSHOT.json [--config PATH]

The bot logs in with its configured token so exported channels can be
resolved against the live guild. Exit codes: 0 on success, 1 when the
export is invalid or the importer cannot start, 2 when a category failed
to import.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

import discord

from modbot.configuration.app_configuration import CONFIG_PATH, AppConfig
from modbot.database.database import initialize_database, shutdown_database
from modbot.datatypes.discord_datatypes import GuildID
from modbot.transfer.errors import PersistenceFailure, ValidationError
from modbot.transfer.import_service import ImportService
from modbot.transfer.runtime import DiscordRuntimeContext
from modbot.util.logger import get_logger, handle_exception, set_console_level

logger = get_logger("main")

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_FAILED = 2


def build_intents() -> discord.Intents:
    """Only guild data is needed to resolve channels."""
    intents = discord.Intents.none()
    intents.guilds = True
    return intents


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="modbot-import",
        description="Import a ModBot guild export into a guild.",
    )
    parser.add_argument("guild_id", help="ID of the guild to import into")
    parser.add_argument("snapshot", type=Path, help="Path to the JSON export")
    parser.add_argument(
        "--config",
        type=Path,
        default=CONFIG_PATH,
        help="Path to the settings file (default: %(default)s)",
    )
    return parser


async def run_import(
    guild_id: GuildID,
    snapshot_path: Path,
    config: AppConfig,
    client: Optional[discord.Client] = None,
) -> int:
    """Open the database, log the bot in and run the import.

    Parameters
    ----------
    guild_id:
        Destination guild.
    snapshot_path:
        JSON export to import.
    config:
        Loaded application configuration.
    client:
        Discord client to resolve channels with. A new one is created when omitted.

    Returns
    -------
    int
        Process exit code.
    """
    client = client or discord.Client(intents=build_intents())
    try:
        try:
            await initialize_database(config.database_path)
        except Exception as exc:
            logger.critical("Failed to initialize database: %s", exc)
            return EXIT_INVALID

        try:
            # REST login is enough for fetch_channel; no gateway session is opened
            await client.login(config.auth_token)
        except discord.LoginFailure as exc:
            logger.critical("Discord login failed: %s", exc)
            return EXIT_INVALID

        service = ImportService()
        try:
            summary = await service.import_file(snapshot_path, guild_id, DiscordRuntimeContext(client))
        except ValidationError as exc:
            logger.error("Export rejected: %s", exc)
            return EXIT_INVALID
        except PersistenceFailure as exc:
            logger.error("%s", exc)
            return EXIT_FAILED
        except OSError as exc:
            logger.error("Could not read %s: %s", snapshot_path, exc)
            return EXIT_INVALID

        for category, count in summary.as_dict().items():
            logger.info("Imported %s: %d", category, count)
        return EXIT_OK
    finally:
        await client.close()
        await shutdown_database()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Parse arguments, load the configuration and run the import."""
    sys.excepthook = handle_exception
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        guild_id = GuildID(args.guild_id)
    except ValueError:
        parser.error(f"invalid guild id: {args.guild_id!r}")

    config = AppConfig(args.config)
    config.load()
    if config.debug_enabled:
        set_console_level(logging.DEBUG)
    if not config.auth_token:
        logger.critical("No auth token configured. The importer cannot log in.")
        return EXIT_INVALID

    logger.info("Importing %s into guild %s…", args.snapshot, guild_id)
    return asyncio.run(run_import(guild_id, args.snapshot, config))


if __name__ == "__main__":
    sys.exit(main())
