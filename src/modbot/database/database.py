"""
Database lifecycle for the importer.

Opens the shared connection, creates the schema, and closes it again at
shutdown. Repositories are given connections from ``db_connection``.
"""

from __future__ import annotations

from pathlib import Path

from modbot.database.db_connection import ConnectionManager, db_connection
from modbot.database.db_schema import SchemaManager
from modbot.util.logger import get_logger

logger = get_logger("database")

# Default database file path
DB_PATH = Path("./data/modbot.db")


async def initialize_database(path: Path = DB_PATH, connection: ConnectionManager = db_connection) -> None:
    """
    Open the database at ``path`` and create the schema.

    Should be called once at program startup, before any repository is used.
    """
    await connection.open(path)
    await SchemaManager.initialize_schema(connection.connection)
    logger.info("[DATABASE] Database initialized at %s", path)


async def shutdown_database(connection: ConnectionManager = db_connection) -> None:
    """Close the shared connection. Safe to call when it was never opened."""
    await connection.close()
