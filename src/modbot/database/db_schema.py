"""
Database schema initialization.

Handles creation of tables, indexes and schema version tracking. Every
table that the importer upserts into has a unique key matching the
upsert's conflict target, so importing the same export twice leaves the
store unchanged.
"""

import aiosqlite
from modbot.util.logger import get_logger

logger = get_logger("database_schema")

SCHEMA_VERSION = 1


class SchemaManager:
    """Manages database schema creation."""

    @staticmethod
    async def initialize_schema(db: aiosqlite.Connection) -> None:
        """
        Create all database tables and indexes if they do not exist.

        Args:
            db: Open database connection
        """
        await SchemaManager._create_tables(db)
        await SchemaManager._create_indexes(db)
        await SchemaManager._update_schema_version(db)
        await db.commit()
        logger.info("[SCHEMA] Database schema initialized")

    @staticmethod
    async def _create_tables(db: aiosqlite.Connection) -> None:
        """Create all required database tables."""
        # Guild settings, one JSON document per guild
        await db.execute("""
            CREATE TABLE IF NOT EXISTS guild_settings (
                guild_id INTEGER PRIMARY KEY,
                config TEXT NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS channel_settings (
                guild_id INTEGER NOT NULL,
                channel_id INTEGER NOT NULL,
                config TEXT NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                PRIMARY KEY (guild_id, channel_id)
            )
        """)

        # trigger_flags is '' rather than NULL so the unique key treats "no flags" as one value
        await db.execute("""
            CREATE TABLE IF NOT EXISTS auto_responses (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                guild_id INTEGER NOT NULL,
                trigger_type TEXT NOT NULL,
                trigger_content TEXT NOT NULL,
                trigger_flags TEXT NOT NULL DEFAULT '',
                response TEXT NOT NULL,
                global INTEGER NOT NULL DEFAULT 0,
                channels TEXT NOT NULL DEFAULT '',
                UNIQUE (guild_id, trigger_type, trigger_content, trigger_flags)
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS bad_words (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                guild_id INTEGER NOT NULL,
                trigger_type TEXT NOT NULL,
                trigger_content TEXT NOT NULL,
                trigger_flags TEXT NOT NULL DEFAULT '',
                response TEXT,
                punishment_action TEXT NOT NULL DEFAULT 'none',
                punishment_duration INTEGER,
                global INTEGER NOT NULL DEFAULT 0,
                channels TEXT NOT NULL DEFAULT '',
                priority INTEGER NOT NULL DEFAULT 0,
                UNIQUE (guild_id, trigger_type, trigger_content, trigger_flags)
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS moderations (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                guild_id INTEGER NOT NULL,
                user_id TEXT NOT NULL,
                action TEXT NOT NULL,
                created INTEGER NOT NULL,
                value INTEGER NOT NULL DEFAULT 0,
                expire_time INTEGER,
                reason TEXT,
                comment TEXT,
                moderator TEXT,
                active INTEGER NOT NULL DEFAULT 1,
                import_key TEXT NOT NULL,
                UNIQUE (guild_id, import_key)
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS schema_version (
                version INTEGER PRIMARY KEY,
                applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

    @staticmethod
    async def _create_indexes(db: aiosqlite.Connection) -> None:
        """Create indexes for the per-guild lookups."""
        await db.execute("CREATE INDEX IF NOT EXISTS idx_channel_settings_guild ON channel_settings(guild_id)")
        await db.execute("CREATE INDEX IF NOT EXISTS idx_auto_responses_guild ON auto_responses(guild_id)")
        await db.execute("CREATE INDEX IF NOT EXISTS idx_bad_words_guild ON bad_words(guild_id, priority DESC)")
        await db.execute("CREATE INDEX IF NOT EXISTS idx_moderations_user ON moderations(guild_id, user_id, created)")

    @staticmethod
    async def _update_schema_version(db: aiosqlite.Connection) -> None:
        """Record the schema version."""
        await db.execute("INSERT OR IGNORE INTO schema_version (version) VALUES (?)", (SCHEMA_VERSION,))
