"""
Database package for ModBot.

Provides the long-lived aiosqlite connection, serialised write
transactions and schema creation.

Public API:
    - db_connection: Global ConnectionManager instance
    - SchemaManager: Table/index creation
"""
