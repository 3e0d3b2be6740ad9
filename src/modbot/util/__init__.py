"""
Utility functions and helpers for ModBot.

- **logger.py**: Centralized logging configuration with colored console output,
  rotating file handlers, and per-session log aggregation. Suppresses noise from
  verbose libraries (Discord internals, aiosqlite). Uses prompt_toolkit for
  non-blocking console I/O.
"""
