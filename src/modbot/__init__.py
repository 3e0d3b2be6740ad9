"""
ModBot - guild data import

Restores a guild's ModBot configuration and moderation history from a
``modbot-1.0.0`` JSON export into the bot's SQLite store.

Core Components:

- **Snapshot validation**: checks every exported collection against the
  contract of its entity kind and re-keys moderations to the destination
  guild before anything is written
- **Import orchestration**: persists guild settings, channel settings,
  auto-responses, bad words and moderations concurrently, without
  cross-category rollback
- **Summary**: per-kind counts of what was imported

Usage:
    from modbot.main import main
    main()  # modbot-import GUILD_ID export.json
"""
