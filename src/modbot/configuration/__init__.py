"""
Configuration management for ModBot.

- **app_configuration.py**: Loads the bot configuration either from the
  YAML/JSON settings file or, when ``MODBOT_USE_ENV`` is set, entirely from
  ``MODBOT_*`` environment variables. Exposes typed accessors for the auth
  token, database location, Google Cloud credentials, the feature whitelist
  and the emoji mapping.
"""
