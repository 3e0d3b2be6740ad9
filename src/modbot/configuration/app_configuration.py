from __future__ import annotations
from pathlib import Path
import fcntl
import os
import re
import sys
from typing import Any, Dict, List, Optional
import yaml
from dotenv import load_dotenv

from modbot.util.logger import get_logger

logger = get_logger("app_configuration")


CONFIG_PATH = Path("./config/config.yml").resolve()
DEFAULT_DATABASE_PATH = "data/modbot.db"

# Environment variable that switches loading from the settings file to MODBOT_* variables
USE_ENV_FLAG = "MODBOT_USE_ENV"

EMOJI_NAMES = (
    "source", "privacy", "invite", "discord", "youtube", "zendesk",
    "firstPage", "previousPage", "refresh", "nextPage", "lastPage",
    "announcement", "channel", "forum", "stage", "thread", "voice",
    "avatar", "ban", "moderations", "mute", "pardon", "strike", "kick",
    "userCreated", "userId", "userJoined",
)


def parse_bool(value: Optional[str]) -> bool:
    """Environment booleans: ``1``, ``true`` and ``y`` (any case) are true."""
    return (value or "").strip().lower() in ("1", "true", "y")


def emoji_env_name(name: str) -> str:
    """``firstPage`` -> ``MODBOT_EMOJI_FIRST_PAGE``."""
    return "MODBOT_EMOJI_" + re.sub(r"(?<!^)(?=[A-Z])", "_", name).upper()


def default_google_cloud() -> Dict[str, Any]:
    return {
        "vision": {"enabled": False},
        "logging": {"enabled": False, "projectId": "", "logName": ""},
        "credentials": {"client_email": "", "private_key": ""},
    }


class GoogleCloudSettings:
    """Typed accessors for the optional ``googleCloud`` section."""

    def __init__(self, data: Dict[str, Any] | None = None) -> None:
        self.data: Dict[str, Any] = data or {}

    def _section(self, key: str) -> Dict[str, Any]:
        section = self.data.get(key, {})
        return section if isinstance(section, dict) else {}

    @property
    def client_email(self) -> str:
        return str(self._section("credentials").get("client_email") or "")

    @property
    def private_key(self) -> str:
        return str(self._section("credentials").get("private_key") or "")

    @property
    def vision_enabled(self) -> bool:
        return bool(self._section("vision").get("enabled", False))

    @property
    def logging_enabled(self) -> bool:
        return bool(self._section("logging").get("enabled", False))

    @property
    def logging_project_id(self) -> str:
        return str(self._section("logging").get("projectId") or "")

    @property
    def logging_log_name(self) -> str:
        return str(self._section("logging").get("logName") or "")


class AppConfig:
    """File-lock based accessor around the bot configuration.

    ``load()`` reads ``./config/config.yml`` (YAML, or JSON which YAML also
    parses) or, when ``MODBOT_USE_ENV`` is set, builds the same mapping from
    ``MODBOT_*`` environment variables. A missing settings file is fatal.
    """

    def __init__(self, config_path: Path = CONFIG_PATH) -> None:
        self.config_path = config_path
        self._data: Dict[str, Any] = {}

    # --------------------------
    # Loading
    # --------------------------
    def load(self) -> Dict[str, Any]:
        """Load the configuration and return the resulting mapping.

        Raises:
            SystemExit: If the settings file is required but missing.
        """
        load_dotenv()
        if os.getenv(USE_ENV_FLAG):
            self._data = self.load_from_env()
            logger.info("[APP CONFIGURATION] Loaded configuration from environment variables")
        else:
            self._data = self.load_from_disk()
            logger.info("[APP CONFIGURATION] Loaded configuration from %s", self.config_path)
        return self._data

    def load_from_disk(self) -> Dict[str, Any]:
        if not self.config_path.exists():
            logger.critical(
                "[APP CONFIGURATION] No settings file found at %s. "
                "Create one or set %s and configure the bot through environment variables.",
                self.config_path, USE_ENV_FLAG,
            )
            sys.exit(1)

        with self.config_path.open("r", encoding="utf-8") as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_SH)
            try:
                data = yaml.safe_load(f) or {}
            finally:
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)

        if not isinstance(data, dict):
            logger.critical("[APP CONFIGURATION] %s must contain a mapping", self.config_path)
            sys.exit(1)

        if data.get("googleCloud") is None:
            data["googleCloud"] = default_google_cloud()
        if data.get("emoji") is None:
            data["emoji"] = {}
        if data.get("featureWhitelist") is None:
            data["featureWhitelist"] = []
        return data

    @staticmethod
    def load_from_env() -> Dict[str, Any]:
        env = os.environ
        whitelist = env.get("MODBOT_FEATURE_WHITELIST", "")
        return {
            "authToken": env.get("MODBOT_AUTH_TOKEN"),
            "database": {
                "path": env.get("MODBOT_DATABASE_PATH", DEFAULT_DATABASE_PATH),
            },
            "googleApiKey": env.get("MODBOT_GOOGLE_API_KEY"),
            "googleCloud": {
                "credentials": {
                    "client_email": env.get("MODBOT_GOOGLE_CLOUD_CREDENTIALS_CLIENT_EMAIL"),
                    "private_key": env.get("MODBOT_GOOGLE_CLOUD_CREDENTIALS_PRIVATE_KEY"),
                },
                "vision": {
                    "enabled": parse_bool(env.get("MODBOT_GOOGLE_CLOUD_VISION_ENABLED")),
                },
                "logging": {
                    "enabled": parse_bool(env.get("MODBOT_GOOGLE_CLOUD_LOGGING_ENABLED")),
                    "projectId": env.get("MODBOT_GOOGLE_CLOUD_LOGGING_PROJECT_ID"),
                    "logName": env.get("MODBOT_GOOGLE_CLOUD_LOGGING_LOG_NAME"),
                },
            },
            "debug": {
                "enabled": parse_bool(env.get("MODBOT_DEBUG_ENABLED")),
                "guild": env.get("MODBOT_DEBUG_GUILD"),
            },
            "featureWhitelist": [item for item in re.split(r" *, *", whitelist.strip()) if item],
            "emoji": {name: env.get(emoji_env_name(name)) for name in EMOJI_NAMES},
        }

    # --------------------------
    # Public API
    # --------------------------
    @property
    def data(self) -> Dict[str, Any]:
        """The loaded configuration mapping. Callers should not mutate it."""
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        """Safe lookup for top-level configuration keys."""
        return self._data.get(key, default)

    @property
    def auth_token(self) -> str:
        return str(self._data.get("authToken") or "")

    @property
    def database_path(self) -> Path:
        database = self._data.get("database", {})
        if not isinstance(database, dict):
            database = {}
        return Path(database.get("path") or DEFAULT_DATABASE_PATH)

    @property
    def google_api_key(self) -> str | None:
        value = self._data.get("googleApiKey")
        return str(value) if value else None

    @property
    def google_cloud(self) -> GoogleCloudSettings:
        settings = self._data.get("googleCloud", {})
        return GoogleCloudSettings(settings if isinstance(settings, dict) else {})

    @property
    def debug_enabled(self) -> bool:
        debug = self._data.get("debug", {})
        return isinstance(debug, dict) and bool(debug.get("enabled", False))

    @property
    def debug_guild(self) -> str | None:
        debug = self._data.get("debug", {})
        value = debug.get("guild") if isinstance(debug, dict) else None
        return str(value) if value else None

    @property
    def feature_whitelist(self) -> List[str]:
        value = self._data.get("featureWhitelist", [])
        return [str(item) for item in value] if isinstance(value, list) else []

    @property
    def emoji(self) -> Dict[str, str | None]:
        """Emoji ids by name; names without a configured emoji map to None."""
        configured = self._data.get("emoji", {})
        if not isinstance(configured, dict):
            configured = {}
        return {name: (str(configured[name]) if configured.get(name) else None) for name in EMOJI_NAMES}

