"""Configuration management for dayboard."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

DAYBOARD_HOME = Path(os.environ.get("DAYBOARD_HOME", Path.home() / "dayboard"))
CONFIG_FILE = DAYBOARD_HOME / "config" / "dayboard.conf"
DATA_DIR = DAYBOARD_HOME / "data"

# Setting keys shared with the board's settings table
ACCESS_TOKEN = "access_token"
REFRESH_TOKEN = "refresh_token"
CLIENT_ID = "client_id"
CLIENT_SECRET = "client_secret"
DAYS_IN_ADVANCE = "days_in_advance"
CALENDAR_IDS = "task_import_calendar_ids"


@dataclass
class Config:
    """dayboard configuration."""

    database_path: str = ""
    timezone: str = "America/Toronto"
    rollover_schedule: str = "0 * * * *"
    reconcile_schedule: str = "*/30 * * * *"
    token_refresh_schedule: str = "*/30 * * * *"
    http_timeout: float = 30.0
    default_days_in_advance: int = 30
    log_level: str = "INFO"

    @property
    def db_path(self) -> Path:
        if self.database_path:
            return Path(self.database_path).expanduser()
        return DATA_DIR / "dayboard.sqlite3"


def _strip_value(value: str) -> str:
    """Unquote a value, dropping inline comments on unquoted ones."""
    if value.startswith('"') or value.startswith("'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def load_config() -> Config:
    """Load configuration from dayboard.conf file."""
    config = Config()

    if not CONFIG_FILE.exists():
        return config

    for line in CONFIG_FILE.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _strip_value(value.strip())

        match key:
            case "database_path":
                config.database_path = value
            case "timezone":
                config.timezone = value
            case "rollover_schedule":
                config.rollover_schedule = value
            case "reconcile_schedule":
                config.reconcile_schedule = value
            case "token_refresh_schedule":
                config.token_refresh_schedule = value
            case "http_timeout":
                try:
                    config.http_timeout = float(value)
                except ValueError:
                    logger.warning(f"Invalid HTTP_TIMEOUT: {value}")
            case "default_days_in_advance":
                try:
                    config.default_days_in_advance = int(value)
                except ValueError:
                    logger.warning(f"Invalid DEFAULT_DAYS_IN_ADVANCE: {value}")
            case "log_level":
                config.log_level = value.upper()

    return config
