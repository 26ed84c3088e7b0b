"""Configuration management for Daybook."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

DAYBOOK_HOME = Path(os.environ.get("DAYBOOK_HOME", Path.home() / "daybook"))
CONFIG_FILE = DAYBOOK_HOME / "config" / "daybook.conf"
DATA_DIR = DAYBOOK_HOME / "journal"

STORAGE_BACKENDS = ("webdav", "local")


@dataclass
class Config:
    """Daybook configuration."""

    storage_backend: str = "webdav"
    # WebDAV (Nextcloud) settings
    webdav_url: str = ""
    webdav_username: str = ""
    webdav_password: str = ""
    webdav_access_token: str = ""
    webdav_folder: str = ""
    request_timeout_seconds: float = 30.0
    # Local fallback
    local_dir: str = ""
    # Editing session
    autosave_delay_seconds: float = 1.0
    session_commit_minutes: float = 30.0
    history_months: int = 3
    timezone: str = ""

    @property
    def session_commit_seconds(self) -> float:
        return self.session_commit_minutes * 60


def _unquote(value: str) -> str:
    """Strip quotes, or an inline comment from an unquoted value."""
    if value[:1] in ('"', "'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        return value.split("#")[0].strip()
    return value


def _parse_number(key: str, value: str, kind: type, default):
    try:
        number = kind(value)
    except ValueError:
        logger.warning(f"Invalid {key.upper()} value {value!r}, using {default}")
        return default
    if number < 0:
        logger.warning(f"Negative {key.upper()} value {value!r}, using {default}")
        return default
    return number


def load_config() -> Config:
    """Load configuration from daybook.conf file."""
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
        value = _unquote(value.strip())

        match key:
            case "storage_backend":
                backend = value.lower()
                if backend in STORAGE_BACKENDS:
                    config.storage_backend = backend
                else:
                    logger.warning(f"Unknown STORAGE_BACKEND {value!r}, using {config.storage_backend}")
            case "webdav_url":
                config.webdav_url = value.rstrip("/")
            case "webdav_username":
                config.webdav_username = value
            case "webdav_password":
                config.webdav_password = value
            case "webdav_access_token":
                config.webdav_access_token = value
            case "webdav_folder":
                config.webdav_folder = value.strip("/")
            case "request_timeout_seconds":
                config.request_timeout_seconds = _parse_number(
                    key, value, float, config.request_timeout_seconds
                )
            case "local_dir":
                config.local_dir = value
            case "autosave_delay_seconds":
                config.autosave_delay_seconds = _parse_number(
                    key, value, float, config.autosave_delay_seconds
                )
            case "session_commit_minutes":
                config.session_commit_minutes = _parse_number(
                    key, value, float, config.session_commit_minutes
                )
            case "history_months":
                config.history_months = _parse_number(key, value, int, config.history_months)
            case "timezone":
                try:
                    ZoneInfo(value)
                except (ZoneInfoNotFoundError, ValueError):
                    logger.warning(f"Unknown TIMEZONE {value!r}, using local time")
                else:
                    config.timezone = value

    return config
