"""Runtime configuration read from environment variables.

All settings have development defaults so the API starts against a local
SQLite file without any environment set up.
"""

import os

from core.exceptions import ConfigurationError


def _int_env(key: str, default: int) -> int:
    raw = os.getenv(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{key} must be an integer, got '{raw}'", config_key=key)


def _bool_env(key: str, default: bool) -> bool:
    raw = os.getenv(key)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "y", "on")


# In production, set WRITE_DATABASE_URL and READ_DATABASE_URL to different DB instances.
WRITE_DATABASE_URL = os.getenv("WRITE_DATABASE_URL", "sqlite:///coaching.db")
READ_DATABASE_URL = os.getenv("READ_DATABASE_URL", WRITE_DATABASE_URL)

LOG_DIR = os.getenv("LOG_DIR", os.path.join(os.path.dirname(__file__), "..", "logs"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# Reminders due within this many minutes are turned into notifications.
REMINDER_LOOKAHEAD_MINUTES = _int_env("REMINDER_LOOKAHEAD_MINUTES", 60)

SEED_FOODS = _bool_env("SEED_FOODS", True)
