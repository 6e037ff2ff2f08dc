"""Application configuration and constants."""
import logging
import os
from pathlib import Path


def _parse_int_env(name: str, default: int) -> int:
    """Parse integer from environment variable."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _parse_bool_env(name: str, default: bool) -> bool:
    """Parse boolean flag from environment variable."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


# Database
DB_DIR = Path(os.environ.get("DB_DIR", Path.cwd() / "data"))
DATABASE_URL = os.environ.get("DATABASE_URL", f"sqlite:///{DB_DIR / 'contests.db'}")

# Authentication
SECRET_KEY = os.environ.get(
    "SECRET_KEY",
    "CHANGE_ME_IN_PRODUCTION_USE_openssl_rand_hex_32"
)
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = _parse_int_env("ACCESS_TOKEN_EXPIRE_MINUTES", 60)
SESSION_EXTEND_MINUTES = _parse_int_env("SESSION_EXTEND_MINUTES", 60)

# Submissions
MAX_WRITE_RETRIES = _parse_int_env("MAX_WRITE_RETRIES", 5)
WRITE_RETRY_BACKOFF_MS = _parse_int_env("WRITE_RETRY_BACKOFF_MS", 20)
# Score the server-side locked answers instead of whatever the client submits
SCORE_LOCKED_ANSWERS = _parse_bool_env("SCORE_LOCKED_ANSWERS", True)
ENFORCE_CONTEST_WINDOW = _parse_bool_env("ENFORCE_CONTEST_WINDOW", True)

# Logging
LOG_LEVEL = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)
