"""
Environment-driven settings.

Values are read once at import time, after a local ``.env`` file (if any)
has been loaded with python-dotenv, so ``.env`` entries override the
defaults below but never variables already set in the environment.
"""

import os

import dotenv

dotenv.load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


# Table name used by the SQL serializer when the caller does not pass one.
SQL_TABLE_NAME: str = os.getenv("FORMAT_BRIDGE_SQL_TABLE", "data")

# Upper bound on input size accepted by the CLI (the engine itself never
# checks; callers are expected to bound input before calling in).
MAX_INPUT_BYTES: int = int(os.getenv("FORMAT_BRIDGE_MAX_INPUT_BYTES", str(5 * 1024 * 1024)))

LOG_LEVEL: str = os.getenv("FORMAT_BRIDGE_LOG_LEVEL", "INFO").upper()

# Log a warning when record-shaped input has keys beyond the first record's.
WARN_HETEROGENEOUS: bool = _env_bool("FORMAT_BRIDGE_WARN_HETEROGENEOUS", True)
