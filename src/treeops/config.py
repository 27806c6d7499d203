"""Configuration constants, .env parsing, and operation defaults."""

from __future__ import annotations

import os
import sys
from pathlib import Path


def read_env_file(keys: list[str]) -> dict[str, str]:
    """Parse .env file and return values for requested keys.

    Does not load into os.environ; callers decide what to do with values.
    """
    env_file = Path.cwd() / ".env"
    try:
        content = env_file.read_text()
    except OSError:
        return {}

    result: dict[str, str] = {}
    wanted = set(keys)

    for line in content.splitlines():
        trimmed = line.strip()
        if not trimmed or trimmed.startswith("#"):
            continue
        eq_idx = trimmed.find("=")
        if eq_idx == -1:
            continue
        key = trimmed[:eq_idx].strip()
        if key not in wanted:
            continue
        value = trimmed[eq_idx + 1 :].strip()
        if (value.startswith('"') and value.endswith('"')) or (value.startswith("'") and value.endswith("'")):
            value = value[1:-1]
        if value:
            result[key] = value

    return result


# Read config values from .env (falls back to os.environ).
_env_config = read_env_file(
    ["TREEOPS_MAX_CONCURRENCY", "TREEOPS_MAX_BUSY_TRIES", "TREEOPS_BUSY_BACKOFF_S", "LOG_LEVEL"]
)


def _setting(key: str, default: str) -> str:
    return os.environ.get(key) or _env_config.get(key, default)


O777: int = 0o777
O666: int = 0o666

IS_WINDOWS: bool = sys.platform == "win32"

LOG_LEVEL: str = _setting("LOG_LEVEL", "INFO").upper()

# Upper bound on filesystem primitives in flight during one top-level call.
MAX_CONCURRENCY: int = max(1, int(_setting("TREEOPS_MAX_CONCURRENCY", "64")))
MAX_BUSY_TRIES: int = max(1, int(_setting("TREEOPS_MAX_BUSY_TRIES", "3")))
BUSY_BACKOFF_S: float = max(0.0, float(_setting("TREEOPS_BUSY_BACKOFF_S", "0.1")))
