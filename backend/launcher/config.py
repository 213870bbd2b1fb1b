import os
from pathlib import Path


def _env_int(name: str, default: int, min_val: int, max_val: int) -> int:
    try:
        return max(min_val, min(int(os.getenv(name, str(default)).strip()), max_val))
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes")


def _env_path(name: str) -> Path | None:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    return Path(raw).expanduser().resolve()


ALLOW_DIRECTORY_SELECTION = _env_bool("LAUNCHER_ALLOW_DIRECTORY_SELECTION", True)
BROWSE_ROOT = _env_path("LAUNCHER_BROWSE_ROOT")
MAX_PREVIEW_BYTES = _env_int("LAUNCHER_MAX_PREVIEW_MB", 5, 1, 100) * 1024 * 1024
NOTIFICATION_HISTORY = _env_int("LAUNCHER_NOTIFICATION_HISTORY", 50, 1, 1000)
