"""
Configuration for imgrights.

Values are read from the environment once, at import time. Invalid values are
logged and replaced by their defaults; numbers are clamped to a sane range.
"""
import os
import logging

from .utils import env_bool

logger = logging.getLogger(__name__)


def _env_raw(*names: str, default: str | None = None) -> str | None:
    for name in names:
        if not name:
            continue
        val = os.getenv(name)
        if val is not None and str(val).strip() != "":
            return str(val).strip()
    return default


def _env_float(default: float, *names: str, min_value: float | None = None, max_value: float | None = None) -> float:
    raw = _env_raw(*names)
    if raw is None:
        return default
    try:
        value = float(raw)
    except (TypeError, ValueError):
        logger.warning("Invalid float for %s=%r, using default=%s", names[0] if names else "<unknown>", raw, default)
        return default
    if min_value is not None and value < min_value:
        logger.warning("Value too small for %s=%s, clamped to %s", names[0] if names else "<unknown>", value, min_value)
        value = min_value
    if max_value is not None and value > max_value:
        logger.warning("Value too large for %s=%s, clamped to %s", names[0] if names else "<unknown>", value, max_value)
        value = max_value
    return value


def _env_bool(default: bool, *names: str) -> bool:
    for name in names:
        if name and name in os.environ:
            return env_bool(name, default)
    return default


def _env_log_level(default: str, *names: str) -> str:
    raw = _env_raw(*names)
    if raw is None:
        return default
    level = raw.upper()
    if not isinstance(logging.getLevelName(level), int):
        logger.warning("Invalid log level for %s=%r, using default=%s", names[0] if names else "<unknown>", raw, default)
        return default
    return level


# ===== External tools =====

EXIFTOOL_BIN = _env_raw("IMGRIGHTS_EXIFTOOL_PATH", "IMGRIGHTS_EXIFTOOL_BIN", default="exiftool")

# Per-call timeout in seconds; 0 (the default) waits on exiftool indefinitely
DEFAULT_EXIFTOOL_TIMEOUT = 0.0
EXIFTOOL_TIMEOUT = _env_float(DEFAULT_EXIFTOOL_TIMEOUT, "IMGRIGHTS_EXIFTOOL_TIMEOUT", min_value=0.0, max_value=600.0)

# Optional os.pathsep-separated list of directories the binary must live under
EXIFTOOL_TRUSTED_DIRS = _env_raw("IMGRIGHTS_EXIFTOOL_TRUSTED_DIRS", default="") or ""

# ===== Console =====

LOG_LEVEL = _env_log_level("INFO", "IMGRIGHTS_LOG_LEVEL")
COLOR_OUTPUT = _env_bool(True, "IMGRIGHTS_COLOR")
