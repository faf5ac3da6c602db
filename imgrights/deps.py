"""
Dependency wiring - builds the process-wide ExifTool handle.
Simple, debug-friendly DI without framework magic.
"""

from __future__ import annotations

import threading

from .adapters.tools import ExifTool
from .config import EXIFTOOL_BIN, EXIFTOOL_TIMEOUT, EXIFTOOL_TRUSTED_DIRS
from .shared import get_logger, log_success

logger = get_logger(__name__)

_EXIFTOOL: ExifTool | None = None
_EXIFTOOL_LOCK = threading.Lock()


def build_exiftool() -> ExifTool:
    """Build a new ExifTool adapter from configuration."""
    exiftool = ExifTool(
        bin_name=EXIFTOOL_BIN or "exiftool",
        timeout=EXIFTOOL_TIMEOUT,
        trusted_dirs=EXIFTOOL_TRUSTED_DIRS,
    )
    if exiftool.is_available():
        log_success(logger, f"ExifTool is available: {exiftool.bin}")
    else:
        logger.warning("ExifTool not found - metadata cannot be read or written")
    return exiftool


def get_exiftool() -> ExifTool:
    """Return the shared ExifTool adapter, building it on first use."""
    global _EXIFTOOL
    with _EXIFTOOL_LOCK:
        if _EXIFTOOL is None:
            _EXIFTOOL = build_exiftool()
        return _EXIFTOOL


def reset_exiftool() -> None:
    """Drop the cached adapter so the next get_exiftool() rebuilds it."""
    global _EXIFTOOL
    with _EXIFTOOL_LOCK:
        _EXIFTOOL = None
