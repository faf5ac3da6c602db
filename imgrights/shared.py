"""Application-facing alias for the shared utilities package."""

from __future__ import annotations

import imgrights_shared as _root_shared

Result = _root_shared.Result
ErrorCode = _root_shared.ErrorCode
FileType = _root_shared.FileType
get_logger = _root_shared.get_logger
configure_logging = _root_shared.configure_logging
log_success = _root_shared.log_success
timer = _root_shared.timer

__all__ = [
    "Result",
    "ErrorCode",
    "FileType",
    "get_logger",
    "configure_logging",
    "log_success",
    "timer",
]
