"""Shared utilities for imgrights."""
from .log import configure_logging, get_logger, log_success
from .result import Result
from .time import now, timer
from .types import ErrorCode, FileType

__all__ = [
    "Result",
    "get_logger",
    "configure_logging",
    "log_success",
    "now",
    "timer",
    "ErrorCode",
    "FileType",
]
