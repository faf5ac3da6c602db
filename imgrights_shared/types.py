"""
Shared types, enums, and constants.
"""
from enum import Enum
from typing import Literal

# File type classifications
FileType = Literal["audio", "image"]


# Error codes
class ErrorCode(str, Enum):
    """Standardized error codes (string enum)."""

    # Client / validation
    INVALID_INPUT = "INVALID_INPUT"
    NOT_FOUND = "NOT_FOUND"

    # Tool availability
    TOOL_MISSING = "TOOL_MISSING"
    TIMEOUT = "TIMEOUT"

    # Operation errors
    READ_FAILED = "READ_FAILED"
    WRITE_FAILED = "WRITE_FAILED"

    # Tool / parsing
    EXIFTOOL_ERROR = "EXIFTOOL_ERROR"
    PARSE_ERROR = "PARSE_ERROR"
