"""
imgrights - read and write creator/license/rights metadata on image files.
"""

from .features.tags import (
    DEFAULT_LICENSE_CC_BY_NC_SA,
    DesiredTags,
    LinkedFile,
    SyncReport,
    TagReadError,
    WriteOutcome,
    get_tags,
    write_image_tags,
    write_image_tags_report,
)

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_LICENSE_CC_BY_NC_SA",
    "DesiredTags",
    "LinkedFile",
    "SyncReport",
    "TagReadError",
    "WriteOutcome",
    "get_tags",
    "write_image_tags",
    "write_image_tags_report",
]
