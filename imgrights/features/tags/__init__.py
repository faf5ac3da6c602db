"""Creator/license/rights tag read and sync."""
from .models import (
    DEFAULT_LICENSE_CC_BY_NC_SA,
    TRACKED_FIELDS,
    UNSET,
    XMP_WRITE_TAGS,
    DesiredTags,
    LinkedFile,
    SyncReport,
    WriteOutcome,
)
from .reader import TagReadError, get_tags
from .writer import write_image_tags, write_image_tags_report

__all__ = [
    "DEFAULT_LICENSE_CC_BY_NC_SA",
    "TRACKED_FIELDS",
    "UNSET",
    "XMP_WRITE_TAGS",
    "DesiredTags",
    "LinkedFile",
    "SyncReport",
    "WriteOutcome",
    "TagReadError",
    "get_tags",
    "write_image_tags",
    "write_image_tags_report",
]
