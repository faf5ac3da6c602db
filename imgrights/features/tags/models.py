"""
Data model for the creator/license/rights tag workflow.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, Final

from ...shared import FileType

# Default creative commons license
DEFAULT_LICENSE_CC_BY_NC_SA: Final[str] = "https://creativecommons.org/licenses/by-nc-sa/4.0/"

# Tracked fields, in the order they are compared and written
TRACKED_FIELDS: Final[tuple[str, ...]] = ("creator", "license", "rights")

# Tracked field -> ExifTool tag written for it
XMP_WRITE_TAGS: Final[dict[str, str]] = {
    "creator": "XMP:Creator",
    "license": "XMP:License",
    "rights": "XMP:Rights",
}

# Tracked field -> key in ExifTool's JSON read output
READ_KEYS: Final[dict[str, str]] = {
    "creator": "Creator",
    "license": "License",
    "rights": "Rights",
}


class _Unset:
    """Sentinel type for a field the caller did not target."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Final[Any] = _Unset()


@dataclass(frozen=True)
class LinkedFile:
    """Current tag state of one file, keyed by its base name."""
    file_name: str
    file_type: FileType
    source_file: str | None
    creator: str | None = None
    license: str | None = None
    rights: str | None = None
    # All normalized tags, only kept when the caller asks for them
    tags: dict[str, Any] | None = None

    def get(self, field_name: str) -> str | None:
        return getattr(self, field_name)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "fileName": self.file_name,
            "fileType": self.file_type,
            "sourceFile": self.source_file,
            "creator": self.creator,
            "license": self.license,
            "rights": self.rights,
        }
        if self.tags is not None:
            out["tags"] = self.tags
        return out


@dataclass(frozen=True)
class DesiredTags:
    """
    Tag values a caller wants written.

    A field left at UNSET is not targeted. None is a real target value and
    clears the tag in the file.
    """
    creator: str | None | _Unset = UNSET
    license: str | None | _Unset = UNSET
    rights: str | None | _Unset = UNSET

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> DesiredTags:
        """Build from a plain mapping; key presence decides targeting, not truthiness."""
        unknown = set(values) - set(TRACKED_FIELDS)
        if unknown:
            raise ValueError(f"Unknown tag field(s): {', '.join(sorted(unknown))}")
        kwargs: dict[str, Any] = {}
        for name in TRACKED_FIELDS:
            if name in values:
                value = values[name]
                kwargs[name] = None if value is None else str(value)
        return cls(**kwargs)

    def targeted(self) -> Iterator[tuple[str, str | None]]:
        """Yield (field, desired value) for every targeted field."""
        for name in TRACKED_FIELDS:
            value = getattr(self, name)
            if value is not UNSET:
                yield name, value

    def is_empty(self) -> bool:
        return not any(True for _ in self.targeted())


@dataclass(frozen=True)
class WriteOutcome:
    """Result of the write issued for one file."""
    file_name: str
    source_file: str
    ok: bool
    error: str | None = None
    code: str = "OK"


@dataclass
class SyncReport:
    """Warnings and per-file write outcomes of one write_image_tags run."""
    warnings: list[str] = field(default_factory=list)
    outcomes: list[WriteOutcome] = field(default_factory=list)

    @property
    def failed(self) -> list[WriteOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def ok(self) -> bool:
        return not self.failed
