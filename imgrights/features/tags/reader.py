"""
Bulk read of creator/license/rights tags through ExifTool.
"""

from __future__ import annotations

import asyncio
import json
import os
from collections.abc import Sequence
from typing import Any

from ...adapters.tools.exiftool import ExifTool
from ...deps import get_exiftool
from ...shared import ErrorCode, get_logger, timer
from .models import READ_KEYS, TRACKED_FIELDS, LinkedFile

logger = get_logger(__name__)

# Everything ExifTool can extract, minus the raw XMP packet blob
READ_TAGS = ["All"]
READ_EXCLUDE = ["XMP:XMP"]


class TagReadError(Exception):
    """A single file could not be read; the whole batch read is aborted."""

    def __init__(self, path: str, code: str, message: str):
        super().__init__(f"[{code}] {path}: {message}")
        self.path = path
        self.code = code
        self.message = message


def _normalize_raw_tags(raw: dict[str, Any]) -> dict[str, Any]:
    """Flatten ExifTool output to plain JSON data (dates, bytes, etc. become strings)."""
    return json.loads(json.dumps(raw, default=str, ensure_ascii=False))


def _tag_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, list):
        # XMP bags with more than one entry
        return ", ".join(str(item) for item in value)
    return str(value)


def _linked_file_from_tags(tags: dict[str, Any], include_all_tags: bool) -> LinkedFile:
    source_file = str(tags["SourceFile"])
    values = {name: _tag_text(tags.get(READ_KEYS[name])) for name in TRACKED_FIELDS}
    return LinkedFile(
        file_name=os.path.basename(source_file),
        file_type="image",
        source_file=source_file,
        tags=tags if include_all_tags else None,
        **values,
    )


async def _read_one(exiftool: ExifTool, path: str) -> dict[str, Any]:
    res = await exiftool.aread(path, READ_TAGS, READ_EXCLUDE)
    if not res.ok or not isinstance(res.data, dict):
        raise TagReadError(path, res.code or ErrorCode.READ_FAILED.value, res.error or "ExifTool read failed")
    return _normalize_raw_tags(res.data)


async def get_tags(
    files: Sequence[str | os.PathLike[str]],
    *,
    exiftool: ExifTool | None = None,
    include_all_tags: bool = False,
) -> dict[str, LinkedFile]:
    """
    Retrieve the creator/license/rights tags of a list of files.

    All files are read concurrently. If any read fails, TagReadError is raised
    and no partial mapping is returned.

    Args:
        files: Paths to image files
        exiftool: Adapter to use (default: the shared one from deps)
        include_all_tags: Keep every tag ExifTool returned on LinkedFile.tags

    Returns:
        Mapping of file base name -> LinkedFile, in input order
    """
    if exiftool is None:
        exiftool = get_exiftool()

    paths = [os.fspath(f) for f in files]
    with timer(f"reading tags of {len(paths)} file(s)", logger):
        all_tags = await asyncio.gather(*(_read_one(exiftool, p) for p in paths))

    linked_files: dict[str, LinkedFile] = {}
    for tags in all_tags:
        linked = _linked_file_from_tags(tags, include_all_tags)
        if linked.file_name in linked_files:
            logger.warning(
                "Duplicate file name %s: %s replaces %s",
                linked.file_name,
                linked.source_file,
                linked_files[linked.file_name].source_file,
            )
        linked_files[linked.file_name] = linked
    return linked_files
