"""
Read/diff/write synchronization of creator/license/rights tags.

Every targeted field is written, even when the file already holds the desired
value. A warning is recorded only when an existing value is about to change.
Write failures never raise: they are logged, and reported per file by
write_image_tags_report().
"""

from __future__ import annotations

import asyncio
import os
from collections.abc import Mapping, Sequence
from typing import Any

from ...adapters.tools.exiftool import ExifTool
from ...deps import get_exiftool
from ...shared import ErrorCode, get_logger, timer
from .models import XMP_WRITE_TAGS, DesiredTags, LinkedFile, SyncReport, WriteOutcome
from .reader import get_tags

logger = get_logger(__name__)


def _format_warning(file_name: str, field_name: str, current: str | None, desired: str | None) -> str:
    return f"WARNING: Overwriting {file_name} existing {field_name}: {current} with {desired}"


def _coerce_desired(desired_tags: DesiredTags | Mapping[str, Any]) -> DesiredTags:
    if isinstance(desired_tags, DesiredTags):
        return desired_tags
    return DesiredTags.from_mapping(desired_tags)


def _build_write_payload(linked: LinkedFile, desired: DesiredTags, warnings: list[str]) -> dict[str, str | None]:
    """Stage every targeted field and record a warning for each value that changes."""
    payload: dict[str, str | None] = {}
    for field_name, value in desired.targeted():
        current = linked.get(field_name)
        if current != value:
            warning = _format_warning(linked.file_name, field_name, current, value)
            warnings.append(warning)
            logger.warning(warning)
        payload[XMP_WRITE_TAGS[field_name]] = value
    return payload


async def _write_one(exiftool: ExifTool, linked: LinkedFile, payload: dict[str, str | None]) -> WriteOutcome:
    target = linked.source_file or linked.file_name
    try:
        res = await exiftool.awrite(target, payload, overwrite_original=True)
    except Exception as exc:
        return WriteOutcome(linked.file_name, target, ok=False, error=str(exc), code=ErrorCode.WRITE_FAILED.value)
    if not res.ok:
        return WriteOutcome(
            linked.file_name,
            target,
            ok=False,
            error=res.error or "ExifTool write failed",
            code=res.code or ErrorCode.WRITE_FAILED.value,
        )
    return WriteOutcome(linked.file_name, target, ok=True)


async def write_image_tags_report(
    files: Sequence[str | os.PathLike[str]],
    desired_tags: DesiredTags | Mapping[str, Any],
    *,
    exiftool: ExifTool | None = None,
) -> SyncReport:
    """
    Read the current tags of `files`, then write the desired ones.

    Raises TagReadError if any file cannot be read; nothing is written then.

    Returns:
        SyncReport with the overwrite warnings and one WriteOutcome per write issued
    """
    desired = _coerce_desired(desired_tags)
    if exiftool is None:
        exiftool = get_exiftool()

    file_tags = await get_tags(files, exiftool=exiftool)

    report = SyncReport()
    pending: list[tuple[LinkedFile, dict[str, str | None]]] = []
    for linked in file_tags.values():
        payload = _build_write_payload(linked, desired, report.warnings)
        if payload:
            pending.append((linked, payload))

    if not pending:
        logger.debug("No tag fields targeted, nothing to write")
        return report

    with timer(f"writing tags of {len(pending)} file(s)", logger):
        report.outcomes = list(
            await asyncio.gather(*(_write_one(exiftool, linked, payload) for linked, payload in pending))
        )

    for outcome in report.failed:
        logger.error("%s", outcome.error)
    return report


async def write_image_tags(
    files: Sequence[str | os.PathLike[str]],
    desired_tags: DesiredTags | Mapping[str, Any],
    *,
    exiftool: ExifTool | None = None,
) -> list[str]:
    """
    Get the current tags of a list of image files, then update the tags we care about.

    Args:
        files: Paths to image files
        desired_tags: DesiredTags, or a mapping with any of creator/license/rights
        exiftool: Adapter to use (default: the shared one from deps)

    Returns:
        Warnings for the tag values that were overwritten
    """
    report = await write_image_tags_report(files, desired_tags, exiftool=exiftool)
    return report.warnings
