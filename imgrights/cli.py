"""Command-line front end: read or write creator/license/rights tags.

Usage:
    imgrights read photo1.jpg photo2.jpg
    imgrights write --creator "Jane Doe" --cc-by-nc-sa photo1.jpg photo2.jpg
"""
from __future__ import annotations

import argparse
import asyncio
import json
import logging
from typing import Any

from .config import COLOR_OUTPUT, LOG_LEVEL
from .features.tags import (
    DEFAULT_LICENSE_CC_BY_NC_SA,
    TRACKED_FIELDS,
    TagReadError,
    get_tags,
    write_image_tags_report,
)
from .shared import configure_logging, get_logger, log_success

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_WRITE_FAILED = 1
EXIT_USAGE = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="imgrights",
        description="Read and write creator/license/rights metadata on image files via ExifTool.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--no-color", action="store_true", help="Disable colored console output")
    sub = parser.add_subparsers(dest="command", required=True)

    read_p = sub.add_parser("read", help="Print current tags as JSON")
    read_p.add_argument("files", nargs="+", help="Image files")
    read_p.add_argument("--all-tags", action="store_true", help="Include every tag ExifTool returns")

    write_p = sub.add_parser("write", help="Write tags, warning about overwritten values")
    write_p.add_argument("files", nargs="+", help="Image files")
    write_p.add_argument("--creator", help="Creator to write")
    write_p.add_argument("--license", help="License (URL) to write")
    write_p.add_argument("--rights", help="Rights statement to write")
    write_p.add_argument(
        "--cc-by-nc-sa",
        action="store_true",
        help=f"Use {DEFAULT_LICENSE_CC_BY_NC_SA} as license",
    )
    write_p.add_argument(
        "--clear",
        action="append",
        default=[],
        choices=TRACKED_FIELDS,
        help="Remove a tag from the files (repeatable)",
    )
    return parser


def _desired_from_args(args: argparse.Namespace) -> dict[str, Any]:
    desired: dict[str, Any] = {}
    if args.creator is not None:
        desired["creator"] = args.creator
    if args.license is not None:
        desired["license"] = args.license
    elif args.cc_by_nc_sa:
        desired["license"] = DEFAULT_LICENSE_CC_BY_NC_SA
    if args.rights is not None:
        desired["rights"] = args.rights
    for field_name in args.clear:
        desired[field_name] = None
    return desired


async def _run_read(args: argparse.Namespace) -> int:
    linked_files = await get_tags(args.files, include_all_tags=args.all_tags)
    payload = {name: linked.to_dict() for name, linked in linked_files.items()}
    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return EXIT_OK


async def _run_write(args: argparse.Namespace) -> int:
    desired = _desired_from_args(args)
    if not desired:
        logger.error("Nothing to write: pass --creator, --license, --rights, --cc-by-nc-sa or --clear")
        return EXIT_USAGE

    report = await write_image_tags_report(args.files, desired)
    if not report.ok:
        logger.error("%d of %d write(s) failed", len(report.failed), len(report.outcomes))
        return EXIT_WRITE_FAILED
    log_success(
        logger,
        f"Wrote tags to {len(report.outcomes)} file(s), {len(report.warnings)} existing value(s) overwritten",
    )
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    configure_logging(
        level=logging.DEBUG if args.verbose else LOG_LEVEL,
        use_color=COLOR_OUTPUT and not args.no_color,
    )

    runner = _run_read if args.command == "read" else _run_write
    try:
        return asyncio.run(runner(args))
    except TagReadError as exc:
        logger.error("Could not read tags: %s", exc)
        return EXIT_USAGE
