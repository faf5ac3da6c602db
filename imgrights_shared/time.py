"""
Time utilities for performance measurement.
"""
from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager


def now() -> float:
    """Get current timestamp in seconds (float)."""
    return time.time()


@contextmanager
def timer(label: str, logger: logging.Logger) -> Iterator[None]:
    """
    Context manager for timing operations.

    Usage:
        with timer("tag read phase", logger):
            await get_tags(files)
    """
    start = now()
    try:
        yield
    finally:
        elapsed = now() - start
        logger.debug("%s took %.3fs", label, elapsed)
