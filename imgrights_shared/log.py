"""
Logging utilities with consistent formatting and emoji indicators.

Nothing here touches handlers at import time: call `configure_logging()` once
from the program entry point.
"""
import logging
import sys
from typing import Final, TextIO

# Emoji indicators for log levels
EMOJI_MAP: Final[dict[str, str]] = {
    "DEBUG": "🔍",
    "INFO": "ℹ️",
    "WARNING": "⚠️",
    "ERROR": "❌",
    "CRITICAL": "🔥",
    "SUCCESS": "✅",
}

# Root logger namespace and console prefix
ROOT_LOGGER: Final[str] = "imgrights"
PREFIX: Final[str] = "🖼 imgrights"

ANSI_RED: Final[str] = "\x1b[31m"
ANSI_RESET: Final[str] = "\x1b[0m"


class EmojiFormatter(logging.Formatter):
    """Custom formatter that adds emoji based on log level."""

    def __init__(self, use_color: bool = False):
        super().__init__(f"{PREFIX} [%(emoji)s] %(name)s: %(message)s")
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as a single line with a prefix and emoji."""
        record.emoji = EMOJI_MAP.get(record.levelname, "🖼")
        line = super().format(record)
        if self.use_color and record.levelno >= logging.WARNING:
            return f"{ANSI_RED}{line}{ANSI_RESET}"
        return line


class _ConsoleHandler(logging.StreamHandler):
    """Marker class so configure_logging() can find its own handler again."""


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger under the `imgrights` namespace.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Logger whose records flow to the handler installed by configure_logging()
    """
    if name.startswith("__main__"):
        name = "main"
    if name == ROOT_LOGGER or name.startswith(f"{ROOT_LOGGER}."):
        return logging.getLogger(name)
    if name.startswith(f"{ROOT_LOGGER}_"):
        # imgrights_shared.* -> imgrights.shared.*
        name = name[len(ROOT_LOGGER) + 1:]
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def configure_logging(
    level: int | str = logging.INFO,
    use_color: bool = False,
    stream: TextIO | None = None,
) -> logging.Logger:
    """
    Install the console handler on the `imgrights` root logger.

    Safe to call more than once: an existing handler is reconfigured instead
    of stacking a duplicate.

    Args:
        level: Logging level (int or name such as "DEBUG")
        use_color: Wrap WARNING and above in ANSI red
        stream: Output stream (default: stderr)

    Returns:
        The configured root logger
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.strip().upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(level)

    for existing in list(root.handlers):
        if isinstance(existing, _ConsoleHandler):
            root.removeHandler(existing)
            existing.close()

    handler = _ConsoleHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(EmojiFormatter(use_color=use_color))
    root.addHandler(handler)

    # Prevent propagation to avoid duplicate logs
    root.propagate = False
    return root


# Add SUCCESS level
SUCCESS_LEVEL: Final[int] = 25  # Between INFO (20) and WARNING (30)
logging.addLevelName(SUCCESS_LEVEL, "SUCCESS")


def log_success(logger: logging.Logger, message: str) -> None:
    """Log a success message with ✅ emoji."""
    logger.log(SUCCESS_LEVEL, message)
