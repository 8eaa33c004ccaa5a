"""Logging setup for the enrichment tools.

Every module logs through a child of the "gamecatalog" logger. Console
output goes to stderr so the run summary printed on stdout stays readable;
an optional log file always keeps DEBUG detail (rejected candidates, rule
misses, request timing) regardless of the console level.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

__all__ = ["CONSOLE_FORMAT", "FILE_FORMAT", "logger", "setup_logging"]

logger = logging.getLogger("gamecatalog")

CONSOLE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s"


def _console_handler() -> logging.StreamHandler | None:
    for handler in logger.handlers:
        if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
            return handler
    return None


def _file_handlers() -> list[logging.FileHandler]:
    return [handler for handler in logger.handlers if isinstance(handler, logging.FileHandler)]


def setup_logging(
    level: int = logging.INFO,
    log_file: Path | None = None,
) -> None:
    """Configure the application logger.

    Safe to call more than once: the console level is updated in place and
    a log file is attached only once per path.

    Args:
        level: Console logging level (default: INFO).
        log_file: Optional path to a log file that records DEBUG and up.
    """
    console = _console_handler()
    if console is None:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(logging.Formatter(fmt=CONSOLE_FORMAT, datefmt="%H:%M:%S"))
        logger.addHandler(console)
    console.setLevel(level)

    if log_file is not None:
        target = log_file.resolve()
        if not any(Path(handler.baseFilename).resolve() == target for handler in _file_handlers()):
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(fmt=FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
            logger.addHandler(file_handler)

    # The logger itself must let DEBUG through whenever a file wants it
    logger.setLevel(logging.DEBUG if _file_handlers() else level)
