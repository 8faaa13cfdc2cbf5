"""Logging configuration using loguru.

Logs share the terminal with the interactive prompts, so the stderr sink is
terse (``WARNING: message``) unless debugging.  A full, call-site annotated
trace can go to a rotating log file instead, see ``NGSCHEMATICS_LOG_FILE``.
Stdlib logging records (click, anyio, asyncio) are bridged into the same sinks.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from loguru import logger

TERMINAL_FORMAT = "<level>{level}</level>: {message}"
DEBUG_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}"


class _InterceptHandler(logging.Handler):
    """Bridge stdlib logging records into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Report the caller of ``logging``, not this handler
        frame = logging.currentframe()
        depth = 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(level: str = "WARNING", *, log_file: Path | None = None) -> None:
    """Install the terminal sink, and the file sink when ``log_file`` is set.

    The file sink always records ``DEBUG`` and above, whatever the terminal
    level, so a failed generation can be investigated after the fact.
    """
    level = level.upper()
    verbose = level in ("TRACE", "DEBUG")

    logger.remove()
    logger.add(sys.stderr, level=level, format=DEBUG_FORMAT if verbose else TERMINAL_FORMAT)
    if log_file is not None:
        logger.add(log_file, level="DEBUG", format=FILE_FORMAT, rotation="1 MB", retention=3, encoding="utf-8")

    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)
    # asyncio debug chatter is not useful for a CLI session
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    logger.debug("Logging initialised (level={}, file={})", level, log_file)
