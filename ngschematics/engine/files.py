"""File-system helpers for configuration readers.

Uses ``anyio.to_thread.run_sync`` for non-blocking file I/O.

Errors are reported through the log, never raised: a missing file is an
expected situation for most callers, which pass ``silent=True`` to keep it
out of the error log.
"""

from __future__ import annotations

import json
import os
import posixpath
import re
from functools import partial
from pathlib import Path
from typing import Any

from anyio import to_thread
from loguru import logger

_COMMENT_LINE = re.compile(r"^[ \t]*//.*$", re.MULTILINE)


async def is_readable(path: str | Path, *, silent: bool = False) -> bool:
    """Check that a file or directory exists and is readable."""
    path = Path(path)
    exists = await to_thread.run_sync(path.exists)
    if not exists:
        if not silent:
            logger.error('"{}" can not be found.', path)
        return False
    readable = await to_thread.run_sync(partial(os.access, path, os.R_OK))
    if not readable:
        if not silent:
            logger.error('"{}" can not be read.', path)
        return False
    return True


async def parse_json_file(path: str | Path, *, silent: bool = False) -> Any | None:
    """Parse a JSON file, or return ``None`` if it is missing or malformed.

    Whole-line ``//`` comments are removed first: some collections (Angular
    Material for instance) ship JSON files with comments.  A file that exists
    but cannot be parsed is always logged as an error, even when ``silent``.
    """
    path = Path(path)
    if not await is_readable(path, silent=silent):
        return None

    try:
        raw = await to_thread.run_sync(partial(_read_file, path))
    except (OSError, UnicodeDecodeError):
        logger.error('"{}" can not be read.', path)
        return None

    try:
        return json.loads(strip_comment_lines(raw))
    except json.JSONDecodeError as e:
        logger.error('"{}" can not be parsed: {}', path, e)
        return None


def strip_comment_lines(data: str) -> str:
    return _COMMENT_LINE.sub("", data)


def remove_filename(partial_path: str) -> str:
    """Remove the file part of a POSIX path.

    ``path/to/file.ts`` -> ``path/to``, while ``path/to/dir`` is kept as is
    (a last segment without a dot is considered a directory).
    """
    basename = posixpath.basename(partial_path)
    return posixpath.dirname(partial_path) if "." in basename else partial_path


async def find_package_json(start: str | Path, name: str, *, silent: bool = False) -> Path | None:
    """Search ``node_modules/<name>/package.json`` upward from ``start``.

    Stops at the first ancestor directory containing it, or at the file-system
    root.
    """
    directory = Path(start)
    while True:
        candidate = directory / "node_modules" / name / "package.json"
        if await is_readable(candidate, silent=True):
            return candidate
        if directory.parent == directory:
            break
        directory = directory.parent

    if not silent:
        logger.error('"{}" package can not be found from "{}".', name, start)
    return None


def _read_file(path: Path) -> str:
    """Read file contents.  Raises ``FileNotFoundError`` if missing."""
    return path.read_text(encoding="utf-8")
