"""Centralized JSON file I/O with consistent error handling.

load_json() is forgiving and returns a default on failure (settings,
translations). save_json() writes atomically through a temp file so a
crash mid-write never leaves a truncated catalog behind.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

__all__ = ["load_json", "save_json"]

logger = logging.getLogger("gamecatalog.json_utils")


def load_json(path: Path, default: Any = None) -> Any:
    """Load and parse a JSON file with unified error handling.

    Args:
        path: Path to the JSON file.
        default: Value to return if file doesn't exist or fails to parse.
            Defaults to empty dict if None.

    Returns:
        Parsed JSON data, or default value on failure.
    """
    if default is None:
        default = {}
    if not path.exists():
        return default
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("Failed to load JSON from %s: %s", path, exc)
        return default


def save_json(path: Path, data: Any, ensure_parents: bool = True) -> None:
    """Save data as JSON, replacing the target atomically.

    Args:
        path: Target file path.
        data: Data to serialize as JSON.
        ensure_parents: Create parent directories if needed.

    Raises:
        OSError: If the file cannot be written.
    """
    if ensure_parents:
        path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.write("\n")
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
