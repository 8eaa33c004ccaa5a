"""Centralized path resolution for bundled resources."""

from __future__ import annotations

from pathlib import Path

__all__ = ["get_resources_dir"]

_resources_dir: Path | None = None


def get_resources_dir() -> Path:
    """Get the path to the bundled resources directory.

    The directory ships inside the package (gamecatalog/resources/), so the
    same lookup works from a source checkout and from an installed wheel.

    Returns:
        Path to the resources directory.

    Raises:
        FileNotFoundError: If resources directory cannot be found.
    """
    global _resources_dir
    if _resources_dir is not None:
        return _resources_dir

    # paths.py is at gamecatalog/utils/paths.py → parent.parent = gamecatalog/
    candidate = Path(__file__).resolve().parent.parent / "resources"
    if not candidate.is_dir():
        raise FileNotFoundError(f"Could not locate resources directory at {candidate}")

    _resources_dir = candidate
    return _resources_dir

