"""Game catalog enrichment: fuzzy title resolution and scraped-field extraction."""

from __future__ import annotations

from gamecatalog.version import __version__

__all__: list[str] = ["__version__"]
