# tests/conftest.py
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from gamecatalog.core.game import CatalogEntry
from gamecatalog.core.game_store import JsonGameStore
from gamecatalog.integrations.page_fetcher import FetchedCandidate

# Padding that lifts a page above the minimum content length
PAGE_PADDING = "<!-- " + "x" * 1200 + " -->"


@pytest.fixture
def make_entry() -> Callable[..., CatalogEntry]:
    """Factory for catalog entries built from raw record fields."""

    def _make(name: str, entry_id: str = "1", **fields: Any) -> CatalogEntry:
        return CatalogEntry.from_dict({"id": entry_id, "name": name, **fields})

    return _make


@pytest.fixture
def catalog_file(tmp_path: Path) -> Path:
    """Catalog file with a few games in different enrichment states."""
    path = tmp_path / "db.json"
    data = {
        "games": [
            {"id": "1", "name": "Alan Wake Remastered", "metacritic": None, "playTime": None},
            {"id": "2", "name": "Obscure Game XYZ", "metacritic": 0},
            {"id": "3", "name": "God of War", "metacritic": 94, "playTime": 20.5, "platform": "PS4"},
        ]
    }
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def store(catalog_file: Path) -> JsonGameStore:
    """Store over the sample catalog."""
    return JsonGameStore(catalog_file)


@pytest.fixture
def score_page() -> Callable[..., str]:
    """Builds a Metacritic-like page with a JSON-LD score."""

    def _page(score: int, name: str = "Alan Wake Remastered", year: str = "2021") -> str:
        ld = {
            "@type": "VideoGame",
            "name": name,
            "datePublished": f"{year}-10-05",
            "aggregateRating": {"@type": "AggregateRating", "ratingValue": score},
        }
        return (
            f"<html><head><title>{name} Reviews - Metacritic</title>"
            f'<script type="application/ld+json">{json.dumps(ld, separators=(",", ":"))}</script>'
            f"</head><body><h1>{name}</h1>{PAGE_PADDING}</body></html>"
        )

    return _page


@pytest.fixture
def candidate() -> Callable[..., FetchedCandidate]:
    """Factory for fetched candidates."""

    def _make(title: str, content: str = "", year: str | None = None, url: str = "") -> FetchedCandidate:
        return FetchedCandidate(title=title, content=content, url=url, year=year)

    return _make
