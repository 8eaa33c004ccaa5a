"""Metacritic site profile: critic scores (Metascore).

Metacritic has no usable search page for scraping, so candidates are
direct game URLs derived from the query: the plain slug first, then the
platform-specific pages. Later URLs are only fetched while no earlier page
yielded an accepted score.
"""

from __future__ import annotations

import json
import logging
import re

from bs4 import BeautifulSoup

from gamecatalog.integrations.site_profile import SiteProfile, build_slug
from gamecatalog.matching.extraction import ExtractionRule, FieldKind, PatternRule

logger = logging.getLogger("gamecatalog.metacritic")

__all__ = ["MetacriticProfile", "extract_page_title", "extract_release_year"]

BASE_URL = "https://www.metacritic.com/game/"
PLATFORMS: tuple[str, ...] = ("playstation-5", "playstation-4", "nintendo-switch", "pc")

NOT_RATED_MARKERS: tuple[str, ...] = ("tbd", "not yet rated", "no score yet")

_TITLE_SUFFIX = re.compile(r"\s*(?:Reviews?\s*)?(?:[-|]\s*Metacritic\s*)?$", re.IGNORECASE)
_DATE_YEAR = re.compile(r"\b(\d{4})\b")

METACRITIC_RULES: tuple[ExtractionRule, ...] = (
    PatternRule("json_ld_rating", r'"ratingValue":\s*(\d+)'),
    PatternRule("ad_metadata", r"&amp;score=(\d+)"),
    PatternRule("aggregate_rating", r'"aggregateRating"[^}]*"ratingValue":\s*(\d+)'),
    PatternRule("score_key", r'"score":\s*(\d+)'),
    PatternRule("meta_score_key", r"metaScore['\"]\s*:\s*(\d+)"),
    PatternRule("metascore_key", r'"metascore"\s*:\s*(\d+)'),
    PatternRule("score_span", r'<span[^>]*class="[^"]*score[^"]*"[^>]*>(\d+)</span>'),
    PatternRule("metascore_div", r'<div[^>]*class="[^"]*metascore[^"]*"[^>]*>(\d+)</div>'),
    PatternRule("data_score", r'<div[^>]*data-score="(\d+)"'),
    PatternRule("escaped_metascore", r'\\"metascore\\":\s*(\d+)'),
    PatternRule("loose_score", r"score['\"]\s*:\s*['\"]*(\d+)['\"]"),
)


def _iter_json_ld(soup: BeautifulSoup):
    """Yields every JSON object embedded as application/ld+json."""
    for script in soup.find_all("script", type="application/ld+json"):
        try:
            data = json.loads(script.string or "")
        except ValueError:
            continue
        items = data if isinstance(data, list) else [data]
        for item in items:
            if isinstance(item, dict):
                yield item


def extract_page_title(html: str) -> str | None:
    """Reads the game title of a Metacritic game page.

    Args:
        html: Game page HTML.

    Returns:
        Title from JSON-LD, <h1>, og:title or <title>, or None.
    """
    if not html:
        return None

    soup = BeautifulSoup(html, "html.parser")
    for item in _iter_json_ld(soup):
        name = item.get("name")
        if isinstance(name, str) and name.strip():
            return name.strip()

    og_title = soup.find("meta", property="og:title")
    candidates = [
        soup.h1.get_text() if soup.h1 else None,
        og_title.get("content") if og_title else None,
        soup.title.get_text() if soup.title else None,
    ]
    for raw in candidates:
        if not raw:
            continue
        title = _TITLE_SUFFIX.sub("", raw.strip()).strip()
        if len(title) > 2:
            return title
    return None


def extract_release_year(html: str) -> str | None:
    """Reads the release year from the page's JSON-LD datePublished."""
    if not html:
        return None

    soup = BeautifulSoup(html, "html.parser")
    for item in _iter_json_ld(soup):
        published = item.get("datePublished")
        if isinstance(published, str):
            match = _DATE_YEAR.search(published)
            if match:
                return match.group(1)
    return None


class MetacriticProfile(SiteProfile):
    """Metascore from metacritic.com."""

    key = "metacritic"
    display_name = "Metacritic"
    target_field = "metacritic"
    field_kind = FieldKind.SCORE
    not_rated_markers = NOT_RATED_MARKERS
    request_delay = 2.0

    @property
    def rules(self) -> tuple[ExtractionRule, ...]:
        return METACRITIC_RULES

    def direct_urls(self, query: str) -> list[str]:
        slug = build_slug(query)
        if not slug:
            logger.debug("No usable slug for '%s'", query)
            return []
        return [f"{BASE_URL}{slug}/"] + [f"{BASE_URL}{platform}/{slug}/" for platform in PLATFORMS]

    def extract_title(self, html: str) -> str | None:
        return extract_page_title(html)

    def extract_year(self, html: str) -> str | None:
        return extract_release_year(html)
