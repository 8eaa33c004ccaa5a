"""Search-term variations for a catalog title.

Produces an ordered, de-duplicated list of query strings, most specific
first. Generic queries ("Alan Wake") only come after the specific ones
("Alan Wake Remastered (2021)") are exhausted, so a generic title cannot
steal the match from the exact edition the catalog lists.
"""

from __future__ import annotations

import re

from gamecatalog.matching.normalizer import extract_year, strip_symbols

__all__ = ["EDITION_PATTERNS", "MIN_VARIATION_LENGTH", "generate"]

MIN_VARIATION_LENGTH = 4

_YEAR_TAG_PATTERN = re.compile(r"\s*\(\s*\d{4}\s*\)\s*")

# Optional "-", ":" or dash separator in front of a qualifier
_SEP = r"(?:\s*[-:–—]\s*|\s+|^)"

# One variation is generated per pattern that matches, in this order.
EDITION_PATTERNS: tuple[re.Pattern[str], ...] = (
    # "Definitive Edition", "Game of the Year Edition", "Director's Cut Edition"
    re.compile(
        _SEP + r"(?:definitive|complete|goty|game\s+of\s+the\s+year|deluxe|ultimate|special|"
        r"collector'?s?|limited|enhanced|remastered|director'?s?\s+cut)\s+edition\b",
        re.IGNORECASE,
    ),
    # "25th Anniversary Edition", "Anniversary Edition"
    re.compile(_SEP + r"(?:\d+(?:st|nd|rd|th)\s+)?anniversary(?:\s+edition)?\b", re.IGNORECASE),
    # "Director's Cut"
    re.compile(_SEP + r"director'?s?\s+cut\b", re.IGNORECASE),
    # Bare qualifiers: "Alan Wake Remastered", "Tomb Raider: Definitive"
    re.compile(
        _SEP + r"(?:definitive|complete|goty|deluxe|ultimate|special|enhanced|remastered)\b(?!\s+edition\b)",
        re.IGNORECASE,
    ),
)

_TRAILING_SEPARATOR_PATTERN = re.compile(r"[\s\-:–—]+$")
_WHITESPACE_PATTERN = re.compile(r"\s+")


def generate(title: str, year: str | None = None) -> list[str]:
    """Builds the ordered search-term variations for a title.

    Order:
        1. Glyph-stripped title (always first when non-empty).
        2. Raw title, if it differs from 1.
        3. Title without its parenthesized year, if it has one.
        4. One variation per edition pattern that matches (year kept).
        5. Title without year and without any edition qualifier.

    Derived variations shorter than MIN_VARIATION_LENGTH characters and
    exact duplicates of earlier entries are dropped.

    Args:
        title: Raw catalog title.
        year: Year hint; extracted from the title when not given.

    Returns:
        Ordered list of unique query strings.
    """
    cleaned = strip_symbols(title)
    if not cleaned:
        return []

    if year is None:
        year = extract_year(cleaned)

    variations: list[str] = [cleaned]

    def _add(candidate: str) -> None:
        candidate = candidate.strip()
        if len(candidate) < MIN_VARIATION_LENGTH:
            return
        if candidate not in variations:
            variations.append(candidate)

    _add(title or "")

    if year:
        _add(_remove_year(cleaned))

    for pattern in EDITION_PATTERNS:
        if pattern.search(cleaned):
            _add(_tidy(pattern.sub(" ", cleaned)))

    base = _remove_year(cleaned) if year else cleaned
    for pattern in EDITION_PATTERNS:
        base = _tidy(pattern.sub(" ", base))
    _add(base)

    return variations


def _remove_year(title: str) -> str:
    """Removes every parenthesized 4-digit year tag."""
    return _tidy(_YEAR_TAG_PATTERN.sub(" ", title))


def _tidy(title: str) -> str:
    """Collapses whitespace and drops separators left dangling at the end."""
    title = _WHITESPACE_PATTERN.sub(" ", title).strip()
    return _TRAILING_SEPARATOR_PATTERN.sub("", title)
