"""Per-site lookup configuration.

A site profile is everything that differs between target sites: where
candidate pages come from (game URLs guessed straight from the query, and
result links harvested from a search page), how a page's game title and
year are read, which rules pull the field out, and how politely to pace
requests. All matching, extraction and retry logic is shared and lives
elsewhere.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Callable, Sequence

from gamecatalog.matching.extraction import (
    DEFAULT_MIN_CONTENT_LENGTH,
    ExtractionRule,
    FieldExtractor,
    FieldKind,
)

__all__ = ["FetchPage", "SiteProfile", "build_slug"]

# Downloads one URL and returns its body; raises requests.RequestException
FetchPage = Callable[[str], str]

_SLUG_SYMBOLS = re.compile(r"[™®©]")
_SLUG_INVALID = re.compile(r"[^a-z0-9]+")


def build_slug(name: str) -> str:
    """Turns a game name into a URL slug.

    Args:
        name: Game name, e.g. "Alan Wake Remastered".

    Returns:
        Slug such as "alan-wake-remastered" (empty for names without letters or digits).
    """
    slug = _SLUG_SYMBOLS.sub("", name.lower())
    return _SLUG_INVALID.sub("-", slug).strip("-")


class SiteProfile(ABC):
    """Base class for a target site.

    Attributes:
        key: Short identifier, also the prefix of the retry-state fields.
        display_name: Human-readable site name.
        target_field: Catalog record key receiving the extracted value.
        field_kind: Whether the field is a score or a duration.
        not_rated_markers: Texts marking a 0 score as a placeholder.
        request_delay: Seconds to wait between two catalog entries.
    """

    key: str = ""
    display_name: str = ""
    target_field: str = ""
    field_kind: FieldKind = FieldKind.SCORE
    not_rated_markers: tuple[str, ...] = ()
    request_delay: float = 2.0

    @property
    @abstractmethod
    def rules(self) -> Sequence[ExtractionRule]:
        """Extraction rules, most reliable first."""

    def direct_urls(self, query: str) -> list[str]:
        """Game page URLs built straight from the query.

        They are tried in order and the first accepted page ends the
        lookup, so no search request is made for it.

        Args:
            query: Search term (one title variation).

        Returns:
            Guessed game page URLs, most likely first.
        """
        return []

    def search_urls(self, query: str, fetch_page: FetchPage) -> list[str]:
        """Game page URLs harvested from the site's search page.

        Args:
            query: Search term (one title variation).
            fetch_page: Downloader for the search page.

        Returns:
            Result URLs in relevance order.
        """
        return []

    @abstractmethod
    def extract_title(self, html: str) -> str | None:
        """Reads the game title shown on a candidate page."""

    def extract_year(self, html: str) -> str | None:
        """Reads the release year from a candidate page, if the site shows one."""
        return None

    def build_extractor(self, min_content_length: int = DEFAULT_MIN_CONTENT_LENGTH) -> FieldExtractor:
        """Creates the field extractor for this site."""
        return FieldExtractor(
            self.rules,
            self.field_kind,
            not_rated_markers=self.not_rated_markers,
            min_content_length=min_content_length,
        )
