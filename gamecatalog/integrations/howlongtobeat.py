"""HowLongToBeat site profile: main-story completion times.

The game page at the query's slug is tried first; when it is missing or
does not match, the site's search page supplies result links. Each game page
is scanned for the "Main Story" time (falling back to "Solo" for games
without a story mode).
"""

from __future__ import annotations

import logging
import re
from urllib.parse import quote_plus, urljoin

from bs4 import BeautifulSoup

from gamecatalog.integrations.site_profile import FetchPage, SiteProfile, build_slug
from gamecatalog.matching.extraction import ExtractionRule, FieldKind, LabeledValueRule, PatternRule

logger = logging.getLogger("gamecatalog.howlongtobeat")

__all__ = ["HowLongToBeatProfile", "extract_game_links", "extract_page_title"]

BASE_URL = "https://howlongtobeat.com"
GAME_URL = BASE_URL + "/game/{slug}"
SEARCH_URL = BASE_URL + "/?q={query}"

MAX_LINKS = 5

_GAME_LINK_PATTERN = re.compile(r"^/game(?:/[^\s\"']+|\?id=\d+)$")

_TITLE_DECORATIONS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\s*\|\s*HowLongToBeat.*$", re.IGNORECASE),
    re.compile(r"^\s*HowLongToBeat\s*[|\-]\s*", re.IGNORECASE),
    re.compile(r"^\s*HowLongToBeat\s*$", re.IGNORECASE),
    re.compile(r"^\s*How\s+long\s+is\s+", re.IGNORECASE),
    re.compile(r"\s*\?\s*$"),
)

_TIME = r"([^<]+)"

HLTB_RULES: tuple[ExtractionRule, ...] = (
    PatternRule(
        "game_card_tidbit",
        r"<div[^>]*GameCard_search_list_tidbit[^>]*>Main Story</div>[\s\S]*?"
        r"<div[^>]*GameCard_search_list_tidbit[^>]*>" + _TIME + r"</div>",
    ),
    PatternRule("time_class", r"<div[^>]*>Main Story</div>[\s\S]*?<div[^>]*time_\d+[^>]*>" + _TIME + r"</div>"),
    PatternRule(
        "search_list_tidbit",
        r"<div[^>]*search_list_tidbit[^>]*>Main Story</div>[\s\S]*?"
        r"<div[^>]*search_list_tidbit[^>]*>" + _TIME + r"</div>",
    ),
    PatternRule("h5_heading", r"<h5[^>]*>Main Story</h5>[\s\S]*?<div[^>]*>" + _TIME + r"</div>"),
    PatternRule("list_item", r"<li[^>]*>\s*<h5[^>]*>Main Story</h5>\s*<div[^>]*>" + _TIME + r"</div>"),
    PatternRule("table_cell", r"<td[^>]*>Main Story</td>[\s\S]*?<td[^>]*>" + _TIME + r"</td>"),
    PatternRule("table_row", r"<tr[^>]*>[\s\S]*?Main Story[\s\S]*?<td[^>]*>" + _TIME + r"</td>"),
    PatternRule("loose_main_story", r"Main Story[\s\S]*?(\d+(?:\.5|½)?\s*Hours?)"),
    LabeledValueRule("labeled_value", ("Main Story", "Solo")),
    PatternRule("loose_main", r"\bMain\b[\s\S]{0,200}?(\d+(?:\.5|½)?\s*Hours?)"),
)


def extract_game_links(html: str, limit: int = MAX_LINKS) -> list[str]:
    """Collects game page links from a search result page.

    Args:
        html: Search page HTML.
        limit: Maximum number of links.

    Returns:
        Absolute URLs in document order, de-duplicated.
    """
    if not html:
        return []

    soup = BeautifulSoup(html, "html.parser")
    links: list[str] = []
    for anchor in soup.find_all("a", href=True):
        href = anchor["href"].strip()
        if not _GAME_LINK_PATTERN.match(href):
            continue
        url = urljoin(BASE_URL, href)
        if url not in links:
            links.append(url)
            if len(links) >= limit:
                break
    return links


def _clean_title(raw: str) -> str:
    title = raw.strip()
    for pattern in _TITLE_DECORATIONS:
        title = pattern.sub("", title)
    return title.strip()


def extract_page_title(html: str) -> str | None:
    """Reads the game title of a HowLongToBeat game page.

    Tries <title>, the first <h1>, the profile header <h1>, then <h2>;
    the first cleaned value longer than two characters wins.

    Args:
        html: Game page HTML.

    Returns:
        The title, or None if the page shows none.
    """
    if not html:
        return None

    soup = BeautifulSoup(html, "html.parser")
    header = soup.select_one("[class*=profile_header] h1")
    candidates = [
        soup.title.get_text() if soup.title else None,
        soup.h1.get_text() if soup.h1 else None,
        header.get_text() if header else None,
        soup.h2.get_text() if soup.h2 else None,
    ]
    for raw in candidates:
        if not raw:
            continue
        title = _clean_title(raw)
        if len(title) > 2:
            return title
    return None


class HowLongToBeatProfile(SiteProfile):
    """Main-story hours from howlongtobeat.com."""

    key = "hltb"
    display_name = "HowLongToBeat"
    target_field = "playTime"
    field_kind = FieldKind.DURATION
    request_delay = 3.0

    @property
    def rules(self) -> tuple[ExtractionRule, ...]:
        return HLTB_RULES

    def direct_urls(self, query: str) -> list[str]:
        slug = build_slug(query)
        return [GAME_URL.format(slug=slug)] if slug else []

    def search_urls(self, query: str, fetch_page: FetchPage) -> list[str]:
        search_url = SEARCH_URL.format(query=quote_plus(query))
        html = fetch_page(search_url)
        links = extract_game_links(html)
        logger.debug("HLTB search '%s' returned %d game links", query, len(links))
        return links

    def extract_title(self, html: str) -> str | None:
        return extract_page_title(html)
