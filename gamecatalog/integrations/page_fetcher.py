"""HTTP content fetcher for candidate pages.

HttpPageFetcher owns (or borrows) one requests.Session and paces requests
so that at most one is in flight and consecutive requests are spaced by a
minimum interval. CandidateFetcher turns a search query into fetched
candidate pages for one site profile.
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator

import requests

from gamecatalog.integrations.site_profile import SiteProfile
from gamecatalog.matching.extraction import DEFAULT_MIN_CONTENT_LENGTH
from gamecatalog.matching.normalizer import extract_year
from gamecatalog.matching.similarity import MATCH_THRESHOLD, NUMERAL_MATCH_THRESHOLD, is_match

logger = logging.getLogger("gamecatalog.page_fetcher")

__all__ = [
    "CandidateFetcher",
    "FetchedCandidate",
    "HttpPageFetcher",
    "open_candidate_fetcher",
]

DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_CANDIDATES = 5

BROWSER_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}


@dataclass(frozen=True)
class FetchedCandidate:
    """One downloaded candidate page.

    Attributes:
        title: Game title shown on the page (empty if none was found).
        content: Raw page HTML.
        url: Page URL.
        year: Release year from the page, or from a "(YYYY)" tag in the title.
    """

    title: str
    content: str
    url: str = ""
    year: str | None = None


class HttpPageFetcher:
    """Sequential, rate-limited page downloader.

    Use as a context manager. A session passed in is borrowed and left
    open; otherwise a session is created on enter and closed on exit.
    """

    def __init__(
        self,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        min_request_interval: float = 1.0,
        user_agent: str | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._session = session
        self._owns_session = session is None
        self.timeout = timeout
        self.min_request_interval = min_request_interval
        self.user_agent = user_agent
        self._sleep = sleep
        self._clock = clock
        self.last_request_time: float | None = None

        self.headers = dict(BROWSER_HEADERS)
        if user_agent:
            self.headers["User-Agent"] = user_agent

    def __enter__(self) -> HttpPageFetcher:
        if self._session is None:
            self._session = requests.Session()
            self._owns_session = True
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """Closes the session if this fetcher created it."""
        if self._session is not None and self._owns_session:
            self._session.close()
            self._session = None

    def _rate_limit(self) -> None:
        """Enforces minimum interval between requests."""
        if self.last_request_time is None:
            return
        elapsed = self._clock() - self.last_request_time
        if elapsed < self.min_request_interval:
            self._sleep(self.min_request_interval - elapsed)

    def fetch(self, url: str) -> str:
        """Downloads one page.

        Args:
            url: Page URL.

        Returns:
            Response body text.

        Raises:
            RuntimeError: If used outside its context.
            requests.RequestException: On network errors or non-2xx status.
        """
        if self._session is None:
            raise RuntimeError("HttpPageFetcher must be used as a context manager")

        self._rate_limit()
        try:
            response = self._session.get(url, headers=self.headers, timeout=self.timeout)
        finally:
            self.last_request_time = self._clock()
        response.raise_for_status()
        logger.debug("Fetched %s (%d chars)", url, len(response.text))
        return response.text


class CandidateFetcher:
    """Content fetcher for one site: query → fetched candidate pages.

    Direct URLs are fetched in order until one page is accepted, that is
    its title matches the query and the site's rules find a value on it.
    Only when none is accepted does the search page get consulted, and all
    of its result pages are collected.
    """

    def __init__(
        self,
        profile: SiteProfile,
        page_fetcher: HttpPageFetcher,
        max_candidates: int = DEFAULT_MAX_CANDIDATES,
        min_content_length: int = DEFAULT_MIN_CONTENT_LENGTH,
        match_threshold: float = MATCH_THRESHOLD,
        numeral_match_threshold: float = NUMERAL_MATCH_THRESHOLD,
    ) -> None:
        self.profile = profile
        self.page_fetcher = page_fetcher
        self.max_candidates = max_candidates
        self.match_threshold = match_threshold
        self.numeral_match_threshold = numeral_match_threshold
        self.extractor = profile.build_extractor(min_content_length)

    def __call__(self, query: str, preferred_year: str | None = None) -> list[FetchedCandidate]:
        """Fetches candidate pages for a query.

        A search page that fails to load propagates when no direct page
        was fetched either; a candidate page that fails to download is
        skipped.

        Args:
            query: Search term.
            preferred_year: Year hint; unused by HTML sites.

        Returns:
            Up to max_candidates fetched pages, direct guesses first.
        """
        candidates: list[FetchedCandidate] = []
        direct_urls = self.profile.direct_urls(query)

        for url in direct_urls:
            if len(candidates) >= self.max_candidates:
                return candidates
            candidate = self._fetch_candidate(url)
            if candidate is None:
                continue
            candidates.append(candidate)
            if self._is_accepted(query, candidate):
                logger.debug("%s: direct page %s accepted", self.profile.display_name, url)
                return candidates

        try:
            search_urls = self.profile.search_urls(query, self.page_fetcher.fetch)
        except requests.RequestException as exc:
            if not candidates:
                raise
            logger.warning("%s: search for '%s' failed: %s", self.profile.display_name, query, exc)
            return candidates

        for url in search_urls:
            if len(candidates) >= self.max_candidates:
                break
            if url in direct_urls:
                continue
            candidate = self._fetch_candidate(url)
            if candidate is not None:
                candidates.append(candidate)

        return candidates

    def _fetch_candidate(self, url: str) -> FetchedCandidate | None:
        try:
            content = self.page_fetcher.fetch(url)
        except requests.RequestException as exc:
            logger.warning("%s: candidate %s unavailable: %s", self.profile.display_name, url, exc)
            return None

        title = self.profile.extract_title(content) or ""
        year = self.profile.extract_year(content) or extract_year(title)
        return FetchedCandidate(title=title, content=content, url=url, year=year)

    def _is_accepted(self, query: str, candidate: FetchedCandidate) -> bool:
        if not is_match(
            query,
            candidate.title,
            threshold=self.match_threshold,
            numeral_threshold=self.numeral_match_threshold,
        ):
            return False
        return self.extractor.extract(candidate.content, source_year=candidate.year).is_found


@contextmanager
def open_candidate_fetcher(
    profile: SiteProfile,
    session: requests.Session | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    min_request_interval: float = 1.0,
    max_candidates: int = DEFAULT_MAX_CANDIDATES,
    user_agent: str | None = None,
    min_content_length: int = DEFAULT_MIN_CONTENT_LENGTH,
    match_threshold: float = MATCH_THRESHOLD,
    numeral_match_threshold: float = NUMERAL_MATCH_THRESHOLD,
) -> Iterator[CandidateFetcher]:
    """Scoped acquisition of a candidate fetcher; the session is released on exit.

    Args:
        profile: Target site.
        session: Caller-owned session to borrow (left open).
        timeout: Per-request timeout in seconds.
        min_request_interval: Minimum spacing between requests in seconds.
        max_candidates: Cap on candidate pages per query.
        user_agent: User-Agent header override.
        min_content_length: Content length below which a page counts as unavailable.
        match_threshold: Title similarity needed to accept a direct page.
        numeral_match_threshold: Same, when either title carries a numeral.

    Yields:
        CandidateFetcher bound to an open page fetcher.
    """
    with HttpPageFetcher(
        session=session,
        timeout=timeout,
        min_request_interval=min_request_interval,
        user_agent=user_agent,
    ) as page_fetcher:
        yield CandidateFetcher(
            profile,
            page_fetcher,
            max_candidates=max_candidates,
            min_content_length=min_content_length,
            match_threshold=match_threshold,
            numeral_match_threshold=numeral_match_threshold,
        )
