from __future__ import annotations

__all__: list[str] = [
    "CandidateFetcher",
    "FetchedCandidate",
    "HowLongToBeatProfile",
    "HttpPageFetcher",
    "MetacriticProfile",
    "SITE_PROFILES",
    "SiteProfile",
    "get_profile",
    "open_candidate_fetcher",
]

from gamecatalog.integrations.howlongtobeat import HowLongToBeatProfile
from gamecatalog.integrations.metacritic import MetacriticProfile
from gamecatalog.integrations.page_fetcher import (
    CandidateFetcher,
    FetchedCandidate,
    HttpPageFetcher,
    open_candidate_fetcher,
)
from gamecatalog.integrations.site_profile import SiteProfile

SITE_PROFILES: dict[str, type[SiteProfile]] = {
    HowLongToBeatProfile.key: HowLongToBeatProfile,
    MetacriticProfile.key: MetacriticProfile,
}


def get_profile(key: str) -> SiteProfile:
    """Instantiates the site profile registered under key.

    Raises:
        KeyError: If no profile has that key.
    """
    return SITE_PROFILES[key]()
