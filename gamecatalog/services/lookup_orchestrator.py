"""Single-entry lookup: variations → candidates → match → extract → retry state.

The orchestrator performs no I/O of its own. Candidate pages come from an
injected fetch callable and the proposed record changes are returned to
the caller, who decides whether to persist them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Protocol, Sequence

from gamecatalog.core.game import CatalogEntry, RetryState, is_missing_value
from gamecatalog.integrations.site_profile import SiteProfile
from gamecatalog.matching.cooldown import RetryCooldownTracker
from gamecatalog.matching.extraction import DEFAULT_MIN_CONTENT_LENGTH, ExtractionOutcome, OutcomeStatus
from gamecatalog.matching.normalizer import extract_year
from gamecatalog.matching.similarity import MATCH_THRESHOLD, NUMERAL_MATCH_THRESHOLD, is_match
from gamecatalog.matching.variations import generate

__all__ = ["Candidate", "FetchCandidates", "LookupOrchestrator", "ResolutionResult"]

logger = logging.getLogger("gamecatalog.lookup")


class Candidate(Protocol):
    """A fetched search result: its title, raw content and optional year."""

    title: str
    content: str
    year: str | None


FetchCandidates = Callable[[str, "str | None"], Sequence[Candidate]]


@dataclass(frozen=True)
class ResolutionResult:
    """Outcome of resolving one catalog entry against one site.

    Attributes:
        entry_id: Id of the resolved entry.
        name: Entry title that was searched.
        outcome: Extraction outcome (FOUND, NOT_FOUND or AMBIGUOUS).
        retry_state: Retry state after this attempt.
        updates: Record fields to persist (retry fields, plus the value on success).
        matched_title: Title of the accepted candidate.
        variation: Search term that produced the accepted candidate.
        skipped: True when the entry was on cooldown and nothing was fetched.
    """

    entry_id: str
    name: str
    outcome: ExtractionOutcome
    retry_state: RetryState
    updates: dict[str, Any] = field(default_factory=dict)
    matched_title: str | None = None
    variation: str | None = None
    skipped: bool = False

    @property
    def found(self) -> bool:
        return self.outcome.is_found

    @property
    def value(self) -> int | float | None:
        return self.outcome.value


@dataclass(frozen=True)
class _Accepted:
    outcome: ExtractionOutcome
    title: str
    variation: str


class LookupOrchestrator:
    """Resolves catalog entries for one site profile."""

    def __init__(
        self,
        profile: SiteProfile,
        tracker: RetryCooldownTracker | None = None,
        max_candidates: int = 5,
        match_threshold: float = MATCH_THRESHOLD,
        numeral_match_threshold: float = NUMERAL_MATCH_THRESHOLD,
        min_content_length: int = DEFAULT_MIN_CONTENT_LENGTH,
    ) -> None:
        """Initializes the orchestrator.

        Args:
            profile: Target site (rules, target field, retry-field prefix).
            tracker: Cooldown policy; defaults to 7 days after 1 failure.
            max_candidates: Candidates examined per variation.
            match_threshold: Similarity percent required without numerals.
            numeral_match_threshold: Similarity percent required with numerals.
            min_content_length: Content shorter than this counts as not loaded.
        """
        self.profile = profile
        self.tracker = tracker or RetryCooldownTracker()
        self.max_candidates = max_candidates
        self.match_threshold = match_threshold
        self.numeral_match_threshold = numeral_match_threshold
        self.extractor = profile.build_extractor(min_content_length)

    def is_eligible(self, entry: CatalogEntry, now: datetime | None = None) -> bool:
        """Checks the entry's cooldown for this site."""
        return self.tracker.is_eligible(entry.retry_state(self.profile.key), now)

    def resolve(
        self,
        entry: CatalogEntry,
        fetch_candidates: FetchCandidates,
        now: datetime | None = None,
    ) -> ResolutionResult:
        """Resolves one entry.

        Args:
            entry: Catalog entry to look up.
            fetch_candidates: ``(query, preferred_year) -> candidates``; may raise.
            now: Attempt time (defaults to current UTC time).

        Returns:
            ResolutionResult with the outcome and the record updates to apply.
        """
        now = now or datetime.now(timezone.utc)
        state = entry.retry_state(self.profile.key)

        if not self.tracker.is_eligible(state, now):
            logger.info(
                "Skipping '%s': on %s cooldown for %s",
                entry.name,
                self.profile.display_name,
                self.tracker.remaining(state, now),
            )
            return ResolutionResult(
                entry_id=entry.id,
                name=entry.name,
                outcome=ExtractionOutcome.not_found(),
                retry_state=state,
                skipped=True,
            )

        accepted, saw_ambiguous = self._search(entry.name, fetch_candidates)

        if accepted is not None:
            outcome = accepted.outcome
        elif saw_ambiguous:
            outcome = ExtractionOutcome.ambiguous()
        else:
            outcome = ExtractionOutcome.not_found()

        # A value the catalog still reads as missing (a 0 score) must not reset the cooldown
        settled = outcome.is_found and not is_missing_value(outcome.value)
        new_state = self.tracker.record_attempt(state, settled, now)
        updates = new_state.to_fields(self.profile.key)
        if outcome.is_found:
            updates[self.profile.target_field] = outcome.value
            logger.info("Found %s for '%s': %s", self.profile.target_field, entry.name, outcome.value)
        else:
            logger.info(
                "No %s for '%s' (%s, attempt %d)",
                self.profile.target_field,
                entry.name,
                outcome.status.value,
                new_state.attempt_count,
            )

        return ResolutionResult(
            entry_id=entry.id,
            name=entry.name,
            outcome=outcome,
            retry_state=new_state,
            updates=updates,
            matched_title=accepted.title if accepted else None,
            variation=accepted.variation if accepted else None,
        )

    def _search(self, name: str, fetch_candidates: FetchCandidates) -> tuple[_Accepted | None, bool]:
        """Walks the variations until one yields an accepted candidate.

        Returns:
            (accepted candidate or None, whether any candidate was ambiguous).
        """
        year_hint = extract_year(name)
        saw_ambiguous = False

        for variation in generate(name, year_hint):
            try:
                candidates = list(fetch_candidates(variation, year_hint))
            except Exception as exc:
                logger.warning("Fetching candidates for '%s' failed: %s", variation, exc)
                continue

            collected: list[_Accepted] = []
            for candidate in candidates[: self.max_candidates]:
                if not is_match(
                    variation,
                    candidate.title,
                    threshold=self.match_threshold,
                    numeral_threshold=self.numeral_match_threshold,
                ):
                    logger.debug("Rejected candidate '%s' for '%s'", candidate.title, variation)
                    continue

                outcome = self.extractor.extract(candidate.content, source_year=candidate.year)
                if outcome.status is OutcomeStatus.AMBIGUOUS:
                    saw_ambiguous = True
                    continue
                if not outcome.is_found:
                    logger.debug("No value on page for '%s' (%s)", candidate.title, outcome.status.value)
                    continue

                accepted = _Accepted(outcome=outcome, title=candidate.title, variation=variation)
                if year_hint and candidate.year == year_hint:
                    return accepted, saw_ambiguous
                collected.append(accepted)

            if collected:
                return collected[0], saw_ambiguous

        return None, saw_ambiguous
