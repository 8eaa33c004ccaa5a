"""Catalog enrichment driver: resolveOne / resolveBatch over the store.

Entries are processed strictly one after another with a fixed delay in
between. A failure on one entry (lookup crash, store write error) is
counted and the batch moves on to the next entry.
"""

from __future__ import annotations

import logging
import time
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Iterable

from gamecatalog.core.game import CatalogEntry
from gamecatalog.core.game_store import JsonGameStore, StoreError
from gamecatalog.matching.extraction import OutcomeStatus
from gamecatalog.services.lookup_orchestrator import FetchCandidates, LookupOrchestrator, ResolutionResult

__all__ = ["BatchResult", "EnrichmentService"]

logger = logging.getLogger("gamecatalog.enrichment")

# Acquires the content fetcher; released when the context exits
FetcherFactory = Callable[[], AbstractContextManager[FetchCandidates]]


@dataclass
class BatchResult:
    """Counters of one batch run.

    Attributes:
        processed: Entries a lookup was attempted for.
        updated: Entries that received a value (counted in dry-run too).
        failed: Entries without a value, including crashed lookups.
        skipped: Entries left alone because they are on cooldown.
        errors: One message per failed entry ("<name>: <reason>").
    """

    processed: int = 0
    updated: int = 0
    failed: int = 0
    skipped: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def success_rate(self) -> float:
        """Percentage of processed entries that were updated."""
        if not self.processed:
            return 0.0
        return self.updated / self.processed * 100


def _describe_miss(resolution: ResolutionResult) -> str:
    if resolution.outcome.status is OutcomeStatus.AMBIGUOUS:
        return "not rated yet"
    return "not found"


class EnrichmentService:
    """Fills one catalog field from one site for entries that lack it."""

    def __init__(
        self,
        store: JsonGameStore,
        orchestrator: LookupOrchestrator,
        fetcher_factory: FetcherFactory,
        delay: float | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initializes the service.

        Args:
            store: Catalog store (get_all / get_by_id / update / update_many).
            orchestrator: Lookup orchestrator for the target site.
            fetcher_factory: Context-manager factory yielding the fetch callable.
            delay: Seconds between entries; defaults to the site's request delay.
            sleep: Sleep function (replaced in tests).
        """
        self.store = store
        self.orchestrator = orchestrator
        self.fetcher_factory = fetcher_factory
        self.delay = orchestrator.profile.request_delay if delay is None else delay
        self._sleep = sleep

    @property
    def target_field(self) -> str:
        return self.orchestrator.profile.target_field

    def find_missing(self, entries: Iterable[CatalogEntry] | None = None) -> list[CatalogEntry]:
        """Returns the entries whose target field is absent, null or 0.

        Raises:
            StoreError: If the catalog cannot be read.
        """
        if entries is None:
            entries = self.store.get_all()
        return [entry for entry in entries if entry.is_missing(self.target_field)]

    # ===== SINGLE ENTRY =====

    def resolve_one(
        self,
        entry: CatalogEntry,
        dry_run: bool = False,
        fetch_candidates: FetchCandidates | None = None,
        now: datetime | None = None,
    ) -> ResolutionResult:
        """Resolves one entry and persists the proposed updates.

        Args:
            entry: Entry to resolve.
            dry_run: Resolve but do not write to the store.
            fetch_candidates: Already acquired fetcher; acquired and released
                around this call when omitted.
            now: Attempt time (tests).

        Returns:
            The resolution result.

        Raises:
            StoreError: If persisting the updates fails or the entry vanished.
        """
        if fetch_candidates is None:
            with self.fetcher_factory() as fetcher:
                result = self.orchestrator.resolve(entry, fetcher, now=now)
        else:
            result = self.orchestrator.resolve(entry, fetch_candidates, now=now)

        if result.updates and not dry_run:
            if self.store.update(entry.id, result.updates) is None:
                raise StoreError(f"Entry {entry.id} no longer exists in the catalog")
        elif result.updates:
            logger.info("[dry-run] Would update '%s': %s", entry.name, result.updates)

        return result

    # ===== BATCH =====

    def resolve_batch(
        self,
        entries: Iterable[CatalogEntry] | None = None,
        limit: int | None = None,
        dry_run: bool = False,
        now: datetime | None = None,
    ) -> BatchResult:
        """Resolves entries lacking the target field, one at a time.

        Entries on cooldown are counted as skipped and do not use up the
        limit. One fetcher is acquired for the whole batch and released on
        every exit path.

        Args:
            entries: Candidate entries; defaults to all missing entries in the store.
            limit: Maximum number of entries to process.
            dry_run: Resolve but do not write to the store.
            now: Attempt time (tests).

        Returns:
            BatchResult counters.

        Raises:
            StoreError: If the catalog cannot be read to build the work list.
        """
        result = BatchResult()

        eligible: list[CatalogEntry] = []
        for entry in self.find_missing(entries):
            if self.orchestrator.is_eligible(entry, now):
                eligible.append(entry)
            else:
                result.skipped += 1

        work = eligible if limit is None else eligible[: max(limit, 0)]
        logger.info(
            "%d entries missing %s: %d to process, %d on cooldown",
            len(eligible) + result.skipped,
            self.target_field,
            len(work),
            result.skipped,
        )
        if not work:
            return result

        with self.fetcher_factory() as fetcher:
            for index, entry in enumerate(work, start=1):
                logger.info("[%d/%d] %s", index, len(work), entry.name)
                result.processed += 1
                try:
                    resolution = self.resolve_one(entry, dry_run=dry_run, fetch_candidates=fetcher, now=now)
                except Exception as exc:
                    logger.warning("Enrichment failed for '%s': %s", entry.name, exc)
                    result.failed += 1
                    result.errors.append(f"{entry.name}: {exc}")
                else:
                    if resolution.found:
                        result.updated += 1
                    else:
                        result.failed += 1
                        result.errors.append(f"{entry.name}: {_describe_miss(resolution)}")

                if index < len(work):
                    self._sleep(self.delay)

        logger.info(
            "Batch done: %d processed, %d updated, %d failed, %d skipped",
            result.processed,
            result.updated,
            result.failed,
            result.skipped,
        )
        return result

    def clear_all_cooldowns(self) -> int:
        """Resets this site's retry state on every catalog entry.

        Returns:
            Number of entries whose retry state was reset.

        Raises:
            StoreError: If the catalog cannot be read or written.
        """
        key = self.orchestrator.profile.key
        cleared = self.orchestrator.tracker.cleared().to_fields(key)
        updates = {entry.id: dict(cleared) for entry in self.store.get_all()}
        count = self.store.update_many(updates)
        logger.info("Cleared %s cooldown on %d entries", self.orchestrator.profile.display_name, count)
        return count
