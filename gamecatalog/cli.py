#!/usr/bin/env python3
"""Command-line entry point: enrich the catalog from one site."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from gamecatalog.config import config
from gamecatalog.core.game import CatalogEntry
from gamecatalog.core.game_store import JsonGameStore, StoreError
from gamecatalog.core.logging import logger, setup_logging
from gamecatalog.integrations import SITE_PROFILES, get_profile, open_candidate_fetcher
from gamecatalog.integrations.site_profile import SiteProfile
from gamecatalog.matching.cooldown import RetryCooldownTracker
from gamecatalog.services.enrichment_service import BatchResult, EnrichmentService
from gamecatalog.services.lookup_orchestrator import LookupOrchestrator
from gamecatalog.utils.i18n import available_languages, init_i18n, t
from gamecatalog.version import __app_name__, __version__

__all__ = ["build_parser", "build_service", "main"]

DEFAULT_MAX_GAMES = {"hltb": 400, "metacritic": 10}

SEPARATOR = "=" * 50


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"'{value}' is not a number") from None
    if number <= 0:
        raise argparse.ArgumentTypeError("must be a positive number")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Builds the argument parser."""
    parser = argparse.ArgumentParser(
        prog="gamecatalog",
        description="Fill missing completion times (HowLongToBeat) or critic scores (Metacritic) in the game catalog.",
    )
    parser.add_argument("--site", required=True, choices=sorted(SITE_PROFILES), help="site to query")
    parser.add_argument(
        "--max-games",
        type=_positive_int,
        default=None,
        help="maximum number of games to process (default: 400 for hltb, 10 for metacritic)",
    )
    parser.add_argument("--dry-run", action="store_true", help="look up values without saving them")
    parser.add_argument("--clear-cooldown", action="store_true", help="reset retry cooldowns before running")
    parser.add_argument("--game", metavar="NAME", help="look up a single title and print the result (never saved)")
    parser.add_argument("--db", type=Path, default=None, help="catalog file (default: from settings)")
    parser.add_argument("--lang", choices=available_languages(), default=None, help="output language")
    parser.add_argument("--verbose", "-v", action="store_true", help="debug logging")
    parser.add_argument("--version", action="version", version=f"{__app_name__} {__version__}")
    return parser


def build_service(profile: SiteProfile, store: JsonGameStore) -> EnrichmentService:
    """Wires orchestrator, fetcher and store from the configuration."""
    tracker = RetryCooldownTracker(config.COOLDOWN_DAYS, config.COOLDOWN_ATTEMPTS)
    orchestrator = LookupOrchestrator(
        profile,
        tracker,
        max_candidates=config.MAX_CANDIDATES,
        match_threshold=config.MATCH_THRESHOLD,
        numeral_match_threshold=config.NUMERAL_MATCH_THRESHOLD,
        min_content_length=config.MIN_CONTENT_LENGTH,
    )

    def fetcher_factory():
        return open_candidate_fetcher(
            profile,
            timeout=config.REQUEST_TIMEOUT,
            min_request_interval=config.CANDIDATE_DELAY,
            max_candidates=config.MAX_CANDIDATES,
            user_agent=config.USER_AGENT,
            min_content_length=config.MIN_CONTENT_LENGTH,
            match_threshold=config.MATCH_THRESHOLD,
            numeral_match_threshold=config.NUMERAL_MATCH_THRESHOLD,
        )

    return EnrichmentService(store, orchestrator, fetcher_factory)


def _print_summary(result: BatchResult) -> None:
    print()
    print(SEPARATOR)
    print(t("cli.summary.title"))
    print(SEPARATOR)
    print(t("cli.summary.processed", count=result.processed))
    print(t("cli.summary.updated", count=result.updated))
    print(t("cli.summary.failed", count=result.failed))
    print(t("cli.summary.skipped", count=result.skipped))

    if result.errors:
        print()
        print(t("cli.summary.errors"))
        for index, error in enumerate(result.errors, start=1):
            print(f"   {index}. {error}")

    print()
    print(t("cli.summary.success_rate", rate=f"{result.success_rate:.1f}"))


def _lookup_single(service: EnrichmentService, name: str) -> int:
    entry = CatalogEntry(id="", name=name)
    result = service.resolve_one(entry, dry_run=True)
    field_name = service.target_field
    if result.found:
        print(t("cli.single.found", name=name, field=field_name, value=result.value, title=result.matched_title))
    else:
        print(t("cli.single.not_found", name=name, field=field_name))
    return 0


def _run_batch(service: EnrichmentService, args: argparse.Namespace) -> int:
    entries = None
    if args.clear_cooldown:
        if args.dry_run:
            # Work on cleared copies only; nothing is written in dry-run mode
            cleared = service.orchestrator.tracker.cleared().to_fields(service.orchestrator.profile.key)
            entries = [CatalogEntry.from_dict({**entry.raw, **cleared}) for entry in service.store.get_all()]
            print(t("cli.cooldown.cleared_dry_run", count=len(entries)))
        else:
            print(t("cli.cooldown.cleared", count=service.clear_all_cooldowns()))

    limit = args.max_games or DEFAULT_MAX_GAMES.get(args.site, 10)
    result = service.resolve_batch(entries, limit=limit, dry_run=args.dry_run)
    _print_summary(result)

    if not args.dry_run and result.updated:
        print()
        print(t("cli.summary.saved", count=result.updated))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Runs the CLI.

    Args:
        argv: Arguments without the program name (defaults to sys.argv[1:]).

    Returns:
        Process exit code: 0 on completion, 1 on fatal errors.
    """
    args = build_parser().parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.INFO, config.LOG_FILE)
    init_i18n(args.lang or config.UI_LANGUAGE)

    profile = get_profile(args.site)
    store = JsonGameStore(args.db or config.CATALOG_FILE)
    service = build_service(profile, store)

    print(t("cli.header", site=profile.display_name))
    if args.dry_run:
        print(t("cli.dry_run"))

    try:
        if args.game:
            return _lookup_single(service, args.game)
        return _run_batch(service, args)
    except StoreError as exc:
        logger.error("Catalog error: %s", exc)
        print(t("cli.error.store", error=exc), file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
