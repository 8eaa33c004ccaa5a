"""Rule-cascade extraction of a numeric field from fetched page content.

An extractor holds an ordered list of rules. Each rule is a pure
``(content) -> str | None`` callable; the first rule whose raw text
converts into a plausible value wins. Structured-data rules go first,
loose HTML patterns last.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Sequence

from bs4 import BeautifulSoup

from gamecatalog.matching.time_parser import parse_hours

__all__ = [
    "DEFAULT_MIN_CONTENT_LENGTH",
    "ExtractionOutcome",
    "ExtractionRule",
    "FieldExtractor",
    "FieldKind",
    "LabeledValueRule",
    "OutcomeStatus",
    "PatternRule",
    "extract_labeled_value",
]

logger = logging.getLogger("gamecatalog.extraction")

# Pages shorter than this did not load properly
DEFAULT_MIN_CONTENT_LENGTH = 1000

MIN_SCORE = 0
MAX_SCORE = 100

ExtractionRule = Callable[[str], "str | None"]


class FieldKind(Enum):
    """Kind of value an extractor produces."""

    SCORE = "score"
    DURATION = "duration"


class OutcomeStatus(Enum):
    """Result tag of one extraction or lookup."""

    FOUND = "found"
    NOT_FOUND = "not_found"
    AMBIGUOUS = "ambiguous"
    # Content too small to judge; the caller should try the next query
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class ExtractionOutcome:
    """Tagged extraction result.

    Attributes:
        status: Outcome tag.
        value: Extracted score (int) or hours (float) when found.
        source_year: Release year reported by the source page, if known.
        rule: Name of the rule that produced the value.
    """

    status: OutcomeStatus
    value: int | float | None = None
    source_year: str | None = None
    rule: str | None = None

    @classmethod
    def found(cls, value: int | float, source_year: str | None = None, rule: str | None = None) -> ExtractionOutcome:
        return cls(OutcomeStatus.FOUND, value=value, source_year=source_year, rule=rule)

    @classmethod
    def not_found(cls) -> ExtractionOutcome:
        return cls(OutcomeStatus.NOT_FOUND)

    @classmethod
    def ambiguous(cls) -> ExtractionOutcome:
        return cls(OutcomeStatus.AMBIGUOUS)

    @classmethod
    def unavailable(cls) -> ExtractionOutcome:
        return cls(OutcomeStatus.UNAVAILABLE)

    @property
    def is_found(self) -> bool:
        return self.status is OutcomeStatus.FOUND


# ===== RULES =====


class PatternRule:
    """Regular-expression rule returning the first capture group."""

    def __init__(self, name: str, pattern: str | re.Pattern[str], flags: int = re.IGNORECASE) -> None:
        self.name = name
        self.pattern = re.compile(pattern, flags) if isinstance(pattern, str) else pattern

    def __call__(self, content: str) -> str | None:
        match = self.pattern.search(content)
        if not match or not match.group(1):
            return None
        return match.group(1).strip()

    def __repr__(self) -> str:
        return f"PatternRule({self.name!r})"


def extract_labeled_value(content: str, labels: Sequence[str]) -> str | None:
    """Reads the value shown next to a label in an HTML listing.

    Labels are tried in order; for each, every element whose whole text is
    the label is considered and the text of its next sibling element (or,
    failing that, the next element in the document) is returned.

    Args:
        content: HTML content.
        labels: Labels in priority order, e.g. ("Main Story", "Solo").

    Returns:
        The adjacent value text, or None if no label has a value.
    """
    if not content:
        return None

    soup = BeautifulSoup(content, "html.parser")
    for label in labels:
        label_pattern = re.compile(rf"^\s*{re.escape(label)}\s*$", re.IGNORECASE)
        for text_node in soup.find_all(string=label_pattern):
            label_tag = text_node.parent
            if label_tag is None:
                continue

            value_tag = label_tag.find_next_sibling()
            if value_tag is None:
                value_tag = label_tag.find_next(lambda tag: bool(tag.get_text(strip=True)))
            if value_tag is None:
                continue

            value = value_tag.get_text(" ", strip=True)
            if value and not label_pattern.match(value):
                return value
    return None


class LabeledValueRule:
    """Rule reading the value adjacent to a label (primary label first)."""

    def __init__(self, name: str, labels: Sequence[str]) -> None:
        self.name = name
        self.labels = tuple(labels)

    def __call__(self, content: str) -> str | None:
        return extract_labeled_value(content, self.labels)

    def __repr__(self) -> str:
        return f"LabeledValueRule({self.name!r}, {self.labels!r})"


# ===== EXTRACTOR =====


class FieldExtractor:
    """Applies an ordered rule cascade and validates the extracted value."""

    def __init__(
        self,
        rules: Sequence[ExtractionRule],
        kind: FieldKind,
        not_rated_markers: Sequence[str] = (),
        min_content_length: int = DEFAULT_MIN_CONTENT_LENGTH,
    ) -> None:
        """Initializes the extractor.

        Args:
            rules: Rules in priority order.
            kind: Whether values are scores or durations.
            not_rated_markers: Case-insensitive texts that mark a literal
                0 score as a placeholder rather than a real score.
            min_content_length: Content below this length counts as a failed load.
        """
        self.rules = list(rules)
        self.kind = kind
        self.not_rated_markers = tuple(marker.lower() for marker in not_rated_markers)
        self.min_content_length = min_content_length

    def extract(self, content: str | None, source_year: str | None = None) -> ExtractionOutcome:
        """Runs the cascade against one page.

        Args:
            content: Raw page content.
            source_year: Release year of the page's game, attached to a hit.

        Returns:
            FOUND with the first plausible value; AMBIGUOUS as soon as a
            rule yields a placeholder zero score; UNAVAILABLE for implausibly
            small content; NOT_FOUND otherwise.
        """
        content = content or ""

        for rule in self.rules:
            try:
                raw = rule(content)
            except Exception as exc:
                logger.warning("Extraction rule %r failed: %s", rule, exc)
                continue
            if raw is None:
                continue

            value = self._convert(raw)
            if value is None:
                continue

            if self.kind is FieldKind.SCORE and value == 0 and self._has_not_rated_marker(content):
                # A placeholder zero ends the cascade
                logger.debug("Rule %s hit a placeholder zero, page is not rated", getattr(rule, "name", None))
                return ExtractionOutcome.ambiguous()

            rule_name = getattr(rule, "name", None)
            logger.debug("Rule %s extracted %s", rule_name, value)
            return ExtractionOutcome.found(value, source_year=source_year, rule=rule_name)

        if len(content) < self.min_content_length:
            logger.debug("Content too small (%d chars), treating as unavailable", len(content))
            return ExtractionOutcome.unavailable()

        return ExtractionOutcome.not_found()

    def _convert(self, raw: str) -> int | float | None:
        """Converts raw rule text into a bounded value, or None."""
        if self.kind is FieldKind.DURATION:
            hours = parse_hours(raw)
            return hours if hours > 0 else None

        try:
            score = int(raw.strip())
        except ValueError:
            return None
        if MIN_SCORE <= score <= MAX_SCORE:
            return score
        return None

    def _has_not_rated_marker(self, content: str) -> bool:
        lowered = content.lower()
        return any(marker in lowered for marker in self.not_rated_markers)
