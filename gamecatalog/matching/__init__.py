"""Site-agnostic title matching, field extraction and retry policy."""

from __future__ import annotations

from gamecatalog.matching.cooldown import RetryCooldownTracker
from gamecatalog.matching.extraction import (
    ExtractionOutcome,
    FieldExtractor,
    FieldKind,
    LabeledValueRule,
    OutcomeStatus,
    PatternRule,
)
from gamecatalog.matching.normalizer import extract_year, normalize
from gamecatalog.matching.similarity import is_match
from gamecatalog.matching.time_parser import parse_hours
from gamecatalog.matching.variations import generate

__all__: list[str] = [
    "ExtractionOutcome",
    "FieldExtractor",
    "FieldKind",
    "LabeledValueRule",
    "OutcomeStatus",
    "PatternRule",
    "RetryCooldownTracker",
    "extract_year",
    "generate",
    "is_match",
    "normalize",
    "parse_hours",
]
