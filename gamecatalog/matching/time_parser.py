"""Completion-time text parsing.

Converts HowLongToBeat-style duration strings ("26½ Hours", "8h 30m",
"12.5") into decimal hours. Returns 0.0 for anything that cannot be read
as a plausible main-story length; callers treat 0.0 as "unusable".
"""

from __future__ import annotations

import logging
import re

__all__ = ["MAX_HOURS", "MIN_HOURS", "parse_hours"]

logger = logging.getLogger("gamecatalog.time_parser")

# Plausible main-story length, inclusive
MIN_HOURS = 0.5
MAX_HOURS = 200.0

_HALF_GLYPH = "½"
_LEADING_HALF_PATTERN = re.compile(r"(?<!\d)½")
_DISALLOWED_PATTERN = re.compile(r"[^\d.\w\s½]")

# Long bare numbers are page/game IDs, not durations
_ID_LIKE_PATTERN = re.compile(r"^\d{5,}$")

# Tried in order, most specific first
_TIME_PATTERNS: tuple[re.Pattern[str], ...] = (
    # "25h 30m", "1h 15min", "26 Hours 30 Minutes"
    re.compile(r"(\d+(?:\.\d+)?)\s*h(?:ours?)?\s*(\d+)?\s*m(?:in(?:utes?)?)?", re.IGNORECASE),
    # "26.5 Hours", "5 hrs"
    re.compile(r"(\d+(?:\.\d+)?)\s*(?:hours?|hrs?)\s*$", re.IGNORECASE),
    # "25.5h", "10h"
    re.compile(r"(\d+(?:\.\d+)?)\s*h$", re.IGNORECASE),
    # "12.5", "40"
    re.compile(r"^(\d{1,3}(?:\.\d+)?)$"),
)


def parse_hours(text: str | None) -> float:
    """Parses a duration string into decimal hours.

    Args:
        text: Raw duration text.

    Returns:
        Hours between MIN_HOURS and MAX_HOURS, or 0.0 if unparseable,
        ID-like or out of range.
    """
    if not text or not isinstance(text, str):
        return 0.0

    # "½ Hour" → "0.5 Hour", "26½" → "26.5"
    cleaned = _LEADING_HALF_PATTERN.sub("0.5", text)
    cleaned = cleaned.replace(_HALF_GLYPH, ".5")
    cleaned = _DISALLOWED_PATTERN.sub("", cleaned).strip()

    if _ID_LIKE_PATTERN.match(cleaned):
        logger.debug("Duration text '%s' looks like an ID, ignoring", text)
        return 0.0

    for pattern in _TIME_PATTERNS:
        match = pattern.search(cleaned)
        if not match:
            continue

        hours = float(match.group(1))
        minutes = int(match.group(2)) if pattern.groups >= 2 and match.group(2) else 0
        total = hours + minutes / 60

        if MIN_HOURS <= total <= MAX_HOURS:
            return total

        logger.debug("Duration %.2fh from '%s' outside %.1f-%.0fh", total, text, MIN_HOURS, MAX_HOURS)

    return 0.0
