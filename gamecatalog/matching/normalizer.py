"""Title canonicalization for game-identity comparison.

Turns a raw catalog or search-result title into a lower-case token string
with trademark glyphs, question decorations, punctuation, stop-words,
release-year tags and edition qualifiers removed. The output is only
ever used for comparison, never shown to the user.
"""

from __future__ import annotations

import re
import unicodedata

__all__ = [
    "EDITION_QUALIFIERS",
    "STOP_WORDS",
    "extract_year",
    "normalize",
    "strip_symbols",
]


# ===== CONSTANTS =====

# Symbols to strip from game names (TM, (R), (C), also text forms)
# Uses a space replacement to avoid "Velocity®Ultra" → "VelocityUltra"
_SYMBOL_PATTERN = re.compile(r"[™®©]|\(TM\)|\(R\)")

# "How long is Alan Wake?" (HowLongToBeat page titles)
_QUESTION_PREFIX_PATTERN = re.compile(r"^\s*(?:how\s+long\s+is\s+)+", re.IGNORECASE)
_QUESTION_SUFFIX_PATTERN = re.compile(r"\s*\?+\s*$")

# Everything that is not a word character, whitespace or a parenthesis.
# Parentheses survive until the year tag has been removed.
_SEPARATOR_PATTERN = re.compile(r"[^\w\s()]|_")

STOP_WORDS: tuple[str, ...] = (
    "the", "a", "an",
    "of", "in", "on", "at", "to", "for", "from", "by", "with",
    "and", "or",
)
_STOP_WORD_PATTERN = re.compile(r"\b(?:" + "|".join(STOP_WORDS) + r")\b", re.IGNORECASE)

_YEAR_TAG_PATTERN = re.compile(r"\(\s*(\d{4})\s*\)")

# Qualifiers as they look after punctuation and stop-word removal:
# "Collector's" → "collector s", "Game of the Year" → "game year".
EDITION_QUALIFIERS: tuple[str, ...] = (
    r"definitive",
    r"complete",
    r"goty",
    r"game\s+year",
    r"deluxe",
    r"ultimate",
    r"special",
    r"collector(?:\s*s)?",
    r"limited",
    r"enhanced",
    r"remastered",
    r"director(?:\s*s)?\s+cut",
    r"(?:\d+\s*(?:st|nd|rd|th)\s+)?anniversary",
)
_QUALIFIER_ALTERNATION = "|".join(EDITION_QUALIFIERS)
_EDITION_PHRASE_PATTERN = re.compile(r"\b(?:" + _QUALIFIER_ALTERNATION + r")\s+edition\b", re.IGNORECASE)
_EDITION_WORD_PATTERN = re.compile(r"\b(?:" + _QUALIFIER_ALTERNATION + r")\b", re.IGNORECASE)

_WHITESPACE_PATTERN = re.compile(r"\s+")

# Passes are repeated until the output is stable; removals can expose
# new leading prefixes ("The How Long Is ..."), so one pass is not enough.
_MAX_PASSES = 5


# ===== PUBLIC API =====


def strip_symbols(title: str) -> str:
    """Removes trademark glyphs and collapses whitespace.

    This is the "cleaned" display form: case, punctuation, editions and
    years are preserved so it can be used as the most specific search term.

    Args:
        title: Raw game title.

    Returns:
        Title without ™/®/© (or their text forms), single-spaced and trimmed.
    """
    if not title:
        return ""
    cleaned = _SYMBOL_PATTERN.sub(" ", title)
    return _WHITESPACE_PATTERN.sub(" ", cleaned).strip()


def extract_year(title: str | None) -> str | None:
    """Returns the 4-digit parenthesized year of a title, if any.

    Args:
        title: Raw game title, e.g. "Tomb Raider (2013)".

    Returns:
        The year as a string ("2013"), or None when the title carries none.
    """
    if not title:
        return None
    match = _YEAR_TAG_PATTERN.search(title)
    return match.group(1) if match else None


def normalize(title: str | None) -> str:
    """Canonicalizes a title for comparison.

    Pipeline (applied until the result no longer changes):
    glyphs → question decoration → punctuation → stop-words → year tag →
    edition qualifiers → parentheses, whitespace, case.

    Args:
        title: Raw game title.

    Returns:
        Normalized comparison key; empty string for empty input.
    """
    if not title:
        return ""

    result = title
    for _ in range(_MAX_PASSES):
        previous = result
        result = _normalize_once(result)
        if result == previous:
            break
    return result


# ===== INTERNAL HELPERS =====


def _fold_accents(text: str) -> str:
    """Decomposes accented characters and drops the combining marks."""
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def _normalize_once(title: str) -> str:
    """Runs a single pass of the normalization pipeline."""
    # 1. Glyphs (and accents, so "Pokémon" and "Pokemon" compare equal)
    text = _fold_accents(_SYMBOL_PATTERN.sub(" ", title))

    # 2. "How long is ...?"
    text = _QUESTION_PREFIX_PATTERN.sub("", text)
    text = _QUESTION_SUFFIX_PATTERN.sub("", text)

    # 3. Colons, dashes, quotes, periods and other punctuation
    text = _SEPARATOR_PATTERN.sub(" ", text)

    # 4. Stop-words
    text = _STOP_WORD_PATTERN.sub(" ", text)

    # 5. (2015)
    text = _YEAR_TAG_PATTERN.sub(" ", text)

    # 6. "Definitive Edition", then bare qualifiers
    text = _EDITION_PHRASE_PATTERN.sub(" ", text)
    text = _EDITION_WORD_PATTERN.sub(" ", text)

    # 7. Leftover parentheses, whitespace, case
    text = text.replace("(", " ").replace(")", " ")
    return _WHITESPACE_PATTERN.sub(" ", text).strip().lower()
