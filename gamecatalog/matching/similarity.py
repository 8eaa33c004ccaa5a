"""Fuzzy game-identity confirmation.

Decides whether a search result title denotes the same game as the title
that was searched for. Uses Levenshtein similarity on normalized titles
with a stricter threshold whenever either title carries a number or a
roman numeral. Titles whose numbers differ ("Final Fantasy VII" / "Final
Fantasy VIII", "FIFA 19" / "FIFA 20") are rejected before any similarity
is computed, so sequels never cross-match.
"""

from __future__ import annotations

import re

from gamecatalog.matching.normalizer import normalize

__all__ = [
    "MATCH_THRESHOLD",
    "NUMERAL_MATCH_THRESHOLD",
    "has_numerals",
    "is_match",
    "levenshtein",
    "numeral_values",
    "prepare_for_match",
    "similarity_percent",
]

# Percent similarity required to accept a candidate
MATCH_THRESHOLD = 75.0
NUMERAL_MATCH_THRESHOLD = 90.0

# Words that sit next to sequel numbers and carry no identity on their own
_QUALIFIER_WORD_PATTERN = re.compile(
    r"\b(?:edition|version|part|vol|volume|chapter|episode|season|hd)\b"
)

_ROMAN_VALUES: dict[str, int] = {
    numeral: value
    for value, numeral in enumerate(
        (
            "i", "ii", "iii", "iv", "v", "vi", "vii", "viii", "ix", "x",
            "xi", "xii", "xiii", "xiv", "xv", "xvi", "xvii", "xviii", "xix", "xx",
        ),
        start=1,
    )
}

_WHITESPACE_PATTERN = re.compile(r"\s+")


def prepare_for_match(title: str) -> str:
    """Normalizes a title and drops numeral-adjacent qualifier words.

    Args:
        title: Raw title.

    Returns:
        Comparison key used by is_match().
    """
    text = _QUALIFIER_WORD_PATTERN.sub(" ", normalize(title))
    return _WHITESPACE_PATTERN.sub(" ", text).strip()


def has_numerals(text: str) -> bool:
    """Checks a prepared title for numeric tokens or roman numerals i–xx.

    Args:
        text: Prepared (normalized, lower-case) title.

    Returns:
        True if any whitespace-separated token is all digits or a roman numeral.
    """
    return any(token.isdigit() or token in _ROMAN_VALUES for token in text.split())


def numeral_values(text: str) -> tuple[int, ...]:
    """Reads the numbers of a prepared title in order, roman numerals as integers.

    Args:
        text: Prepared (normalized, lower-case) title.

    Returns:
        Values such as (7,) for "final fantasy vii" or (2, 2) for "2 fast 2 furious".
    """
    values: list[int] = []
    for token in text.split():
        if token.isdigit():
            values.append(int(token))
        elif token in _ROMAN_VALUES:
            values.append(_ROMAN_VALUES[token])
    return tuple(values)


def levenshtein(s1: str, s2: str) -> int:
    """Calculates the Levenshtein (edit) distance between two strings.

    Args:
        s1: First string.
        s2: Second string.

    Returns:
        Minimum number of single-character edits to transform s1 into s2.
    """
    if s1 == s2:
        return 0
    if not s1:
        return len(s2)
    if not s2:
        return len(s1)

    # Two-row optimization, iterate over the longer string
    if len(s1) > len(s2):
        s1, s2 = s2, s1

    prev_row = list(range(len(s1) + 1))
    for j, ch2 in enumerate(s2, start=1):
        curr_row = [j] + [0] * len(s1)
        for i, ch1 in enumerate(s1, start=1):
            cost = 0 if ch1 == ch2 else 1
            curr_row[i] = min(
                curr_row[i - 1] + 1,  # insertion
                prev_row[i] + 1,  # deletion
                prev_row[i - 1] + cost,  # substitution
            )
        prev_row = curr_row

    return prev_row[len(s1)]


def similarity_percent(s1: str, s2: str) -> float:
    """Edit-distance similarity in percent: (maxLen - distance) / maxLen * 100.

    Args:
        s1: First string.
        s2: Second string.

    Returns:
        Similarity between 0.0 and 100.0 (100.0 for two empty strings).
    """
    max_len = max(len(s1), len(s2))
    if max_len == 0:
        return 100.0
    return (max_len - levenshtein(s1, s2)) / max_len * 100.0


def is_match(
    searched: str,
    found: str,
    *,
    threshold: float = MATCH_THRESHOLD,
    numeral_threshold: float = NUMERAL_MATCH_THRESHOLD,
) -> bool:
    """Confirms that a found title denotes the searched game.

    Args:
        searched: Title (or variation) that was searched for.
        found: Title of the search result.
        threshold: Required similarity when no numerals are involved.
        numeral_threshold: Required similarity when either title has numerals.

    Returns:
        True if the titles are considered the same game.
    """
    left = prepare_for_match(searched)
    right = prepare_for_match(found)

    # Titles made only of qualifiers ("Definitive Edition") identify nothing
    if not left or not right:
        return False

    if left == right:
        return True

    if has_numerals(left) or has_numerals(right):
        # Different sequel or release numbers are different games
        if numeral_values(left) != numeral_values(right):
            return False
        return similarity_percent(left, right) >= numeral_threshold

    return similarity_percent(left, right) >= threshold
