# gamecatalog/core/game.py

"""Catalog entry and retry-state models.

A CatalogEntry wraps one record of the game catalog. The underlying dict
is kept as-is so unknown keys survive a read-modify-write cycle; the
typed attributes are convenience views over it.

Retry bookkeeping is stored per site as two flat keys on the record:
``<siteKey>Attempts`` (int) and ``<siteKey>LastAttempt`` (ISO-8601 UTC).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

__all__ = [
    "CatalogEntry",
    "RetryState",
    "attempts_key",
    "is_missing_value",
    "last_attempt_key",
]


def attempts_key(site_key: str) -> str:
    """Record key holding the consecutive failure count for a site."""
    return f"{site_key}Attempts"


def last_attempt_key(site_key: str) -> str:
    """Record key holding the last attempt timestamp for a site."""
    return f"{site_key}LastAttempt"


def is_missing_value(value: Any) -> bool:
    """Checks whether a stored field value counts as absent.

    Args:
        value: Stored value (None, 0 and empty string count as missing).

    Returns:
        True if the field should be looked up.
    """
    return value is None or value == 0 or value == ""


def _parse_timestamp(value: Any) -> datetime | None:
    """Parses an ISO-8601 timestamp into an aware UTC datetime."""
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


@dataclass(frozen=True)
class RetryState:
    """Per-entity, per-site lookup bookkeeping.

    Attributes:
        attempt_count: Consecutive failed lookups since the last success.
        last_attempt: When the most recent lookup happened (aware UTC).
    """

    attempt_count: int = 0
    last_attempt: datetime | None = None

    def to_fields(self, site_key: str) -> dict[str, Any]:
        """Serializes the state into flat record fields.

        Args:
            site_key: Site identifier used as field prefix.

        Returns:
            Dict with the attempts and last-attempt keys.
        """
        stamp = None
        if self.last_attempt is not None:
            stamp = self.last_attempt.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")
        return {
            attempts_key(site_key): self.attempt_count,
            last_attempt_key(site_key): stamp,
        }

    @classmethod
    def from_fields(cls, data: dict[str, Any], site_key: str) -> RetryState:
        """Reads the state back from a record.

        Args:
            data: Raw catalog record.
            site_key: Site identifier used as field prefix.

        Returns:
            RetryState, defaulting to "never attempted" for absent or bad values.
        """
        raw_count = data.get(attempts_key(site_key), 0)
        try:
            count = max(int(raw_count or 0), 0)
        except (TypeError, ValueError):
            count = 0
        return cls(attempt_count=count, last_attempt=_parse_timestamp(data.get(last_attempt_key(site_key))))


@dataclass
class CatalogEntry:
    """One game record of the catalog.

    Attributes:
        id: Stable identifier of the record.
        name: Display title used for searching.
        metacritic: Critic score (0-100), None when absent.
        play_time: Main-story hours, None when absent.
        raw: The full underlying record.
    """

    id: str
    name: str
    metacritic: int | None = None
    play_time: float | None = None
    raw: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CatalogEntry:
        """Builds an entry from a raw catalog record.

        Args:
            data: Record as stored in the catalog file.

        Returns:
            CatalogEntry sharing a copy of the record.
        """
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name") or data.get("title") or ""),
            metacritic=data.get("metacritic"),
            play_time=data.get("playTime"),
            raw=dict(data),
        )

    def get(self, field_name: str, default: Any = None) -> Any:
        """Returns a raw record field."""
        return self.raw.get(field_name, default)

    def is_missing(self, field_name: str) -> bool:
        """Checks whether the given record field still needs a value."""
        return is_missing_value(self.raw.get(field_name))

    def retry_state(self, site_key: str) -> RetryState:
        """Returns the retry bookkeeping for one site."""
        return RetryState.from_fields(self.raw, site_key)
