"""Retry cooldown policy for external lookups.

Entities that failed to resolve are not retried on every run: once the
consecutive-failure count reaches the threshold, the entity stays blocked
until the cooldown period since the last attempt has elapsed.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from gamecatalog.core.game import RetryState

__all__ = ["DEFAULT_ATTEMPT_THRESHOLD", "DEFAULT_COOLDOWN_DAYS", "RetryCooldownTracker"]

logger = logging.getLogger("gamecatalog.cooldown")

DEFAULT_COOLDOWN_DAYS = 7
DEFAULT_ATTEMPT_THRESHOLD = 1


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RetryCooldownTracker:
    """Decides lookup eligibility and updates retry state after attempts."""

    def __init__(
        self,
        cooldown_days: float = DEFAULT_COOLDOWN_DAYS,
        attempt_threshold: int = DEFAULT_ATTEMPT_THRESHOLD,
    ) -> None:
        """Initializes the tracker.

        Args:
            cooldown_days: Days an entity stays blocked after failing.
            attempt_threshold: Consecutive failures before the cooldown applies.
        """
        if cooldown_days < 0:
            raise ValueError("cooldown_days must not be negative")
        if attempt_threshold < 1:
            raise ValueError("attempt_threshold must be at least 1")
        self.cooldown = timedelta(days=cooldown_days)
        self.attempt_threshold = attempt_threshold

    def is_eligible(self, state: RetryState, now: datetime | None = None) -> bool:
        """Checks whether a lookup may be attempted now.

        Args:
            state: Current retry state of the entity.
            now: Reference time (defaults to current UTC time).

        Returns:
            True if never attempted, below the threshold, or the cooldown elapsed.
        """
        if state.last_attempt is None or state.attempt_count < self.attempt_threshold:
            return True
        return (now or _utcnow()) - state.last_attempt >= self.cooldown

    def remaining(self, state: RetryState, now: datetime | None = None) -> timedelta:
        """Time left until the entity becomes eligible again (zero if eligible)."""
        if self.is_eligible(state, now):
            return timedelta(0)
        return state.last_attempt + self.cooldown - (now or _utcnow())

    def record_attempt(self, state: RetryState, succeeded: bool, now: datetime | None = None) -> RetryState:
        """Returns the state after one lookup attempt.

        Args:
            state: State before the attempt.
            succeeded: Whether a value was found.
            now: Attempt time (defaults to current UTC time).

        Returns:
            New RetryState: count reset on success, incremented on failure.
        """
        stamp = now or _utcnow()
        if succeeded:
            return RetryState(attempt_count=0, last_attempt=stamp)
        return RetryState(attempt_count=state.attempt_count + 1, last_attempt=stamp)

    @staticmethod
    def cleared() -> RetryState:
        """State of an entity that was never attempted."""
        return RetryState()
