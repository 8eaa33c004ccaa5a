"""Tests for the retry cooldown policy."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from gamecatalog.core.game import RetryState
from gamecatalog.matching.cooldown import RetryCooldownTracker

NOW = datetime(2026, 1, 10, 12, 0, tzinfo=timezone.utc)


class TestIsEligible:
    """Tests for RetryCooldownTracker.is_eligible()."""

    def test_never_attempted(self) -> None:
        assert RetryCooldownTracker().is_eligible(RetryState(), NOW)

    def test_recent_failure_blocks(self) -> None:
        state = RetryState(attempt_count=1, last_attempt=NOW - timedelta(days=3))
        assert not RetryCooldownTracker().is_eligible(state, NOW)

    def test_old_failure_allows(self) -> None:
        state = RetryState(attempt_count=1, last_attempt=NOW - timedelta(days=8))
        assert RetryCooldownTracker().is_eligible(state, NOW)

    def test_exactly_cooldown_allows(self) -> None:
        state = RetryState(attempt_count=4, last_attempt=NOW - timedelta(days=7))
        assert RetryCooldownTracker().is_eligible(state, NOW)

    def test_recent_success_allows(self) -> None:
        state = RetryState(attempt_count=0, last_attempt=NOW - timedelta(hours=1))
        assert RetryCooldownTracker().is_eligible(state, NOW)

    def test_custom_threshold(self) -> None:
        tracker = RetryCooldownTracker(cooldown_days=7, attempt_threshold=3)
        recent = NOW - timedelta(days=1)
        assert tracker.is_eligible(RetryState(2, recent), NOW)
        assert not tracker.is_eligible(RetryState(3, recent), NOW)

    def test_custom_cooldown(self) -> None:
        tracker = RetryCooldownTracker(cooldown_days=1)
        assert tracker.is_eligible(RetryState(1, NOW - timedelta(days=2)), NOW)


class TestRecordAttempt:
    """Tests for RetryCooldownTracker.record_attempt()."""

    def test_success_resets_count(self) -> None:
        state = RetryState(attempt_count=5, last_attempt=NOW - timedelta(days=30))
        new_state = RetryCooldownTracker().record_attempt(state, succeeded=True, now=NOW)
        assert new_state == RetryState(attempt_count=0, last_attempt=NOW)

    def test_failure_increments(self) -> None:
        new_state = RetryCooldownTracker().record_attempt(RetryState(), succeeded=False, now=NOW)
        assert new_state == RetryState(attempt_count=1, last_attempt=NOW)

        again = RetryCooldownTracker().record_attempt(new_state, succeeded=False, now=NOW + timedelta(days=8))
        assert again.attempt_count == 2

    def test_input_state_unchanged(self) -> None:
        state = RetryState()
        RetryCooldownTracker().record_attempt(state, succeeded=False, now=NOW)
        assert state == RetryState()

    def test_defaults_to_aware_now(self) -> None:
        new_state = RetryCooldownTracker().record_attempt(RetryState(), succeeded=False)
        assert new_state.last_attempt is not None
        assert new_state.last_attempt.tzinfo is not None


class TestRemainingAndCleared:
    """Tests for remaining() and cleared()."""

    def test_remaining(self) -> None:
        state = RetryState(attempt_count=1, last_attempt=NOW - timedelta(days=3))
        assert RetryCooldownTracker().remaining(state, NOW) == timedelta(days=4)

    def test_remaining_zero_when_eligible(self) -> None:
        assert RetryCooldownTracker().remaining(RetryState(), NOW) == timedelta(0)

    def test_cleared(self) -> None:
        assert RetryCooldownTracker.cleared() == RetryState()


class TestValidation:
    """Tests for constructor validation."""

    def test_negative_cooldown(self) -> None:
        with pytest.raises(ValueError):
            RetryCooldownTracker(cooldown_days=-1)

    def test_zero_threshold(self) -> None:
        with pytest.raises(ValueError):
            RetryCooldownTracker(attempt_threshold=0)
