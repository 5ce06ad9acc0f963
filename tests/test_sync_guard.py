"""Tests for the echo-suppression guard value."""

import pytest

from quadrille.sync import SyncGuard, SyncState


class TestSyncGuard:
    def test_starts_idle(self) -> None:
        guard = SyncGuard()
        assert guard.state is SyncState.IDLE
        assert not guard.is_engaged

    def test_engage_issues_fresh_token(self) -> None:
        guard = SyncGuard()
        first = guard.engage()
        second = first.engage()

        assert first.is_engaged
        assert second.token == first.token + 1

    def test_release_with_current_token(self) -> None:
        engaged = SyncGuard().engage()
        released = engaged.release(engaged.token)

        assert released.state is SyncState.IDLE
        assert released.token == engaged.token

    def test_stale_release_keeps_newer_engagement(self) -> None:
        """An earlier write's cooldown cannot end a later write's window."""
        first = SyncGuard().engage()
        second = first.engage()
        assert second.release(first.token) is second

    def test_engage_does_not_mutate(self) -> None:
        guard = SyncGuard()
        guard.engage()
        assert guard.state is SyncState.IDLE

    def test_frozen(self) -> None:
        with pytest.raises(AttributeError):
            SyncGuard().state = SyncState.APPLYING_LOCAL_EDIT  # type: ignore[misc]
