"""Echo-suppression guard.

While the engine is writing a local edit, every change notification from
the store is the engine's own write coming back and must be ignored. The
guard is a small immutable value the engine swaps on each transition:

    IDLE --engage()--> APPLYING_LOCAL_EDIT --release(token)--> IDLE

Each engagement carries a fresh token. ``release`` only returns to IDLE
for the token of the latest engagement, so the cooldown of an earlier
write cannot end the suppression window of a later one.

Example:
    >>> guard = SyncGuard()
    >>> busy = guard.engage()
    >>> busy.is_engaged
    True
    >>> newer = busy.engage()
    >>> newer.release(busy.token).is_engaged
    True
    >>> newer.release(newer.token).is_engaged
    False

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class SyncState(Enum):
    """Synchronization state of one engine."""

    IDLE = "idle"
    APPLYING_LOCAL_EDIT = "applying_local_edit"


@dataclass(frozen=True, slots=True)
class SyncGuard:
    state: SyncState = SyncState.IDLE
    token: int = 0

    @property
    def is_engaged(self) -> bool:
        return self.state is SyncState.APPLYING_LOCAL_EDIT

    def engage(self) -> SyncGuard:
        """Enter APPLYING_LOCAL_EDIT with a new token."""
        return SyncGuard(SyncState.APPLYING_LOCAL_EDIT, self.token + 1)

    def release(self, token: int) -> SyncGuard:
        """Return to IDLE if ``token`` is the latest engagement, else stay."""
        if token != self.token:
            return self
        return SyncGuard(SyncState.IDLE, self.token)


__all__ = [
    "SyncGuard",
    "SyncState",
]
