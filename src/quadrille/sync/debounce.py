"""Per-key debouncing on the running asyncio loop.

Each key (a section title) has at most one pending action. Scheduling again
before the delay elapses replaces the pending action and restarts the
timer, so only the last edit in a burst is committed. Once an action has
started it runs to completion: newer schedules never cancel in-flight work.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Hashable

from quadrille.utils.logger import get_logger

logger = get_logger(__name__)

type Action = Callable[[], Awaitable[None]]


class KeyedDebouncer[K: Hashable]:
    """Delay actions per key, keeping only the latest one.

    Must be used from inside a running event loop.
    """

    __slots__ = ("_delay", "_timers", "_actions", "_running")

    def __init__(self, delay: float) -> None:
        """Initialize debouncer.

        Args:
            delay: Quiet period in seconds before a pending action runs
        """
        self._delay = delay
        self._timers: dict[K, asyncio.TimerHandle] = {}
        self._actions: dict[K, Action] = {}
        self._running: dict[asyncio.Task[None], K] = {}

    @property
    def delay(self) -> float:
        return self._delay

    def schedule(self, key: K, action: Action) -> None:
        """Run ``action`` after the delay unless superseded first."""
        timer = self._timers.pop(key, None)
        if timer is not None:
            timer.cancel()
            logger.debug("Superseded pending action for %r", key)
        loop = asyncio.get_running_loop()
        self._actions[key] = action
        self._timers[key] = loop.call_later(self._delay, self._fire, key)

    def is_pending(self, key: K) -> bool:
        return key in self._timers

    def is_running(self, key: K) -> bool:
        """Check whether an action for ``key`` has started and not yet finished."""
        return key in self._running.values()

    @property
    def pending_keys(self) -> tuple[K, ...]:
        return tuple(self._timers)

    def cancel(self, key: K | None = None) -> None:
        """Drop pending actions for ``key`` (or every key); running ones continue."""
        keys = [key] if key is not None else list(self._timers)
        for item in keys:
            timer = self._timers.pop(item, None)
            if timer is not None:
                timer.cancel()
            self._actions.pop(item, None)

    async def flush(self) -> None:
        """Run every pending action now and wait for all running ones."""
        for key in list(self._timers):
            self._timers.pop(key).cancel()
            self._start(key)
        if self._running:
            await asyncio.gather(*self._running, return_exceptions=True)

    def _fire(self, key: K) -> None:
        self._timers.pop(key, None)
        self._start(key)

    def _start(self, key: K) -> None:
        action = self._actions.pop(key, None)
        if action is None:
            return
        task = asyncio.ensure_future(action())
        self._running[task] = key
        task.add_done_callback(self._finished)

    def _finished(self, task: asyncio.Task[None]) -> None:
        self._running.pop(task, None)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("Debounced action failed", exc_info=error)


__all__ = [
    "Action",
    "KeyedDebouncer",
]
