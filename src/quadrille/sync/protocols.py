"""Protocols for the host side of synchronization.

The engine never touches files or widgets directly. A host supplies a
DocumentStore (the single source of truth) and one Frame per rendered
block; both are matched structurally, so no base classes are needed.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Protocol, runtime_checkable

type ChangeCallback = Callable[[], None]
type Unsubscribe = Callable[[], None]


@runtime_checkable
class DocumentStore(Protocol):
    """Whole-document persistence with change notifications.

    Thread Safety:
        Called from a single asyncio event loop. Callbacks registered with
        ``subscribe`` may run synchronously inside ``write_all`` (many hosts
        notify before the write call returns); the engine tolerates this.

    """

    async def read_all(self, doc_id: str) -> str:
        """Return the current full text of a document."""
        ...

    async def write_all(self, doc_id: str, text: str) -> None:
        """Replace the full text of a document."""
        ...

    def subscribe(self, doc_id: str, callback: ChangeCallback) -> Unsubscribe:
        """Call ``callback`` whenever the document changes, from any origin.

        Returns:
            A function that removes the subscription.
        """
        ...


@runtime_checkable
class RangePatchingStore(DocumentStore, Protocol):
    """A store that can replace a line range without rewriting everything."""

    async def replace_range(
        self,
        doc_id: str,
        start_line: int,
        end_line: int,
        new_lines: Sequence[str],
    ) -> None:
        """Replace lines ``[start_line, end_line)`` with ``new_lines``.

        Args:
            doc_id: Document to patch
            start_line: First replaced line (zero-based)
            end_line: Exclusive end of the replaced range
            new_lines: Replacement lines, without newline characters

        """
        ...


@runtime_checkable
class Frame(Protocol):
    """An editor bound to one section.

    ``is_editing`` is True while the user is typing in the frame; the engine
    will not overwrite its contents then.
    """

    @property
    def is_editing(self) -> bool: ...

    async def refresh(self, content: str) -> None:
        """Replace the frame's contents with the section's current body.

        Called while the engine holds its commit lock: it may call
        ``frame_edited`` but must not await ``commit_local_edit``. An
        exception is reported as a FrameRefreshError.
        """
        ...


__all__ = [
    "ChangeCallback",
    "DocumentStore",
    "Frame",
    "RangePatchingStore",
    "Unsubscribe",
]
