"""In-memory DocumentStore.

A reference host store: documents live in a dict, subscribers are notified
synchronously from inside every write (the harshest ordering a real host
can produce), and writes can be made to fail on demand.

Example:
    >>> store = InMemoryDocumentStore({"notes.md": "# A\\nfoo\\n"})
    >>> unsubscribe = store.subscribe("notes.md", lambda: print("changed"))
    >>> store.set_text("notes.md", "# A\\nbar\\n")
    changed

"""

from __future__ import annotations

import asyncio
from collections import defaultdict
from collections.abc import Mapping, Sequence

from quadrille.sync.protocols import ChangeCallback, Unsubscribe
from quadrille.utils.logger import get_logger

logger = get_logger(__name__)


class InMemoryDocumentStore:
    """Dict-backed store implementing DocumentStore and RangePatchingStore.

    Attributes:
        write_count: Successful writes (full or ranged) per document

    """

    def __init__(self, documents: Mapping[str, str] | None = None) -> None:
        self._documents: dict[str, str] = dict(documents or {})
        self._subscribers: dict[str, list[ChangeCallback]] = defaultdict(list)
        self._failures: list[Exception] = []
        self.write_count: dict[str, int] = defaultdict(int)

    async def read_all(self, doc_id: str) -> str:
        await asyncio.sleep(0)
        try:
            return self._documents[doc_id]
        except KeyError:
            raise FileNotFoundError(doc_id) from None

    async def write_all(self, doc_id: str, text: str) -> None:
        await asyncio.sleep(0)
        self._raise_injected_failure()
        self._store(doc_id, text)

    async def replace_range(
        self,
        doc_id: str,
        start_line: int,
        end_line: int,
        new_lines: Sequence[str],
    ) -> None:
        await asyncio.sleep(0)
        self._raise_injected_failure()
        lines = self._documents.get(doc_id, "").split("\n")
        if not 0 <= start_line <= end_line <= len(lines):
            msg = f"range {start_line}-{end_line} outside {doc_id} ({len(lines)} lines)"
            raise ValueError(msg)
        lines[start_line:end_line] = list(new_lines)
        self._store(doc_id, "\n".join(lines))

    def subscribe(self, doc_id: str, callback: ChangeCallback) -> Unsubscribe:
        self._subscribers[doc_id].append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers[doc_id]:
                self._subscribers[doc_id].remove(callback)

        return unsubscribe

    def subscriber_count(self, doc_id: str) -> int:
        return len(self._subscribers[doc_id])

    def text(self, doc_id: str) -> str:
        """Current text, read synchronously."""
        return self._documents[doc_id]

    def set_text(self, doc_id: str, text: str, *, notify: bool = True) -> None:
        """Change a document from outside the engine (another editor, sync, ...)."""
        self._documents[doc_id] = text
        if notify:
            self._notify(doc_id)

    def fail_next_write(self, error: Exception | None = None) -> None:
        """Make the next write raise ``error`` (an OSError by default)."""
        self._failures.append(error or OSError("simulated write failure"))

    def _raise_injected_failure(self) -> None:
        if self._failures:
            logger.debug("Injected write failure")
            raise self._failures.pop(0)

    def _store(self, doc_id: str, text: str) -> None:
        self._documents[doc_id] = text
        self.write_count[doc_id] += 1
        self._notify(doc_id)

    def _notify(self, doc_id: str) -> None:
        for callback in list(self._subscribers[doc_id]):
            callback()


__all__ = [
    "InMemoryDocumentStore",
]
