"""Bidirectional synchronization between a document and its section frames.

The engine owns one document; the host supplies a DocumentStore and one
Frame per rendered block (see ``quadrille.sync.protocols``).
"""

from quadrille.sync.debounce import KeyedDebouncer
from quadrille.sync.engine import FrameBinding, IssueHandler, LocalEditCommit, SectionSyncEngine
from quadrille.sync.guard import SyncGuard, SyncState
from quadrille.sync.memory import InMemoryDocumentStore
from quadrille.sync.protocols import DocumentStore, Frame, RangePatchingStore

__all__ = [
    "DocumentStore",
    "Frame",
    "FrameBinding",
    "InMemoryDocumentStore",
    "IssueHandler",
    "KeyedDebouncer",
    "LocalEditCommit",
    "RangePatchingStore",
    "SectionSyncEngine",
    "SyncGuard",
    "SyncState",
]
