"""Per-document section synchronization.

One SectionSyncEngine keeps a set of frames, each bound to one level-1
section, consistent with a single document held by a DocumentStore.

Local edits (frame -> document):
    1. ``frame_edited`` debounces per section; only the last content of a
       burst is committed.
    2. ``commit_local_edit`` engages the guard, re-reads and re-parses the
       document, and replaces only the section's body lines.
    3. The guard is released after a cooldown, scheduled in ``finally`` so
       a failed write can never leave it engaged.

External changes (document -> frames):
    1. Notifications that arrive while the guard is engaged are the
       engine's own writes coming back and are ignored.
    2. Otherwise the document is re-parsed and every bound frame whose
       section changed is refreshed, unless the user is typing in it or
       its own edit is still waiting to be committed.

Commits and external passes are serialized per engine, so each re-read
sees the previous commit's result and offsets are never stale.

Example:
    >>> store = InMemoryDocumentStore({"notes.md": "# A\\nfoo\\n# B\\nbar\\n"})
    >>> async def main():
    ...     async with SectionSyncEngine(store, "notes.md") as engine:
    ...         engine.bind_frame("A", frame_a)
    ...         await engine.load_frames()
    ...         engine.frame_edited("A", "new text")
    >>> asyncio.run(main())

Thread Safety:
    Not thread-safe. Use from a single asyncio event loop.

"""

from __future__ import annotations

import asyncio
import functools
from collections import Counter
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from quadrille.authoring import insert_missing_sections
from quadrille.config import SyncConfig, get_sync_config
from quadrille.errors import (
    DocumentWriteError,
    FrameRefreshError,
    SectionMissingError,
    SyncConflictError,
    SyncIssue,
    ValidationError,
)
from quadrille.headings import first_level_one_heading, title_problem
from quadrille.result import Err, Ok, Result
from quadrille.sections import SectionRegistry, parse_sections, replace_section_lines, split_lines
from quadrille.sync.debounce import KeyedDebouncer
from quadrille.sync.guard import SyncGuard
from quadrille.sync.protocols import DocumentStore, Frame, RangePatchingStore, Unsubscribe
from quadrille.utils.logger import get_logger

logger = get_logger(__name__)

type IssueHandler = Callable[[SyncIssue], None]


@dataclass(slots=True)
class FrameBinding:
    """A frame and what the engine last showed in it.

    Attributes:
        title: Section the frame displays
        frame: The host's editor
        last_known: Section body as of the last refresh or commit (None
            before the first load)
        deferred: An external change arrived while the frame was busy

    """

    title: str
    frame: Frame
    last_known: str | None = None
    deferred: bool = False


@dataclass(frozen=True, slots=True)
class LocalEditCommit:
    """Where a committed edit landed in the document.

    ``start`` is the heading line; ``old_end``/``new_end`` are the section's
    exclusive end before and after the write.
    """

    title: str
    start: int
    old_end: int
    new_end: int
    patched_range: bool


class SectionSyncEngine:
    """Bidirectional sync between one document and its section frames."""

    def __init__(
        self,
        store: DocumentStore,
        doc_id: str,
        *,
        config: SyncConfig | None = None,
        on_issue: IssueHandler | None = None,
    ) -> None:
        """Initialize engine.

        Args:
            store: Host store holding the document
            doc_id: Document this engine synchronizes
            config: Timing and policy settings (defaults to the active SyncConfig)
            on_issue: Called with every SyncIssue instead of raising it
        """
        self._store = store
        self._doc_id = doc_id
        self._config = config or get_sync_config()
        self._on_issue = on_issue
        self._guard = SyncGuard()
        self._bindings: dict[str, FrameBinding] = {}
        self._debouncer: KeyedDebouncer[str] = KeyedDebouncer(self._config.debounce_seconds)
        self._commit_lock = asyncio.Lock()
        self._committing: Counter[str] = Counter()
        self._cooldowns: dict[int, asyncio.TimerHandle] = {}
        self._external_tasks: set[asyncio.Task[tuple[str, ...]]] = set()
        self._external_scheduled = False
        self._unsubscribe: Unsubscribe | None = None
        self._closed = False

    @property
    def doc_id(self) -> str:
        return self._doc_id

    @property
    def config(self) -> SyncConfig:
        return self._config

    @property
    def guard(self) -> SyncGuard:
        """Current guard value (replaced, never mutated, on each transition)."""
        return self._guard

    @property
    def is_applying_local_edit(self) -> bool:
        return self._guard.is_engaged

    @property
    def is_started(self) -> bool:
        return self._unsubscribe is not None

    @property
    def bindings(self) -> tuple[FrameBinding, ...]:
        return tuple(self._bindings.values())

    def binding(self, title: str) -> FrameBinding | None:
        return self._bindings.get(title.strip())

    # Lifecycle

    def start(self) -> None:
        """Subscribe to the store's change notifications."""
        self._ensure_open()
        if self._unsubscribe is None:
            self._unsubscribe = self._store.subscribe(self._doc_id, self._on_store_change)
            logger.debug("Subscribed to %s", self._doc_id)

    async def flush(self) -> None:
        """Commit every pending debounced edit now and wait for it."""
        await self._debouncer.flush()

    async def close(self) -> None:
        """Flush pending edits, unsubscribe, and drop all timers.

        The guard ends IDLE. Closing twice is a no-op.
        """
        if self._closed:
            return
        await self.flush()
        self._closed = True
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        for handle in self._cooldowns.values():
            handle.cancel()
        self._cooldowns.clear()
        for task in self._external_tasks:
            task.cancel()
        self._debouncer.cancel()
        self._guard = self._guard.release(self._guard.token)
        logger.debug("Engine for %s closed", self._doc_id)

    async def __aenter__(self) -> SectionSyncEngine:
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # Frames

    def bind_frame(self, title: str, frame: Frame) -> FrameBinding:
        """Bind ``frame`` to a section, replacing any frame bound to it.

        Raises:
            ValidationError: If ``title`` cannot be a heading.
        """
        problem = title_problem(title)
        if problem is not None:
            raise ValidationError([problem])
        binding = FrameBinding(title.strip(), frame)
        self._bindings[binding.title] = binding
        return binding

    def unbind_frame(self, title: str) -> FrameBinding | None:
        """Remove a binding and drop its pending (not yet started) edit."""
        title = title.strip()
        self._debouncer.cancel(title)
        return self._bindings.pop(title, None)

    async def load_frames(self) -> Result[SectionRegistry, SectionMissingError]:
        """Fill every bound frame with its section's current content.

        Bound titles absent from the document are reported as one
        SectionMissingError; their frames are left untouched.
        """
        missing: list[str] = []
        async with self._commit_lock:
            registry = parse_sections(await self._store.read_all(self._doc_id))
            for binding in list(self._bindings.values()):
                content = registry.content_of(binding.title)
                if content is None:
                    missing.append(binding.title)
                    continue
                await self._refresh(binding, content)

        if missing:
            error = SectionMissingError(missing, doc_id=self._doc_id)
            self._report(error)
            return Err(error)
        return Ok(registry)

    async def frame_released(self, title: str) -> bool:
        """Apply an external change deferred while the frame was busy.

        Returns:
            True if the frame was refreshed.
        """
        binding = self._bindings.get(title.strip())
        if binding is None or not binding.deferred:
            return False
        async with self._commit_lock:
            if self._has_local_edit(binding.title):
                # The queued edit overwrites the section; nothing to show.
                return False
            binding.deferred = False
            text = await self._store.read_all(self._doc_id)
            content = parse_sections(text).content_of(binding.title)
            if content is None or content == binding.last_known:
                return False
            if not await self._refresh(binding, content):
                return False
        logger.debug("Applied deferred change to '%s'", binding.title)
        return True

    # Local edits

    def frame_edited(self, title: str, content: str) -> None:
        """Record a local edit; it is committed once the frame goes quiet.

        Must be called from inside the running event loop.
        """
        self._ensure_open()
        title = title.strip()
        self._debouncer.schedule(title, functools.partial(self._commit_debounced, title, content))

    async def commit_local_edit(
        self,
        title: str,
        content: str,
    ) -> Result[LocalEditCommit, SyncConflictError]:
        """Write ``content`` as the body of section ``title``.

        The guard is engaged before the store is touched, and the document
        is re-read and re-parsed so the replaced range is always current.

        Returns:
            Ok(LocalEditCommit), or Err(SyncConflictError) when the section
            no longer exists or ``content`` contains a level-1 heading line
            (the edit is discarded and reported; nothing is written).

        Raises:
            DocumentWriteError: If the store fails to read or write. The
                guard is still released after the cooldown.
        """
        title = title.strip()
        heading = first_level_one_heading(content)
        if heading is not None:
            return self._conflict(
                SyncConflictError(
                    title,
                    doc_id=self._doc_id,
                    reason=f"content contains level-1 heading '# {heading[1]}'",
                )
            )

        self._committing[title] += 1
        try:
            async with self._commit_lock:
                token = self._engage()
                try:
                    return await self._apply_local_edit(title, content)
                finally:
                    self._schedule_release(token)
        finally:
            self._committing[title] -= 1

    async def _apply_local_edit(
        self,
        title: str,
        content: str,
    ) -> Result[LocalEditCommit, SyncConflictError]:
        try:
            text = await self._store.read_all(self._doc_id)
        except Exception as exc:
            raise DocumentWriteError(self._doc_id, title=title) from exc

        registry = parse_sections(text)
        section = registry.get(title)
        if section is None:
            return self._conflict(SyncConflictError(title, doc_id=self._doc_id))
        if self._config.reject_duplicate_titles and title in registry.duplicates:
            return self._conflict(
                SyncConflictError(
                    title,
                    doc_id=self._doc_id,
                    reason="heading appears more than once",
                )
            )

        new_lines = split_lines(content)
        patched = isinstance(self._store, RangePatchingStore)
        try:
            if patched:
                await self._store.replace_range(
                    self._doc_id, section.body_start, section.end, new_lines
                )
            else:
                await self._store.write_all(
                    self._doc_id, replace_section_lines(text, section, content)
                )
        except Exception as exc:
            raise DocumentWriteError(self._doc_id, title=title) from exc

        binding = self._bindings.get(title)
        if binding is not None:
            binding.last_known = content
            binding.deferred = False

        logger.debug(
            "Committed %d line(s) to '%s' in %s", len(new_lines), title, self._doc_id
        )
        return Ok(
            LocalEditCommit(
                title=title,
                start=section.start,
                old_end=section.end,
                new_end=section.body_start + len(new_lines),
                patched_range=patched,
            )
        )

    async def _commit_debounced(self, title: str, content: str) -> None:
        try:
            await self.commit_local_edit(title, content)
        except DocumentWriteError as exc:
            logger.error("Could not commit edit to '%s'", title, exc_info=exc)
            self._report(exc)

    def _conflict(self, error: SyncConflictError) -> Err[SyncConflictError]:
        logger.warning("%s", error)
        self._report(error)
        return Err(error)

    async def ensure_sections(
        self,
        titles: Iterable[str],
    ) -> Result[tuple[str, ...], ValidationError]:
        """Append empty sections for any of ``titles`` the document lacks.

        Bound frames of newly created sections are refreshed.

        Returns:
            Ok(titles that were added), or Err(ValidationError) for unusable
            titles (nothing is written then).

        Raises:
            DocumentWriteError: If the store fails to write.
        """
        titles = list(titles)
        async with self._commit_lock:
            text = await self._store.read_all(self._doc_id)
            before = parse_sections(text)
            inserted = insert_missing_sections(text, titles)
            if isinstance(inserted, Err):
                return inserted
            updated = inserted.value
            if updated == text:
                return Ok(())

            token = self._engage()
            try:
                await self._store.write_all(self._doc_id, updated)
            except Exception as exc:
                raise DocumentWriteError(self._doc_id) from exc
            finally:
                self._schedule_release(token)

            after = parse_sections(updated)
            added = tuple(title for title in after.titles if title not in before)
            for title in added:
                binding = self._bindings.get(title)
                if binding is not None:
                    await self._refresh(binding, after[title].content)
        logger.debug("Added sections %s to %s", added, self._doc_id)
        return Ok(added)

    # External changes

    def notify_local_change_origin(self) -> None:
        """Mark the next change notification as self-originated.

        For hosts that write on the engine's behalf: engages the guard and
        releases it after the cooldown.

        Raises:
            RuntimeError: If called outside a running event loop. The guard
                is left untouched.
        """
        asyncio.get_running_loop()
        self._schedule_release(self._engage())

    async def handle_external_change(self) -> tuple[str, ...]:
        """Refresh every bound frame whose section changed.

        The pass holds the commit lock, so no local edit lands between the
        re-read and the last refresh. A frame's ``refresh`` must therefore
        not await ``commit_local_edit`` (``frame_edited`` is fine).

        Frames that are being edited, or whose edit is waiting to be
        committed, are held back according to ``busy_frame_policy``. A frame
        whose refresh raises is reported as a FrameRefreshError and the
        remaining frames are still refreshed.

        Returns:
            Titles of the refreshed frames.
        """
        if self._guard.is_engaged:
            logger.debug("Ignored change to %s while applying a local edit", self._doc_id)
            return ()

        refreshed: list[str] = []
        missing: list[str] = []
        async with self._commit_lock:
            registry = parse_sections(await self._store.read_all(self._doc_id))
            for binding in list(self._bindings.values()):
                content = registry.content_of(binding.title)
                if content is None:
                    missing.append(binding.title)
                    continue
                if content == binding.last_known:
                    continue
                if binding.frame.is_editing or self._has_local_edit(binding.title):
                    self._hold_back(binding)
                    continue
                if await self._refresh(binding, content):
                    refreshed.append(binding.title)

        if missing:
            self._report(SectionMissingError(missing, doc_id=self._doc_id))
        return tuple(refreshed)

    def _has_local_edit(self, title: str) -> bool:
        if self._committing[title] > 0:
            return True
        return self._debouncer.is_pending(title) or self._debouncer.is_running(title)

    async def _refresh(self, binding: FrameBinding, content: str) -> bool:
        try:
            await binding.frame.refresh(content)
        except Exception as exc:
            logger.error("Frame for '%s' failed to refresh", binding.title, exc_info=exc)
            error = FrameRefreshError(binding.title, doc_id=self._doc_id)
            error.__cause__ = exc
            self._report(error)
            return False
        binding.last_known = content
        binding.deferred = False
        return True

    def _hold_back(self, binding: FrameBinding) -> None:
        if self._config.busy_frame_policy == "defer":
            binding.deferred = True
            logger.debug("Deferred external change to busy frame '%s'", binding.title)
        else:
            logger.debug("Skipped external change to busy frame '%s'", binding.title)

    def _on_store_change(self) -> None:
        # May run synchronously inside the engine's own write call.
        if self._closed:
            return
        if self._guard.is_engaged:
            logger.debug("Echo suppressed for %s", self._doc_id)
            return
        if self._external_scheduled:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("Change to %s arrived outside the event loop; ignored", self._doc_id)
            return
        self._external_scheduled = True
        task = loop.create_task(self._run_external_change())
        self._external_tasks.add(task)
        task.add_done_callback(self._external_finished)

    async def _run_external_change(self) -> tuple[str, ...]:
        self._external_scheduled = False
        return await self.handle_external_change()

    def _external_finished(self, task: asyncio.Task[tuple[str, ...]]) -> None:
        self._external_tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("Failed to apply external change to %s", self._doc_id, exc_info=error)

    # Guard

    def _engage(self) -> int:
        self._guard = self._guard.engage()
        return self._guard.token

    def _schedule_release(self, token: int) -> None:
        loop = asyncio.get_running_loop()
        self._cooldowns[token] = loop.call_later(
            self._config.cooldown_seconds, self._release, token
        )

    def _release(self, token: int) -> None:
        self._cooldowns.pop(token, None)
        self._guard = self._guard.release(token)

    def _report(self, issue: SyncIssue) -> None:
        if self._on_issue is not None:
            self._on_issue(issue)
        else:
            logger.warning("Unhandled sync issue: %s", issue)

    def _ensure_open(self) -> None:
        if self._closed:
            msg = f"Engine for {self._doc_id} is closed"
            raise RuntimeError(msg)


__all__ = [
    "FrameBinding",
    "IssueHandler",
    "LocalEditCommit",
    "SectionSyncEngine",
]
