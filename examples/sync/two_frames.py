"""Two frames over one document: local edits, echo suppression, remote changes."""

import asyncio

from quadrille import InMemoryDocumentStore, SectionSyncEngine, SyncConfig


class PrintingFrame:
    def __init__(self, title: str) -> None:
        self.title = title
        self.is_editing = False

    async def refresh(self, content: str) -> None:
        print(f"  [{self.title}] shows {content!r}")


async def main() -> None:
    store = InMemoryDocumentStore({"board.md": "# A\nfoo\n# B\nbar\n"})
    config = SyncConfig(debounce_ms=50, cooldown_ms=50)

    async with SectionSyncEngine(store, "board.md", config=config) as engine:
        engine.bind_frame("A", PrintingFrame("A"))
        engine.bind_frame("B", PrintingFrame("B"))
        print("Load:")
        await engine.load_frames()

        print("Typing in A (only the last keystroke is written, and no frame refreshes):")
        for content in ("f", "fo", "foo2"):
            engine.frame_edited("A", content)
        await asyncio.sleep(0.2)
        print("  document:", repr(store.text("board.md")))

        print("Another editor changes B:")
        store.set_text("board.md", "# A\nfoo2\n# B\nchanged elsewhere\n")
        await asyncio.sleep(0.05)


asyncio.run(main())
