"""Placement helpers for building and editing layout models.

These sit next to the validator and share its conventions (zero-based
cells, exclusive right/bottom edges) but answer editor questions instead:
where does a new block fit, does this move collide, how do I pull a dragged
block back onto the grid.

Thread Safety:
    All functions are pure. Safe to call from any thread.

"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from quadrille.layout.model import GridSize, LayoutBlock


def blocks_overlap(a: LayoutBlock, b: LayoutBlock) -> bool:
    """Check whether two rectangles share at least one cell.

    Touching edges do not overlap.
    """
    return not (
        a.right <= b.x
        or b.right <= a.x
        or a.bottom <= b.y
        or b.bottom <= a.y
    )


def would_collide(
    block: LayoutBlock,
    blocks: Iterable[LayoutBlock],
    *,
    exclude: str | None = None,
) -> list[LayoutBlock]:
    """Return the blocks that ``block`` would overlap.

    Args:
        block: Candidate position
        blocks: Blocks already on the board
        exclude: Title to ignore, typically the block being moved

    Returns:
        Overlapping blocks in board order (empty when the spot is free).

    """
    return [
        other
        for other in blocks
        if (exclude is None or other.title != exclude) and blocks_overlap(block, other)
    ]


def find_free_position(
    width: int,
    height: int,
    blocks: Iterable[LayoutBlock],
    *,
    grid: GridSize | None = None,
) -> tuple[int, int] | None:
    """Find the top-most, then left-most spot where a w x h block fits.

    Args:
        width: Block width in cells
        height: Block height in cells
        blocks: Blocks already on the board (out-of-grid cells are ignored)
        grid: Grid dimensions (defaults to the active SyncConfig grid)

    Returns:
        (x, y) of the first free spot, or None if the board is full.

    """
    grid = grid or _active_grid()
    if width <= 0 or height <= 0 or width > grid.columns or height > grid.rows:
        return None

    occupied = [[False] * grid.columns for _ in range(grid.rows)]
    for block in blocks:
        for x, y in block.cells():
            if grid.contains(x, y):
                occupied[y][x] = True

    for y in range(grid.rows - height + 1):
        for x in range(grid.columns - width + 1):
            if _area_free(occupied, x, y, width, height):
                return x, y
    return None


def normalize_block(block: LayoutBlock, *, grid: GridSize | None = None) -> LayoutBlock:
    """Clamp a block onto the grid.

    Position is clamped into the grid first, then the size is shrunk so the
    block does not overflow. Sizes are at least one cell.
    """
    grid = grid or _active_grid()
    x = min(max(block.x, 0), grid.columns - 1)
    y = min(max(block.y, 0), grid.rows - 1)
    w = min(max(block.w, 1), grid.columns - x)
    h = min(max(block.h, 1), grid.rows - y)
    return LayoutBlock(block.title, x, y, w, h)


def find_duplicate_titles(blocks: Sequence[LayoutBlock]) -> list[str]:
    """Titles used by more than one block (compared trimmed, case-insensitive).

    Two blocks with the same title would render the same section twice.
    """
    seen: set[str] = set()
    duplicates: list[str] = []
    for block in blocks:
        key = block.title.strip().lower()
        if key in seen and block.title not in duplicates:
            duplicates.append(block.title)
        seen.add(key)
    return duplicates


def _area_free(occupied: list[list[bool]], x: int, y: int, width: int, height: int) -> bool:
    for row in occupied[y : y + height]:
        if any(row[x : x + width]):
            return False
    return True


def _active_grid() -> GridSize:
    from quadrille.config import get_sync_config

    return get_sync_config().grid


__all__ = [
    "blocks_overlap",
    "find_duplicate_titles",
    "find_free_position",
    "normalize_block",
    "would_collide",
]
