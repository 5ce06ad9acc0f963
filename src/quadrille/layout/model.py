"""Grid layout model for Quadrille boards.

A board is a fixed grid (24 columns by default) on which each section of a
document is given a rectangle. Blocks are declarative and immutable; they are
loaded from configuration or produced by a visual editor, validated, and then
only read.

Thread Safety:
    All types are frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any

DEFAULT_COLUMNS = 24
DEFAULT_ROWS = 100

BLOCK_FIELDS: tuple[str, ...] = ("title", "x", "y", "w", "h")


@dataclass(frozen=True, slots=True)
class GridSize:
    """Dimensions of the placement grid, in cells."""

    columns: int = DEFAULT_COLUMNS
    rows: int = DEFAULT_ROWS

    def __str__(self) -> str:
        return f"{self.columns}x{self.rows}"

    def contains(self, x: int, y: int) -> bool:
        """Check whether a cell coordinate lies on the grid."""
        return 0 <= x < self.columns and 0 <= y < self.rows


@dataclass(frozen=True, slots=True)
class LayoutBlock:
    """A named rectangle on the grid.

    ``title`` must match a level-1 section heading for the block to be
    renderable. ``x``/``y`` are the zero-based top-left cell; ``w``/``h`` are
    the size in cells.

    Examples:
        >>> block = LayoutBlock("Todo", x=0, y=0, w=12, h=10)
        >>> block.right, block.bottom
        (12, 10)

    """

    title: str
    x: int
    y: int
    w: int
    h: int

    @property
    def right(self) -> int:
        """Exclusive right edge column."""
        return self.x + self.w

    @property
    def bottom(self) -> int:
        """Exclusive bottom edge row."""
        return self.y + self.h

    @property
    def area(self) -> int:
        return self.w * self.h

    def cells(self) -> Iterator[tuple[int, int]]:
        """Yield every (x, y) cell the block covers, column by column."""
        for x in range(self.x, self.right):
            for y in range(self.y, self.bottom):
                yield x, y

    def moved_to(self, x: int, y: int) -> LayoutBlock:
        return LayoutBlock(self.title, x, y, self.w, self.h)

    def to_dict(self) -> dict[str, Any]:
        return {"title": self.title, "x": self.x, "y": self.y, "w": self.w, "h": self.h}

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> LayoutBlock:
        """Build a block from a record, without validating it.

        Extra keys (such as an editor-assigned ``id``) are ignored.

        Raises:
            KeyError: If one of the five fields is absent.
        """
        return cls(
            title=data["title"],
            x=data["x"],
            y=data["y"],
            w=data["w"],
            h=data["h"],
        )


@dataclass(frozen=True, slots=True)
class LayoutModel:
    """An ordered, named arrangement of blocks (a "board").

    Order matters: collision detection is first-writer-wins, so a block
    declared later loses any overlap with an earlier one.

    """

    name: str
    blocks: tuple[LayoutBlock, ...]

    @property
    def titles(self) -> tuple[str, ...]:
        """Block titles in declaration order."""
        return tuple(block.title for block in self.blocks)

    def block_for(self, title: str) -> LayoutBlock | None:
        """Return the first block with the given title, if any."""
        for block in self.blocks:
            if block.title == title:
                return block
        return None

    def __len__(self) -> int:
        return len(self.blocks)

    def __iter__(self) -> Iterator[LayoutBlock]:
        return iter(self.blocks)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "boxes": [block.to_dict() for block in self.blocks]}


__all__ = [
    "BLOCK_FIELDS",
    "DEFAULT_COLUMNS",
    "DEFAULT_ROWS",
    "GridSize",
    "LayoutBlock",
    "LayoutModel",
]
