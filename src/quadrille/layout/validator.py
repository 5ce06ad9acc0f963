"""Structural, bounds, and collision validation for layout models.

Validation happens in two passes:

1. Every block is checked on its own: the five fields must be present and
   typed, the title non-empty, the rectangle non-degenerate and inside the
   grid. Blocks failing here are reported and left out of pass 2.
2. Surviving blocks are painted onto an occupancy grid in declaration
   order. A block that lands on an occupied cell is reported with the first
   conflicting cell and is *not* painted, so it cannot cause a cascade of
   false collisions for the blocks after it. Earlier blocks win ties.

Any issue makes the model invalid as a whole; ``valid_blocks`` still lists
the survivors so a host may choose to render a partial board.

Example:
    >>> result = validate_model("kanban", [
    ...     {"title": "Todo", "x": 0, "y": 0, "w": 12, "h": 10},
    ...     {"title": "Done", "x": 12, "y": 0, "w": 12, "h": 10},
    ... ])
    >>> result.is_valid
    True

Thread Safety:
    All functions are pure. Safe to call from any thread.

"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Literal

from quadrille.errors import ValidationError
from quadrille.layout.model import BLOCK_FIELDS, GridSize, LayoutBlock, LayoutModel
from quadrille.result import Err, Ok, Result

type IssueKind = Literal["structure", "bounds", "collision"]

_COORDINATES: tuple[str, ...] = ("x", "y", "w", "h")


@dataclass(frozen=True, slots=True)
class BlockIssue:
    """One problem found in one block.

    Attributes:
        kind: "structure", "bounds", or "collision"
        index: Zero-based position of the block in the model
        title: Block title when it could be read, else None
        message: Human-readable description, prefixed with the model name
        cell: First conflicting (x, y) cell for collisions
        other: Index of the block already occupying ``cell``

    """

    kind: IssueKind
    index: int
    title: str | None
    message: str
    cell: tuple[int, int] | None = None
    other: int | None = None


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Outcome of validating one layout model."""

    model_name: str
    issues: tuple[BlockIssue, ...]
    valid_blocks: tuple[LayoutBlock, ...]

    @property
    def is_valid(self) -> bool:
        return not self.issues

    @property
    def errors(self) -> tuple[str, ...]:
        """Every issue message, in the order found."""
        return tuple(issue.message for issue in self.issues)

    @property
    def collisions(self) -> tuple[BlockIssue, ...]:
        return tuple(issue for issue in self.issues if issue.kind == "collision")

    def to_model(self) -> LayoutModel:
        """Model made of the blocks that passed every check."""
        return LayoutModel(self.model_name, self.valid_blocks)

    def raise_for_errors(self) -> None:
        """Raise ValidationError listing every issue, if there are any."""
        if self.issues:
            raise ValidationError(self.errors, model_name=self.model_name)


def validate_model(
    name: str,
    blocks: Sequence[Mapping[str, Any] | LayoutBlock],
    *,
    grid: GridSize | None = None,
) -> ValidationResult:
    """Validate a layout model: structure, bounds, then collisions.

    Args:
        name: Model name, used to prefix every message
        blocks: Raw records (as loaded from configuration) or LayoutBlocks
        grid: Grid dimensions (defaults to the active SyncConfig grid)

    Returns:
        ValidationResult with every issue and the surviving blocks.

    """
    grid = grid or _active_grid()
    issues: list[BlockIssue] = []
    candidates: list[tuple[int, LayoutBlock]] = []

    for index, raw in enumerate(blocks):
        block, block_issues = _check_block(name, raw, index, grid)
        issues.extend(block_issues)
        if block is not None:
            candidates.append((index, block))

    collision_issues, placed = _detect_collisions(name, candidates, grid)
    issues.extend(collision_issues)

    return ValidationResult(
        model_name=name,
        issues=tuple(issues),
        valid_blocks=tuple(placed),
    )


def validate_block(
    raw: Mapping[str, Any] | LayoutBlock,
    *,
    grid: GridSize | None = None,
    model_name: str = "",
) -> Result[LayoutBlock, ValidationError]:
    """Check a single block's structure and bounds.

    Args:
        raw: Record or LayoutBlock to check
        grid: Grid dimensions (defaults to the active SyncConfig grid)
        model_name: Used to prefix messages (optional)

    Returns:
        Ok(LayoutBlock) or Err(ValidationError) listing every violation.

    """
    block, issues = _check_block(model_name, raw, 0, grid or _active_grid())
    if block is None:
        return Err(ValidationError([issue.message for issue in issues], model_name or None))
    return Ok(block)


def _check_block(
    model_name: str,
    raw: object,
    index: int,
    grid: GridSize,
) -> tuple[LayoutBlock | None, list[BlockIssue]]:
    """Run the per-block checks; the block is None when any check failed."""
    prefix = f"[{model_name}] " if model_name else ""
    label = f"{prefix}block {index + 1}"

    if isinstance(raw, LayoutBlock):
        record: Mapping[str, Any] = raw.to_dict()
    elif isinstance(raw, Mapping):
        record = raw
    else:
        message = f"{label}: invalid structure (expected a record, got {type(raw).__name__})"
        return None, [BlockIssue("structure", index, None, message)]

    title = record.get("title")
    readable_title = title if isinstance(title, str) else None
    if readable_title is not None and readable_title.strip():
        label = f"{label} '{readable_title}'"

    structure: list[str] = []
    missing = [field for field in BLOCK_FIELDS if field not in record]
    if missing:
        structure.append("missing " + ", ".join(f"'{field}'" for field in missing))
    if "title" in record and not isinstance(title, str):
        structure.append(f"'title' must be a string (got {type(title).__name__})")
    for field in _COORDINATES:
        if field in record and not _is_int(record[field]):
            structure.append(f"'{field}' must be an integer (got {record[field]!r})")
    if structure:
        message = f"{label}: invalid structure ({'; '.join(structure)})"
        return None, [BlockIssue("structure", index, readable_title, message)]

    block = LayoutBlock.from_mapping(record)
    problems: list[str] = []
    if not block.title.strip():
        problems.append("empty title")
    if block.x < 0:
        problems.append(f"x={block.x} (must be >= 0)")
    if block.y < 0:
        problems.append(f"y={block.y} (must be >= 0)")
    if block.w <= 0:
        problems.append(f"w={block.w} (must be > 0)")
    if block.h <= 0:
        problems.append(f"h={block.h} (must be > 0)")
    if block.right > grid.columns:
        problems.append(
            f"overflows horizontally (x={block.x} + w={block.w} > {grid.columns})"
        )
    if block.bottom > grid.rows:
        problems.append(f"overflows vertically (y={block.y} + h={block.h} > {grid.rows})")

    if problems:
        issues = [
            BlockIssue("bounds", index, block.title, f"{label}: {problem}")
            for problem in problems
        ]
        return None, issues
    return block, []


def _detect_collisions(
    model_name: str,
    candidates: Sequence[tuple[int, LayoutBlock]],
    grid: GridSize,
) -> tuple[list[BlockIssue], list[LayoutBlock]]:
    """Paint blocks onto an occupancy grid, first writer wins.

    Returns the collision issues and the blocks that were painted.
    """
    # owner[x][y] is the model index of the block holding the cell, or -1
    owner = [[-1] * grid.rows for _ in range(grid.columns)]
    titles: dict[int, str] = {}
    issues: list[BlockIssue] = []
    placed: list[LayoutBlock] = []
    prefix = f"[{model_name}] " if model_name else ""

    for index, block in candidates:
        conflict = _first_occupied_cell(owner, block)
        if conflict is not None:
            x, y = conflict
            holder = owner[x][y]
            message = (
                f"{prefix}collision: block {index + 1} '{block.title}' overlaps "
                f"'{titles[holder]}' at ({x}, {y})"
            )
            issues.append(BlockIssue("collision", index, block.title, message, conflict, holder))
            continue

        for x, y in block.cells():
            owner[x][y] = index
        titles[index] = block.title
        placed.append(block)

    return issues, placed


def _first_occupied_cell(owner: list[list[int]], block: LayoutBlock) -> tuple[int, int] | None:
    for x, y in block.cells():
        if owner[x][y] != -1:
            return x, y
    return None


def _is_int(value: object) -> bool:
    # bool is an int subclass but never a coordinate
    return isinstance(value, int) and not isinstance(value, bool)


def _active_grid() -> GridSize:
    from quadrille.config import get_sync_config

    return get_sync_config().grid


__all__ = [
    "BlockIssue",
    "IssueKind",
    "ValidationResult",
    "validate_block",
    "validate_model",
]
