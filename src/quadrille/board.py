"""Board planning: match a layout model against a document's sections.

A board is renderable when its layout validates and every block's title
heads a section. ``plan_board`` computes both in one step so a host can
draw the frames it can and offer to generate the missing headings.
Documents pick their layout with an ``agile-board:`` frontmatter key (see
``plan_document_board``).

Example:
    >>> model = LayoutModel("pair", (
    ...     LayoutBlock("A", 0, 0, 12, 10),
    ...     LayoutBlock("B", 12, 0, 12, 10),
    ... ))
    >>> plan = plan_board("# A\\nfoo\\n# B\\nbar\\n", model)
    >>> [p.section.content for p in plan.placements]
    ['foo', 'bar']
    >>> plan.is_renderable
    True

"""

from __future__ import annotations

from dataclasses import dataclass

from quadrille.authoring import split_frontmatter
from quadrille.errors import LayoutNotFoundError, SectionMissingError
from quadrille.layout.model import GridSize, LayoutBlock, LayoutModel
from quadrille.layout.registry import LayoutRegistry
from quadrille.layout.validator import ValidationResult, validate_model
from quadrille.result import Err, Ok, Result
from quadrille.sections import Section, parse_sections
from quadrille.utils.logger import get_logger

logger = get_logger(__name__)

# Frontmatter key naming the layout a document is displayed with.
BOARD_KEY = "agile-board"


@dataclass(frozen=True, slots=True)
class Placement:
    """A block paired with the section it displays."""

    block: LayoutBlock
    section: Section


@dataclass(frozen=True, slots=True)
class BoardPlan:
    """What a host needs to draw one board for one document.

    Attributes:
        model_name: Layout the plan was made from
        placements: Renderable blocks with their sections, in model order
        missing_titles: Block titles with no matching heading, in model order
        layout: Validation outcome of the model against the grid

    """

    model_name: str
    placements: tuple[Placement, ...]
    missing_titles: tuple[str, ...]
    layout: ValidationResult

    @property
    def is_renderable(self) -> bool:
        return self.layout.is_valid and not self.missing_titles

    def missing_error(self, doc_id: str | None = None) -> SectionMissingError | None:
        """The missing-sections problem for this plan, or None if complete."""
        if not self.missing_titles:
            return None
        return SectionMissingError(self.missing_titles, model_name=self.model_name, doc_id=doc_id)


def plan_board(text: str, model: LayoutModel, *, grid: GridSize | None = None) -> BoardPlan:
    """Pair each valid block of ``model`` with its section in ``text``.

    Blocks rejected by layout validation get no placement; their titles
    are still checked for existence.
    """
    layout = validate_model(model.name, model.blocks, grid=grid)
    registry = parse_sections(text)

    rejected = {issue.index for issue in layout.issues}
    placements: list[Placement] = []
    missing: list[str] = []
    for index, block in enumerate(model.blocks):
        title = block.title.strip()
        section = registry.get(title)
        if section is None:
            if title not in missing:
                missing.append(title)
            continue
        if index not in rejected:
            placements.append(Placement(block, section))

    return BoardPlan(
        model_name=model.name,
        placements=tuple(placements),
        missing_titles=tuple(missing),
        layout=layout,
    )


def plan_board_by_name(
    registry: LayoutRegistry,
    name: str,
    text: str,
    *,
    grid: GridSize | None = None,
) -> Result[BoardPlan, LayoutNotFoundError]:
    """Resolve a layout by name, then plan it against ``text``."""
    match registry.resolve(name):
        case Ok(value=model):
            return Ok(plan_board(text, model, grid=grid))
        case Err(error=error):
            return Err(error)


def detect_board_name(text: str, key: str = BOARD_KEY) -> str | None:
    """Read the board a document asks for from its frontmatter.

    Only a flat ``key: value`` line inside the leading ``---`` block is
    recognized; surrounding quotes are removed.

    Returns:
        The layout name, or None when there is no frontmatter, no such
        key, or an empty value.

    Examples:
        >>> detect_board_name("---\\nagile-board: swot\\n---\\n# Strengths\\n")
        'swot'
        >>> detect_board_name("# Strengths\\n") is None
        True

    """
    frontmatter, _ = split_frontmatter(text)
    for line in frontmatter.split("\n")[1:-1]:
        name, sep, value = line.partition(":")
        if not sep or name.strip() != key:
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            value = value[1:-1].strip()
        return value or None
    return None


def plan_document_board(
    registry: LayoutRegistry,
    text: str,
    *,
    grid: GridSize | None = None,
    key: str = BOARD_KEY,
) -> Result[BoardPlan | None, LayoutNotFoundError]:
    """Plan the board named in ``text``'s frontmatter.

    Returns:
        Ok(None) when the document names no board, Ok(plan) for a
        registered layout, or Err(LayoutNotFoundError) for an unknown one.
    """
    name = detect_board_name(text, key)
    if name is None:
        return Ok(None)
    logger.debug("Document asks for board '%s'", name)
    return plan_board_by_name(registry, name, text, grid=grid)


__all__ = [
    "BOARD_KEY",
    "BoardPlan",
    "Placement",
    "detect_board_name",
    "plan_board",
    "plan_board_by_name",
    "plan_document_board",
]
