"""Layout registry for named board lookup.

The registry maps layout names to validated models. Models only get in
through the builder, which validates them first, so anything a registry
hands out is safe to render.

Thread Safety:
LayoutRegistry is immutable after creation. Safe to share.
Use LayoutRegistryBuilder for mutable construction.

Example:
    >>> builder = LayoutRegistryBuilder()
    >>> builder.register_raw("kanban", [
    ...     {"title": "Todo", "x": 0, "y": 0, "w": 8, "h": 20},
    ...     {"title": "Doing", "x": 8, "y": 0, "w": 8, "h": 20},
    ...     {"title": "Done", "x": 16, "y": 0, "w": 8, "h": 20},
    ... ])
    >>> registry = builder.build()
    >>> registry.get("kanban").titles
    ('Todo', 'Doing', 'Done')
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from quadrille.errors import LayoutNotFoundError, ValidationError
from quadrille.layout.model import GridSize, LayoutBlock, LayoutModel
from quadrille.layout.placement import find_duplicate_titles
from quadrille.layout.validator import validate_model
from quadrille.result import Err, Ok, Result
from quadrille.utils.logger import get_logger

logger = get_logger(__name__)


class LayoutRegistry:
    """Immutable registry of layout models, keyed by name.

    Iteration and ``names`` follow registration order.
    """

    __slots__ = ("_models",)

    def __init__(self, models: dict[str, LayoutModel]) -> None:
        """Initialize registry with a pre-built mapping.

        Use LayoutRegistryBuilder to create instances.
        """
        self._models = models

    def get(self, name: str) -> LayoutModel | None:
        """Get the model registered under ``name``, or None."""
        return self._models.get(name)

    def has(self, name: str) -> bool:
        """Check if a layout name is registered."""
        return name in self._models

    def resolve(self, name: str) -> Result[LayoutModel, LayoutNotFoundError]:
        """Look up a model, reporting unknown names with the alternatives.

        Args:
            name: Layout name (e.g. taken from a document's frontmatter)

        Returns:
            Ok(LayoutModel) or Err(LayoutNotFoundError) listing known names.
        """
        model = self._models.get(name)
        if model is None:
            return Err(LayoutNotFoundError(name, available=self.names))
        return Ok(model)

    @property
    def names(self) -> tuple[str, ...]:
        """All registered layout names."""
        return tuple(self._models)

    @property
    def models(self) -> tuple[LayoutModel, ...]:
        return tuple(self._models.values())

    def __contains__(self, name: object) -> bool:
        """Support 'name in registry' syntax."""
        return name in self._models

    def __iter__(self) -> Iterator[LayoutModel]:
        return iter(self._models.values())

    def __len__(self) -> int:
        """Number of registered layouts."""
        return len(self._models)


class LayoutRegistryBuilder:
    """Mutable builder for LayoutRegistry.

    Every model is validated on registration; invalid models never reach
    the built registry.
    """

    __slots__ = ("_models", "_grid")

    def __init__(self, *, grid: GridSize | None = None) -> None:
        """Initialize empty builder.

        Args:
            grid: Grid to validate against (defaults to the active SyncConfig grid)
        """
        self._models: dict[str, LayoutModel] = {}
        self._grid = grid

    def register(self, model: LayoutModel, *, replace: bool = False) -> LayoutRegistryBuilder:
        """Validate and register a model.

        Args:
            model: Model to add
            replace: Allow overriding a model with the same name (user
                layouts overriding bundled ones)

        Returns:
            Self for chaining

        Raises:
            ValidationError: If the model has structural, bounds, or
                collision errors (all of them are listed)
            ValueError: If the name is taken and ``replace`` is False
        """
        if model.name in self._models and not replace:
            msg = f"Layout '{model.name}' already registered"
            raise ValueError(msg)

        validate_model(model.name, model.blocks, grid=self._grid).raise_for_errors()

        duplicates = find_duplicate_titles(model.blocks)
        if duplicates:
            logger.warning(
                "Layout %r reuses block titles %s; they will show the same section",
                model.name,
                duplicates,
            )

        self._models[model.name] = model
        return self

    def register_raw(
        self,
        name: str,
        blocks: Sequence[Mapping[str, Any]],
        *,
        replace: bool = False,
    ) -> LayoutRegistryBuilder:
        """Validate raw block records and register them as a model.

        Raises:
            ValidationError: If any block is malformed, out of bounds, or
                collides with an earlier block
            ValueError: If the name is taken and ``replace`` is False
        """
        result = validate_model(name, blocks, grid=self._grid)
        result.raise_for_errors()
        return self.register(LayoutModel(name, result.valid_blocks), replace=replace)

    def register_all(self, models: Sequence[LayoutModel]) -> LayoutRegistryBuilder:
        """Register multiple models.

        Returns:
            Self for chaining
        """
        for model in models:
            self.register(model)
        return self

    def build(self) -> LayoutRegistry:
        """Build immutable registry from registered models."""
        return LayoutRegistry(dict(self._models))

    def __contains__(self, name: object) -> bool:
        return name in self._models

    def __len__(self) -> int:
        """Number of registered models."""
        return len(self._models)


@dataclass(frozen=True, slots=True)
class LayoutLoadReport:
    """Result of loading a batch of layout models.

    Attributes:
        registry: Registry holding every model that validated
        rejected: Model name -> every error that kept it out

    """

    registry: LayoutRegistry
    rejected: dict[str, tuple[str, ...]] = field(default_factory=dict)

    @property
    def is_clean(self) -> bool:
        return not self.rejected


def load_layouts(
    data: Mapping[str, Any],
    *,
    grid: GridSize | None = None,
    base: LayoutRegistryBuilder | None = None,
) -> LayoutLoadReport:
    """Load ``{name: [block, ...]}`` configuration into a registry.

    Invalid models are left out and reported rather than failing the whole
    batch, so one broken board never hides the others.

    Args:
        data: Structured configuration, one list of block records per name
        grid: Grid to validate against (defaults to the active SyncConfig grid)
        base: Builder to add to, e.g. one pre-populated with bundled layouts;
            loaded models replace same-named entries in it

    Returns:
        LayoutLoadReport with the registry and the rejected models.

    """
    builder = base if base is not None else LayoutRegistryBuilder(grid=grid)
    rejected: dict[str, tuple[str, ...]] = {}

    for name, blocks in data.items():
        if not isinstance(blocks, Sequence) or isinstance(blocks, str):
            rejected[name] = (f"[{name}] layout must be a list of blocks",)
            logger.warning("Layout %r rejected: not a list of blocks", name)
            continue
        try:
            builder.register_raw(name, blocks, replace=True)
        except ValidationError as exc:
            rejected[name] = exc.errors
            logger.warning("Layout %r rejected with %d error(s)", name, len(exc.errors))

    return LayoutLoadReport(registry=builder.build(), rejected=rejected)


def _quadrants(name: str, titles: tuple[str, str, str, str], size: int = 12) -> LayoutModel:
    top_left, top_right, bottom_left, bottom_right = titles
    return LayoutModel(
        name,
        (
            LayoutBlock(top_left, 0, 0, 12, size),
            LayoutBlock(top_right, 12, 0, 12, size),
            LayoutBlock(bottom_left, 0, size, 12, size),
            LayoutBlock(bottom_right, 12, size, 12, size),
        ),
    )


def bundled_layouts() -> tuple[LayoutModel, ...]:
    """Layouts shipped with Quadrille. Each fits any grid of at least 24x24."""
    return (
        _quadrants("eisenhower", ("Do", "Schedule", "Delegate", "Eliminate")),
        _quadrants("swot", ("Strengths", "Weaknesses", "Opportunities", "Threats")),
        _quadrants("moscow", ("Must have", "Should have", "Could have", "Won't have")),
        _quadrants(
            "effort_impact",
            ("Quick Wins", "Major Projects", "Fill-ins", "Thankless Tasks"),
        ),
        LayoutModel(
            "cornell",
            (
                LayoutBlock("Cues", 0, 0, 6, 18),
                LayoutBlock("Notes", 6, 0, 18, 18),
                LayoutBlock("Summary", 0, 18, 24, 6),
            ),
        ),
    )


# Cached singleton, safe since LayoutRegistry is immutable
_DEFAULT_REGISTRY: LayoutRegistry | None = None


def create_default_registry() -> LayoutRegistry:
    """Get the registry of bundled layouts (cached singleton)."""
    global _DEFAULT_REGISTRY
    if _DEFAULT_REGISTRY is None:
        _DEFAULT_REGISTRY = create_registry_with_defaults(grid=GridSize()).build()
    return _DEFAULT_REGISTRY


def create_registry_with_defaults(*, grid: GridSize | None = None) -> LayoutRegistryBuilder:
    """Create a builder pre-populated with the bundled layouts.

    Use this to add user layouts on top of the defaults:

        >>> builder = create_registry_with_defaults()
        >>> report = load_layouts(user_config, base=builder)

    Returns:
        LayoutRegistryBuilder with the bundled layouts registered
    """
    builder = LayoutRegistryBuilder(grid=grid)
    return builder.register_all(bundled_layouts())


__all__ = [
    "LayoutLoadReport",
    "LayoutRegistry",
    "LayoutRegistryBuilder",
    "bundled_layouts",
    "create_default_registry",
    "create_registry_with_defaults",
    "load_layouts",
]
