"""Grid layout models, validation, and the layout registry.

A layout ("board") places document sections on a fixed grid, 24 columns by
default. Models are validated before use; see ``validate_model``.
"""

from quadrille.layout.files import (
    layout_filename,
    load_layout_directory,
    load_layout_file,
    read_layout_file,
    save_layout_file,
)
from quadrille.layout.model import (
    DEFAULT_COLUMNS,
    DEFAULT_ROWS,
    GridSize,
    LayoutBlock,
    LayoutModel,
)
from quadrille.layout.placement import (
    blocks_overlap,
    find_duplicate_titles,
    find_free_position,
    normalize_block,
    would_collide,
)
from quadrille.layout.registry import (
    LayoutLoadReport,
    LayoutRegistry,
    LayoutRegistryBuilder,
    bundled_layouts,
    create_default_registry,
    create_registry_with_defaults,
    load_layouts,
)
from quadrille.layout.validator import (
    BlockIssue,
    ValidationResult,
    validate_block,
    validate_model,
)

__all__ = [
    "BlockIssue",
    "DEFAULT_COLUMNS",
    "DEFAULT_ROWS",
    "GridSize",
    "LayoutBlock",
    "LayoutLoadReport",
    "LayoutModel",
    "LayoutRegistry",
    "LayoutRegistryBuilder",
    "ValidationResult",
    "blocks_overlap",
    "bundled_layouts",
    "create_default_registry",
    "create_registry_with_defaults",
    "find_duplicate_titles",
    "find_free_position",
    "layout_filename",
    "load_layout_directory",
    "load_layout_file",
    "load_layouts",
    "normalize_block",
    "read_layout_file",
    "save_layout_file",
    "validate_block",
    "validate_model",
    "would_collide",
]
