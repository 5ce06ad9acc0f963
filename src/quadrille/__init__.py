"""
Quadrille: section-addressable Markdown boards.

One flat Markdown document, many editors. Each level-1 heading names a
section; a layout places sections on a 24-column grid; the sync engine keeps
every section's frame and the document consistent without echo loops.

Quick Start:
    >>> from quadrille import parse_sections, plan_board, create_default_registry
    >>> text = "# Do\\nship it\\n# Schedule\\n# Delegate\\n# Eliminate\\n"
    >>> plan = plan_board(text, create_default_registry().get("eisenhower"))
    >>> plan.is_renderable
    True
    >>> parse_sections(text)["Do"].content
    'ship it'

Keeping frames in sync:
    >>> async def open_board(store, frames):
    ...     async with SectionSyncEngine(store, "board.md") as engine:
    ...         for title, frame in frames.items():
    ...             engine.bind_frame(title, frame)
    ...         await engine.load_frames()
    ...         ...  # frames call engine.frame_edited(title, content)
"""

from quadrille.authoring import (
    SectionReport,
    create_section_report,
    generate_section_markdown,
    insert_missing_sections,
    reset_with_sections,
    split_frontmatter,
    validate_required_sections,
)
from quadrille.board import (
    BOARD_KEY,
    BoardPlan,
    Placement,
    detect_board_name,
    plan_board,
    plan_board_by_name,
    plan_document_board,
)
from quadrille.config import (
    SyncConfig,
    get_sync_config,
    reset_sync_config,
    set_sync_config,
    sync_config_context,
)
from quadrille.errors import (
    DocumentWriteError,
    FrameRefreshError,
    LayoutNotFoundError,
    ParseError,
    QuadrilleError,
    SectionMissingError,
    SyncConflictError,
    ValidationError,
    describe_issue,
)
from quadrille.headings import (
    extract_level_one_title,
    first_level_one_heading,
    is_level_one_heading,
)
from quadrille.layout import (
    GridSize,
    LayoutBlock,
    LayoutModel,
    LayoutRegistry,
    LayoutRegistryBuilder,
    ValidationResult,
    create_default_registry,
    create_registry_with_defaults,
    find_free_position,
    load_layout_directory,
    load_layouts,
    save_layout_file,
    validate_model,
)
from quadrille.result import Err, Ok, Result
from quadrille.sections import (
    Section,
    SectionRegistry,
    find_section,
    parse_sections,
    replace_section_lines,
    section_exists,
    sections_exist,
)
from quadrille.sync import (
    DocumentStore,
    Frame,
    InMemoryDocumentStore,
    RangePatchingStore,
    SectionSyncEngine,
    SyncGuard,
    SyncState,
)

__version__ = "0.1.0"

__all__ = [  # noqa: RUF022 - grouped by category
    "__version__",
    # Sections
    "Section",
    "SectionRegistry",
    "extract_level_one_title",
    "find_section",
    "first_level_one_heading",
    "is_level_one_heading",
    "parse_sections",
    "replace_section_lines",
    "section_exists",
    "sections_exist",
    # Authoring
    "SectionReport",
    "create_section_report",
    "generate_section_markdown",
    "insert_missing_sections",
    "reset_with_sections",
    "split_frontmatter",
    "validate_required_sections",
    # Layout
    "GridSize",
    "LayoutBlock",
    "LayoutModel",
    "LayoutRegistry",
    "LayoutRegistryBuilder",
    "ValidationResult",
    "create_default_registry",
    "create_registry_with_defaults",
    "find_free_position",
    "load_layout_directory",
    "load_layouts",
    "save_layout_file",
    "validate_model",
    # Boards
    "BOARD_KEY",
    "BoardPlan",
    "Placement",
    "detect_board_name",
    "plan_board",
    "plan_board_by_name",
    "plan_document_board",
    # Sync
    "DocumentStore",
    "Frame",
    "InMemoryDocumentStore",
    "RangePatchingStore",
    "SectionSyncEngine",
    "SyncGuard",
    "SyncState",
    # Configuration
    "SyncConfig",
    "get_sync_config",
    "reset_sync_config",
    "set_sync_config",
    "sync_config_context",
    # Results and errors
    "Err",
    "Ok",
    "Result",
    "DocumentWriteError",
    "FrameRefreshError",
    "LayoutNotFoundError",
    "ParseError",
    "QuadrilleError",
    "SectionMissingError",
    "SyncConflictError",
    "ValidationError",
    "describe_issue",
]
