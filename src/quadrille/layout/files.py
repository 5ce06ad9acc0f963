"""JSON layout files.

Two shapes are accepted on disk:

- one board per file, as written by the visual editor::

      {"name": "kanban", "boxes": [{"id": "box-1", "title": "Todo", "x": 0, ...}]}

- several boards in one mapping, the older ``layout.json`` shape::

      {"kanban": [{"title": "Todo", "x": 0, ...}], "swot": [...]}

Box keys other than the five block fields (``id`` and friends) are ignored.
Saving always writes the first shape, atomically (temp file, then rename).

"""

from __future__ import annotations

import json
import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from quadrille.errors import ValidationError
from quadrille.layout.model import GridSize, LayoutModel
from quadrille.layout.registry import LayoutLoadReport, LayoutRegistryBuilder, load_layouts
from quadrille.utils.logger import get_logger

logger = get_logger(__name__)

LAYOUT_SUFFIX = ".json"

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9_-]+")


def read_layout_file(path: str | os.PathLike[str]) -> dict[str, Any]:
    """Read a layout file into ``{name: [block records]}``.

    Args:
        path: JSON file in either supported shape

    Returns:
        Raw, unvalidated block records keyed by layout name.

    Raises:
        ValidationError: If the file is not JSON or has neither shape.
        OSError: If the file cannot be read.

    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValidationError(
            [f"{path.name}: invalid JSON at line {exc.lineno}, column {exc.colno}: {exc.msg}"]
        ) from exc

    if not isinstance(data, Mapping):
        raise ValidationError([f"{path.name}: expected an object at the top level"])

    if "boxes" in data:
        name = data.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ValidationError([f"{path.name}: layout 'name' is required"])
        return {name: data["boxes"]}

    return dict(data)


def load_layout_file(
    path: str | os.PathLike[str],
    *,
    grid: GridSize | None = None,
    base: LayoutRegistryBuilder | None = None,
) -> LayoutLoadReport:
    """Load and validate every layout in one file.

    Raises:
        ValidationError: If the file itself is unreadable as a layout file.
    """
    return load_layouts(read_layout_file(path), grid=grid, base=base)


def load_layout_directory(
    directory: str | os.PathLike[str],
    *,
    grid: GridSize | None = None,
    base: LayoutRegistryBuilder | None = None,
) -> LayoutLoadReport:
    """Load every ``*.json`` layout file in a directory.

    Files are read in name order. A file that cannot be parsed is reported
    under its file name in ``rejected``; it does not stop the others.

    Args:
        directory: Folder holding layout files (missing folder -> empty report)
        grid: Grid to validate against (defaults to the active SyncConfig grid)
        base: Builder to add to, e.g. one pre-populated with bundled layouts

    Returns:
        LayoutLoadReport covering every file.

    """
    directory = Path(directory)
    builder = base if base is not None else LayoutRegistryBuilder(grid=grid)
    rejected: dict[str, tuple[str, ...]] = {}

    if not directory.is_dir():
        logger.debug("Layout directory %s does not exist", directory)
        return LayoutLoadReport(registry=builder.build(), rejected=rejected)

    for path in sorted(directory.glob(f"*{LAYOUT_SUFFIX}")):
        try:
            raw = read_layout_file(path)
        except ValidationError as exc:
            rejected[path.name] = exc.errors
            logger.warning("Layout file %s skipped: %s", path.name, exc)
            continue
        report = load_layouts(raw, grid=grid, base=builder)
        rejected.update(report.rejected)

    return LayoutLoadReport(registry=builder.build(), rejected=rejected)


def layout_filename(name: str) -> str:
    """File name a layout is saved under.

    Example:
        >>> layout_filename("Sprint board #2")
        'Sprint-board-2.json'
    """
    stem = _UNSAFE_FILENAME_CHARS.sub("-", name.strip()).strip("-") or "layout"
    return stem + LAYOUT_SUFFIX


def save_layout_file(model: LayoutModel, directory: str | os.PathLike[str]) -> Path:
    """Write a model as ``{"name", "boxes"}`` JSON, atomically.

    The model is written to a temporary sibling first and renamed into
    place, so readers never see a half-written file.

    Args:
        model: Layout to save (validate it first; saving does not)
        directory: Target folder, created if missing

    Returns:
        Path of the written file.

    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    target = directory / layout_filename(model.name)
    temp = target.with_name(target.name + ".tmp")

    temp.write_text(json.dumps(model.to_dict(), indent=2) + "\n", encoding="utf-8")
    os.replace(temp, target)
    logger.debug("Saved layout %r to %s", model.name, target)
    return target


__all__ = [
    "LAYOUT_SUFFIX",
    "layout_filename",
    "load_layout_directory",
    "load_layout_file",
    "read_layout_file",
    "save_layout_file",
]
