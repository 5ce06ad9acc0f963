"""Save a custom board as JSON and load it back next to the bundled ones."""

import tempfile

from quadrille import (
    LayoutBlock,
    LayoutModel,
    create_registry_with_defaults,
    load_layout_directory,
    save_layout_file,
)

kanban = LayoutModel(
    "kanban",
    (
        LayoutBlock("Todo", 0, 0, 8, 20),
        LayoutBlock("Doing", 8, 0, 8, 20),
        LayoutBlock("Done", 16, 0, 8, 20),
    ),
)

with tempfile.TemporaryDirectory() as folder:
    path = save_layout_file(kanban, folder)
    print("Saved", path.name)

    report = load_layout_directory(folder, base=create_registry_with_defaults())
    print("Layouts:", ", ".join(report.registry.names))
    print("Rejected:", report.rejected or "none")
