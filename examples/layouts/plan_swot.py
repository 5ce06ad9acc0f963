"""Plan the board a note names in its frontmatter, then add the missing headings."""

from quadrille import create_default_registry, insert_missing_sections, plan_document_board

registry = create_default_registry()
note = "---\nagile-board: swot\n---\n# Strengths\nFast parser\n# Threats\nScope creep\n"

plan = plan_document_board(registry, note).unwrap()
print("Board:", plan.model_name)
print("Renderable:", plan.is_renderable)
print("Missing:", plan.missing_titles)

note = insert_missing_sections(note, plan.missing_titles).unwrap()
plan = plan_document_board(registry, note).unwrap()
print("Renderable after insert:", plan.is_renderable)
for placement in plan.placements:
    block = placement.block
    print(f"  {block.title:<14} at ({block.x}, {block.y}) size {block.w}x{block.h}")
