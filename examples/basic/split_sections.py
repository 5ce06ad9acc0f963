"""Split a note into level-1 sections."""

from quadrille import parse_sections

source = """Preamble is not part of any section.

# Backlog
- write docs
## Subheadings stay inside
#tags too

# Done
- ship 0.1
"""

registry = parse_sections(source)

for section in registry.ordered():
    print(f"{section.title!r}: lines {section.start}-{section.end}")
    print("  content:", section.content.strip().replace("\n", " | "))
