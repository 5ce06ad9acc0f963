"""Section segmentation for Quadrille documents.

A document is split into named, line-addressed regions, one per level-1
heading. The scan is a single top-to-bottom pass over ``text.split("\\n")``:

1. A heading line closes the open section (``end`` = this line) and opens a
   new one (``start`` = this line).
2. End of input closes the last section (``end`` = line count).
3. Text before the first heading belongs to no section.

Registries are recomputed from scratch on every parse and never patched
incrementally, so offsets always agree with the text they came from.

Example:
    >>> registry = parse_sections("# A\\nfoo\\n# B\\nbar\\n")
    >>> registry["B"].start, registry["B"].end
    (2, 5)
    >>> registry["A"].content
    'foo'

Thread Safety:
    All functions are pure and all values are immutable.

"""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass

from quadrille.errors import ValidationError
from quadrille.headings import extract_level_one_title


@dataclass(frozen=True, slots=True)
class Section:
    """A named region of a document.

    Attributes:
        title: Trimmed heading text
        start: Line index of the heading
        end: Exclusive line index where the next level-1 heading begins,
            or the document's line count
        lines: The lines strictly between the heading and ``end``

    """

    title: str
    start: int
    end: int
    lines: tuple[str, ...]

    @property
    def content(self) -> str:
        """Section body as text (what a frame edits)."""
        return "\n".join(self.lines)

    @property
    def body_start(self) -> int:
        """Index of the first body line."""
        return self.start + 1

    @property
    def line_count(self) -> int:
        """Lines spanned, heading included."""
        return self.end - self.start


class SectionRegistry(Mapping[str, Section]):
    """Immutable mapping from title to Section.

    When a title appears more than once, the last occurrence wins the
    mapping slot and the title is listed in ``duplicates``; ``ordered()``
    still returns every parsed section.
    """

    __slots__ = ("_ordered", "_by_title", "_duplicates", "_line_count")

    def __init__(self, sections: Iterable[Section] = (), *, line_count: int = 0) -> None:
        self._ordered = tuple(sections)
        self._by_title: dict[str, Section] = {}
        duplicates: list[str] = []
        for section in self._ordered:
            if section.title in self._by_title and section.title not in duplicates:
                duplicates.append(section.title)
            self._by_title[section.title] = section
        self._duplicates = tuple(duplicates)
        self._line_count = line_count

    def __getitem__(self, title: str) -> Section:
        return self._by_title[title]

    def __iter__(self) -> Iterator[str]:
        return iter(self._by_title)

    def __len__(self) -> int:
        return len(self._by_title)

    def __repr__(self) -> str:
        return f"SectionRegistry({list(self._by_title)!r})"

    @property
    def titles(self) -> tuple[str, ...]:
        return tuple(self._by_title)

    @property
    def duplicates(self) -> tuple[str, ...]:
        """Titles that head more than one section, in order of first repeat."""
        return self._duplicates

    @property
    def line_count(self) -> int:
        """Line count of the parsed document."""
        return self._line_count

    def ordered(self) -> tuple[Section, ...]:
        """Every parsed section, shadowed duplicates included, by ``start``."""
        return self._ordered

    def content_of(self, title: str) -> str | None:
        """Body text of a section, or None if the title is absent."""
        section = self._by_title.get(title)
        return section.content if section is not None else None


def split_lines(text: str) -> list[str]:
    """Split a document into lines the way the parser addresses them."""
    return text.split("\n")


def parse_sections(text: str) -> SectionRegistry:
    """Segment a document into level-1 sections.

    Total over strings: never fails, and a document without level-1
    headings yields an empty registry.

    Args:
        text: Full document text

    Returns:
        SectionRegistry consistent with ``text``.

    Raises:
        ValidationError: If ``text`` is not a string.

    """
    if not isinstance(text, str):
        raise ValidationError([f"document must be a string (got {type(text).__name__})"])

    lines = split_lines(text)
    sections: list[Section] = []
    open_title: str | None = None
    open_start = 0

    for index, line in enumerate(lines):
        title = extract_level_one_title(line)
        if title is None:
            continue
        if open_title is not None:
            sections.append(_close(open_title, open_start, index, lines))
        open_title = title
        open_start = index

    if open_title is not None:
        sections.append(_close(open_title, open_start, len(lines), lines))

    return SectionRegistry(sections, line_count=len(lines))


def _close(title: str, start: int, end: int, lines: list[str]) -> Section:
    return Section(title=title, start=start, end=end, lines=tuple(lines[start + 1 : end]))


def find_section(text: str, title: str) -> Section | None:
    """Parse ``text`` and return the section named ``title`` (trimmed), if any."""
    return parse_sections(text).get(title.strip())


def section_exists(text: str, title: str) -> bool:
    """Check for a level-1 section with exactly this (trimmed) title.

    Examples:
        >>> section_exists("# Intro\\ntext", "Intro")
        True
        >>> section_exists("## Intro\\ntext", "Intro")
        False
        >>> section_exists("# Intro advanced", "Intro")
        False
    """
    if not text or not isinstance(title, str) or not title.strip():
        return False
    wanted = title.strip()
    return any(extract_level_one_title(line) == wanted for line in split_lines(text))


def sections_exist(text: str, titles: Iterable[str]) -> dict[str, bool]:
    """Check many titles with a single parse.

    Returns:
        Each requested title (as given) mapped to whether it exists.
    """
    present = parse_sections(text) if text else SectionRegistry()
    return {title: title.strip() in present for title in titles}


def replace_section_lines(text: str, section: Section, new_content: str) -> str:
    """Rebuild ``text`` with a section's body replaced.

    The heading line and everything outside ``[start + 1, end)`` is kept
    byte for byte.

    Args:
        text: Current document text (``section`` must come from parsing it)
        section: Target section
        new_content: Replacement body

    Returns:
        The new document text.

    Raises:
        ValidationError: If the section's range does not fit the document.

    """
    lines = split_lines(text)
    if section.start < 0 or section.end > len(lines) or section.end <= section.start:
        raise ValidationError(
            [
                f"section '{section.title}' spans lines {section.start}-{section.end}, "
                f"document has {len(lines)}"
            ]
        )
    merged = lines[: section.body_start] + split_lines(new_content) + lines[section.end :]
    return "\n".join(merged)


__all__ = [
    "Section",
    "SectionRegistry",
    "find_section",
    "parse_sections",
    "replace_section_lines",
    "section_exists",
    "sections_exist",
    "split_lines",
]
