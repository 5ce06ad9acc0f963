"""Level-1 heading classification.

Only strict level-1 ATX headings delimit sections. A delimiter line is one
``#``, at least one whitespace character, then a title that does not start
with ``#``. Deeper headings (``##``, ``###``, ...) and tags (``#todo``) stay
inside the enclosing section's content.

Examples:
    >>> extract_level_one_title("# Backlog  ")
    'Backlog'
    >>> extract_level_one_title("## Notes") is None
    True
    >>> extract_level_one_title("#todo") is None
    True
"""

import re

# One '#', whitespace, a first title char that is neither '#' nor a line
# break, then the rest of the line; trailing whitespace is not captured.
_LEVEL_ONE = re.compile(r"#\s+([^\s#].*?)\s*")


def extract_level_one_title(line: str) -> str | None:
    """Return the trimmed title if ``line`` is a level-1 heading.

    Args:
        line: A single document line, without its trailing newline

    Returns:
        Title text, or None for any other line.

    """
    match = _LEVEL_ONE.fullmatch(line)
    if match is None:
        return None
    return match.group(1).strip() or None


def is_level_one_heading(line: str) -> bool:
    """Check whether a line delimits a section."""
    return extract_level_one_title(line) is not None


def first_level_one_heading(text: str) -> tuple[int, str] | None:
    """Find the first line of ``text`` that would delimit a new section.

    Section bodies must not contain such a line, or writing them back would
    split the section in two.

    Returns:
        (1-indexed line number, title), or None if ``text`` has no
        level-1 heading.

    Example:
        >>> first_level_one_heading("intro\\n# Other\\nmore")
        (2, 'Other')
    """
    for lineno, line in enumerate(text.split("\n"), start=1):
        title = extract_level_one_title(line)
        if title is not None:
            return lineno, title
    return None


def title_problem(title: object) -> str | None:
    """Explain why ``title`` cannot be written as a level-1 heading.

    A usable title is a non-empty string (after trimming) with no line
    break and no ``#``.

    Returns:
        A short description of the problem, or None if the title is usable.

    """
    if not isinstance(title, str):
        return f"title must be a string (got {type(title).__name__})"
    normalized = title.strip()
    if not normalized:
        return "title is empty"
    if "\n" in normalized or "\r" in normalized:
        return f"title {title!r} contains a line break"
    if "#" in normalized:
        return f"title {title!r} contains '#'"
    return None


def heading_line(title: str) -> str:
    """Render a title as a level-1 heading line (no trailing newline)."""
    return f"# {title.strip()}"


__all__ = [
    "extract_level_one_title",
    "first_level_one_heading",
    "heading_line",
    "is_level_one_heading",
    "title_problem",
]
