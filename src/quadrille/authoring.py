"""Generate, insert, and check sections in a document's text.

These helpers sit on top of ``parse_sections`` and back the "this board
needs sections your note does not have" workflow: report what is missing,
then offer to append it.

Only ``generate_section_markdown`` and ``reset_with_sections`` raise (on a
title that cannot be a heading, or body content that would start another
section). Everything else reports problems through
``Ok``/``Err`` values.

Example:
    >>> text = "# Todo\\n- write tests\\n"
    >>> validate_required_sections(text, ["Todo", "Done"])
    Err(error=SectionMissingError("Missing sections: 'Done'"))
    >>> insert_missing_sections(text, ["Done"]).unwrap()
    '# Todo\\n- write tests\\n\\n# Done\\n\\n'

"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from quadrille.errors import ParseError, SectionMissingError, ValidationError
from quadrille.headings import first_level_one_heading, heading_line, title_problem
from quadrille.result import Err, Ok, Result
from quadrille.sections import SectionRegistry, parse_sections, split_lines

FRONTMATTER_FENCE = "---"


def generate_section_markdown(title: str, content: str = "") -> str:
    """Render a new section: heading, blank line, content, blank line.

    Args:
        title: Section title (trimmed; must not contain ``#`` or a line break)
        content: Initial body (optional)

    Returns:
        ``"# title\\n\\n"`` followed by the content, which always ends in
        exactly one blank line.

    Raises:
        ParseError: If the title cannot be written as a level-1 heading,
            or the content contains a level-1 heading line (it would start
            another section). ``lineno`` is the offending content line.

    Examples:
        >>> generate_section_markdown("Introduction")
        '# Introduction\\n\\n'
        >>> generate_section_markdown("Todo", "- Item 1")
        '# Todo\\n\\n- Item 1\\n\\n'

    """
    problem = title_problem(title)
    if problem is not None:
        raise ParseError(problem)
    if not isinstance(content, str):
        raise ParseError(f"content must be a string (got {type(content).__name__})")
    heading = first_level_one_heading(content)
    if heading is not None:
        lineno, nested = heading
        raise ParseError(f"content contains level-1 heading '# {nested}'", lineno=lineno)

    header = heading_line(title) + "\n\n"
    if not content.strip():
        return header
    return header + content.rstrip("\n") + "\n\n"


def insert_missing_sections(text: str, titles: Iterable[str]) -> Result[str, ValidationError]:
    """Append a generated section for every title the document lacks.

    Titles already present (and repeats within ``titles``) are skipped, so
    inserting titles that all exist returns the text unchanged. New
    sections go after the trailing content, in the order given, separated
    from it by a blank line.

    Args:
        text: Current document text
        titles: Titles that must exist afterwards

    Returns:
        Ok(new text) or Err(ValidationError) naming every unusable title.

    """
    if not isinstance(text, str):
        return Err(_not_a_document(text))

    titles = list(titles)
    problems = _title_problems(titles)
    if problems:
        return Err(ValidationError(problems))

    present = parse_sections(text)
    missing = [title for title in _unique_trimmed(titles) if title not in present]
    if not missing:
        return Ok(text)

    addition = "".join(generate_section_markdown(title) for title in missing)
    cleaned = text.rstrip()
    separator = "\n\n" if cleaned else ""
    return Ok(cleaned + separator + addition)


def validate_required_sections(
    text: str,
    titles: Iterable[str],
    *,
    reject_duplicates: bool | None = None,
) -> Result[SectionRegistry, SectionMissingError | ValidationError]:
    """Check that every required title heads a section.

    Args:
        text: Document text
        titles: Required section titles (trimmed before comparing)
        reject_duplicates: Treat repeated headings as an error; defaults to
            ``SyncConfig.reject_duplicate_titles``

    Returns:
        Ok(registry) when all are present. Otherwise Err with a
        SectionMissingError listing the absent titles in the order they
        were required (and any unusable ones in ``invalid_titles``), or a
        ValidationError for a non-string document, for unusable titles
        when nothing is missing, or, in strict mode, for duplicated headings.

    """
    if not isinstance(text, str):
        return Err(_not_a_document(text))

    titles = list(titles)
    problems = _title_problems(titles)
    invalid = [str(title) for title in titles if title_problem(title) is not None]
    usable = [title for title in titles if title_problem(title) is None]

    registry = parse_sections(text)
    missing = [title for title in _unique_trimmed(usable) if title not in registry]
    if missing:
        return Err(SectionMissingError(missing, invalid_titles=invalid))
    if problems:
        return Err(ValidationError(problems))

    if reject_duplicates is None:
        from quadrille.config import get_sync_config

        reject_duplicates = get_sync_config().reject_duplicate_titles
    if reject_duplicates and registry.duplicates:
        return Err(
            ValidationError(
                [f"heading '# {title}' appears more than once" for title in registry.duplicates]
            )
        )
    return Ok(registry)


@dataclass(frozen=True, slots=True)
class SectionReport:
    """Diagnostic summary of a document against a list of required titles."""

    is_valid: bool
    total_sections: int
    required_sections: int
    missing_sections: tuple[str, ...]
    extra_sections: tuple[str, ...]
    invalid_titles: tuple[str, ...]
    duplicate_titles: tuple[str, ...]


def create_section_report(
    text: str,
    titles: Sequence[str],
) -> Result[SectionReport, ValidationError]:
    """Compare a document's sections with the titles a board needs.

    Unlike ``validate_required_sections`` this never stops at the first kind
    of problem: missing, extra, invalid, and duplicated titles are all
    reported together.

    Returns:
        Ok(report), or Err(ValidationError) if ``text`` is not a string.
    """
    if not isinstance(text, str):
        return Err(_not_a_document(text))

    registry = parse_sections(text)
    invalid = tuple(_title_problems(titles))
    required = _unique_trimmed(title for title in titles if title_problem(title) is None)
    missing = tuple(title for title in required if title not in registry)
    extra = tuple(title for title in registry.titles if title not in required)

    return Ok(
        SectionReport(
            is_valid=not missing and not invalid,
            total_sections=len(registry),
            required_sections=len(required),
            missing_sections=missing,
            extra_sections=extra,
            invalid_titles=invalid,
            duplicate_titles=registry.duplicates,
        )
    )


def split_frontmatter(text: str) -> tuple[str, str]:
    """Split a leading YAML frontmatter block from the body.

    Returns:
        (frontmatter including both fences, remaining body). Frontmatter is
        empty when the text does not open with a closed ``---`` block.

    """
    lines = split_lines(text)
    if not lines or lines[0].rstrip() != FRONTMATTER_FENCE:
        return "", text
    for index in range(1, len(lines)):
        if lines[index].rstrip() == FRONTMATTER_FENCE:
            return "\n".join(lines[: index + 1]), "\n".join(lines[index + 1 :])
    return "", text


def reset_with_sections(text: str, titles: Iterable[str]) -> str:
    """Replace the document body with empty sections for ``titles``.

    Frontmatter is preserved; everything after it is discarded.

    Raises:
        ParseError: If any title cannot be a heading.
    """
    titles = list(titles)
    problems = _title_problems(titles)
    if problems:
        raise ParseError("; ".join(problems))

    frontmatter, _ = split_frontmatter(text)
    body = "".join(generate_section_markdown(title) for title in _unique_trimmed(titles))
    return f"{frontmatter}\n{body}" if frontmatter else body


def _title_problems(titles: Iterable[object]) -> list[str]:
    return [problem for title in titles if (problem := title_problem(title)) is not None]


def _not_a_document(text: object) -> ValidationError:
    return ValidationError([f"document must be a string (got {type(text).__name__})"])


def _unique_trimmed(titles: Iterable[str]) -> list[str]:
    unique: list[str] = []
    for title in titles:
        normalized = title.strip()
        if normalized not in unique:
            unique.append(normalized)
    return unique


__all__ = [
    "FRONTMATTER_FENCE",
    "SectionReport",
    "create_section_report",
    "generate_section_markdown",
    "insert_missing_sections",
    "reset_with_sections",
    "split_frontmatter",
    "validate_required_sections",
]
