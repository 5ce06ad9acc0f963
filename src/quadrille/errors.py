"""Exception classes for Quadrille.

Provides the closed set of problems the parser, the layout validator, and
the synchronization engine can report. Pure helpers hand these back inside
``Err`` values (see ``quadrille.result``); only argument misuse and the
explicit ``unwrap``/``raise_for_errors`` calls raise them.

Taxonomy:
    ParseError           malformed input to a title-generation helper
    ValidationError      layout structure/bounds/collision or bad titles
    SectionMissingError  referenced titles absent from the document
    SyncConflictError    a local write aborted (section vanished or content
                         would split it)
    LayoutNotFoundError  a board referenced by an unknown name
    DocumentWriteError   the host store failed while committing an edit
    FrameRefreshError    a frame raised while being shown new content
"""

from __future__ import annotations

from collections.abc import Iterable


class QuadrilleError(Exception):
    """Base exception for all Quadrille errors.

    Subclass this for specific error categories.
    """

    pass


class ParseError(QuadrilleError):
    """Malformed input to a section-generation helper.

    The segmentation scan itself never fails; this is raised only when a
    caller asks to generate a heading from an unusable title.
    """

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        source_file: str | None = None,
    ) -> None:
        """Initialize parse error with optional location.

        Args:
            message: Error description
            lineno: Line number where error occurred (1-indexed)
            source_file: Path to source file (optional)
        """
        self.message = message
        self.lineno = lineno
        self.source_file = source_file

        location = ""
        if source_file:
            location = f"{source_file}:"
        if lineno is not None:
            location += f"{lineno}:"
        if location:
            location = location.rstrip(":") + " "

        super().__init__(f"{location}{message}")


class ValidationError(QuadrilleError):
    """Structural, bounds, or collision problems, or invalid titles.

    Always carries every offending entry, never just the first.
    """

    def __init__(self, errors: Iterable[str], model_name: str | None = None) -> None:
        """Initialize validation error.

        Args:
            errors: Human-readable description of each problem
            model_name: Layout model the errors belong to (optional)
        """
        self.errors = tuple(errors)
        self.model_name = model_name

        prefix = f"Layout '{model_name}': " if model_name else ""
        super().__init__(prefix + "; ".join(self.errors))


class SectionMissingError(QuadrilleError):
    """Referenced section titles are absent from the current document."""

    def __init__(
        self,
        missing_titles: Iterable[str],
        *,
        model_name: str | None = None,
        doc_id: str | None = None,
        invalid_titles: Iterable[str] = (),
    ) -> None:
        """Initialize section-missing error.

        Args:
            missing_titles: Titles not found, in the order they were requested
            model_name: Layout model that required them (optional)
            doc_id: Document they were looked up in (optional)
            invalid_titles: Requested titles that could never be headings
        """
        self.missing_titles = tuple(missing_titles)
        self.invalid_titles = tuple(invalid_titles)
        self.model_name = model_name
        self.doc_id = doc_id

        where = ""
        if model_name:
            where += f" for layout '{model_name}'"
        if doc_id:
            where += f" in {doc_id}"
        listed = ", ".join(f"'{title}'" for title in self.missing_titles)
        message = f"Missing sections{where}: {listed}" if listed else f"Invalid sections{where}"
        if self.invalid_titles:
            message += f" (invalid titles: {', '.join(self.invalid_titles)})"
        super().__init__(message)


class SyncConflictError(QuadrilleError):
    """A local edit could not be committed to its section."""

    def __init__(
        self,
        title: str,
        *,
        doc_id: str | None = None,
        reason: str = "section no longer exists",
    ) -> None:
        """Initialize sync conflict error.

        Args:
            title: Section the edit targeted
            doc_id: Document being written (optional)
            reason: Why the write was abandoned
        """
        self.title = title
        self.doc_id = doc_id
        self.reason = reason

        location = f" in {doc_id}" if doc_id else ""
        super().__init__(f"Edit to section '{title}'{location} discarded: {reason}")


class LayoutNotFoundError(QuadrilleError):
    """A layout model was requested by a name nobody registered."""

    def __init__(self, name: str, available: Iterable[str] = ()) -> None:
        """Initialize layout-not-found error.

        Args:
            name: The requested layout name
            available: Names that are registered, for the user to pick from
        """
        self.name = name
        self.available = tuple(available)

        hint = f" (available: {', '.join(self.available)})" if self.available else ""
        super().__init__(f"Layout '{name}' not found{hint}")


class DocumentWriteError(QuadrilleError):
    """The host document store failed while an edit was being committed.

    The underlying exception is chained as ``__cause__``.
    """

    def __init__(self, doc_id: str, *, title: str | None = None) -> None:
        """Initialize document write error.

        Args:
            doc_id: Document that could not be written
            title: Section whose edit was being committed (optional)
        """
        self.doc_id = doc_id
        self.title = title

        target = f" section '{title}' of" if title else ""
        super().__init__(f"Failed to write{target} {doc_id}")


class FrameRefreshError(QuadrilleError):
    """A frame failed to display its section's new content.

    The frame keeps its previous content and is retried on the next
    change. The frame's exception is chained as ``__cause__``.
    """

    def __init__(self, title: str, *, doc_id: str | None = None) -> None:
        """Initialize frame refresh error.

        Args:
            title: Section the frame displays
            doc_id: Document the content came from (optional)
        """
        self.title = title
        self.doc_id = doc_id

        source = f" from {doc_id}" if doc_id else ""
        super().__init__(f"Frame for section '{title}' could not be refreshed{source}")


# Every problem a host may be handed.
type Issue = (
    ParseError
    | ValidationError
    | SectionMissingError
    | SyncConflictError
    | LayoutNotFoundError
    | DocumentWriteError
    | FrameRefreshError
)

# Problems the synchronization engine reports instead of raising.
type SyncIssue = (
    SectionMissingError | SyncConflictError | DocumentWriteError | FrameRefreshError
)


def describe_issue(issue: Issue) -> str:
    """Render an issue as a user-facing sentence with a way to fix it.

    Args:
        issue: Any Quadrille problem value

    Returns:
        One line suitable for a notice or status bar
    """
    match issue:
        case SectionMissingError(missing_titles=missing) if missing:
            headings = ", ".join(f"# {title}" for title in missing)
            return f"{issue} - add the headings {headings} or insert them automatically"
        case LayoutNotFoundError(available=available) if available:
            return f"{issue} - check the layout name in the document"
        case SyncConflictError():
            return f"{issue} - reopen the board to pick up the current sections"
        case DocumentWriteError() | FrameRefreshError():
            cause = issue.__cause__
            return f"{issue}: {cause}" if cause is not None else str(issue)
        case _:
            return str(issue)


__all__ = [
    "DocumentWriteError",
    "FrameRefreshError",
    "Issue",
    "LayoutNotFoundError",
    "ParseError",
    "QuadrilleError",
    "SectionMissingError",
    "SyncConflictError",
    "SyncIssue",
    "ValidationError",
    "describe_issue",
]
