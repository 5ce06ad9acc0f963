"""Tests for the exception taxonomy and user-facing descriptions."""

import pytest

from quadrille import (
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


class TestMessages:
    def test_parse_error_location(self) -> None:
        error = ParseError("bad title", lineno=3, source_file="notes.md")
        assert str(error) == "notes.md:3 bad title"
        assert str(ParseError("bad title")) == "bad title"

    def test_validation_error_lists_everything(self) -> None:
        error = ValidationError(["one", "two"], model_name="kanban")
        assert error.errors == ("one", "two")
        assert str(error) == "Layout 'kanban': one; two"

    def test_section_missing(self) -> None:
        error = SectionMissingError(["B", "C"], model_name="pair", doc_id="notes.md")
        assert str(error) == "Missing sections for layout 'pair' in notes.md: 'B', 'C'"

    def test_section_missing_with_invalid_titles(self) -> None:
        error = SectionMissingError(["B"], invalid_titles=["x#"])
        assert error.invalid_titles == ("x#",)
        assert "invalid titles: x#" in str(error)

    def test_sync_conflict(self) -> None:
        error = SyncConflictError("A", doc_id="notes.md")
        assert str(error) == "Edit to section 'A' in notes.md discarded: section no longer exists"

    def test_layout_not_found(self) -> None:
        assert str(LayoutNotFoundError("x", ["a", "b"])) == "Layout 'x' not found (available: a, b)"

    def test_document_write_error(self) -> None:
        assert str(DocumentWriteError("notes.md", title="A")) == (
            "Failed to write section 'A' of notes.md"
        )

    def test_frame_refresh_error(self) -> None:
        error = FrameRefreshError("B", doc_id="notes.md")
        assert error.title == "B"
        assert str(error) == "Frame for section 'B' could not be refreshed from notes.md"

    @pytest.mark.parametrize(
        "error",
        [
            ParseError("x"),
            ValidationError(["x"]),
            SectionMissingError(["x"]),
            SyncConflictError("x"),
            LayoutNotFoundError("x"),
            DocumentWriteError("x"),
            FrameRefreshError("x"),
        ],
    )
    def test_common_base(self, error: Exception) -> None:
        assert isinstance(error, QuadrilleError)


class TestDescribeIssue:
    def test_missing_sections_suggests_headings(self) -> None:
        text = describe_issue(SectionMissingError(["B"]))
        assert "# B" in text
        assert "insert them automatically" in text

    def test_write_error_includes_cause(self) -> None:
        try:
            try:
                raise OSError("disk full")
            except OSError as exc:
                raise DocumentWriteError("notes.md") from exc
        except DocumentWriteError as error:
            assert describe_issue(error).endswith("disk full")

    def test_conflict(self) -> None:
        assert "reopen the board" in describe_issue(SyncConflictError("A"))

    def test_plain_fallback(self) -> None:
        assert describe_issue(ValidationError(["bad"])) == "bad"
