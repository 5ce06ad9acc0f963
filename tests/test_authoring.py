"""Tests for section generation, insertion, and required-title checks."""

import pytest

from quadrille import (
    Err,
    Ok,
    ParseError,
    SectionMissingError,
    SyncConfig,
    ValidationError,
    create_section_report,
    generate_section_markdown,
    insert_missing_sections,
    parse_sections,
    reset_with_sections,
    split_frontmatter,
    sync_config_context,
    validate_required_sections,
)


class TestGenerateSectionMarkdown:
    """Heading plus normalized body."""

    def test_empty_content(self) -> None:
        assert generate_section_markdown("Introduction") == "# Introduction\n\n"

    def test_with_content(self) -> None:
        assert generate_section_markdown("Todo", "- Item 1") == "# Todo\n\n- Item 1\n\n"

    def test_trailing_newlines_normalized(self) -> None:
        """Content always ends in exactly one blank line."""
        assert generate_section_markdown("T", "body\n") == "# T\n\nbody\n\n"
        assert generate_section_markdown("T", "body\n\n\n") == "# T\n\nbody\n\n"

    def test_whitespace_only_content_is_empty(self) -> None:
        assert generate_section_markdown("T", "  \n ") == "# T\n\n"

    def test_title_trimmed(self) -> None:
        assert generate_section_markdown("  Done  ") == "# Done\n\n"

    @pytest.mark.parametrize("title", ["", "   ", "a\nb", "#tag", "C# notes"])
    def test_malformed_title_raises(self, title: str) -> None:
        with pytest.raises(ParseError):
            generate_section_markdown(title)

    def test_non_string_content_raises(self) -> None:
        with pytest.raises(ParseError, match="content must be a string"):
            generate_section_markdown("T", None)  # type: ignore[arg-type]

    def test_content_with_level_one_heading_raises(self) -> None:
        """A body line that would open another section is refused."""
        with pytest.raises(ParseError, match="level-1 heading '# Other'") as excinfo:
            generate_section_markdown("T", "intro\n# Other\nmore")
        assert excinfo.value.lineno == 2

    def test_deeper_headings_and_tags_allowed(self) -> None:
        text = generate_section_markdown("T", "## Sub\n#tag\nbody")
        assert parse_sections(text).titles == ("T",)


class TestInsertMissingSections:
    """Appending generated sections."""

    def test_appends_missing_title(self) -> None:
        result = insert_missing_sections("# A\nfoo\n", ["B"])

        assert result == Ok("# A\nfoo\n\n# B\n\n")
        registry = parse_sections(result.unwrap())
        assert registry.titles == ("A", "B")
        assert registry["A"].content.strip() == "foo"

    def test_all_present_returns_text_unchanged(self) -> None:
        text = "# A\nfoo\n# B\nbar\n  "
        assert insert_missing_sections(text, ["A", "B"]) == Ok(text)

    def test_idempotent(self) -> None:
        once = insert_missing_sections("# A\n", ["B", "C"]).unwrap()
        twice = insert_missing_sections(once, ["B", "C"]).unwrap()
        assert once == twice

    def test_order_preserved_and_repeats_skipped(self) -> None:
        result = insert_missing_sections("", ["Z", "A", "Z", " A "]).unwrap()
        assert result == "# Z\n\n# A\n\n"

    def test_empty_document_has_no_separator(self) -> None:
        assert insert_missing_sections("   \n", ["A"]).unwrap() == "# A\n\n"

    def test_trailing_whitespace_trimmed_before_separator(self) -> None:
        assert insert_missing_sections("# A\nfoo\n\n\n  ", ["B"]).unwrap() == (
            "# A\nfoo\n\n# B\n\n"
        )

    def test_malformed_titles_reported_together(self) -> None:
        """Every bad title is listed and nothing raises."""
        result = insert_missing_sections("# A\n", ["ok", "", "x#y"])

        assert isinstance(result, Err)
        assert isinstance(result.error, ValidationError)
        assert len(result.error.errors) == 2

    def test_non_string_document(self) -> None:
        result = insert_missing_sections(None, ["A"])  # type: ignore[arg-type]
        assert isinstance(result, Err)


class TestValidateRequiredSections:
    """Required-title checks returning Result values."""

    def test_all_present(self) -> None:
        result = validate_required_sections("# A\n# B\n", ["A", "B"])
        assert isinstance(result, Ok)
        assert result.value.titles == ("A", "B")

    def test_missing_titles_in_required_order(self) -> None:
        result = validate_required_sections("# B\n", ["C", "B", "A"])

        assert isinstance(result, Err)
        assert isinstance(result.error, SectionMissingError)
        assert result.error.missing_titles == ("C", "A")

    def test_missing_and_invalid_reported_together(self) -> None:
        result = validate_required_sections("# A\n", ["A", "B", "bad#"])

        assert isinstance(result, Err)
        assert isinstance(result.error, SectionMissingError)
        assert result.error.missing_titles == ("B",)
        assert result.error.invalid_titles == ("bad#",)

    def test_only_invalid_titles(self) -> None:
        result = validate_required_sections("# A\n", ["A", ""])

        assert isinstance(result, Err)
        assert isinstance(result.error, ValidationError)

    def test_duplicates_allowed_by_default(self) -> None:
        assert isinstance(validate_required_sections("# A\n1\n# A\n2", ["A"]), Ok)

    def test_duplicates_rejected_when_strict(self) -> None:
        result = validate_required_sections("# A\n1\n# A\n2", ["A"], reject_duplicates=True)

        assert isinstance(result, Err)
        assert isinstance(result.error, ValidationError)
        assert "more than once" in str(result.error)

    def test_strict_mode_from_config(self) -> None:
        with sync_config_context(SyncConfig(reject_duplicate_titles=True)):
            result = validate_required_sections("# A\n# A\n", ["A"])
        assert isinstance(result, Err)

    def test_missing_then_insert_scenario(self) -> None:
        """A missing section is reported, inserted, and then found."""
        text = "# A\nfoo\n"
        missing = validate_required_sections(text, ["A", "B"])
        assert isinstance(missing, Err)
        assert missing.error.missing_titles == ("B",)

        fixed = insert_missing_sections(text, ["A", "B"]).unwrap()
        assert isinstance(validate_required_sections(fixed, ["A", "B"]), Ok)

    def test_non_string_document(self) -> None:
        """Reported as an Err like the other Result helpers, never raised."""
        result = validate_required_sections(None, ["A"])  # type: ignore[arg-type]

        assert isinstance(result, Err)
        assert isinstance(result.error, ValidationError)
        assert result.error.errors == ("document must be a string (got NoneType)",)


class TestSectionReport:
    """Diagnostic report."""

    def test_full_report(self) -> None:
        report = create_section_report("# A\n# Extra\n# A\n", ["A", "B", ""]).unwrap()

        assert report.is_valid is False
        assert report.total_sections == 2
        assert report.required_sections == 2
        assert report.missing_sections == ("B",)
        assert report.extra_sections == ("Extra",)
        assert report.invalid_titles == ("title is empty",)
        assert report.duplicate_titles == ("A",)

    def test_valid_report(self) -> None:
        report = create_section_report("# A\n", ["A"]).unwrap()
        assert report.is_valid
        assert report.missing_sections == ()

    def test_non_string_document(self) -> None:
        result = create_section_report(b"# A\n", ["A"])  # type: ignore[arg-type]

        assert isinstance(result, Err)
        assert "document must be a string (got bytes)" in str(result.error)


class TestFrontmatterAndReset:
    """Frontmatter splitting and resetting a note to a layout's sections."""

    def test_split_frontmatter(self) -> None:
        front, body = split_frontmatter("---\nlayout: swot\n---\n# A\nx")
        assert front == "---\nlayout: swot\n---"
        assert body == "# A\nx"

    def test_no_frontmatter(self) -> None:
        assert split_frontmatter("# A\n---\n") == ("", "# A\n---\n")

    def test_unclosed_frontmatter_is_body(self) -> None:
        assert split_frontmatter("---\nlayout: swot\n") == ("", "---\nlayout: swot\n")

    def test_reset_keeps_frontmatter(self) -> None:
        text = "---\nlayout: swot\n---\n# Old\nstuff\n"
        result = reset_with_sections(text, ["Strengths", "Weaknesses"])

        assert result == "---\nlayout: swot\n---\n# Strengths\n\n# Weaknesses\n\n"

    def test_reset_without_frontmatter(self) -> None:
        assert reset_with_sections("# Old\nstuff", ["New"]) == "# New\n\n"

    def test_reset_rejects_bad_titles(self) -> None:
        with pytest.raises(ParseError):
            reset_with_sections("", ["ok", "#bad"])
