"""Property-based tests for the section parser using Hypothesis.

These tests verify invariants that hold for any document:
1. Sections never overlap and are ordered by start
2. A generated section parses back to the same title and content, or is
   refused when its content would start another section
3. Inserting titles that already exist changes nothing
"""

import string

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from quadrille import (
    ParseError,
    generate_section_markdown,
    insert_missing_sections,
    is_level_one_heading,
    parse_sections,
)
from quadrille.headings import first_level_one_heading

titles = st.text(
    alphabet=string.ascii_letters + string.digits + " -_()", min_size=1, max_size=20
).filter(lambda title: title.strip())
body_lines = st.text(alphabet=string.ascii_letters + string.digits + " #-*\t", max_size=20)
bodies = st.lists(body_lines, max_size=6).map("\n".join)
heading_lines = titles.map(lambda title: f"# {title}")
documents = st.lists(st.one_of(heading_lines, body_lines), max_size=15).map("\n".join)


class TestSegmentationProperties:
    """Invariants of parse_sections."""

    @given(text=documents)
    @settings(max_examples=200)
    def test_sections_are_ordered_and_disjoint(self, text: str) -> None:
        registry = parse_sections(text)
        ordered = registry.ordered()

        for section in ordered:
            assert section.start < section.end <= registry.line_count
        for current, following in zip(ordered, ordered[1:], strict=False):
            assert current.end <= following.start

    @given(text=documents)
    def test_parsing_is_deterministic(self, text: str) -> None:
        assert parse_sections(text).ordered() == parse_sections(text).ordered()

    @given(text=documents)
    def test_every_heading_line_starts_a_section(self, text: str) -> None:
        lines = text.split("\n")
        starts = {section.start for section in parse_sections(text).ordered()}
        assert starts == {i for i, line in enumerate(lines) if is_level_one_heading(line)}


class TestGenerationProperties:
    """Round trip and idempotence of the authoring helpers."""

    @given(title=titles, content=bodies)
    @settings(max_examples=200)
    def test_generated_section_round_trips(self, title: str, content: str) -> None:
        """One section named title whose content equals the input modulo edge newlines."""
        if first_level_one_heading(content) is not None:
            with pytest.raises(ParseError, match="level-1 heading"):
                generate_section_markdown(title, content)
            return

        registry = parse_sections(generate_section_markdown(title, content))

        assert registry.titles == (title.strip(),)
        parsed = registry[title.strip()].content
        if content.strip():
            assert parsed.strip("\n") == content.strip("\n")
        else:
            assert parsed.strip() == ""

    @given(text=documents, required=st.lists(titles, max_size=4))
    @settings(max_examples=100)
    def test_insertion_is_idempotent(self, text: str, required: list[str]) -> None:
        once = insert_missing_sections(text, required).unwrap()
        twice = insert_missing_sections(once, required).unwrap()

        assert twice == once
        present = parse_sections(once)
        assert all(title.strip() in present for title in required)
