"""Tests for board planning: layouts matched against documents."""

from quadrille import (
    Err,
    GridSize,
    LayoutBlock,
    LayoutModel,
    LayoutNotFoundError,
    Ok,
    create_default_registry,
    detect_board_name,
    insert_missing_sections,
    plan_board,
    plan_board_by_name,
    plan_document_board,
)

PAIR = LayoutModel("pair", (LayoutBlock("A", 0, 0, 12, 10), LayoutBlock("B", 12, 0, 12, 10)))


class TestPlanBoard:
    """Scenarios from a two-block board."""

    def test_both_sections_render(self) -> None:
        plan = plan_board("# A\nfoo\n# B\nbar\n", PAIR)

        assert plan.is_renderable
        assert plan.missing_titles == ()
        assert plan.layout.collisions == ()
        assert [p.block.title for p in plan.placements] == ["A", "B"]
        assert plan.placements[0].section.content == "foo"
        assert plan.missing_error() is None

    def test_missing_section_reported_then_inserted(self) -> None:
        text = "# A\nfoo\n"
        plan = plan_board(text, PAIR)

        assert not plan.is_renderable
        assert plan.missing_titles == ("B",)
        error = plan.missing_error(doc_id="notes.md")
        assert error is not None
        assert error.missing_titles == ("B",)
        assert error.model_name == "pair"
        assert "notes.md" in str(error)

        fixed = insert_missing_sections(text, plan.missing_titles).unwrap()
        assert plan_board(fixed, PAIR).is_renderable

    def test_invalid_block_gets_no_placement(self) -> None:
        model = LayoutModel(
            "clash", (LayoutBlock("A", 0, 0, 12, 10), LayoutBlock("B", 6, 0, 12, 10))
        )
        plan = plan_board("# A\n# B\n", model)

        assert not plan.is_renderable
        assert [p.block.title for p in plan.placements] == ["A"]
        assert plan.missing_titles == ()
        assert len(plan.layout.collisions) == 1

    def test_missing_titles_in_model_order(self) -> None:
        model = LayoutModel(
            "three",
            (
                LayoutBlock("Z", 0, 0, 1, 1),
                LayoutBlock("A", 1, 0, 1, 1),
                LayoutBlock("M", 2, 0, 1, 1),
            ),
        )
        plan = plan_board("# A\n", model, grid=GridSize(3, 1))
        assert plan.missing_titles == ("Z", "M")


class TestPlanBoardByName:
    def test_bundled_layout(self) -> None:
        text = "# Do\nship\n# Schedule\n# Delegate\n# Eliminate\n"
        result = plan_board_by_name(create_default_registry(), "eisenhower", text)

        assert isinstance(result, Ok)
        assert result.value.is_renderable

    def test_unknown_layout(self) -> None:
        result = plan_board_by_name(create_default_registry(), "kanban", "# A\n")

        assert isinstance(result, Err)
        assert isinstance(result.error, LayoutNotFoundError)
        assert "swot" in result.error.available


class TestDetectBoardName:
    """Layout name read from the document's frontmatter."""

    def test_plain_value(self) -> None:
        assert detect_board_name("---\nagile-board: swot\n---\n# Strengths\n") == "swot"

    def test_quoted_value_among_other_keys(self) -> None:
        text = '---\ntags: [work]\nagile-board: "moscow"\ncreated: 2024-01-01\n---\n# Must\n'
        assert detect_board_name(text) == "moscow"

    def test_no_frontmatter(self) -> None:
        assert detect_board_name("# A\nagile-board: swot\n") is None

    def test_key_absent_or_empty(self) -> None:
        assert detect_board_name("---\ntitle: Plan\n---\n") is None
        assert detect_board_name("---\nagile-board:\n---\n") is None

    def test_unclosed_frontmatter_ignored(self) -> None:
        assert detect_board_name("---\nagile-board: swot\n# A\n") is None

    def test_custom_key(self) -> None:
        assert detect_board_name("---\nboard: cornell\n---\n", key="board") == "cornell"


class TestPlanDocumentBoard:
    """Planning the board a document names for itself."""

    def test_named_board_is_planned(self) -> None:
        text = "---\nagile-board: eisenhower\n---\n# Do\nship\n# Schedule\n"
        result = plan_document_board(create_default_registry(), text)

        assert isinstance(result, Ok)
        plan = result.value
        assert plan is not None
        assert plan.model_name == "eisenhower"
        assert plan.placements[0].section.content == "ship"
        assert plan.missing_titles == ("Delegate", "Eliminate")

    def test_document_without_board(self) -> None:
        assert plan_document_board(create_default_registry(), "# Do\n") == Ok(None)

    def test_unknown_board(self) -> None:
        text = "---\nagile-board: kanban\n---\n# A\n"
        result = plan_document_board(create_default_registry(), text)

        assert isinstance(result, Err)
        assert isinstance(result.error, LayoutNotFoundError)
        assert result.error.name == "kanban"
