"""Tests for editor placement helpers."""

import pytest

from quadrille import GridSize, LayoutBlock
from quadrille.layout import (
    blocks_overlap,
    find_duplicate_titles,
    find_free_position,
    normalize_block,
    would_collide,
)

GRID = GridSize(columns=24, rows=24)


class TestOverlap:
    @pytest.mark.parametrize(
        ("a", "b", "expected"),
        [
            (LayoutBlock("A", 0, 0, 4, 4), LayoutBlock("B", 3, 3, 2, 2), True),
            (LayoutBlock("A", 0, 0, 4, 4), LayoutBlock("B", 4, 0, 2, 2), False),
            (LayoutBlock("A", 0, 0, 4, 4), LayoutBlock("B", 0, 4, 2, 2), False),
            (LayoutBlock("A", 0, 0, 10, 10), LayoutBlock("B", 2, 2, 1, 1), True),
        ],
    )
    def test_blocks_overlap(self, a: LayoutBlock, b: LayoutBlock, expected: bool) -> None:
        assert blocks_overlap(a, b) is expected
        assert blocks_overlap(b, a) is expected

    def test_would_collide_excludes_moved_block(self) -> None:
        board = [LayoutBlock("A", 0, 0, 4, 4), LayoutBlock("B", 4, 0, 4, 4)]
        moved = LayoutBlock("A", 2, 0, 4, 4)

        assert would_collide(moved, board, exclude="A") == [board[1]]
        assert would_collide(moved, board) == board


class TestFindFreePosition:
    def test_empty_board(self) -> None:
        assert find_free_position(4, 4, [], grid=GRID) == (0, 0)

    def test_first_row_then_next(self) -> None:
        board = [LayoutBlock("A", 0, 0, 20, 2)]
        assert find_free_position(4, 2, board, grid=GRID) == (20, 0)
        assert find_free_position(5, 2, board, grid=GRID) == (0, 2)

    def test_full_board(self) -> None:
        board = [LayoutBlock("All", 0, 0, 24, 24)]
        assert find_free_position(1, 1, board, grid=GRID) is None

    @pytest.mark.parametrize(("w", "h"), [(0, 1), (1, 0), (25, 1), (1, 25)])
    def test_impossible_sizes(self, w: int, h: int) -> None:
        assert find_free_position(w, h, [], grid=GRID) is None

    def test_result_does_not_collide(self) -> None:
        board = [LayoutBlock("A", 0, 0, 12, 12), LayoutBlock("B", 12, 0, 12, 6)]
        x, y = find_free_position(6, 6, board, grid=GRID)
        assert not would_collide(LayoutBlock("New", x, y, 6, 6), board)
        assert (x, y) == (12, 6)


class TestNormalizeBlock:
    def test_inside_grid_unchanged(self) -> None:
        block = LayoutBlock("A", 1, 2, 3, 4)
        assert normalize_block(block, grid=GRID) == block

    def test_clamps_position_and_size(self) -> None:
        assert normalize_block(LayoutBlock("A", -3, 30, 0, 5), grid=GRID) == LayoutBlock(
            "A", 0, 23, 1, 1
        )

    def test_shrinks_overflowing_width(self) -> None:
        assert normalize_block(LayoutBlock("A", 20, 0, 10, 2), grid=GRID).w == 4


class TestDuplicateTitles:
    def test_case_and_whitespace_insensitive(self) -> None:
        blocks = [
            LayoutBlock("Todo", 0, 0, 1, 1),
            LayoutBlock(" todo ", 1, 0, 1, 1),
            LayoutBlock("Done", 2, 0, 1, 1),
        ]
        assert find_duplicate_titles(blocks) == [" todo "]

    def test_no_duplicates(self) -> None:
        assert find_duplicate_titles([LayoutBlock("A", 0, 0, 1, 1)]) == []
