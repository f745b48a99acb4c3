"""
Unit tests for mine placement.

Tests mine counts, the first-click safe zone, adjacency counts, and
injectable shuffling.
"""
import random

import pytest
from polysweeper import Board, MinePlacementError, place_mines, safe_zone


def assert_counts_exact(board: Board) -> None:
    """Every non-mine cell counts exactly its mine neighbors."""
    for cell in board:
        if not cell.is_mine:
            expected = sum(board.get_cell(n).is_mine for n in cell.neighbor_ids)
            assert cell.adjacent_mines == expected


# ============================================================================
# Mine Count Tests
# ============================================================================

class TestMineCount:
    """Test how many mines are placed."""

    def test_level_one_on_42_cells_places_6(self, small_board: Board) -> None:
        """floor(42 * 0.15) = 6."""
        placed = place_mines(small_board, 0, level=1)
        assert placed == 6
        assert len(small_board.mine_ids()) == 6

    def test_level_one_on_162_cells_places_24(self, default_board: Board) -> None:
        """floor(162 * 0.15) = 24."""
        assert place_mines(default_board, 10, level=1) == 24

    def test_higher_level_places_more(self, default_board: Board) -> None:
        """Level 6 doubles the base rate."""
        assert place_mines(default_board, 10, level=6) == 48

    def test_density_cap_at_high_level(self, default_board: Board) -> None:
        """Very high levels stop at half the board."""
        assert place_mines(default_board, 10, level=50) == 81

    def test_count_clamped_to_candidates(self) -> None:
        """A graph fully inside the safe zone gets no mines."""
        complete = [tuple(j for j in range(4) if j != i) for i in range(4)]
        board = Board.from_adjacency(complete)
        assert place_mines(board, 0, level=20) == 0
        assert board.mine_ids() == []
        assert board.mines_placed is True


# ============================================================================
# Safe Zone Tests
# ============================================================================

class TestSafeZone:
    """Test the first-click guarantee."""

    def test_safe_zone_is_cell_and_neighbors(self, small_board: Board) -> None:
        """The safe zone holds the anchor and its neighbors."""
        zone = safe_zone(small_board, 3)
        assert zone == {3, *small_board.neighbors(3)}

    @pytest.mark.parametrize("seed", range(5))
    def test_anchor_and_neighbors_are_never_mines(
        self, small_polyhedron, seed: int
    ) -> None:
        """No anchor on any board ever gets a mine nearby."""
        rng = random.Random(seed)
        for anchor in range(small_polyhedron.num_cells):
            board = Board.from_polyhedron(small_polyhedron)
            place_mines(board, anchor, level=10, shuffle=rng.shuffle)
            for cell_id in safe_zone(board, anchor):
                assert board.get_cell(cell_id).is_mine is False

    def test_fixed_order_ignores_safe_cells(
        self, small_board: Board, fixed_order
    ) -> None:
        """Cells in the safe zone are never candidates, even when preferred."""
        anchor = 0
        neighbor = small_board.neighbors(anchor)[0]
        place_mines(small_board, anchor, level=1, shuffle=fixed_order([neighbor, anchor]))
        assert small_board.get_cell(neighbor).is_mine is False
        assert small_board.get_cell(anchor).is_mine is False


# ============================================================================
# Layout Tests
# ============================================================================

class TestLayout:
    """Test exact layouts and adjacency counts."""

    def test_fixed_permutation_sets_exact_mines(
        self, small_board: Board, fixed_order
    ) -> None:
        """The first mine_count shuffled candidates become mines."""
        outside = sorted(set(range(42)) - safe_zone(small_board, 0))
        chosen = outside[-6:]
        place_mines(small_board, 0, level=1, shuffle=fixed_order(chosen))
        assert sorted(small_board.mine_ids()) == chosen

    def test_unshuffled_takes_lowest_ids(self, path_board: Board, no_shuffle) -> None:
        """Without shuffling the candidates stay in id order."""
        place_mines(path_board, 5, level=1, shuffle=no_shuffle)
        # floor(6 * 0.15) = 0
        assert path_board.mine_ids() == []
        path_board.reset()
        place_mines(path_board, 5, level=10, shuffle=no_shuffle)
        # floor(6 * min(0.15 * 2.8, 0.5)) = 2
        assert path_board.mine_ids() == [0, 1]

    @pytest.mark.parametrize("seed", range(5))
    def test_adjacent_counts_are_exact(self, default_board: Board, seed: int) -> None:
        """Counts equal the number of mine neighbors."""
        place_mines(default_board, 0, level=3, shuffle=random.Random(seed).shuffle)
        assert_counts_exact(default_board)

    def test_path_counts(self, path_board: Board, fixed_order) -> None:
        """Counts on a hand-made graph."""
        place_mines(path_board, 0, level=10, shuffle=fixed_order([3, 5]))
        assert path_board.mine_ids() == [3, 5]
        counts = [path_board.get_cell(i).adjacent_mines for i in (0, 1, 2, 4)]
        assert counts == [0, 0, 1, 2]


# ============================================================================
# Error Tests
# ============================================================================

class TestPlacementErrors:
    """Test misuse of placement."""

    def test_second_placement_raises_error(self, small_board: Board) -> None:
        """Mines are placed at most once per board."""
        place_mines(small_board, 0, level=1)
        with pytest.raises(MinePlacementError):
            place_mines(small_board, 1, level=1)

    def test_unknown_anchor_raises_error(self, small_board: Board) -> None:
        """The anchor must be a cell of the board."""
        with pytest.raises(ValueError, match="Unknown safe cell"):
            place_mines(small_board, 42, level=1)
        assert small_board.mines_placed is False
