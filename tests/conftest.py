"""
Pytest configuration and shared fixtures.
"""
import random
import sys
from pathlib import Path
from typing import List, Tuple

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from polysweeper import (
    Board,
    BoardConfig,
    Cell,
    GameEngine,
    Session,
    generate_goldberg_polyhedron,
)


# ============================================================================
# Helpers
# ============================================================================

def _fixed_order(order: List[int]):
    """
    Shuffle replacement that puts the given ids first, in order.

    Lets a test decide exactly which cells become mines.
    """
    def shuffle(candidates: List[int]) -> None:
        wanted = [cell_id for cell_id in order if cell_id in candidates]
        rest = [cell_id for cell_id in candidates if cell_id not in wanted]
        candidates[:] = wanted + rest
    return shuffle


def _no_shuffle(candidates: List[int]) -> None:
    """Keep candidates in ascending id order."""


def _path_adjacency(length: int) -> List[Tuple[int, ...]]:
    """Neighbor lists of a simple path 0 - 1 - ... - (length - 1)."""
    adjacency = []
    for i in range(length):
        neighbors = []
        if i > 0:
            neighbors.append(i - 1)
        if i < length - 1:
            neighbors.append(i + 1)
        adjacency.append(tuple(neighbors))
    return adjacency


@pytest.fixture
def fixed_order():
    """Factory for shuffles that put chosen ids first."""
    return _fixed_order


@pytest.fixture
def no_shuffle():
    """Shuffle that keeps ascending id order."""
    return _no_shuffle


@pytest.fixture
def path_board() -> Board:
    """Six cells in a line: 0 - 1 - 2 - 3 - 4 - 5."""
    return Board.from_adjacency(_path_adjacency(6))


# ============================================================================
# Topology Fixtures
# ============================================================================

@pytest.fixture(scope="session")
def dodecahedron():
    """Subdivision depth 0: twelve pentagons."""
    return generate_goldberg_polyhedron(1.0, 0)


@pytest.fixture(scope="session")
def small_polyhedron():
    """Subdivision depth 1: 42 cells."""
    return generate_goldberg_polyhedron(2.0, 1)


@pytest.fixture(scope="session")
def level_one_polyhedron():
    """Subdivision depth 2: 162 cells, as used on level 1."""
    return generate_goldberg_polyhedron(2.0, 2)


# ============================================================================
# Board Fixtures
# ============================================================================

@pytest.fixture
def small_board(small_polyhedron) -> Board:
    """Fresh 42-cell board."""
    return Board.from_polyhedron(small_polyhedron)


@pytest.fixture
def default_board(level_one_polyhedron) -> Board:
    """Fresh 162-cell board."""
    return Board.from_polyhedron(level_one_polyhedron)


@pytest.fixture
def engine(default_board: Board) -> GameEngine:
    """Level 1 engine with seeded mine placement and a frozen clock."""
    return GameEngine(
        session=Session(),
        board=default_board,
        shuffle=random.Random(1234).shuffle,
        clock=lambda: 100.0,
    )


@pytest.fixture
def small_engine(small_board: Board) -> GameEngine:
    """Level 1 engine on the 42-cell board."""
    return GameEngine(
        session=Session(),
        board=small_board,
        shuffle=random.Random(99).shuffle,
        clock=lambda: 0.0,
    )


# ============================================================================
# Cell Fixtures
# ============================================================================

@pytest.fixture
def hidden_cell() -> Cell:
    """Create a hidden cell."""
    return Cell(id=0, neighbor_ids=(1, 2, 3, 4, 5))


@pytest.fixture
def mine_cell() -> Cell:
    """Create a cell containing a mine."""
    return Cell(id=0, is_mine=True)


@pytest.fixture
def numbered_cell() -> Cell:
    """Create a revealed cell with adjacent mines."""
    cell = Cell(id=0, adjacent_mines=3)
    cell.reveal()
    return cell


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def valid_config() -> BoardConfig:
    """Create a valid board configuration."""
    return BoardConfig(2.0, 2)
