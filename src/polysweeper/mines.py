"""
Mine placement for Polysweeper.

Mines are placed lazily on the first reveal of a level so that the
clicked cell and its whole neighborhood are always safe.
"""
import logging
import random
from typing import Callable, List, MutableSequence, Set

from .board import Board
from .errors import MinePlacementError
from .session import mine_count_for

logger = logging.getLogger(__name__)

# In-place shuffle of a list of candidate ids; random.shuffle by default.
Shuffler = Callable[[MutableSequence[int]], None]


def safe_zone(board: Board, safe_id: int) -> Set[int]:
    """The anchor cell plus all of its neighbors."""
    return {safe_id, *board.neighbors(safe_id)}


def place_mines(
    board: Board,
    safe_id: int,
    level: int,
    shuffle: Shuffler = random.shuffle,
) -> int:
    """
    Place mines on a board, keeping the anchor's neighborhood clear.

    Args:
        board: Board without mines.
        safe_id: Id of the cell that triggered placement.
        level: Current level, which sets the mine density.
        shuffle: In-place shuffle used to pick mine cells.

    Returns:
        Number of mines placed.

    Raises:
        MinePlacementError: If the board already has mines.
        ValueError: If safe_id is not a cell of the board.
    """
    if board.mines_placed:
        raise MinePlacementError("Mines have already been placed on this board")
    if board.get_cell(safe_id) is None:
        raise ValueError(f"Unknown safe cell id: {safe_id}")

    excluded = safe_zone(board, safe_id)
    candidates: List[int] = [
        cell.id for cell in board if cell.id not in excluded
    ]
    num_mines = mine_count_for(board.num_cells, level)
    if num_mines > len(candidates):
        logger.warning(
            "Level %d wants %d mines but only %d cells are outside the safe zone",
            level, num_mines, len(candidates),
        )
        num_mines = len(candidates)

    shuffle(candidates)
    for cell_id in candidates[:num_mines]:
        board.cells[cell_id].is_mine = True

    _calculate_adjacent_mines(board)
    board.mines_placed = True
    logger.debug(
        "Placed %d mines on %d cells around safe cell %d",
        num_mines, board.num_cells, safe_id,
    )
    return num_mines


def _calculate_adjacent_mines(board: Board) -> None:
    """Calculate adjacent mine counts for all non-mine cells."""
    for cell in board:
        if not cell.is_mine:
            cell.adjacent_mines = sum(
                1 for nid in cell.neighbor_ids if board.cells[nid].is_mine
            )
