"""
Cell module for Polysweeper.

Represents one polygonal face of the Goldberg polyhedron with its
state (hidden/revealed/flagged), content (mine/number) and the
geometry handed to the presentation layer.
"""
from enum import Enum, auto
from dataclasses import dataclass, field
from typing import Tuple

import numpy as np


# ============================================================================
# Constants
# ============================================================================

HIDDEN_OBSERVATION = -1
FLAGGED_OBSERVATION = -2
MINE_OBSERVATION = 9


class CellState(Enum):
    """Possible visual states of a cell."""

    HIDDEN = auto()
    REVEALED = auto()
    FLAGGED = auto()


# ============================================================================
# Cell Data Class
# ============================================================================

@dataclass
class Cell:
    """
    Represents a single pentagonal or hexagonal cell on the sphere.

    Attributes:
        id: Stable identifier, equal to the generator's cell index.
        neighbor_ids: Ids of cells sharing an edge with this one.
        boundary: (k, 3) array of polygon corners, counter-clockwise
            when seen from outside the sphere.
        is_mine: Whether this cell contains a mine.
        adjacent_mines: Count of mines in neighboring cells (0-6).
        state: Current visual state (hidden, revealed, or flagged).
    """

    id: int
    neighbor_ids: Tuple[int, ...] = ()
    boundary: np.ndarray = field(
        default_factory=lambda: np.zeros((0, 3)), repr=False
    )
    is_mine: bool = False
    adjacent_mines: int = 0
    state: CellState = CellState.HIDDEN

    def reveal(self) -> bool:
        """
        Reveal this cell.

        Returns:
            True if cell was successfully revealed, False if already
            revealed or flagged.
        """
        if self.state != CellState.HIDDEN:
            return False
        self.state = CellState.REVEALED
        return True

    def toggle_flag(self) -> bool:
        """
        Toggle flag on this cell.

        Returns:
            True if flag was toggled, False if cell is revealed.
        """
        if self.state == CellState.REVEALED:
            return False
        if self.state == CellState.HIDDEN:
            self.state = CellState.FLAGGED
        else:
            self.state = CellState.HIDDEN
        return True

    def clear(self) -> None:
        """Return the cell to a hidden, mine-free state."""
        self.is_mine = False
        self.adjacent_mines = 0
        self.state = CellState.HIDDEN

    @property
    def is_hidden(self) -> bool:
        """Check if cell is hidden."""
        return self.state == CellState.HIDDEN

    @property
    def is_revealed(self) -> bool:
        """Check if cell is revealed."""
        return self.state == CellState.REVEALED

    @property
    def is_flagged(self) -> bool:
        """Check if cell is flagged."""
        return self.state == CellState.FLAGGED

    @property
    def is_pentagon(self) -> bool:
        """Check if cell is one of the twelve pentagons."""
        return len(self.neighbor_ids) == 5

    @property
    def center(self) -> np.ndarray:
        """Mean of the boundary corners."""
        return self.boundary.mean(axis=0)

    def to_observation(self) -> int:
        """
        Convert cell to observation value for rendering and agents.

        Returns:
            -1: Hidden cell
            -2: Flagged cell
            0-6: Revealed cell with adjacent mine count
            9: Revealed mine (game over state)
        """
        if self.state == CellState.HIDDEN:
            return HIDDEN_OBSERVATION
        if self.state == CellState.FLAGGED:
            return FLAGGED_OBSERVATION
        if self.is_mine:
            return MINE_OBSERVATION
        return self.adjacent_mines


def observation_symbol(value: int) -> str:
    """Single-character text form of an observation value."""
    if value == HIDDEN_OBSERVATION:
        return "."
    if value == FLAGGED_OBSERVATION:
        return "F"
    if value == MINE_OBSERVATION:
        return "*"
    if value == 0:
        return " "
    return str(value)
