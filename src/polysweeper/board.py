"""
Board module for Polysweeper.

Holds the per-level set of cells built from a generated Goldberg
polyhedron, keyed by the generator's cell index. Game rules live in
the mines and engine modules; the board only stores and looks up.
"""
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

import numpy as np

from .cell import Cell, CellState
from .topology import Polyhedron, generate_goldberg_polyhedron


# ============================================================================
# Constants
# ============================================================================

BASE_RADIUS = 2.0
RADIUS_PER_LEVEL = 0.5


@dataclass
class BoardConfig:
    """
    Configuration for a Polysweeper board.

    Attributes:
        radius: Radius of the sphere.
        subdivisions: Icosahedron subdivision rounds (cell count grows 4x).
    """

    radius: float = BASE_RADIUS
    subdivisions: int = 2

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Ensure configuration values are valid."""
        if self.radius <= 0:
            raise ValueError("Radius must be positive")
        if self.subdivisions < 0:
            raise ValueError("Subdivisions cannot be negative")

    @classmethod
    def for_level(cls, level: int) -> "BoardConfig":
        """Sphere grows with every level; detail steps up at 3 and 6."""
        if level < 1:
            raise ValueError("Level must be at least 1")
        if level < 3:
            subdivisions = 2
        elif level < 6:
            subdivisions = 3
        else:
            subdivisions = 4
        return cls(
            radius=BASE_RADIUS + (level - 1) * RADIUS_PER_LEVEL,
            subdivisions=subdivisions,
        )


# ============================================================================
# Board Class
# ============================================================================

@dataclass
class Board:
    """
    Polysweeper game board.

    Stores the cells of one level and the flag recording whether
    mines have been placed yet.
    """

    config: BoardConfig = field(default_factory=lambda: BoardConfig())
    polyhedron: Optional[Polyhedron] = field(default=None, repr=False)
    _cells: List[Cell] = field(default_factory=list, repr=False)
    mines_placed: bool = False

    def __post_init__(self) -> None:
        """Generate the polyhedron unless cells were supplied directly."""
        if self._cells:
            return
        if self.polyhedron is None:
            self.polyhedron = generate_goldberg_polyhedron(
                self.config.radius, self.config.subdivisions
            )
        self._init_cells()

    @classmethod
    def from_polyhedron(cls, polyhedron: Polyhedron) -> "Board":
        """Build a board around an already generated polyhedron."""
        config = BoardConfig(polyhedron.radius, polyhedron.subdivisions)
        return cls(config=config, polyhedron=polyhedron)

    @classmethod
    def from_adjacency(cls, adjacency: List[Tuple[int, ...]]) -> "Board":
        """
        Build a geometry-free board from a bare neighbor list.

        Used for hand-made graphs in tests and tools; no topology checks
        are applied beyond what the caller guarantees.
        """
        cells = [
            Cell(id=i, neighbor_ids=tuple(nbs)) for i, nbs in enumerate(adjacency)
        ]
        return cls(_cells=cells)

    # ========================================================================
    # Cell Storage (Low-level)
    # ========================================================================

    def _init_cells(self) -> None:
        """Create one hidden cell per polygon."""
        self._cells = [
            Cell(id=i, neighbor_ids=tuple(neighbors), boundary=polygon)
            for i, (polygon, neighbors) in enumerate(
                zip(self.polyhedron.polygons, self.polyhedron.adjacency)
            )
        ]
        self.mines_placed = False

    def is_valid_id(self, cell_id: int) -> bool:
        """Check if id names a cell on this board."""
        return (
            isinstance(cell_id, (int, np.integer))
            and not isinstance(cell_id, bool)
            and 0 <= cell_id < len(self._cells)
        )

    # ========================================================================
    # Lookup
    # ========================================================================

    @property
    def num_cells(self) -> int:
        """Number of cells on the board."""
        return len(self._cells)

    @property
    def cells(self) -> List[Cell]:
        """All cells, indexed by id."""
        return self._cells

    def __iter__(self) -> Iterator[Cell]:
        return iter(self._cells)

    def __len__(self) -> int:
        return len(self._cells)

    def get_cell(self, cell_id: int) -> Optional[Cell]:
        """Get cell by id, or None if invalid."""
        if not self.is_valid_id(cell_id):
            return None
        return self._cells[cell_id]

    def neighbors(self, cell_id: int) -> Tuple[int, ...]:
        """Neighbor ids of a cell, empty for an invalid id."""
        cell = self.get_cell(cell_id)
        if cell is None:
            return ()
        return cell.neighbor_ids

    @property
    def adjacency(self) -> List[Tuple[int, ...]]:
        """Neighbor ids for every cell, indexed by id."""
        return [cell.neighbor_ids for cell in self._cells]

    def mine_ids(self) -> List[int]:
        """Ids of every mine, for the game-over display pass."""
        return [cell.id for cell in self._cells if cell.is_mine]

    def count_neighbors(self, cell_id: int, state: CellState) -> int:
        """Count neighbors of a cell in the given state."""
        return sum(
            1 for nid in self.neighbors(cell_id) if self._cells[nid].state == state
        )

    def get_observation(self) -> np.ndarray:
        """
        Get board state as a flat numpy array indexed by cell id.

        Returns:
            1D int8 array where:
                -1 = hidden
                -2 = flagged
                0-6 = revealed with adjacent count
                9 = revealed mine
        """
        return np.array(
            [cell.to_observation() for cell in self._cells], dtype=np.int8
        )

    def get_valid_actions(self) -> List[int]:
        """
        Get list of cells that can be revealed.

        Returns:
            Ids of hidden cells.
        """
        return [cell.id for cell in self._cells if cell.is_hidden]

    def reset(self) -> None:
        """Hide every cell and remove all mines."""
        for cell in self._cells:
            cell.clear()
        self.mines_placed = False
