"""
Polysweeper: minesweeper on the surface of a Goldberg polyhedron.

Provides the topology generator, board and session models, mine
placement and the reveal/chord engine.
"""
from .errors import PolysweeperError, TopologyError, MinePlacementError
from .topology import (
    Polyhedron,
    expected_cell_count,
    generate_goldberg_polyhedron,
    validate_topology,
)
from .cell import Cell, CellState, observation_symbol
from .board import Board, BoardConfig
from .session import Session, difficulty_multiplier, mine_density, mine_count_for
from .mines import place_mines, safe_zone
from .engine import (
    GameEngine,
    Outcome,
    TickResult,
    check_victory,
    process_requests,
    resolve_chord,
)
from .storage import SessionStore
from .environment import PolysweeperEnv

__all__ = [
    "PolysweeperError",
    "TopologyError",
    "MinePlacementError",
    "Polyhedron",
    "expected_cell_count",
    "generate_goldberg_polyhedron",
    "validate_topology",
    "Cell",
    "CellState",
    "observation_symbol",
    "Board",
    "BoardConfig",
    "Session",
    "difficulty_multiplier",
    "mine_density",
    "mine_count_for",
    "place_mines",
    "safe_zone",
    "GameEngine",
    "Outcome",
    "TickResult",
    "check_victory",
    "process_requests",
    "resolve_chord",
    "SessionStore",
    "PolysweeperEnv",
]
