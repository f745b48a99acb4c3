"""
Session and difficulty model for Polysweeper.

A session spans a whole game: the level survives board regeneration,
while the per-level counters reset every time a new board is built.
"""
import math
from dataclasses import dataclass, asdict, fields
from typing import Any, Dict, Optional


# ============================================================================
# Difficulty
# ============================================================================

BASE_MINE_RATE = 0.15
LEVEL_DIFFICULTY_STEP = 0.2
MAX_MINE_RATE = 0.5


def difficulty_multiplier(level: int) -> float:
    """Mine-rate multiplier for a level (1.0 at level 1, +0.2 per level)."""
    if level < 1:
        raise ValueError("Level must be at least 1")
    return 1.0 + (level - 1) * LEVEL_DIFFICULTY_STEP


def mine_density(level: int) -> float:
    """Fraction of cells that are mines, capped at MAX_MINE_RATE."""
    return min(BASE_MINE_RATE * difficulty_multiplier(level), MAX_MINE_RATE)


def mine_count_for(total_cells: int, level: int) -> int:
    """Number of mines for a board, truncated toward zero."""
    return math.floor(total_cells * mine_density(level))


# ============================================================================
# Session
# ============================================================================

@dataclass
class Session:
    """
    Game-wide progress plus counters for the current level.

    Attributes:
        level: Current level, starting at 1.
        max_level: Highest level ever reached.
        is_first_click: True until the first reveal of the level.
        total_mines: Mines on the current board (0 until placement).
        flags_placed: Cells currently flagged.
        cells_revealed: Cells revealed on the current board.
        total_cells: Cells on the current board.
        start_time: Clock reading at the first reveal of the level.
    """

    level: int = 1
    max_level: int = 1
    is_first_click: bool = True
    total_mines: int = 0
    flags_placed: int = 0
    cells_revealed: int = 0
    total_cells: int = 0
    start_time: Optional[float] = None

    def __post_init__(self) -> None:
        """Validate session values after initialization."""
        if self.level < 1:
            raise ValueError("Level must be at least 1")
        if self.max_level < self.level:
            self.max_level = self.level

    def start_level(self, total_cells: int) -> None:
        """Reset per-level counters for a freshly generated board."""
        self.is_first_click = True
        self.total_mines = 0
        self.flags_placed = 0
        self.cells_revealed = 0
        self.total_cells = total_cells
        self.start_time = None

    def advance_level(self) -> None:
        """Move to the next level, tracking the highest level reached."""
        self.level += 1
        if self.level > self.max_level:
            self.max_level = self.level

    @property
    def safe_cells(self) -> int:
        """Cells that must be revealed to clear the board."""
        return self.total_cells - self.total_mines

    @property
    def is_cleared(self) -> bool:
        """Win condition: every non-mine cell of a mined board revealed."""
        return self.total_mines > 0 and self.cells_revealed >= self.safe_cells

    @property
    def mines_remaining(self) -> int:
        """Mines minus flags, as shown on the HUD (can go negative)."""
        return self.total_mines - self.flags_placed

    def elapsed(self, now: float) -> float:
        """Seconds since the first reveal, or 0 before it."""
        if self.start_time is None:
            return 0.0
        return max(0.0, now - self.start_time)

    def hud_text(self, now: float, status: str = "") -> str:
        """Single-line HUD summary."""
        return (
            f"Lvl: {self.level} | Mines: {self.mines_remaining} | "
            f"Time: {self.elapsed(now):.0f}  {status}"
        ).rstrip()

    # ========================================================================
    # Serialization
    # ========================================================================

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Session":
        """
        Build a session from a dictionary produced by to_dict.

        Raises:
            ValueError: If a field is missing or has the wrong type.
        """
        if not isinstance(data, dict):
            raise ValueError("Session data must be a mapping")
        values = {}
        for item in fields(cls):
            if item.name not in data:
                raise ValueError(f"Missing session field: {item.name}")
            values[item.name] = data[item.name]

        for name in ("level", "max_level", "total_mines", "flags_placed",
                     "cells_revealed", "total_cells"):
            value = values[name]
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(f"Invalid value for {name}: {value!r}")
        if not isinstance(values["is_first_click"], bool):
            raise ValueError("is_first_click must be a boolean")
        start_time = values["start_time"]
        if start_time is not None:
            if isinstance(start_time, bool) or not isinstance(start_time, (int, float)):
                raise ValueError(f"Invalid start_time: {start_time!r}")
            values["start_time"] = float(start_time)
        return cls(**values)
