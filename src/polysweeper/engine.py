"""
Reveal/chord engine for Polysweeper.

Requests accumulate between ticks; each tick resolves chords into
reveal targets, places mines on the first reveal of a level, and
flood-fills to a fixed point before reporting the outcome.
"""
import logging
import random
import time
from collections import deque
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, Iterable, List, Optional

from .board import Board, BoardConfig
from .mines import Shuffler, place_mines
from .session import Session

logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

class Outcome(Enum):
    """Terminal signal consumed by the presentation layer."""

    NONE = auto()
    MINE_HIT = auto()
    VICTORY = auto()


OUTCOME_LABELS = {
    Outcome.NONE: "",
    Outcome.MINE_HIT: "GAME OVER",
    Outcome.VICTORY: "VICTORY!",
}


@dataclass
class TickResult:
    """
    What one batch of requests did to the board.

    Attributes:
        outcome: Terminal outcome reached in this batch, if any.
        revealed_ids: Cells revealed, in reveal order.
        mines_placed: Whether this batch triggered mine placement.
    """

    outcome: Outcome = Outcome.NONE
    revealed_ids: List[int] = field(default_factory=list)
    mines_placed: bool = False

    @property
    def changed(self) -> bool:
        """Whether any board or session state was mutated."""
        return bool(self.revealed_ids) or self.mines_placed


# ============================================================================
# Pure Operations
# ============================================================================

def resolve_chord(board: Board, cell_id: int) -> List[int]:
    """
    Reveal targets of a chord on a revealed cell.

    Args:
        board: Board to inspect.
        cell_id: Revealed cell being chorded.

    Returns:
        Hidden neighbor ids if the flagged neighbor count equals the
        cell's adjacent mine count, otherwise an empty list.
    """
    cell = board.get_cell(cell_id)
    if cell is None or not cell.is_revealed:
        return []

    flags = 0
    hidden = []
    for neighbor_id in cell.neighbor_ids:
        neighbor = board.cells[neighbor_id]
        if neighbor.is_flagged:
            flags += 1
        elif neighbor.is_hidden:
            hidden.append(neighbor_id)

    if flags != cell.adjacent_mines:
        return []
    return hidden


def check_victory(session: Session) -> bool:
    """Check if every non-mine cell of a mined board is revealed."""
    return session.is_cleared


def process_requests(
    board: Board,
    session: Session,
    reveal_ids: Iterable[int],
    chord_ids: Iterable[int] = (),
    shuffle: Shuffler = random.shuffle,
) -> TickResult:
    """
    Apply one tick's worth of reveal and chord requests.

    Chords are resolved first and their targets merged with the direct
    reveals. If the board has no mines yet, they are placed around the
    first hidden target before anything is revealed. The queue is then
    drained completely; every cell is revealed at most once.

    Args:
        board: Board to mutate.
        session: Session whose counters are updated.
        reveal_ids: Directly requested reveals.
        chord_ids: Requested chords.
        shuffle: In-place shuffle used for mine placement.

    Returns:
        TickResult describing the batch.
    """
    result = TickResult()
    queue = deque(reveal_ids)
    for chord_id in chord_ids:
        queue.extend(resolve_chord(board, chord_id))

    if not board.mines_placed:
        anchor = _first_hidden(board, queue)
        if anchor is not None:
            session.total_mines = place_mines(board, anchor, session.level, shuffle)
            session.is_first_click = False
            result.mines_placed = True

    visited = set()
    while queue:
        cell_id = queue.popleft()
        if cell_id in visited:
            continue
        cell = board.get_cell(cell_id)
        if cell is None or not cell.reveal():
            continue
        visited.add(cell_id)
        session.cells_revealed += 1
        result.revealed_ids.append(cell_id)

        if cell.is_mine:
            result.outcome = Outcome.MINE_HIT
            continue
        if cell.adjacent_mines == 0:
            queue.extend(
                nid for nid in cell.neighbor_ids if board.cells[nid].is_hidden
            )

    if result.outcome == Outcome.NONE and check_victory(session):
        result.outcome = Outcome.VICTORY
    return result


def _first_hidden(board: Board, cell_ids: Iterable[int]) -> Optional[int]:
    """First id naming an existing hidden cell."""
    for cell_id in cell_ids:
        cell = board.get_cell(cell_id)
        if cell is not None and cell.is_hidden:
            return cell_id
    return None


# ============================================================================
# Game Engine
# ============================================================================

class GameEngine:
    """
    Owns the session and the current level's board.

    Presentation code queues requests with request_reveal, request_chord
    or click, toggles flags directly, and calls tick once per frame.
    Requests naming unknown cells or cells in the wrong state are
    ignored.
    """

    def __init__(
        self,
        session: Optional[Session] = None,
        board: Optional[Board] = None,
        shuffle: Shuffler = random.shuffle,
        clock: Callable[[], float] = time.monotonic,
        on_change: Optional[Callable[[Session], None]] = None,
    ) -> None:
        """
        Initialize the engine.

        Args:
            session: Session to continue (default: fresh level 1 session).
            board: Board to play (default: generated for the session level).
            shuffle: In-place shuffle used for mine placement.
            clock: Time source for the elapsed-time anchor.
            on_change: Save hook called with the session after every
                state change.
        """
        self.session = session if session is not None else Session()
        self.shuffle = shuffle
        self.clock = clock
        self.on_change = on_change
        self._pending_reveals: List[int] = []
        self._pending_chords: List[int] = []
        self._outcome = Outcome.NONE
        if board is None:
            self.new_level()
        else:
            self._start(board)

    # ========================================================================
    # Level Flow
    # ========================================================================

    def _start(self, board: Board) -> None:
        """Install a fresh board and reset per-level state."""
        self.board = board
        self.session.start_level(board.num_cells)
        self._pending_reveals.clear()
        self._pending_chords.clear()
        self._outcome = Outcome.NONE
        logger.info(
            "Level %d started with %d cells", self.session.level, board.num_cells
        )
        self._notify()

    def new_level(self) -> None:
        """Generate a board for the session's current level."""
        self._start(Board(BoardConfig.for_level(self.session.level)))

    def restart_level(self) -> None:
        """Replay the current level on a new board (after a loss)."""
        self.new_level()

    def advance_level(self) -> None:
        """Move to the next level and generate its board (after a win)."""
        self.session.advance_level()
        self.new_level()

    # ========================================================================
    # Requests
    # ========================================================================

    def request_reveal(self, cell_id: int) -> bool:
        """
        Queue a reveal for the next tick.

        The first accepted reveal of a level starts the clock.

        Returns:
            True if the request was queued.
        """
        if not self.is_playing:
            return False
        cell = self.board.get_cell(cell_id)
        if cell is None or not cell.is_hidden:
            return False
        if self.session.is_first_click:
            self.session.is_first_click = False
            self.session.start_time = self.clock()
        self._pending_reveals.append(cell_id)
        return True

    def request_chord(self, cell_id: int) -> bool:
        """Queue a chord on a revealed cell for the next tick."""
        if not self.is_playing:
            return False
        cell = self.board.get_cell(cell_id)
        if cell is None or not cell.is_revealed:
            return False
        self._pending_chords.append(cell_id)
        return True

    def click(self, cell_id: int) -> bool:
        """Primary click: reveal a hidden cell, chord a revealed one."""
        cell = self.board.get_cell(cell_id)
        if cell is None:
            return False
        if cell.is_hidden:
            return self.request_reveal(cell_id)
        if cell.is_revealed:
            return self.request_chord(cell_id)
        return False

    def toggle_flag(self, cell_id: int) -> bool:
        """
        Flag a hidden cell or unflag a flagged one.

        Returns:
            True if the flag was toggled.
        """
        if not self.is_playing:
            return False
        cell = self.board.get_cell(cell_id)
        if cell is None or not cell.toggle_flag():
            return False
        if cell.is_flagged:
            self.session.flags_placed += 1
        else:
            self.session.flags_placed -= 1
        self._notify()
        return True

    # ========================================================================
    # Tick Processing
    # ========================================================================

    def tick(self) -> Outcome:
        """
        Drain all queued requests.

        Returns:
            The current outcome (sticky once terminal).
        """
        reveals, chords = self._pending_reveals, self._pending_chords
        self._pending_reveals, self._pending_chords = [], []
        if not (reveals or chords) or not self.is_playing:
            return self._outcome

        result = process_requests(
            self.board, self.session, reveals, chords, self.shuffle
        )
        logger.debug(
            "Tick: %d reveals, %d chords -> %d cells revealed",
            len(reveals), len(chords), len(result.revealed_ids),
        )
        if result.outcome != Outcome.NONE:
            self._outcome = result.outcome
            logger.info(
                "Level %d ended: %s", self.session.level, result.outcome.name
            )
        if result.changed:
            self._notify()
        return self._outcome

    def reveal(self, cell_id: int) -> Outcome:
        """Queue a reveal and process it immediately."""
        self.request_reveal(cell_id)
        return self.tick()

    def chord(self, cell_id: int) -> Outcome:
        """Queue a chord and process it immediately."""
        self.request_chord(cell_id)
        return self.tick()

    def _notify(self) -> None:
        """Invoke the save hook, if any."""
        if self.on_change is not None:
            self.on_change(self.session)

    # ========================================================================
    # State Accessors
    # ========================================================================

    @property
    def outcome(self) -> Outcome:
        """Terminal outcome of the current level."""
        return self._outcome

    @property
    def is_playing(self) -> bool:
        """Check if the level is still in progress."""
        return self._outcome == Outcome.NONE

    @property
    def is_won(self) -> bool:
        """Check if the level was cleared."""
        return self._outcome == Outcome.VICTORY

    @property
    def is_lost(self) -> bool:
        """Check if a mine was hit."""
        return self._outcome == Outcome.MINE_HIT

    @property
    def pending_requests(self) -> int:
        """Number of requests waiting for the next tick."""
        return len(self._pending_reveals) + len(self._pending_chords)

    def elapsed(self) -> float:
        """Seconds since the first reveal of the level."""
        return self.session.elapsed(self.clock())

    def hud_text(self) -> str:
        """HUD line for the current state."""
        return self.session.hud_text(self.clock(), OUTCOME_LABELS[self._outcome])
