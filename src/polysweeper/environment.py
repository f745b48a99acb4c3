"""
Gymnasium environment wrapper for Polysweeper.

Provides a standard RL interface over one level of the spherical board.
"""
import random
from typing import Any, Dict, List, Optional, SupportsFloat, Tuple

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .board import Board, BoardConfig
from .cell import FLAGGED_OBSERVATION, MINE_OBSERVATION, observation_symbol
from .engine import GameEngine, Outcome
from .session import Session
from .topology import generate_goldberg_polyhedron


# ============================================================================
# Constants
# ============================================================================

REWARD_SAFE = 1.0
REWARD_WIN = 10.0
REWARD_MINE = -10.0
REWARD_INVALID = -0.1


# ============================================================================
# Polysweeper Environment
# ============================================================================

class PolysweeperEnv(gym.Env):
    """
    Gymnasium environment for Polysweeper.

    Observation:
        1D array indexed by cell id where:
        - -1 = hidden cell
        - -2 = flagged cell
        - 0-6 = revealed cell with adjacent mine count
        - 9 = revealed mine

    Actions:
        Discrete action space of size num_cells; action i reveals cell i.

    Rewards:
        - +1 for revealing a safe cell
        - +10 for winning the level
        - -10 for hitting a mine
        - -0.1 for invalid action (already revealed/flagged)
    """

    metadata = {"render_modes": ["human", "ansi"], "render_fps": 4}

    def __init__(
        self,
        config: Optional[BoardConfig] = None,
        level: int = 1,
        render_mode: Optional[str] = None,
        seed: Optional[int] = None,
    ) -> None:
        """
        Initialize the Polysweeper environment.

        Args:
            config: Board configuration (default: derived from level).
            level: Level that sets the mine density.
            render_mode: How to render the environment.
            seed: Seed for mine placement of the first episode.
        """
        super().__init__()

        self.config = config or BoardConfig.for_level(level)
        self.level = level
        self.render_mode = render_mode
        # The topology never changes between episodes, only the mines do.
        self._polyhedron = generate_goldberg_polyhedron(
            self.config.radius, self.config.subdivisions
        )
        self._rng = random.Random(seed)
        self._initial_seed = seed
        self.engine = self._make_engine()

        num_cells = self._polyhedron.num_cells
        self.observation_space = spaces.Box(
            low=FLAGGED_OBSERVATION,
            high=MINE_OBSERVATION,
            shape=(num_cells,),
            dtype=np.int8,
        )
        self.action_space = spaces.Discrete(num_cells)

        self._steps = 0

    def _make_engine(self) -> GameEngine:
        """Fresh engine on a fresh board sharing the cached topology."""
        return GameEngine(
            session=Session(level=self.level),
            board=Board.from_polyhedron(self._polyhedron),
            shuffle=self._rng.shuffle,
        )

    @property
    def board(self) -> Board:
        """Board of the current episode."""
        return self.engine.board

    @property
    def adjacency(self) -> List[Tuple[int, ...]]:
        """Neighbor ids per cell, for graph-aware agents."""
        return self._polyhedron.adjacency

    @property
    def num_cells(self) -> int:
        """Number of cells on the board."""
        return self._polyhedron.num_cells

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Reset the environment for a new episode.

        Args:
            seed: Random seed for reproducibility.
            options: Additional options (unused).

        Returns:
            Tuple of (observation, info dict).
        """
        if seed is None:
            seed = self._initial_seed
        self._initial_seed = None
        super().reset(seed=seed)
        self._rng.seed(int(self.np_random.integers(0, 2**32)))
        self.engine = self._make_engine()
        self._steps = 0

        return self.board.get_observation(), self._get_info()

    def step(
        self, action: int
    ) -> Tuple[np.ndarray, SupportsFloat, bool, bool, Dict[str, Any]]:
        """
        Execute one action in the environment.

        Args:
            action: Id of the cell to reveal.

        Returns:
            Tuple of (observation, reward, terminated, truncated, info).
        """
        self._steps += 1
        reward = self._calculate_reward(int(action))

        observation = self.board.get_observation()
        terminated = not self.engine.is_playing
        truncated = False

        return observation, reward, terminated, truncated, self._get_info()

    def _calculate_reward(self, cell_id: int) -> float:
        """
        Reveal a cell and score the result.

        Args:
            cell_id: Id of the cell to reveal.

        Returns:
            Reward value.
        """
        cell = self.board.get_cell(cell_id)

        # Invalid action (unknown, already revealed or flagged)
        if cell is None or not cell.is_hidden or not self.engine.is_playing:
            return REWARD_INVALID

        outcome = self.engine.reveal(cell_id)

        if outcome == Outcome.VICTORY:
            return REWARD_WIN
        if outcome == Outcome.MINE_HIT:
            return REWARD_MINE
        return REWARD_SAFE

    def _get_info(self) -> Dict[str, Any]:
        """Get info dictionary for current state."""
        session = self.engine.session
        if self.engine.is_won:
            game_state = "WON"
        elif self.engine.is_lost:
            game_state = "LOST"
        else:
            game_state = "PLAYING"
        return {
            "steps": self._steps,
            "revealed": session.cells_revealed,
            "total_safe": session.safe_cells if session.total_mines else None,
            "total_mines": session.total_mines,
            "game_state": game_state,
            "valid_actions": len(self.board.get_valid_actions()),
        }

    def render(self) -> Optional[str]:
        """Render the current board state."""
        if self.render_mode == "ansi":
            return self._render_ansi()
        if self.render_mode == "human":
            print(self._render_ansi())
        return None

    def _render_ansi(self) -> str:
        """Render cells as rows of symbols, ten per line, in id order."""
        symbols = [observation_symbol(value) for value in self.board.get_observation()]

        lines = [self.engine.hud_text()]
        for start in range(0, len(symbols), 10):
            row = " ".join(symbols[start:start + 10])
            lines.append(f"{start:5d} | {row}")
        return "\n".join(lines)

    def get_action_mask(self) -> np.ndarray:
        """
        Get mask of valid actions.

        Returns:
            Boolean array where True = valid action.
        """
        mask = np.zeros(self.action_space.n, dtype=bool)
        mask[self.board.get_valid_actions()] = True
        return mask
