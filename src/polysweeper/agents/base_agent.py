"""
Base agent interface for Polysweeper autoplayers.

Defines the abstract interface that all agents must implement.
"""
from abc import ABC, abstractmethod
from typing import Optional, Sequence, Tuple

import numpy as np

from ..cell import FLAGGED_OBSERVATION, HIDDEN_OBSERVATION


# ============================================================================
# Base Agent Interface
# ============================================================================

class BaseAgent(ABC):
    """
    Abstract base class for Polysweeper agents.

    All agents must implement the select_action method to choose
    which cell to reveal based on the current observation. Cells are
    identified by id; the neighbor lists replace grid coordinates.
    """

    def __init__(self, adjacency: Sequence[Tuple[int, ...]]) -> None:
        """
        Initialize the agent.

        Args:
            adjacency: Neighbor ids for every cell, indexed by id.
        """
        self.adjacency = [tuple(nbs) for nbs in adjacency]
        self.total_cells = len(self.adjacency)

    @abstractmethod
    def select_action(
        self,
        observation: np.ndarray,
        valid_actions: Optional[np.ndarray] = None,
    ) -> int:
        """
        Select an action based on the current observation.

        Args:
            observation: 1D array of cell states indexed by id.
            valid_actions: Optional mask of valid actions.

        Returns:
            Id of the cell to reveal.
        """

    def get_valid_actions_from_obs(self, observation: np.ndarray) -> np.ndarray:
        """
        Get valid actions mask from observation.

        Args:
            observation: 1D array of cell states.

        Returns:
            Boolean mask where True = valid action.
        """
        return np.asarray(observation) == HIDDEN_OBSERVATION

    def split_neighbors(
        self, observation: np.ndarray, cell_id: int
    ) -> Tuple[set, set]:
        """Hidden and flagged neighbor ids of a cell."""
        hidden = set()
        flagged = set()
        for neighbor_id in self.adjacency[cell_id]:
            value = observation[neighbor_id]
            if value == HIDDEN_OBSERVATION:
                hidden.add(neighbor_id)
            elif value == FLAGGED_OBSERVATION:
                flagged.add(neighbor_id)
        return hidden, flagged

    def reset(self) -> None:
        """Reset agent state for new episode."""
