"""
Logic-based agent for Polysweeper.

Uses constraint propagation over the cell graph to make certain
deductions, and guesses the least likely mine only when stuck.
"""
import random
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Sequence, Set, Tuple

import numpy as np

from .base_agent import BaseAgent


# Largest adjacent-mine count a hexagonal cell can show.
MAX_ADJACENT = 6


# ============================================================================
# Constraint Types
# ============================================================================

@dataclass(frozen=True)
class Constraint:
    """
    A constraint representing: sum of cells in 'cells' == mine_count.

    For example, if a revealed "2" has 3 hidden neighbors and 0 flagged,
    the constraint is: cells={A, B, C}, mine_count=2
    """

    cells: FrozenSet[int]
    mine_count: int


# ============================================================================
# Logic Agent
# ============================================================================

class LogicAgent(BaseAgent):
    """
    Agent that uses constraint propagation for deductions.

    Strategy:
        1. Build constraints from all revealed numbered cells
        2. Propagate trivial constraints (all safe / all mines)
        3. Apply subset reduction for advanced deductions
        4. If no certain moves, pick the cell with lowest estimated
           mine probability
        5. Open on a pentagon (fewest neighbors)
    """

    def __init__(
        self,
        adjacency: Sequence[Tuple[int, ...]],
        seed: Optional[int] = None,
    ) -> None:
        """
        Initialize the logic agent.

        Args:
            adjacency: Neighbor ids for every cell.
            seed: Random seed for the opening move.
        """
        super().__init__(adjacency)
        self._rng = random.Random(seed)
        self._first_move = True
        self.pentagon_ids = [
            cell_id for cell_id, nbs in enumerate(self.adjacency) if len(nbs) == 5
        ]

    def select_action(
        self,
        observation: np.ndarray,
        valid_actions: Optional[np.ndarray] = None,
    ) -> int:
        """
        Select the best action using constraint propagation.

        Args:
            observation: 1D array of cell states.
            valid_actions: Optional mask of valid actions.

        Returns:
            Best cell id based on analysis.
        """
        if valid_actions is None:
            valid_actions = self.get_valid_actions_from_obs(observation)

        valid_indices = np.where(valid_actions)[0]

        if len(valid_indices) == 0:
            return 0

        valid_set = set(int(i) for i in valid_indices)

        if self._first_move:
            self._first_move = False
            return self._select_first_move(valid_set)

        safe_cells, mine_cells = self.solve(observation)

        for cell_id in sorted(safe_cells):
            if cell_id in valid_set:
                return cell_id

        return self._select_by_probability(observation, valid_set, mine_cells)

    def _select_first_move(self, valid_set: Set[int]) -> int:
        """Open on a random hidden pentagon when one is available."""
        pentagons = [cell_id for cell_id in self.pentagon_ids if cell_id in valid_set]
        if pentagons:
            return self._rng.choice(pentagons)
        return self._rng.choice(sorted(valid_set))

    # ========================================================================
    # Constraint Solving
    # ========================================================================

    def _build_constraints(self, observation: np.ndarray) -> List[Constraint]:
        """
        Build constraints from revealed numbered cells.

        Each revealed number N with hidden neighbors creates a constraint:
        "exactly (N - flagged_count) of these hidden cells are mines"
        """
        constraints = []
        for cell_id, value in enumerate(observation):
            if value < 1 or value > MAX_ADJACENT:
                continue

            hidden, flagged = self.split_neighbors(observation, cell_id)
            remaining = int(value) - len(flagged)
            if not hidden or remaining < 0 or remaining > len(hidden):
                continue

            constraints.append(Constraint(frozenset(hidden), remaining))
        return constraints

    def solve(self, observation: np.ndarray) -> Tuple[Set[int], Set[int]]:
        """
        Propagate constraints to find definite safe and mine cells.

        Returns:
            Tuple of (safe_cells, mine_cells) sets.
        """
        safe_cells: Set[int] = set()
        mine_cells: Set[int] = set()
        constraints = self._build_constraints(observation)

        changed = True
        iterations = 0
        max_iterations = 100

        while changed and iterations < max_iterations:
            changed = False
            iterations += 1

            reduced = []
            for constraint in constraints:
                remaining_cells = constraint.cells - safe_cells - mine_cells
                remaining_mines = constraint.mine_count - len(constraint.cells & mine_cells)

                if not remaining_cells:
                    continue
                if remaining_mines == 0:
                    safe_cells.update(remaining_cells)
                    changed = True
                    continue
                if remaining_mines == len(remaining_cells):
                    mine_cells.update(remaining_cells)
                    changed = True
                    continue

                reduced.append(Constraint(frozenset(remaining_cells), remaining_mines))

            subset_safe, subset_mines, constraints = self._subset_reduction(reduced)
            if subset_safe - safe_cells or subset_mines - mine_cells:
                safe_cells.update(subset_safe)
                mine_cells.update(subset_mines)
                changed = True

        return safe_cells, mine_cells

    def _subset_reduction(
        self, constraints: List[Constraint]
    ) -> Tuple[Set[int], Set[int], List[Constraint]]:
        """
        Apply subset reduction to find additional deductions.

        If constraint A's cells are a subset of constraint B's cells,
        the difference (B - A) holds (B.mines - A.mines) mines.
        """
        safe_cells: Set[int] = set()
        mine_cells: Set[int] = set()
        derived: List[Constraint] = []

        for i, first in enumerate(constraints):
            for second in constraints[i + 1:]:
                if first.cells < second.cells:
                    small, large = first, second
                elif second.cells < first.cells:
                    small, large = second, first
                else:
                    continue

                diff_cells = large.cells - small.cells
                diff_mines = large.mine_count - small.mine_count
                if diff_mines == 0:
                    safe_cells.update(diff_cells)
                elif diff_mines == len(diff_cells):
                    mine_cells.update(diff_cells)
                elif 0 < diff_mines < len(diff_cells):
                    derived.append(Constraint(frozenset(diff_cells), diff_mines))

        # dict.fromkeys keeps order while dropping duplicates
        result = list(dict.fromkeys(constraints + derived))
        return safe_cells, mine_cells, result

    # ========================================================================
    # Guessing
    # ========================================================================

    def _select_by_probability(
        self,
        observation: np.ndarray,
        valid_set: Set[int],
        known_mines: Set[int],
    ) -> int:
        """Select the hidden cell with lowest estimated mine probability."""
        probabilities = self._estimate_mine_probabilities(observation, known_mines)

        candidates = sorted(valid_set - known_mines) or sorted(valid_set)
        return min(candidates, key=lambda cell_id: probabilities.get(cell_id, 0.5))

    def _estimate_mine_probabilities(
        self,
        observation: np.ndarray,
        known_mines: Set[int],
    ) -> Dict[int, float]:
        """
        Estimate mine probability for each constrained hidden cell.

        Returns:
            Dict mapping cell id to the most pessimistic local estimate.
        """
        estimates: Dict[int, List[float]] = defaultdict(list)

        for cell_id, value in enumerate(observation):
            if value < 1 or value > MAX_ADJACENT:
                continue

            hidden, flagged = self.split_neighbors(observation, cell_id)
            unknown = hidden - known_mines
            remaining = int(value) - len(flagged) - len(hidden & known_mines)
            if not unknown or remaining < 0:
                continue

            probability = remaining / len(unknown)
            for neighbor_id in unknown:
                estimates[neighbor_id].append(probability)

        return {cell_id: max(probs) for cell_id, probs in estimates.items()}

    def reset(self) -> None:
        """Reset for new game."""
        self._first_move = True
