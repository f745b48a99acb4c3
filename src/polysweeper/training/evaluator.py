"""
Evaluation of Polysweeper agents.

Plays agents through fresh levels and reports win rate and progress.
"""
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from ..agents.base_agent import BaseAgent
from ..board import BoardConfig
from ..environment import PolysweeperEnv


# ============================================================================
# Evaluation Configuration
# ============================================================================

@dataclass
class EvaluationConfig:
    """Configuration for evaluating agents."""

    level: int = 1
    subdivisions: Optional[int] = None
    num_episodes: int = 100
    max_steps: int = 2000
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.level < 1:
            raise ValueError("Level must be at least 1")
        if self.num_episodes < 1:
            raise ValueError("Need at least one episode")
        if self.max_steps < 1:
            raise ValueError("Need at least one step per episode")

    def board_config(self) -> BoardConfig:
        """Board for the configured level, optionally with fixed detail."""
        config = BoardConfig.for_level(self.level)
        if self.subdivisions is not None:
            config = BoardConfig(config.radius, self.subdivisions)
        return config


# ============================================================================
# Agent Evaluator
# ============================================================================

class Evaluator:
    """
    Evaluate and compare multiple agents.

    Every agent faces the same sequence of seeded boards when a seed
    is configured.
    """

    def __init__(self, config: Optional[EvaluationConfig] = None) -> None:
        """
        Initialize the evaluator.

        Args:
            config: Evaluation settings.
        """
        self.config = config or EvaluationConfig()
        self.env = PolysweeperEnv(
            config=self.config.board_config(), level=self.config.level
        )

    def make_agent(self, factory: Callable[..., BaseAgent]) -> BaseAgent:
        """Build an agent for this evaluator's board."""
        return factory(self.env.adjacency)

    def evaluate(self, agent: BaseAgent) -> Dict[str, float]:
        """
        Evaluate a single agent.

        Args:
            agent: Agent to evaluate.

        Returns:
            Dictionary with evaluation metrics.
        """
        wins = 0
        total_reward = 0.0
        total_steps = 0
        total_revealed = 0

        for episode in range(self.config.num_episodes):
            seed = None if self.config.seed is None else self.config.seed + episode
            observation, info = self.env.reset(seed=seed)
            agent.reset()

            for _ in range(self.config.max_steps):
                valid_actions = self.env.get_action_mask()
                action = agent.select_action(observation, valid_actions)
                observation, reward, terminated, truncated, info = self.env.step(action)

                total_reward += float(reward)
                total_steps += 1

                if terminated or truncated:
                    break

            if info.get("game_state") == "WON":
                wins += 1
            total_revealed += info.get("revealed", 0)

        episodes = self.config.num_episodes
        return {
            "win_rate": wins / episodes,
            "avg_reward": total_reward / episodes,
            "avg_steps": total_steps / episodes,
            "avg_revealed": total_revealed / episodes,
        }

    def compare(self, agents: Dict[str, BaseAgent]) -> Dict[str, Dict[str, float]]:
        """
        Compare multiple agents.

        Args:
            agents: Dictionary of agent_name -> agent.

        Returns:
            Dictionary of agent_name -> evaluation metrics.
        """
        results = {}
        for name, agent in agents.items():
            print(f"Evaluating {name}...")
            results[name] = self.evaluate(agent)
        return results
