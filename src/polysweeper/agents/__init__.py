"""
Polysweeper autoplayers.

Provides agents for playing Polysweeper:
- RandomAgent: Baseline random selection
- LogicAgent: Constraint propagation over the cell graph
"""
from .base_agent import BaseAgent
from .random_agent import RandomAgent
from .logic_agent import Constraint, LogicAgent

__all__ = [
    "BaseAgent",
    "RandomAgent",
    "Constraint",
    "LogicAgent",
]
