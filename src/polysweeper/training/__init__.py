"""
Evaluation module for Polysweeper agents.
"""
from .evaluator import EvaluationConfig, Evaluator

__all__ = [
    "EvaluationConfig",
    "Evaluator",
]
