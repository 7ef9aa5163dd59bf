"""
TaikoDifficulty Evaluation Package
"""

from .evaluator import Evaluator
from .metrics import MonotonicityMetrics, StarMetrics

__all__ = [
    "StarMetrics",
    "MonotonicityMetrics",
    "Evaluator",
]
