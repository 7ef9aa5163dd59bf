"""
TaikoDifficulty Data Types

Hit events, mods and chart conversion for the rating engine.
"""

from .hit_event import (
    DIFFICULTY_ADJUSTMENT_MODS,
    HitType,
    Mod,
    RawHitEvent,
    adjust_overall_difficulty,
    clock_rate_for,
    is_compatible,
)
from .record import ChartRecord
from .tokenizer import HitEventTokenizer

__all__ = [
    "HitType",
    "RawHitEvent",
    "Mod",
    "DIFFICULTY_ADJUSTMENT_MODS",
    "clock_rate_for",
    "adjust_overall_difficulty",
    "is_compatible",
    "HitEventTokenizer",
    "ChartRecord",
]
