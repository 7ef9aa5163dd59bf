"""
TaikoDifficulty Preprocessing

Difficulty objects, rhythm classification and the global colour encoding.
"""

from .colour import (
    AlternatingMonoPattern,
    ColourEncoding,
    MonoStreak,
    RepeatingHitPatterns,
    encode_colours,
)
from .difficulty_object import (
    DifficultyObject,
    DifficultyObjectArena,
    create_difficulty_objects,
)
from .rhythm import COMMON_RHYTHMS, HitRhythm, closest_rhythm

__all__ = [
    "DifficultyObject",
    "DifficultyObjectArena",
    "create_difficulty_objects",
    "HitRhythm",
    "COMMON_RHYTHMS",
    "closest_rhythm",
    "ColourEncoding",
    "MonoStreak",
    "AlternatingMonoPattern",
    "RepeatingHitPatterns",
    "encode_colours",
]
