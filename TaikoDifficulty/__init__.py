"""
TaikoDifficulty

Deterministic star rating for taiko charts:
- Preprocessing of hit events into index-linked difficulty objects
- Global colour (centre/rim pattern) encoding
- Rhythm, Colour and Stamina strain skills
- Calibrated aggregation into a star rating and attribute bundle
"""

from .calculator import (
    DifficultyAttributes,
    TaikoDifficultyCalculator,
    combine_peaks,
    difficulty_adjustment_mod_combinations,
    norm,
    rescale,
)
from .constants import DEFAULT_CONFIG, VERSION, CalibrationConfig
from .data import ChartRecord, HitEventTokenizer, HitType, Mod, RawHitEvent

__all__ = [
    "TaikoDifficultyCalculator",
    "DifficultyAttributes",
    "CalibrationConfig",
    "DEFAULT_CONFIG",
    "VERSION",
    "rescale",
    "norm",
    "combine_peaks",
    "difficulty_adjustment_mod_combinations",
    "HitType",
    "RawHitEvent",
    "Mod",
    "HitEventTokenizer",
    "ChartRecord",
]
