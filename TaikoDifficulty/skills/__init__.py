"""
TaikoDifficulty Skills

The four strain trackers combined into the star rating:
- Rhythm: irregular timing
- Colour: centre/rim pattern complexity
- Stamina: hitting speed with both hands
- Stamina (single colour): hitting speed on monotone runs
"""

from .colour import Colour
from .rhythm import Rhythm
from .stamina import Stamina
from .strain import StrainDecaySkill, StrainSkill, weighted_peak_sum

__all__ = [
    "StrainSkill",
    "StrainDecaySkill",
    "weighted_peak_sum",
    "Rhythm",
    "Colour",
    "Stamina",
]
