"""
Centralized Constants for TaikoDifficulty

Consolidates note types, difficulty orderings, timing window ranges and
every calibration constant of the star rating formula.
"""

import math
from dataclasses import dataclass
from typing import Dict, Tuple

# Bump whenever the rating formula changes so cached ratings are invalidated.
VERSION = 20241007

# =============================================================================
# Note Types
# =============================================================================

# Chart note types that are single hits, mapped to (is_rim, is_strong)
HIT_NOTE_TYPES: Dict[str, Tuple[bool, bool]] = {
    "Don": (False, False),
    "Ka": (True, False),
    "DonBig": (False, True),
    "KaBig": (True, True),
}

# Long notes and markers carry no hit of their own
NON_HIT_NOTE_TYPES = ("Roll", "RollBig", "Balloon", "BalloonAlt", "EndOf")

# Samples that turn a hit into a rim hit
RIM_SAMPLES = ("hitclap", "hitwhistle")

# =============================================================================
# Difficulty Classes
# =============================================================================

DIFFICULTY_CLASSES = ["easy", "normal", "hard", "oni", "ura"]

# Difficulty ordering for within-song comparisons (handles both cases)
DIFFICULTY_ORDER: Dict[str, int] = {}
for i, d in enumerate(DIFFICULTY_CLASSES):
    DIFFICULTY_ORDER[d] = i
    DIFFICULTY_ORDER[d.capitalize()] = i

# =============================================================================
# Timing Windows
# =============================================================================

# Window half-widths in ms at OD 0, 5 and 10
GREAT_WINDOW_RANGE = (50.0, 35.0, 20.0)
OK_WINDOW_RANGE = (120.0, 80.0, 50.0)

# =============================================================================
# Database Attribute IDs
# =============================================================================

ATTRIB_ID_MAX_COMBO = 9
ATTRIB_ID_DIFFICULTY = 11
ATTRIB_ID_GREAT_HIT_WINDOW = 13
ATTRIB_ID_OK_HIT_WINDOW = 27
ATTRIB_ID_MONO_STAMINA_FACTOR = 29

# =============================================================================
# Calibration
# =============================================================================

DIFFICULTY_MULTIPLIER = 0.084375


@dataclass(frozen=True)
class CalibrationConfig:
    """Every tunable constant of the rating formula.

    Skills and the aggregator read their constants from here, so a
    recalibration only touches this structure.
    """

    # Strain sections
    section_length: float = 400.0  # ms
    decay_weight: float = 0.9  # per-rank weight decay of sorted peaks

    # Final skill multipliers
    rhythm_skill_multiplier: float = 0.2 * DIFFICULTY_MULTIPLIER
    colour_skill_multiplier: float = 0.375 * DIFFICULTY_MULTIPLIER
    stamina_skill_multiplier: float = 0.375 * DIFFICULTY_MULTIPLIER

    # Rhythm skill
    rhythm_strain_multiplier: float = 10.0
    rhythm_strain_decay_base: float = 0.0
    rhythm_inner_decay: float = 0.96
    rhythm_history_length: int = 8

    # Colour skill
    colour_strain_multiplier: float = 0.12
    colour_strain_decay_base: float = 0.8

    # Stamina skill
    stamina_strain_multiplier: float = 1.1
    stamina_strain_decay_base: float = 0.4
    colour_change_finger_window: float = 300.0  # ms

    # Peak combination
    colour_stamina_norm: float = 1.5
    rhythm_norm: float = 2.0
    relax_stamina_divisor: float = 1.5

    # Final scaling
    star_scale: float = 1.4
    rescale_multiplier: float = 10.43
    rescale_divisor: float = 8.0
    mono_stamina_exponent: float = 5.0

    # Convert corrections
    convert_multiplier: float = 0.925
    convert_relax_multiplier: float = 0.60
    convert_low_colour_multiplier: float = 0.80
    convert_low_colour_threshold: float = 2.0
    convert_high_stamina_threshold: float = 8.0


DEFAULT_CONFIG = CalibrationConfig()


# =============================================================================
# Helper Functions
# =============================================================================


def logistic(exponent: float, max_value: float = 1.0) -> float:
    """Logistic curve ``max_value / (1 + e^exponent)``."""
    # math.exp raises past this point; the curve is already 0 there
    if exponent > 709.0:
        return 0.0
    return max_value / (1 + math.exp(exponent))


def difficulty_range(difficulty: float, range_: Tuple[float, float, float]) -> float:
    """Piecewise-linear interpolation of a (0, 5, 10) difficulty range."""
    low, mid, high = range_
    if difficulty > 5:
        return mid + (high - mid) * (difficulty - 5) / 5
    if difficulty < 5:
        return mid + (mid - low) * (difficulty - 5) / 5
    return mid
