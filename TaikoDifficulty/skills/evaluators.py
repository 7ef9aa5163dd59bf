"""
Per-object difficulty evaluators for the colour and stamina skills.
"""

import math

from ..constants import logistic
from ..preprocessing.colour import (
    AlternatingMonoPattern,
    MonoStreak,
    RepeatingHitPatterns,
)
from ..preprocessing.difficulty_object import DifficultyObject, DifficultyObjectArena

# =============================================================================
# Colour
# =============================================================================


def _position_falloff(position: int) -> float:
    # ~1 for the first two entries, 0.5 for the third, then falls off quickly
    return logistic(math.e * position - 2 * math.e)


def evaluate_repeating_hit_patterns(group: RepeatingHitPatterns) -> float:
    """Groups that have not appeared recently are harder to read."""
    return 2 * (1 - _position_falloff(group.repetition_interval))


def evaluate_alternating_mono_pattern(
    pattern: AlternatingMonoPattern, group: RepeatingHitPatterns
) -> float:
    return _position_falloff(pattern.index) * evaluate_repeating_hit_patterns(group)


def evaluate_mono_streak(
    streak: MonoStreak, pattern: AlternatingMonoPattern, group: RepeatingHitPatterns
) -> float:
    return (
        _position_falloff(streak.index)
        * evaluate_alternating_mono_pattern(pattern, group)
        * 0.5
    )


def evaluate_colour_difficulty(current: DifficultyObject) -> float:
    """
    Colour difficulty of an object.

    Only objects that start a MonoStreak, AlternatingMonoPattern or
    RepeatingHitPatterns carry difficulty, one term per structure started.
    """
    colour = current.colour
    streak = colour.mono_streak
    pattern = colour.alternating_mono_pattern
    group = colour.repeating_hit_patterns
    if streak is None or pattern is None or group is None:
        return 0.0

    difficulty = 0.0
    if streak.first == current.index:
        difficulty += evaluate_mono_streak(streak, pattern, group)
    if pattern.first == current.index:
        difficulty += evaluate_alternating_mono_pattern(pattern, group)
    if group.first == current.index:
        difficulty += evaluate_repeating_hit_patterns(group)

    return difficulty


# =============================================================================
# Stamina
# =============================================================================


def speed_bonus(interval: float) -> float:
    # Capped to avoid infinite values on simultaneous hits
    interval = max(interval, 1.0)
    return 30 / interval


def available_fingers_for(
    current: DifficultyObject,
    arena: DifficultyObjectArena,
    colour_change_window: float = 300.0,
) -> int:
    """Two fingers when a colour change is close, four otherwise."""
    previous_change = current.colour.previous_colour_change
    next_change = current.colour.next_colour_change

    if (
        previous_change is not None
        and current.start_time - arena[previous_change].start_time
        < colour_change_window
    ):
        return 2
    if (
        next_change is not None
        and arena[next_change].start_time - current.start_time < colour_change_window
    ):
        return 2
    return 4


def evaluate_stamina_difficulty(
    current: DifficultyObject,
    arena: DifficultyObjectArena,
    colour_change_window: float = 300.0,
) -> float:
    """
    Stamina difficulty of an object, from the time since the same finger was
    last used (``fingers`` same-coloured notes back).
    """
    fingers = available_fingers_for(current, arena, colour_change_window)
    key_previous = arena.previous_mono(current, fingers - 1)
    if key_previous is None:
        return 0.0

    object_strain = 0.5  # base strain for every object
    object_strain += speed_bonus(current.start_time - key_previous.start_time)
    return object_strain
