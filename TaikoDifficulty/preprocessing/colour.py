"""
Colour Pattern Encoding

Encodes the centre/rim ("colour") structure of a chart in three levels:

1. MonoStreak: a run of consecutive notes of the same colour.
2. AlternatingMonoPattern: a run of MonoStreaks sharing the same length,
   e.g. ``kkd kkd`` or ``d k d k``.
3. RepeatingHitPatterns: AlternatingMonoPatterns that repeat with a period
   of two, plus how far back the same group last appeared.

Run boundaries depend on later notes, so the encoding is computed once over
the finished object arena rather than per object.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ..data.hit_event import HitType
    from .difficulty_object import DifficultyObjectArena

MAX_REPETITION_INTERVAL = 16


@dataclass(eq=False)
class MonoStreak:
    """Consecutive notes of the same colour."""

    hit_type: "HitType"
    object_indices: list[int] = field(default_factory=list)
    index: int = 0  # position within the parent AlternatingMonoPattern

    @property
    def first(self) -> int:
        return self.object_indices[0]

    @property
    def last(self) -> int:
        return self.object_indices[-1]

    @property
    def run_length(self) -> int:
        return len(self.object_indices)


@dataclass(eq=False)
class AlternatingMonoPattern:
    """Consecutive MonoStreaks of identical length."""

    mono_streaks: list[MonoStreak] = field(default_factory=list)
    index: int = 0  # position within the parent RepeatingHitPatterns

    @property
    def first(self) -> int:
        return self.mono_streaks[0].first

    def has_identical_mono_length(self, other: "AlternatingMonoPattern") -> bool:
        return other.mono_streaks[0].run_length == self.mono_streaks[0].run_length

    def is_repetition_of(self, other: "AlternatingMonoPattern") -> bool:
        """Same streak length, same streak count and same starting colour."""
        return (
            self.has_identical_mono_length(other)
            and len(other.mono_streaks) == len(self.mono_streaks)
            and other.mono_streaks[0].hit_type == self.mono_streaks[0].hit_type
        )


@dataclass(eq=False)
class RepeatingHitPatterns:
    """AlternatingMonoPatterns grouped because they repeat every other pattern."""

    previous: Optional["RepeatingHitPatterns"] = None
    alternating_mono_patterns: list[AlternatingMonoPattern] = field(
        default_factory=list
    )
    repetition_interval: int = MAX_REPETITION_INTERVAL + 1

    @property
    def first(self) -> int:
        return self.alternating_mono_patterns[0].first

    def _is_repetition_of(self, other: "RepeatingHitPatterns") -> bool:
        if len(self.alternating_mono_patterns) != len(other.alternating_mono_patterns):
            return False

        for mine, theirs in zip(
            self.alternating_mono_patterns[:2], other.alternating_mono_patterns[:2]
        ):
            if not mine.has_identical_mono_length(theirs):
                return False

        return True

    def find_repetition_interval(self) -> None:
        """Distance to the closest earlier group repeating this one (capped)."""
        other = self.previous
        interval = 1

        while other is not None and interval < MAX_REPETITION_INTERVAL:
            if self._is_repetition_of(other):
                self.repetition_interval = interval
                return
            other = other.previous
            interval += 1

        self.repetition_interval = MAX_REPETITION_INTERVAL + 1


@dataclass
class ColourEncoding:
    """Per-object slot filled in by ``encode_colours``."""

    mono_streak: Optional[MonoStreak] = None
    alternating_mono_pattern: Optional[AlternatingMonoPattern] = None
    repeating_hit_patterns: Optional[RepeatingHitPatterns] = None
    mono_position: int = 0  # position of the object within its MonoStreak
    previous_colour_change: Optional[int] = None  # object index
    next_colour_change: Optional[int] = None  # object index


def _encode_mono_streaks(arena: "DifficultyObjectArena") -> list[MonoStreak]:
    streaks: list[MonoStreak] = []
    current: Optional[MonoStreak] = None

    for obj in arena:
        previous = arena.previous_note(obj, 0)
        if current is None or previous is None or obj.hit_type != previous.hit_type:
            current = MonoStreak(hit_type=obj.hit_type)
            streaks.append(current)
        current.object_indices.append(obj.index)

    return streaks


def _encode_alternating_mono_patterns(
    streaks: list[MonoStreak],
) -> list[AlternatingMonoPattern]:
    patterns: list[AlternatingMonoPattern] = []
    current: Optional[AlternatingMonoPattern] = None

    for i, streak in enumerate(streaks):
        if current is None or streak.run_length != streaks[i - 1].run_length:
            current = AlternatingMonoPattern()
            patterns.append(current)
        current.mono_streaks.append(streak)

    return patterns


def _encode_repeating_hit_patterns(
    patterns: list[AlternatingMonoPattern],
) -> list[RepeatingHitPatterns]:
    groups: list[RepeatingHitPatterns] = []
    current: Optional[RepeatingHitPatterns] = None

    def is_coupled(i: int) -> bool:
        return i < len(patterns) - 2 and patterns[i].is_repetition_of(patterns[i + 2])

    i = 0
    while i < len(patterns):
        current = RepeatingHitPatterns(previous=current)

        if not is_coupled(i):
            current.alternating_mono_patterns.append(patterns[i])
        else:
            while is_coupled(i):
                current.alternating_mono_patterns.append(patterns[i])
                i += 1
            # The last coupled pattern and its partner close the group
            current.alternating_mono_patterns.append(patterns[i])
            current.alternating_mono_patterns.append(patterns[i + 1])
            i += 1

        groups.append(current)
        i += 1

    for group in groups:
        group.find_repetition_interval()

    return groups


def encode_colours(arena: "DifficultyObjectArena") -> list[RepeatingHitPatterns]:
    """
    Compute the colour encoding of every object in the arena.

    Args:
        arena: Fully populated difficulty object arena

    Returns:
        The top-level RepeatingHitPatterns, in chart order
    """
    streaks = _encode_mono_streaks(arena)
    patterns = _encode_alternating_mono_patterns(streaks)
    groups = _encode_repeating_hit_patterns(patterns)

    for group in groups:
        for i, pattern in enumerate(group.alternating_mono_patterns):
            pattern.index = i

            for j, streak in enumerate(pattern.mono_streaks):
                streak.index = j

                previous_change = arena.previous_note(arena[streak.first], 0)
                next_change = arena.next_note(arena[streak.last], 0)

                for position, object_index in enumerate(streak.object_indices):
                    colour = arena[object_index].colour
                    colour.mono_position = position
                    colour.mono_streak = streak
                    colour.alternating_mono_pattern = pattern
                    colour.repeating_hit_patterns = group
                    colour.previous_colour_change = (
                        previous_change.index if previous_change else None
                    )
                    colour.next_colour_change = (
                        next_change.index if next_change else None
                    )

    return groups
