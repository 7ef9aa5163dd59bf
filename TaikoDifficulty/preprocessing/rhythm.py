"""
Rhythm classification of consecutive hit intervals.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class HitRhythm:
    """A common ratio between two consecutive intervals and its difficulty."""

    numerator: int
    denominator: int
    difficulty: float

    @property
    def ratio(self) -> float:
        return self.numerator / self.denominator


COMMON_RHYTHMS = (
    HitRhythm(1, 1, 0.0),
    HitRhythm(2, 1, 0.3),
    HitRhythm(1, 2, 0.5),
    HitRhythm(3, 1, 0.3),
    HitRhythm(1, 3, 0.35),
    HitRhythm(3, 2, 0.6),  # higher: forces a hand switch when fully alternating
    HitRhythm(2, 3, 0.4),
    HitRhythm(5, 4, 0.5),
    HitRhythm(4, 5, 0.7),
)


def closest_rhythm(delta_time: float, previous_delta_time: float) -> HitRhythm:
    """
    Snap the ratio of two intervals to the closest common rhythm.

    Args:
        delta_time: Interval ending at the current hit
        previous_delta_time: Interval ending at the previous hit

    Returns:
        The closest entry of COMMON_RHYTHMS (first one wins on ties)
    """
    if previous_delta_time == 0:
        # Simultaneous hits have no meaningful ratio; treat as unchanged.
        return COMMON_RHYTHMS[0]

    ratio = delta_time / previous_delta_time
    # min() keeps the first of equally close entries
    return min(COMMON_RHYTHMS, key=lambda r: abs(r.ratio - ratio))
