"""
Hit events and modifiers

The input vocabulary of the rating engine: centre/rim hits and the
difficulty-affecting mods a chart can be played with.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from ..constants import RIM_SAMPLES


class HitType(Enum):
    """Which part of the drum a hit is played on."""

    CENTRE = "centre"
    RIM = "rim"

    def invert(self) -> "HitType":
        """Return the other hit type."""
        return HitType.RIM if self is HitType.CENTRE else HitType.CENTRE

    @classmethod
    def from_samples(cls, samples: Iterable[str]) -> "HitType":
        """Derive the hit type from sample names (clap or whistle means rim)."""
        return cls.RIM if any(s in RIM_SAMPLES for s in samples) else cls.CENTRE


@dataclass(frozen=True)
class RawHitEvent:
    """A single timed hit of a chart, as handed over by the chart loader."""

    start_time: float  # ms
    hit_type: HitType
    is_strong: bool = False
    samples: tuple[str, ...] = ()  # only meaningful to playback

    @classmethod
    def from_samples(
        cls, start_time: float, samples: Iterable[str], is_strong: bool = False
    ) -> "RawHitEvent":
        """Build an event whose hit type is inferred from its samples."""
        samples = tuple(samples)
        return cls(
            start_time=start_time,
            hit_type=HitType.from_samples(samples),
            is_strong=is_strong,
            samples=samples,
        )

    def inverted(self) -> "RawHitEvent":
        """Return a copy of this event on the opposite side of the drum."""
        return RawHitEvent(
            start_time=self.start_time,
            hit_type=self.hit_type.invert(),
            is_strong=self.is_strong,
            samples=self.samples,
        )


class Mod(Enum):
    """Mods known to affect difficulty."""

    DOUBLE_TIME = "DT"
    HALF_TIME = "HT"
    EASY = "EZ"
    HARD_ROCK = "HR"
    RELAX = "RX"


# Speed changes applied to the playback clock
MOD_CLOCK_RATES = {
    Mod.DOUBLE_TIME: 1.5,
    Mod.HALF_TIME: 0.75,
}

# Mods whose combinations change the rating and are worth caching
DIFFICULTY_ADJUSTMENT_MODS = (Mod.DOUBLE_TIME, Mod.HALF_TIME, Mod.EASY, Mod.HARD_ROCK)

# Pairs that cannot be enabled together
INCOMPATIBLE_MODS = (
    frozenset({Mod.DOUBLE_TIME, Mod.HALF_TIME}),
    frozenset({Mod.EASY, Mod.HARD_ROCK}),
)


def clock_rate_for(mods: Iterable[Mod]) -> float:
    """Playback clock rate implied by a mod set."""
    rate = 1.0
    for mod in mods:
        rate *= MOD_CLOCK_RATES.get(mod, 1.0)
    return rate


def adjust_overall_difficulty(overall_difficulty: float, mods: Iterable[Mod]) -> float:
    """Apply Easy / Hard Rock to the chart's overall difficulty."""
    mods = set(mods)
    if Mod.EASY in mods:
        overall_difficulty *= 0.5
    if Mod.HARD_ROCK in mods:
        overall_difficulty = min(overall_difficulty * 1.4, 10.0)
    return overall_difficulty


def is_compatible(mods: Iterable[Mod]) -> bool:
    """Whether no two mods in the set exclude each other."""
    mods = set(mods)
    return not any(pair <= mods for pair in INCOMPATIBLE_MODS)
