"""
Taiko Difficulty Calculator

Combines the four skills into the calibrated star rating and the attribute
bundle consumed by ranking and display.
"""

import itertools
import logging
import math
from dataclasses import asdict, dataclass
from typing import Iterable, Iterator, Optional, Sequence

from .constants import (
    ATTRIB_ID_DIFFICULTY,
    ATTRIB_ID_GREAT_HIT_WINDOW,
    ATTRIB_ID_MAX_COMBO,
    ATTRIB_ID_MONO_STAMINA_FACTOR,
    ATTRIB_ID_OK_HIT_WINDOW,
    DEFAULT_CONFIG,
    GREAT_WINDOW_RANGE,
    OK_WINDOW_RANGE,
    VERSION,
    CalibrationConfig,
    difficulty_range,
)
from .data.hit_event import (
    DIFFICULTY_ADJUSTMENT_MODS,
    Mod,
    RawHitEvent,
    adjust_overall_difficulty,
    clock_rate_for,
    is_compatible,
)
from .preprocessing.colour import encode_colours
from .preprocessing.difficulty_object import (
    DifficultyObjectArena,
    create_difficulty_objects,
)
from .skills import Colour, Rhythm, Stamina
from .skills.strain import weighted_peak_sum

logger = logging.getLogger(__name__)


def norm(p: float, *values: float) -> float:
    """Lp norm ``(sum v^p)^(1/p)`` of the given values."""
    return math.pow(sum(math.pow(v, p) for v in values), 1 / p)


def rescale(star_rating: float, config: Optional[CalibrationConfig] = None) -> float:
    """
    Compress a raw combined rating onto the star scale.

    Negative inputs are returned unchanged.
    """
    config = config or DEFAULT_CONFIG
    if star_rating < 0:
        return star_rating
    return config.rescale_multiplier * math.log(
        star_rating / config.rescale_divisor + 1
    )


@dataclass
class DifficultyAttributes:
    """Everything the rating engine computes for one chart and mod set."""

    mods: tuple[Mod, ...] = ()
    star_rating: float = 0.0
    rhythm_difficulty: float = 0.0
    colour_difficulty: float = 0.0
    stamina_difficulty: float = 0.0
    mono_stamina_factor: float = 0.0
    rhythm_top_strains: float = 0.0
    colour_top_strains: float = 0.0
    stamina_top_strains: float = 0.0
    great_hit_window: float = 0.0
    ok_hit_window: float = 0.0
    max_combo: int = 0
    version: int = VERSION

    def to_dict(self) -> dict:
        data = asdict(self)
        data["mods"] = [mod.value for mod in self.mods]
        return data

    def to_database_attributes(self) -> list[tuple[int, float]]:
        """(attribute id, value) pairs for cached storage."""
        return [
            (ATTRIB_ID_MAX_COMBO, self.max_combo),
            (ATTRIB_ID_DIFFICULTY, self.star_rating),
            (ATTRIB_ID_GREAT_HIT_WINDOW, self.great_hit_window),
            (ATTRIB_ID_OK_HIT_WINDOW, self.ok_hit_window),
            (ATTRIB_ID_MONO_STAMINA_FACTOR, self.mono_stamina_factor),
        ]

    @classmethod
    def from_database_attributes(
        cls, values: dict[int, float], mods: Iterable[Mod] = ()
    ) -> "DifficultyAttributes":
        return cls(
            mods=tuple(mods),
            max_combo=int(values[ATTRIB_ID_MAX_COMBO]),
            star_rating=values[ATTRIB_ID_DIFFICULTY],
            great_hit_window=values[ATTRIB_ID_GREAT_HIT_WINDOW],
            ok_hit_window=values[ATTRIB_ID_OK_HIT_WINDOW],
            mono_stamina_factor=values[ATTRIB_ID_MONO_STAMINA_FACTOR],
        )


@dataclass
class SkillSet:
    """The four skills of one calculation, fed with the same objects."""

    rhythm: Rhythm
    colour: Colour
    stamina: Stamina
    single_colour_stamina: Stamina

    def __iter__(self):
        return iter(
            (self.rhythm, self.colour, self.stamina, self.single_colour_stamina)
        )


class TaikoDifficultyCalculator:
    """
    Star rating calculator for taiko charts.

    Pipeline:
    1. Hit events -> difficulty objects (clock-adjusted, index-linked)
    2. Global colour encoding over all objects
    3. Rhythm / Colour / Stamina / single-colour Stamina strain tracking
    4. Section-wise peak combination, weighted sum and rescaling
    """

    version = VERSION

    def __init__(self, config: Optional[CalibrationConfig] = None):
        self.config = config or DEFAULT_CONFIG

    def create_skills(self) -> SkillSet:
        # Skills are mod-independent; relax is applied when peaks are combined
        return SkillSet(
            rhythm=Rhythm(self.config),
            colour=Colour(self.config),
            stamina=Stamina(self.config, single_colour=False),
            single_colour_stamina=Stamina(self.config, single_colour=True),
        )

    def create_difficulty_objects(
        self, events: Sequence[RawHitEvent], clock_rate: float
    ) -> DifficultyObjectArena:
        arena = create_difficulty_objects(events, clock_rate)
        # Must complete before any skill runs: encodings look ahead
        encode_colours(arena)
        return arena

    def calculate(
        self,
        events: Sequence[RawHitEvent],
        mods: Iterable[Mod] = (),
        clock_rate: Optional[float] = None,
        overall_difficulty: float = 5.0,
        is_convert: bool = False,
    ) -> DifficultyAttributes:
        """
        Calculate the difficulty attributes of a chart.

        Args:
            events: Hit events ordered by start time (ms)
            mods: Active difficulty-affecting mods
            clock_rate: Playback rate; derived from speed mods if None
            overall_difficulty: Chart OD, before mod adjustments
            is_convert: Whether the chart was converted from another mode

        Returns:
            DifficultyAttributes for the chart
        """
        mods = tuple(mods)
        if clock_rate is None:
            clock_rate = clock_rate_for(mods)

        if len(events) == 0:
            return DifficultyAttributes(mods=mods)

        arena = self.create_difficulty_objects(events, clock_rate)
        skills = self.create_skills()

        for obj in arena:
            for skill in skills:
                skill.process(obj, arena)

        return self.create_difficulty_attributes(
            skills,
            mods,
            clock_rate=clock_rate,
            overall_difficulty=adjust_overall_difficulty(overall_difficulty, mods),
            max_combo=len(events),
            is_convert=is_convert,
        )

    def calculate_all(
        self,
        events: Sequence[RawHitEvent],
        overall_difficulty: float = 5.0,
        is_convert: bool = False,
    ) -> Iterator[DifficultyAttributes]:
        """Attributes for every compatible combination of difficulty adjustment mods."""
        for mods in difficulty_adjustment_mod_combinations():
            yield self.calculate(
                events,
                mods,
                overall_difficulty=overall_difficulty,
                is_convert=is_convert,
            )

    def create_difficulty_attributes(
        self,
        skills: SkillSet,
        mods: tuple[Mod, ...],
        clock_rate: float,
        overall_difficulty: float,
        max_combo: int,
        is_convert: bool,
    ) -> DifficultyAttributes:
        config = self.config
        is_relax = Mod.RELAX in mods

        rhythm_rating = skills.rhythm.difficulty_value() * config.rhythm_skill_multiplier
        colour_rating = skills.colour.difficulty_value() * config.colour_skill_multiplier
        stamina_rating = (
            skills.stamina.difficulty_value() * config.stamina_skill_multiplier
        )
        mono_stamina_rating = (
            skills.single_colour_stamina.difficulty_value()
            * config.stamina_skill_multiplier
        )
        mono_stamina_factor = (
            1.0
            if stamina_rating == 0
            else math.pow(
                mono_stamina_rating / stamina_rating, config.mono_stamina_exponent
            )
        )

        combined_rating = self.combined_difficulty_value(skills, is_relax)
        star_rating = rescale(combined_rating * config.star_scale, config)

        if is_convert:
            star_rating = self.apply_convert_corrections(
                star_rating, colour_rating, stamina_rating, is_relax
            )

        logger.debug(
            "Ratings: rhythm=%.4f colour=%.4f stamina=%.4f mono=%.4f -> star=%.4f",
            rhythm_rating,
            colour_rating,
            stamina_rating,
            mono_stamina_rating,
            star_rating,
        )

        return DifficultyAttributes(
            mods=mods,
            star_rating=star_rating,
            rhythm_difficulty=rhythm_rating,
            colour_difficulty=colour_rating,
            stamina_difficulty=stamina_rating,
            mono_stamina_factor=mono_stamina_factor,
            rhythm_top_strains=skills.rhythm.count_top_weighted_strains(),
            colour_top_strains=skills.colour.count_top_weighted_strains(),
            stamina_top_strains=skills.stamina.count_top_weighted_strains(),
            great_hit_window=difficulty_range(overall_difficulty, GREAT_WINDOW_RANGE)
            / clock_rate,
            ok_hit_window=difficulty_range(overall_difficulty, OK_WINDOW_RANGE)
            / clock_rate,
            max_combo=max_combo,
        )

    def apply_convert_corrections(
        self,
        star_rating: float,
        colour_rating: float,
        stamina_rating: float,
        is_relax: bool,
    ) -> float:
        """
        Penalise charts converted from another mode, where standard play-style
        assumptions no longer hold.
        """
        config = self.config
        star_rating *= config.convert_multiplier

        # Multiple inputs are easier to abuse with relax, or on low colour
        # variance with high stamina demand
        if is_relax:
            star_rating *= config.convert_relax_multiplier
        elif (
            colour_rating < config.convert_low_colour_threshold
            and stamina_rating > config.convert_high_stamina_threshold
        ):
            star_rating *= config.convert_low_colour_multiplier

        logger.debug("Applied convert corrections: star=%.4f", star_rating)
        return star_rating

    def combined_difficulty_value(self, skills: SkillSet, is_relax: bool) -> float:
        """
        Combine the section peaks of all skills into one rating.

        Per section, colour and stamina peaks are merged with an L1.5 norm and
        the result with the rhythm peak through an L2 norm. The combined peaks
        are then summed with weights decaying by rank.
        """
        return combine_peaks(
            skills.rhythm.get_current_strain_peaks(),
            skills.colour.get_current_strain_peaks(),
            skills.stamina.get_current_strain_peaks(),
            is_relax,
            self.config,
        )


def combine_peaks(
    rhythm_peaks: Sequence[float],
    colour_peaks: Sequence[float],
    stamina_peaks: Sequence[float],
    is_relax: bool = False,
    config: Optional[CalibrationConfig] = None,
) -> float:
    """
    Weighted sum of per-section combined peaks.

    The three timelines share section boundaries and are aligned by index.
    Sections whose combined peak is 0 do not contribute.
    """
    config = config or DEFAULT_CONFIG
    peaks = []

    for rhythm_peak, colour_peak, stamina_peak in zip(
        rhythm_peaks, colour_peaks, stamina_peaks
    ):
        rhythm_peak = float(rhythm_peak) * config.rhythm_skill_multiplier
        colour_peak = float(colour_peak) * config.colour_skill_multiplier
        stamina_peak = float(stamina_peak) * config.stamina_skill_multiplier

        if is_relax:
            # No colour difficulty with relax, and more fingers for stamina
            colour_peak = 0.0
            stamina_peak /= config.relax_stamina_divisor

        peak = norm(
            config.rhythm_norm,
            norm(config.colour_stamina_norm, colour_peak, stamina_peak),
            rhythm_peak,
        )
        if peak > 0:
            peaks.append(peak)

    return weighted_peak_sum(peaks, config.decay_weight)


def difficulty_adjustment_mod_combinations() -> list[tuple[Mod, ...]]:
    """No mod, every single mod and every compatible pair."""
    combinations = [()]
    for size in (1, 2):
        for mods in itertools.combinations(DIFFICULTY_ADJUSTMENT_MODS, size):
            if is_compatible(mods):
                combinations.append(mods)
    return combinations
