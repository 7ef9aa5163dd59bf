"""
Strain Skills

A skill simulates how much load one aspect of a chart puts on the player.
Each object adds to a strain value that decays over time; the timeline is
cut into fixed-length sections whose peak strains are combined into the
skill's difficulty.
"""

import math
from abc import ABC, abstractmethod
from typing import Iterable, Optional

import numpy as np

from ..constants import DEFAULT_CONFIG, CalibrationConfig
from ..preprocessing.difficulty_object import DifficultyObject, DifficultyObjectArena


def weighted_peak_sum(peaks: Iterable[float], decay_weight: float) -> float:
    """
    Sum peaks from highest to lowest, each weighted ``decay_weight`` times less
    than the previous one. Zero peaks are dropped before sorting.

    Accumulation is sequential so the result is reproducible bit-for-bit.
    """
    peaks = np.asarray(list(peaks), dtype=np.float64)
    peaks = peaks[peaks > 0]
    if peaks.size == 0:
        return 0.0

    # Stable descending sort
    peaks = -np.sort(-peaks, kind="stable")
    weights = np.cumprod(np.full(peaks.size, decay_weight))
    weights = np.concatenate(([1.0], weights[:-1]))
    return float(np.cumsum(peaks * weights)[-1])


class StrainSkill(ABC):
    """
    Base class for section-peak strain tracking.

    Subclasses implement ``strain_value_at`` (strain after an object) and
    ``calculate_initial_strain`` (strain carried into a new section).
    """

    def __init__(self, config: Optional[CalibrationConfig] = None):
        self.config = config or DEFAULT_CONFIG
        self.object_strains: list[float] = []

        self._strain_peaks: list[float] = []
        self._current_section_peak = 0.0
        self._current_section_end = 0.0

    @abstractmethod
    def strain_value_at(
        self, current: DifficultyObject, arena: DifficultyObjectArena
    ) -> float:
        """Strain right after ``current`` has been hit."""

    @abstractmethod
    def calculate_initial_strain(
        self, time: float, current: DifficultyObject, arena: DifficultyObjectArena
    ) -> float:
        """Strain at ``time``, the start of a section that ``current`` falls in."""

    def process(self, current: DifficultyObject, arena: DifficultyObjectArena) -> None:
        """Feed the next object of the arena, in order."""
        section_length = self.config.section_length

        # The first object opens the first section
        if current.index == 0:
            self._current_section_end = (
                math.ceil(current.start_time / section_length) * section_length
            )

        while current.start_time > self._current_section_end:
            self._strain_peaks.append(self._current_section_peak)
            self._current_section_peak = self.calculate_initial_strain(
                self._current_section_end, current, arena
            )
            self._current_section_end += section_length

        strain = self.strain_value_at(current, arena)
        self._current_section_peak = max(strain, self._current_section_peak)
        self.object_strains.append(strain)

    def process_all(self, arena: DifficultyObjectArena) -> "StrainSkill":
        for obj in arena:
            self.process(obj, arena)
        return self

    def get_current_strain_peaks(self) -> np.ndarray:
        """Peak strain of every section so far, including the open one."""
        return np.array(self._strain_peaks + [self._current_section_peak])

    def difficulty_value(self) -> float:
        """Weighted sum of the section peaks, highest first."""
        return weighted_peak_sum(
            self.get_current_strain_peaks(), self.config.decay_weight
        )

    def count_top_weighted_strains(self) -> float:
        """
        Effective number of objects whose strain drives the difficulty.

        Compares every object strain against the strain every section would
        have if all peaks were equal, through a logistic curve.
        """
        if not self.object_strains:
            return 0.0

        # Equal peaks p weighted by 0.9 per rank sum to 10p
        consistent_top_strain = self.difficulty_value() / 10
        if consistent_top_strain == 0:
            return float(len(self.object_strains))

        strains = np.asarray(self.object_strains)
        weights = 1.1 / (1 + np.exp(-10 * (strains / consistent_top_strain - 0.88)))
        return float(np.cumsum(weights)[-1])


class StrainDecaySkill(StrainSkill):
    """
    Strain skill whose strain decays exponentially with elapsed time and grows
    by a per-object value.
    """

    skill_multiplier: float = 1.0
    strain_decay_base: float = 1.0

    def __init__(self, config: Optional[CalibrationConfig] = None):
        super().__init__(config)
        self.current_strain = 0.0

    @abstractmethod
    def strain_value_of(
        self, current: DifficultyObject, arena: DifficultyObjectArena
    ) -> float:
        """Raw difficulty of a single object."""

    def strain_decay(self, ms: float) -> float:
        # Unordered input can yield negative intervals; a zero base cannot take them
        return self.strain_decay_base ** (max(ms, 0.0) / 1000)

    def calculate_initial_strain(
        self, time: float, current: DifficultyObject, arena: DifficultyObjectArena
    ) -> float:
        previous = arena.previous(current, 0)
        return self.current_strain * self.strain_decay(time - previous.start_time)

    def strain_value_at(
        self, current: DifficultyObject, arena: DifficultyObjectArena
    ) -> float:
        self.current_strain *= self.strain_decay(current.delta_time)
        self.current_strain += (
            self.strain_value_of(current, arena) * self.skill_multiplier
        )
        return self.current_strain
