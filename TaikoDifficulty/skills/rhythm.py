from collections import deque

from ..preprocessing.difficulty_object import DifficultyObject
from .strain import StrainDecaySkill


class Rhythm(StrainDecaySkill):
    """
    Difficulty of irregular timing between consecutive hits.

    Keeps its own strain that decays per object rather than per millisecond;
    the base strain does not carry over between objects.
    """

    def __init__(self, config=None):
        super().__init__(config)
        self.skill_multiplier = self.config.rhythm_strain_multiplier
        self.strain_decay_base = self.config.rhythm_strain_decay_base

        self.rhythm_history: deque[DifficultyObject] = deque(
            maxlen=self.config.rhythm_history_length
        )
        self.notes_since_rhythm_change = 0
        self._rhythm_strain = 0.0

    def strain_value_of(self, current, arena) -> float:
        self._rhythm_strain *= self.config.rhythm_inner_decay
        self.notes_since_rhythm_change += 1

        # Unchanged rhythm, no rhythm strain
        if current.rhythm.difficulty == 0.0:
            return 0.0

        object_strain = current.rhythm.difficulty
        object_strain *= self.repetition_penalties(current)
        object_strain *= self.pattern_length_penalty(self.notes_since_rhythm_change)
        object_strain *= self.speed_penalty(current.delta_time)

        # Read by the penalties above, so reset only afterwards
        self.notes_since_rhythm_change = 0

        self._rhythm_strain += object_strain
        return self._rhythm_strain

    def repetition_penalties(self, current: DifficultyObject) -> float:
        """Penalise rhythm sequences that already appeared recently."""
        penalty = 1.0
        self.rhythm_history.append(current)
        history = self.rhythm_history

        for pattern_length in range(2, self.config.rhythm_history_length // 2 + 1):
            for start in range(len(history) - pattern_length - 1, -1, -1):
                if not self._same_pattern(start, pattern_length):
                    continue

                notes_since = current.index - history[start].index
                penalty *= self.repetition_penalty(notes_since)
                break

        return penalty

    def _same_pattern(self, start: int, pattern_length: int) -> bool:
        history = self.rhythm_history
        offset = len(history) - pattern_length
        return all(
            history[start + i].rhythm == history[offset + i].rhythm
            for i in range(pattern_length)
        )

    @staticmethod
    def repetition_penalty(notes_since: int) -> float:
        return min(1.0, 0.032 * notes_since)

    @staticmethod
    def pattern_length_penalty(pattern_length: int) -> float:
        short_pattern_penalty = min(0.15 * pattern_length, 1.0)
        long_pattern_penalty = max(0.0, min(2.5 - 0.15 * pattern_length, 1.0))
        return min(short_pattern_penalty, long_pattern_penalty)

    def speed_penalty(self, delta_time: float) -> float:
        if delta_time < 80:
            return 1.0
        if delta_time < 210:
            return max(0.0, 1.4 - 0.005 * delta_time)

        self._reset()
        return 0.0

    def _reset(self) -> None:
        self._rhythm_strain = 0.0
        self.notes_since_rhythm_change = 0
