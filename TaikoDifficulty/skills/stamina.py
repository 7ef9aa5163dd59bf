from typing import Optional

from ..constants import CalibrationConfig, logistic
from ..preprocessing.difficulty_object import DifficultyObject, DifficultyObjectArena
from .evaluators import evaluate_stamina_difficulty
from .strain import StrainSkill


class Stamina(StrainSkill):
    """
    Physical load of hitting notes in quick succession.

    With ``single_colour`` set, only long runs of one colour count, which
    simulates playing a monotone stream with a single hand.
    """

    def __init__(
        self,
        config: Optional[CalibrationConfig] = None,
        single_colour: bool = False,
    ):
        super().__init__(config)
        self.single_colour = single_colour
        self.current_strain = 0.0

    def strain_decay(self, ms: float) -> float:
        return self.config.stamina_strain_decay_base ** (max(ms, 0.0) / 1000)

    def strain_value_at(
        self, current: DifficultyObject, arena: DifficultyObjectArena
    ) -> float:
        self.current_strain *= self.strain_decay(current.delta_time)
        self.current_strain += (
            evaluate_stamina_difficulty(
                current, arena, self.config.colour_change_finger_window
            )
            * self.config.stamina_strain_multiplier
        )

        if self.single_colour:
            # Ramps up over the first notes of each mono streak
            position = current.colour.mono_position
            return logistic(-(position - 10) / 2.0, self.current_strain)

        return self.current_strain

    def calculate_initial_strain(
        self, time: float, current: DifficultyObject, arena: DifficultyObjectArena
    ) -> float:
        if self.single_colour:
            return 0.0

        previous = arena.previous(current, 0)
        return self.current_strain * self.strain_decay(time - previous.start_time)
