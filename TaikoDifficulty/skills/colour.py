from .evaluators import evaluate_colour_difficulty
from .strain import StrainDecaySkill


class Colour(StrainDecaySkill):
    """
    Difficulty of reading and switching between centre and rim hits.

    Decays slower than the other skills: only the first note of each encoded
    structure carries difficulty, so strain needs time to build up on slower
    charts.
    """

    def __init__(self, config=None):
        super().__init__(config)
        self.skill_multiplier = self.config.colour_strain_multiplier
        self.strain_decay_base = self.config.colour_strain_decay_base

    def strain_value_of(self, current, arena) -> float:
        return evaluate_colour_difficulty(current)
