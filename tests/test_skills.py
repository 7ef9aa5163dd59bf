import math

import pytest
from conftest import alternating, make_events

from TaikoDifficulty import HitType, RawHitEvent
from TaikoDifficulty.preprocessing import create_difficulty_objects, encode_colours
from TaikoDifficulty.skills import Colour, Rhythm, Stamina, weighted_peak_sum
from TaikoDifficulty.skills.evaluators import (
    available_fingers_for,
    evaluate_colour_difficulty,
    evaluate_stamina_difficulty,
    speed_bonus,
)


def prepared(events, clock_rate=1.0):
    arena = create_difficulty_objects(events, clock_rate)
    encode_colours(arena)
    return arena


def test_weighted_peak_sum_sorts_and_decays():
    assert weighted_peak_sum([1.0, 3.0, 2.0], 0.9) == pytest.approx(
        3.0 + 2.0 * 0.9 + 1.0 * 0.81
    )
    assert weighted_peak_sum([], 0.9) == 0.0
    assert weighted_peak_sum([0.0, 0.0], 0.9) == 0.0


def test_weighted_peak_sum_matches_sequential_loop():
    peaks = [0.37, 1.91, 0.0, 1.2, 0.05, 2.4, 0.77]
    expected, weight = 0.0, 1.0
    for strain in sorted((p for p in peaks if p > 0), reverse=True):
        expected += strain * weight
        weight *= 0.9
    assert weighted_peak_sum(peaks, 0.9) == expected


def test_sections_split_the_timeline():
    events = make_events("ddd")
    events.append(RawHitEvent(1000.0, HitType.RIM))
    arena = prepared(events)

    stamina = Stamina().process_all(arena)

    # Objects at 200 and 1000 ms: sections end at 400, 800 and 1200
    assert len(stamina.get_current_strain_peaks()) == 3
    assert len(stamina.object_strains) == 2


def test_skills_share_section_boundaries(alternating_chart):
    arena = prepared(alternating_chart)
    skills = [
        Rhythm().process_all(arena),
        Colour().process_all(arena),
        Stamina().process_all(arena),
        Stamina(single_colour=True).process_all(arena),
    ]
    lengths = {len(skill.get_current_strain_peaks()) for skill in skills}
    assert lengths == {13}


def test_empty_skill_is_zero():
    stamina = Stamina()
    assert stamina.difficulty_value() == 0.0
    assert stamina.count_top_weighted_strains() == 0.0
    assert list(stamina.get_current_strain_peaks()) == [0.0]


def test_constant_rhythm_has_no_rhythm_strain(alternating_chart):
    rhythm = Rhythm().process_all(prepared(alternating_chart))
    assert rhythm.difficulty_value() == 0.0
    assert all(strain == 0.0 for strain in rhythm.object_strains)


def test_rhythm_change_creates_strain():
    events = make_events("dkdkdkdkdk", interval=100.0)
    last = events[-1].start_time
    events += [
        RawHitEvent(last + 50.0 * (i + 1), HitType.CENTRE if i % 2 else HitType.RIM)
        for i in range(8)
    ]
    rhythm = Rhythm().process_all(prepared(events))
    assert rhythm.difficulty_value() > 0


def test_rhythm_penalties():
    assert Rhythm.pattern_length_penalty(1) == pytest.approx(0.15)
    assert Rhythm.pattern_length_penalty(8) == 1.0
    assert Rhythm.pattern_length_penalty(16) == pytest.approx(0.1)
    assert Rhythm.pattern_length_penalty(20) == 0.0
    assert Rhythm.repetition_penalty(10) == pytest.approx(0.32)
    assert Rhythm.repetition_penalty(100) == 1.0

    rhythm = Rhythm()
    assert rhythm.speed_penalty(50) == 1.0
    assert rhythm.speed_penalty(100) == pytest.approx(0.9)
    assert rhythm.speed_penalty(250) == 0.0


def test_colour_difficulty_only_on_structure_starts(alternating_chart):
    arena = prepared(alternating_chart)
    e = math.e

    def falloff(x):
        return 1 / (1 + math.exp(x))

    repeat = 2 * (1 - falloff(17 * e - 2 * e))
    alt = falloff(-2 * e) * repeat

    assert evaluate_colour_difficulty(arena[0]) == pytest.approx(
        falloff(-2 * e) * alt * 0.5 + alt + repeat
    )
    assert evaluate_colour_difficulty(arena[2]) == pytest.approx(0.5 * alt * 0.5)

    # Second note of a streak adds nothing
    arena = prepared(make_events("dd" + "ddkk"))
    assert evaluate_colour_difficulty(arena[1]) == 0.0
    assert evaluate_colour_difficulty(arena[2]) > 0.0


def test_available_fingers():
    close = prepared(make_events("dd" + "dkdk", interval=100.0))
    assert available_fingers_for(close[1], close) == 2

    far = prepared(make_events("dd" + "ddddd", interval=100.0))
    # Single streak: no colour change anywhere
    assert available_fingers_for(far[2], far) == 4


def test_stamina_difficulty_uses_same_finger_interval():
    arena = prepared(make_events("dd" + alternating(8), interval=100.0))

    # Two fingers: same finger is two same-coloured notes back (400 ms)
    assert evaluate_stamina_difficulty(arena[3], arena) == 0.0
    assert evaluate_stamina_difficulty(arena[4], arena) == pytest.approx(
        0.5 + 30 / 400
    )
    assert speed_bonus(0.0) == 30.0


def test_single_colour_stamina_is_attenuated_on_short_streaks(alternating_chart):
    arena = prepared(alternating_chart)
    stamina = Stamina().process_all(arena)
    mono = Stamina(single_colour=True).process_all(arena)

    ratio = 1 / (1 + math.exp(5))
    for full, single in zip(stamina.object_strains, mono.object_strains):
        assert single == pytest.approx(full * ratio)


def test_long_monotone_streak_counts_for_single_colour_stamina():
    arena = prepared(make_events("d" * 60, interval=80.0))
    stamina = Stamina().process_all(arena)
    mono = Stamina(single_colour=True).process_all(arena)

    assert mono.object_strains[-1] == pytest.approx(
        stamina.object_strains[-1], rel=1e-6
    )


def test_count_top_weighted_strains(alternating_chart):
    stamina = Stamina().process_all(prepared(alternating_chart))
    count = stamina.count_top_weighted_strains()
    assert 0 < count < len(stamina.object_strains) * 1.1
