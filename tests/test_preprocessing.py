import pytest
from conftest import make_events

from TaikoDifficulty import HitType, RawHitEvent
from TaikoDifficulty.preprocessing import (
    COMMON_RHYTHMS,
    closest_rhythm,
    create_difficulty_objects,
    encode_colours,
)


def encoded(pattern: str):
    # Two leading events only serve as predecessors of the first object
    arena = create_difficulty_objects(make_events("dd" + pattern), clock_rate=1.0)
    groups = encode_colours(arena)
    return arena, groups


def test_fewer_than_three_events_yield_no_objects():
    assert len(create_difficulty_objects([], 1.0)) == 0
    assert len(create_difficulty_objects(make_events("dk"), 1.0)) == 0
    assert len(create_difficulty_objects(make_events("dkd"), 1.0)) == 1


def test_non_positive_clock_rate_is_rejected():
    with pytest.raises(ValueError):
        create_difficulty_objects(make_events("dkd"), 0.0)


def test_objects_carry_clock_adjusted_timing_and_links():
    events = [
        RawHitEvent(0.0, HitType.CENTRE),
        RawHitEvent(100.0, HitType.CENTRE),
        RawHitEvent(200.0, HitType.RIM),
        RawHitEvent(350.0, HitType.RIM, is_strong=True),
        RawHitEvent(400.0, HitType.CENTRE),
    ]
    arena = create_difficulty_objects(events, clock_rate=2.0)

    assert [obj.index for obj in arena] == [0, 1, 2]
    assert [obj.start_time for obj in arena] == [100.0, 175.0, 200.0]
    assert [obj.delta_time for obj in arena] == [50.0, 75.0, 25.0]

    first, second, third = arena
    assert (first.last_event_index, first.last_last_event_index) == (1, 0)
    assert (third.last_event_index, third.last_last_event_index) == (3, 2)
    assert second.is_strong

    assert arena.rim == [0, 1]
    assert arena.centre == [2]
    assert arena.notes == [0, 1, 2]
    assert first.mono_delta_time is None
    assert second.mono_delta_time == 75.0
    # Measured against the raw centre event at 100 ms, which yields no object
    assert third.mono_delta_time == 150.0


def test_mono_delta_time_counts_leading_events():
    arena = create_difficulty_objects(make_events("ddd"), clock_rate=1.0)
    assert arena[0].mono_delta_time == 100.0

    arena = create_difficulty_objects(make_events("dkkd", interval=50.0), 2.0)
    assert [obj.mono_delta_time for obj in arena] == [25.0, 75.0]

    arena = create_difficulty_objects(make_events("ddk"), 1.0)
    assert arena[0].mono_delta_time is None


def test_arena_lookups_resolve_by_index():
    arena = create_difficulty_objects(make_events("dd" + "dkdkk"), 1.0)
    obj = arena[4]

    assert arena.previous(obj, 0).index == 3
    assert arena.previous(obj, 3).index == 0
    assert arena.previous(obj, 4) is None
    assert arena.next(obj, 0) is None
    assert arena.next(arena[0], 1).index == 2

    # Rim objects are 1, 3, 4
    assert arena.previous_mono(obj, 0).index == 3
    assert arena.previous_mono(obj, 1).index == 1
    assert arena.previous_mono(obj, 2) is None
    assert arena.next_mono(arena[1], 0).index == 3
    assert arena.previous_note(obj, 1).index == 2
    assert arena.next_note(arena[2], 0).index == 3


def test_closest_rhythm():
    assert closest_rhythm(100, 100) is COMMON_RHYTHMS[0]
    assert closest_rhythm(200, 100).ratio == 2.0
    assert closest_rhythm(100, 200).ratio == 0.5
    assert closest_rhythm(150, 100).difficulty == 0.6
    assert closest_rhythm(100, 0) is COMMON_RHYTHMS[0]


def test_rhythm_is_assigned_from_both_predecessors():
    events = make_events("ddd")
    events.append(RawHitEvent(events[-1].start_time + 200.0, HitType.RIM))
    arena = create_difficulty_objects(events, 1.0)

    assert arena[0].rhythm.difficulty == 0.0
    assert arena[1].rhythm.ratio == 2.0


def test_alternation_is_one_pattern():
    arena, groups = encoded("dkdkdk")

    assert len(groups) == 1
    (pattern,) = groups[0].alternating_mono_patterns
    assert len(pattern.mono_streaks) == 6
    assert all(streak.run_length == 1 for streak in pattern.mono_streaks)
    assert [s.index for s in pattern.mono_streaks] == list(range(6))
    assert groups[0].repetition_interval == 17

    assert arena[0].colour.previous_colour_change is None
    assert arena[0].colour.next_colour_change == 1
    assert arena[3].colour.previous_colour_change == 2
    assert arena[3].colour.mono_streak.hit_type is HitType.RIM


def test_mono_streaks_follow_colour_runs():
    arena, groups = encoded("ddkkk")

    streaks = [
        streak
        for group in groups
        for pattern in group.alternating_mono_patterns
        for streak in pattern.mono_streaks
    ]
    assert [s.run_length for s in streaks] == [2, 3]
    assert [s.object_indices for s in streaks] == [[0, 1], [2, 3, 4]]
    assert [arena[i].colour.mono_position for i in range(5)] == [0, 1, 0, 1, 2]

    # Colour changes around the rim run
    assert arena[3].colour.previous_colour_change == 1
    assert arena[3].colour.next_colour_change is None
    assert len(groups) == 2


def test_patterns_repeating_every_other_are_grouped():
    _, groups = encoded("dkkdkk")

    assert len(groups) == 1
    lengths = [
        p.mono_streaks[0].run_length for p in groups[0].alternating_mono_patterns
    ]
    assert lengths == [1, 2, 1, 2]
    assert [p.index for p in groups[0].alternating_mono_patterns] == [0, 1, 2, 3]


def test_repetition_interval_finds_earlier_group():
    _, groups = encoded("d kk ddd k dd kkk")

    assert len(groups) == 6
    assert [g.repetition_interval for g in groups] == [17, 17, 17, 3, 3, 3]


def test_every_object_is_encoded():
    arena, _ = encoded("ddkdkkkdkd")
    for obj in arena:
        assert obj.colour.mono_streak is not None
        assert obj.colour.alternating_mono_pattern is not None
        assert obj.colour.repeating_hit_patterns is not None
        assert obj.index in obj.colour.mono_streak.object_indices
