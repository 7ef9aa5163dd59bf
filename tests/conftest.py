import pytest

from TaikoDifficulty import HitType, RawHitEvent, TaikoDifficultyCalculator

# d/k = centre/rim, D/K = strong centre/rim
_PATTERN_TYPES = {
    "d": (HitType.CENTRE, False),
    "k": (HitType.RIM, False),
    "D": (HitType.CENTRE, True),
    "K": (HitType.RIM, True),
}


def make_events(pattern: str, interval: float = 100.0, start: float = 0.0):
    """Evenly spaced hit events from a d/k pattern string (spaces ignored)."""
    events = []
    for ch in pattern.replace(" ", ""):
        hit_type, is_strong = _PATTERN_TYPES[ch]
        events.append(
            RawHitEvent(
                start_time=start + len(events) * interval,
                hit_type=hit_type,
                is_strong=is_strong,
            )
        )
    return events


def alternating(count: int) -> str:
    return ("dk" * count)[:count]


@pytest.fixture
def calculator():
    return TaikoDifficultyCalculator()


@pytest.fixture
def alternating_chart():
    """50 alternating centre/rim hits, 100 ms apart."""
    return make_events(alternating(50), interval=100.0)
