"""
Difficulty Object Preprocessing

Turns the ordered hit events of a chart into difficulty objects that carry
clock-adjusted timing and index-based links to earlier objects. Objects live
in an append-only arena; every "previous"/"next" relation is an index lookup.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from ..data.hit_event import HitType, RawHitEvent
from .colour import ColourEncoding
from .rhythm import HitRhythm, closest_rhythm

logger = logging.getLogger(__name__)


@dataclass
class DifficultyObject:
    """A hit event enriched with everything the skills need."""

    index: int  # position in the arena
    start_time: float  # clock-adjusted, ms
    delta_time: float  # clock-adjusted interval to the previous event
    hit_type: HitType
    is_strong: bool
    last_event_index: int  # raw event indices of the two predecessors
    last_last_event_index: int
    mono_index: int  # position among objects of the same hit type
    note_index: int  # position among all note objects
    mono_delta_time: Optional[float]  # interval to previous same-type event
    rhythm: HitRhythm
    colour: ColourEncoding = field(default_factory=ColourEncoding)


class DifficultyObjectArena:
    """
    Append-only store of difficulty objects.

    Besides the full object list, keeps per-hit-type index lists (centre,
    rim) and the combined note list so that "previous object of type X"
    resolves in O(1).
    """

    def __init__(self):
        self.objects: list[DifficultyObject] = []
        self.centre: list[int] = []
        self.rim: list[int] = []
        self.notes: list[int] = []

    def __len__(self) -> int:
        return len(self.objects)

    def __iter__(self):
        return iter(self.objects)

    def __getitem__(self, index: int) -> DifficultyObject:
        return self.objects[index]

    def mono_list(self, hit_type: HitType) -> list[int]:
        return self.centre if hit_type is HitType.CENTRE else self.rim

    def append(
        self,
        event: RawHitEvent,
        last_event: RawHitEvent,
        last_last_event: RawHitEvent,
        event_index: int,
        clock_rate: float,
        last_mono_time: Optional[float] = None,
    ) -> DifficultyObject:
        """
        Create the object for ``event`` and register it in every index list.

        ``last_mono_time`` is the raw start time of the previous event of the
        same hit type, if any.
        """
        index = len(self.objects)
        mono = self.mono_list(event.hit_type)
        start_time = event.start_time / clock_rate

        mono_delta_time = None
        if last_mono_time is not None:
            mono_delta_time = (event.start_time - last_mono_time) / clock_rate

        delta_time = (event.start_time - last_event.start_time) / clock_rate
        previous_delta_time = (
            last_event.start_time - last_last_event.start_time
        ) / clock_rate

        obj = DifficultyObject(
            index=index,
            start_time=start_time,
            delta_time=delta_time,
            hit_type=event.hit_type,
            is_strong=event.is_strong,
            last_event_index=event_index - 1,
            last_last_event_index=event_index - 2,
            mono_index=len(mono),
            note_index=len(self.notes),
            mono_delta_time=mono_delta_time,
            rhythm=closest_rhythm(delta_time, previous_delta_time),
        )

        self.objects.append(obj)
        mono.append(index)
        self.notes.append(index)
        return obj

    # ------------------------------------------------------------------
    # Index lookups (None when out of range)
    # ------------------------------------------------------------------

    @staticmethod
    def _lookup(
        objects: list[DifficultyObject], indices: Optional[list[int]], position: int
    ) -> Optional[DifficultyObject]:
        if position < 0:
            return None
        if indices is None:
            return objects[position] if position < len(objects) else None
        return objects[indices[position]] if position < len(indices) else None

    def previous(self, obj: DifficultyObject, n: int = 0) -> Optional[DifficultyObject]:
        return self._lookup(self.objects, None, obj.index - (n + 1))

    def next(self, obj: DifficultyObject, n: int = 0) -> Optional[DifficultyObject]:
        return self._lookup(self.objects, None, obj.index + (n + 1))

    def previous_mono(
        self, obj: DifficultyObject, n: int = 0
    ) -> Optional[DifficultyObject]:
        mono = self.mono_list(obj.hit_type)
        return self._lookup(self.objects, mono, obj.mono_index - (n + 1))

    def next_mono(self, obj: DifficultyObject, n: int = 0) -> Optional[DifficultyObject]:
        mono = self.mono_list(obj.hit_type)
        return self._lookup(self.objects, mono, obj.mono_index + (n + 1))

    def previous_note(
        self, obj: DifficultyObject, n: int = 0
    ) -> Optional[DifficultyObject]:
        return self._lookup(self.objects, self.notes, obj.note_index - (n + 1))

    def next_note(self, obj: DifficultyObject, n: int = 0) -> Optional[DifficultyObject]:
        return self._lookup(self.objects, self.notes, obj.note_index + (n + 1))


def create_difficulty_objects(
    events: Sequence[RawHitEvent], clock_rate: float
) -> DifficultyObjectArena:
    """
    Build the difficulty objects of a chart.

    The first two events have no pair of predecessors and produce no object,
    so charts with fewer than three events yield an empty arena.

    Args:
        events: Hit events ordered by start time
        clock_rate: Playback rate multiplier (> 0)

    Returns:
        The populated arena
    """
    if clock_rate <= 0:
        raise ValueError(f"clock_rate must be positive, got {clock_rate}")

    arena = DifficultyObjectArena()
    # Tracked over every raw event, including the two that yield no object
    last_mono_times: dict[HitType, float] = {}
    for i, event in enumerate(events):
        if i >= 2:
            arena.append(
                event,
                events[i - 1],
                events[i - 2],
                i,
                clock_rate,
                last_mono_times.get(event.hit_type),
            )
        last_mono_times[event.hit_type] = event.start_time

    logger.debug(
        "Created %d difficulty objects (%d centre, %d rim) at clock rate %.2f",
        len(arena),
        len(arena.centre),
        len(arena.rim),
        clock_rate,
    )
    return arena
