"""
Hit Event Tokenizer for Taiko Chart Notes

Converts chart segment data (as produced by the chart dataset and the TJA
parser) into the ordered hit events the rating engine consumes.
"""

from typing import Optional

from ..constants import HIT_NOTE_TYPES, NON_HIT_NOTE_TYPES
from .hit_event import HitType, RawHitEvent


class HitEventTokenizer:
    """
    Tokenizes Taiko chart data into hit event sequences.

    Features:
    - Extracts Don/Ka hits (small and big) from segments
    - Converts timestamps from seconds to milliseconds
    - Skips rolls, balloons and their end markers, which are not hits
    """

    def __init__(self, time_offset: float = 0.0):
        """
        Args:
            time_offset: Seconds added to every note timestamp
        """
        self.time_offset = time_offset

    def tokenize_chart(self, segments: list[dict]) -> list[RawHitEvent]:
        """
        Convert chart segments to a list of RawHitEvents.

        Args:
            segments: List of segment dicts from the dataset

        Returns:
            List of RawHitEvent objects, sorted by start time
        """
        events = []

        for segment in segments:
            segment_start = segment.get("timestamp", 0.0)

            for note in segment.get("notes", []):
                event = self.tokenize_note(note, segment_start)
                if event is not None:
                    events.append(event)

        # Stable sort keeps chart order for simultaneous notes
        events.sort(key=lambda e: e.start_time)
        return events

    def tokenize_note(
        self, note: dict, segment_start: float = 0.0
    ) -> Optional[RawHitEvent]:
        """
        Convert a single note dict, or return None if it is not a hit.

        Raises:
            ValueError: If the note type is unknown
        """
        note_type = note.get("note_type", "Don")
        if note_type in NON_HIT_NOTE_TYPES:
            return None
        if note_type not in HIT_NOTE_TYPES:
            raise ValueError(f"Unknown note type: {note_type!r}")

        is_rim, is_strong = HIT_NOTE_TYPES[note_type]
        note_time = note.get("timestamp", segment_start) + self.time_offset

        return RawHitEvent(
            start_time=note_time * 1000.0,
            hit_type=HitType.RIM if is_rim else HitType.CENTRE,
            is_strong=is_strong,
        )
