"""
Labelled chart records used for batch rating and evaluation.
"""

from dataclasses import dataclass, field
from typing import Optional

from .hit_event import Mod, RawHitEvent
from .tokenizer import HitEventTokenizer


@dataclass
class ChartRecord:
    """A single chart (one course of one song) with its labels."""

    song_id: str
    difficulty: str  # easy/normal/hard/oni/ura
    events: list[RawHitEvent]
    level: Optional[int] = None  # charted star level, if known
    overall_difficulty: float = 5.0
    is_convert: bool = False
    mods: tuple[Mod, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(
        cls, data: dict, tokenizer: Optional[HitEventTokenizer] = None
    ) -> "ChartRecord":
        """Build a record from a dataset row with a ``segments`` field."""
        tokenizer = tokenizer or HitEventTokenizer()
        level = data.get("level")
        return cls(
            song_id=str(data.get("song_id", data.get("title", ""))),
            difficulty=data.get("difficulty", "oni"),
            events=tokenizer.tokenize_chart(data.get("segments", [])),
            level=int(level) if level is not None else None,
            overall_difficulty=float(data.get("overall_difficulty", 5.0)),
            is_convert=bool(data.get("is_convert", False)),
            mods=tuple(Mod(m) for m in data.get("mods", [])),
        )
