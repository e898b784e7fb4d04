"""Intermediate representation dataclasses for parsed captions.

WHY: Caption files come back from the synthesizer in two textual formats
(SubRip and WebVTT). Downstream consumers (transcript players, word
highlighting) should not care which one it was. The IR gives both a single
typed shape.

HOW: Two dataclasses:
  Cue        — one timed caption entry with cleaned display text
  WordTiming — one approximate word slice inside a cue

RULES:
- All times are integer milliseconds (not float seconds)
- end_ms >= start_ms for every Cue and WordTiming
- Cue.text is already cleaned and may be empty
- Cue.id is the 1-based sequence number within one parse, as a string
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Cue:
    """One timed caption entry.

    RULES:
    - Produced in file order; parsers never re-sort or merge overlaps
    - text holds the cleaned display text (markup and token noise removed)
    """

    id: str
    start_ms: int
    end_ms: int
    text: str

    @property
    def duration_ms(self) -> int:
        return self.end_ms - self.start_ms


@dataclass(frozen=True)
class WordTiming:
    """Approximate timing of a single word within a cue.

    The word is a whitespace-free run taken from Cue.text. Timings are a
    linear split of the cue duration, not an alignment.
    """

    word: str
    start_ms: int
    end_ms: int
