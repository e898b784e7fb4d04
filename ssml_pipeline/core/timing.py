"""Approximate word timing and playback lookups over parsed cues.

WHY: The player highlights the cue and the word being spoken. Caption
tracks only carry cue-level timing, so word positions are estimated by
splitting each cue's duration evenly across its words. This is a linear
approximation, not an alignment.

HOW: word_timings() computes slice boundaries with integer arithmetic
(start + duration * i // n), which keeps the slices contiguous and makes the
last slice end exactly on the cue's end. find_active_cue() and
find_active_word() are linear scans used by playback position updates.

RULES:
- Words are runs of non-whitespace in Cue.text, in original order
- No words → empty list
- First slice starts at cue.start_ms, last slice ends at cue.end_ms
- Lookups use inclusive bounds and return the first match
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from ssml_pipeline.core.ir import Cue, WordTiming


def word_timings(cue: Cue) -> List[WordTiming]:
    """Split a cue's duration evenly across its words.

    Args:
        cue: A parsed cue; its text is split on whitespace.

    Returns:
        One WordTiming per word, partitioning [cue.start_ms, cue.end_ms].
    """
    words = cue.text.split()
    if not words:
        return []

    count = len(words)
    duration = cue.end_ms - cue.start_ms
    boundaries = [cue.start_ms + (duration * i) // count for i in range(count + 1)]

    return [
        WordTiming(word=word, start_ms=boundaries[i], end_ms=boundaries[i + 1])
        for i, word in enumerate(words)
    ]


def find_active_cue(cues: Sequence[Cue], position_ms: int) -> Optional[Cue]:
    """Return the first cue whose interval contains position_ms, if any."""
    for cue in cues:
        if cue.start_ms <= position_ms <= cue.end_ms:
            return cue
    return None


def find_active_word(cue: Cue, position_ms: int) -> Optional[Tuple[str, int]]:
    """Return (word, index) of the approximate word spoken at position_ms.

    Adjacent slices share a boundary; a position on the boundary resolves to
    the earlier word.
    """
    for index, timing in enumerate(word_timings(cue)):
        if timing.start_ms <= position_ms <= timing.end_ms:
            return timing.word, index
    return None
