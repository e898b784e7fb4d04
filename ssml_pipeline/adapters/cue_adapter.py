"""Adapter: Cue IR to JSON-ready cue records.

WHY: Player front ends consume cues as JSON with camelCase keys
(``startMs``, ``endMs``) and, for word highlighting, an optional list of
approximate word timings. The IR uses snake_case dataclasses, so this
adapter bridges the two without leaking JSON naming into the core.

HOW: One record per cue, keys in a fixed order. With include_words=True
each record gets a ``words`` list built by word_timings().

RULES:
- Input cues are never modified
- Times stay integer milliseconds
- ``words`` is present only when requested (an empty list for a wordless cue)
"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

from ssml_pipeline.core.ir import Cue, WordTiming
from ssml_pipeline.core.timing import word_timings


def word_to_record(timing: WordTiming) -> Dict[str, Any]:
    """Convert one WordTiming to ``{word, startMs, endMs}``."""
    return {
        "word": timing.word,
        "startMs": timing.start_ms,
        "endMs": timing.end_ms,
    }


def cue_to_record(cue: Cue, include_words: bool = False) -> Dict[str, Any]:
    """Convert one Cue to ``{id, startMs, endMs, text[, words]}``."""
    record: Dict[str, Any] = {
        "id": cue.id,
        "startMs": cue.start_ms,
        "endMs": cue.end_ms,
        "text": cue.text,
    }
    if include_words:
        record["words"] = [word_to_record(t) for t in word_timings(cue)]
    return record


def cues_to_records(
    cues: Sequence[Cue],
    include_words: bool = False,
) -> List[Dict[str, Any]]:
    """Convert cues to a list of JSON-ready records in the same order."""
    return [cue_to_record(cue, include_words) for cue in cues]
