"""SubRip (.srt) caption parser.

Blocks are separated by blank lines. Each block is an optional index line,
a timing line ``HH:MM:SS,mmm --> HH:MM:SS,mmm`` and one or more text lines.
A period is accepted in place of the comma, since some converters emit it.
"""

from __future__ import annotations

import re
from typing import Iterator

from ssml_pipeline.parsers.base import (
    TIMESTAMP_ARROW,
    BaseCaptionParser,
    CaptionParseError,
    RawCue,
    timestamp_to_ms,
)

_BLOCK_SEPARATOR_RE = re.compile(r"\n[ \t]*\n")
_SRT_TIMESTAMP_RE = re.compile(r"^(\d+):(\d{2}):(\d{2})[,.](\d{3})$")


class SRTCaptionParser(BaseCaptionParser):
    """Parse SubRip content block by block."""

    @property
    def name(self) -> str:
        return "srt"

    def parse_timestamp(self, value: str) -> int:
        match = _SRT_TIMESTAMP_RE.match(value.strip())
        if match is None:
            raise CaptionParseError("Invalid SRT timestamp: {!r}".format(value))
        return timestamp_to_ms(*match.groups())

    def split_cues(self, content: str) -> Iterator[RawCue]:
        blocks = [block for block in _BLOCK_SEPARATOR_RE.split(content) if block.strip()]
        for position, block in enumerate(blocks, start=1):
            lines = block.strip("\n").split("\n")
            if TIMESTAMP_ARROW in lines[0]:
                yield RawCue(position, lines[0], lines[1:])
            elif len(lines) > 1:
                # Index line first; a block without a timing line here fails
                # in parse_timing_line() and is skipped.
                yield RawCue(position, lines[1], lines[2:])
            else:
                yield RawCue(position, "", [])
