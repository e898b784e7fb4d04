"""WebVTT (.vtt) caption parser.

Line-based state machine. Everything before the first timing line (the
``WEBVTT`` header, NOTE/STYLE/REGION blocks, cue identifiers) is ignored.
A line containing ``-->`` opens a cue; the following lines up to the next
blank line are its text. Timestamps are ``HH:MM:SS.mmm`` or ``MM:SS.mmm``;
cue settings after the end timestamp are ignored.
"""

from __future__ import annotations

import re
from typing import Iterator, Optional

from ssml_pipeline.parsers.base import (
    TIMESTAMP_ARROW,
    BaseCaptionParser,
    CaptionParseError,
    RawCue,
    timestamp_to_ms,
)

_VTT_TIMESTAMP_RE = re.compile(r"^(?:(\d+):)?(\d{2}):(\d{2})\.(\d{3})$")


class VTTCaptionParser(BaseCaptionParser):
    """Parse WebVTT content line by line."""

    @property
    def name(self) -> str:
        return "vtt"

    def parse_timestamp(self, value: str) -> int:
        match = _VTT_TIMESTAMP_RE.match(value.strip())
        if match is None:
            raise CaptionParseError("Invalid VTT timestamp: {!r}".format(value))
        return timestamp_to_ms(*match.groups())

    def split_cues(self, content: str) -> Iterator[RawCue]:
        current: Optional[RawCue] = None
        position = 0

        for line in content.split("\n"):
            if TIMESTAMP_ARROW in line:
                if current is not None:
                    yield current
                position += 1
                current = RawCue(position, line)
            elif not line.strip():
                if current is not None:
                    yield current
                current = None
            elif current is not None:
                current.text_lines.append(line)

        if current is not None:
            yield current
