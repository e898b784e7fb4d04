"""Abstract base caption parser and shared timestamp handling.

WHY: The synthesizer's caption track arrives either as SubRip or as WebVTT.
Both parsers must produce the same Cue list, apply the same malformed-cue
policy, and clean cue text the same way, so those parts live here.

HOW: BaseCaptionParser is an ABC. Subclasses implement ``split_cues()``,
which cuts the file into RawCue values (timing line plus text lines), and
``parse_timestamp()`` for their timestamp syntax. The shared ``parse()``
parses each timing line, cleans the text and assigns the next sequential
id. A CaptionParseError raised for one cue is logged and the cue skipped.

RULES:
- Ids are "1", "2", ... over cues actually emitted (skips do not count)
- Milliseconds need exactly three digits; minutes and seconds are 0-59
- Anything after the end timestamp (cue settings) is ignored
- A cue whose end precedes its start is malformed
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Iterator, List, Sequence, Tuple

from ssml_pipeline.config import DEFAULT_NORMALIZER_CONFIG, NormalizerConfig
from ssml_pipeline.core.extractor import to_plain_text
from ssml_pipeline.core.ir import Cue

logger = logging.getLogger(__name__)

TIMESTAMP_ARROW = "-->"

_TIMING_LINE_RE = re.compile(r"^\s*(\S+)\s*-->\s*(\S+)(?:\s.*)?$")


class CaptionParseError(ValueError):
    """Raised for a cue whose timing line cannot be parsed."""


def normalize_newlines(content: str) -> str:
    """Drop a leading BOM and convert CRLF/CR line endings to LF."""
    if content.startswith("\ufeff"):
        content = content[1:]
    return content.replace("\r\n", "\n").replace("\r", "\n")


def timestamp_to_ms(hours: str, minutes: str, seconds: str, millis: str) -> int:
    """Combine timestamp components into milliseconds.

    Raises:
        CaptionParseError: If minutes or seconds are out of range.
    """
    h, m, s, ms = int(hours or 0), int(minutes), int(seconds), int(millis)
    if m > 59 or s > 59:
        raise CaptionParseError(
            "Timestamp component out of range: {}:{}:{}".format(hours, minutes, seconds)
        )
    return ((h * 60 + m) * 60 + s) * 1000 + ms


@dataclass
class RawCue:
    """One cue as found in the file, before timing is parsed.

    Attributes:
        position: 1-based position of the cue in the file (for log messages).
        timing_line: The line holding "start --> end".
        text_lines: The cue's text lines, unstripped.
    """

    position: int
    timing_line: str
    text_lines: List[str] = field(default_factory=list)


class BaseCaptionParser(ABC):
    """Abstract base for caption format parsers.

    To add a new caption format:
    1. Create a new file in parsers/
    2. Subclass BaseCaptionParser
    3. Implement name, parse_timestamp() and split_cues()
    4. Register in PARSERS dict in parsers/__init__.py
    """

    def __init__(self, config: NormalizerConfig = DEFAULT_NORMALIZER_CONFIG) -> None:
        self.config = config

    @property
    @abstractmethod
    def name(self) -> str:
        """Short format name, e.g. "srt"."""

    @abstractmethod
    def parse_timestamp(self, value: str) -> int:
        """Convert one timestamp string to milliseconds.

        Raises:
            CaptionParseError: If the value is not a valid timestamp.
        """

    @abstractmethod
    def split_cues(self, content: str) -> Iterator[RawCue]:
        """Yield the raw cues of newline-normalized content in file order."""

    def parse(self, content: str) -> List[Cue]:
        """Parse caption file content into cues.

        Args:
            content: Full caption file text.

        Returns:
            Cues in file order with sequential ids; malformed cues are
            logged and left out.
        """
        cues: List[Cue] = []
        for raw in self.split_cues(normalize_newlines(content)):
            try:
                start_ms, end_ms = self.parse_timing_line(raw.timing_line)
            except CaptionParseError as exc:
                logger.warning(
                    "Skipping malformed %s cue #%d: %s", self.name, raw.position, exc
                )
                continue
            cues.append(Cue(
                id=str(len(cues) + 1),
                start_ms=start_ms,
                end_ms=end_ms,
                text=self.clean_text(raw.text_lines),
            ))
        return cues

    def parse_timing_line(self, line: str) -> Tuple[int, int]:
        """Parse "start --> end [settings]" into (start_ms, end_ms)."""
        match = _TIMING_LINE_RE.match(line)
        if match is None:
            raise CaptionParseError("Missing timestamp in line: {!r}".format(line))
        start_ms = self.parse_timestamp(match.group(1))
        end_ms = self.parse_timestamp(match.group(2))
        if end_ms < start_ms:
            raise CaptionParseError(
                "Cue ends before it starts: {!r}".format(line.strip())
            )
        return start_ms, end_ms

    def clean_text(self, text_lines: Sequence[str]) -> str:
        """Join text lines with single spaces and clean the result."""
        raw_text = " ".join(line.strip() for line in text_lines if line.strip())
        return to_plain_text(raw_text, self.config)
