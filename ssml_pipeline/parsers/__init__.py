"""Caption parser registry.

WHY: The CLI and any other caller pick a parser by format name ("srt",
"vtt"). A central dict keeps that lookup in one place: adding a format is
a new module plus one line here.

HOW: PARSERS maps lower-case format names to parser *classes*.
parse_captions() looks the name up case-insensitively, instantiates the
parser with the given normalizer config and runs it.

RULES:
- Unknown format names raise ValueError
- Malformed cues never fail the whole parse (see parsers.base)
"""

from __future__ import annotations

from typing import List

from ssml_pipeline.config import DEFAULT_NORMALIZER_CONFIG, NormalizerConfig
from ssml_pipeline.core.ir import Cue
from ssml_pipeline.parsers.base import BaseCaptionParser, CaptionParseError
from ssml_pipeline.parsers.srt import SRTCaptionParser
from ssml_pipeline.parsers.vtt import VTTCaptionParser

PARSERS: dict[str, type[BaseCaptionParser]] = {
    "srt": SRTCaptionParser,
    "vtt": VTTCaptionParser,
}


def parse_captions(
    content: str,
    fmt: str,
    config: NormalizerConfig = DEFAULT_NORMALIZER_CONFIG,
) -> List[Cue]:
    """Parse caption content of the given format into cues.

    Args:
        content: Full caption file text.
        fmt: Format name, "srt" or "vtt" (case-insensitive).
        config: Pause-descriptor policy used when cleaning cue text.

    Returns:
        Cues in file order.

    Raises:
        ValueError: If the format name is unknown.
    """
    parser_cls = PARSERS.get(fmt.strip().lower())
    if parser_cls is None:
        raise ValueError(
            "Unknown caption format {!r} (expected one of: {})".format(
                fmt, ", ".join(sorted(PARSERS))
            )
        )
    return parser_cls(config).parse(content)


__all__ = [
    "PARSERS",
    "BaseCaptionParser",
    "CaptionParseError",
    "SRTCaptionParser",
    "VTTCaptionParser",
    "parse_captions",
]
