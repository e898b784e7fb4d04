"""Plain-text extraction from markup and caption files.

WHY: Transcript views, caption text and downloads must never show raw
markup. The same function is called on validated markup, on LLM output
that may be broken, and on whole caption files whose timing lines must
survive untouched. It has to accept all three and never fail.

HOW: Two named strategies sit behind one interface:
  TreeExtractionStrategy      — walks the parsed markup tree, turning
                                <break> elements into pause markers
  HeuristicExtractionStrategy — regex tag stripping for input that does
                                not parse as XML
select_strategy() picks one with a single up-front well-formedness check.
Both hand their output to normalize_artifacts(), which resolves pause
markers and removes leaked keyword tokens.

to_plain_text() first checks whether the input is a caption file (blocks
with a timestamp line). If so, index and timestamp lines are kept verbatim
and only the cue text lines are cleaned.

RULES:
- to_plain_text() never raises
- Text nodes are kept verbatim; fragments are joined with single spaces
- <break time="..."> becomes "[pause <time>]", a bare <break> "[pause]"
- Children of <break> are still walked (some producers nest text there)
- Caption mode: WEBVTT/NOTE/STYLE/REGION blocks are kept verbatim
"""

from __future__ import annotations

import html
import logging
import re
from abc import ABC, abstractmethod
from typing import List

from ssml_pipeline.config import DEFAULT_NORMALIZER_CONFIG, NormalizerConfig
from ssml_pipeline.core.markup import (
    Element,
    MarkupSyntaxError,
    Node,
    TextNode,
    parse_fragment,
)
from ssml_pipeline.core.normalizer import normalize_artifacts

logger = logging.getLogger(__name__)

CAPTION_TIMESTAMP_RE = re.compile(
    r"\d{2}:\d{2}:\d{2}[.,]\d{3}\s*-->\s*\d{2}:\d{2}:\d{2}[.,]\d{3}"
)
_BLOCK_SEPARATOR_RE = re.compile(r"\r?\n[ \t]*\r?\n")
_LINE_SEPARATOR_RE = re.compile(r"\r?\n")
_VERBATIM_BLOCK_PREFIXES = ("WEBVTT", "NOTE", "STYLE", "REGION")

_BREAK_TAG_RE = re.compile(r"<\s*break\b([^>]*)>", re.IGNORECASE)
_TIME_ATTRIBUTE_RE = re.compile(r"""\btime\s*=\s*["']([^"']*)["']""", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]*>")


def pause_marker(time_value=None) -> str:
    """Render the textual pause marker the normalizer understands."""
    if time_value:
        return "[pause {}]".format(time_value.strip())
    return "[pause]"


class ExtractionStrategy(ABC):
    """Turns one piece of markup into raw (not yet normalized) text."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Short strategy name used in log messages."""

    @abstractmethod
    def extract(self, markup: str) -> str:
        """Return readable text with pause markers; must not raise."""


class TreeExtractionStrategy(ExtractionStrategy):
    """Depth-first walk over well-formed markup.

    Every node kind is handled explicitly: TextNode contributes its text,
    a "break" Element contributes a pause marker and then its children,
    any other Element contributes its children.
    """

    @property
    def name(self) -> str:
        return "tree"

    def extract(self, markup: str) -> str:
        root = parse_fragment(markup)
        fragments = self.collect(root)
        return " ".join(fragments)

    def collect(self, root: Element) -> List[str]:
        fragments: List[str] = []
        stack: List[Node] = [root]
        while stack:
            node = stack.pop()
            if isinstance(node, TextNode):
                fragments.append(node.text)
            elif isinstance(node, Element):
                if node.name == "break":
                    fragments.append(pause_marker(node.get("time")))
                stack.extend(reversed(node.children))
            else:
                raise TypeError("Unexpected markup node: {!r}".format(node))
        return fragments


class HeuristicExtractionStrategy(ExtractionStrategy):
    """Regex tag stripping for markup that does not parse.

    Break tags are rewritten to pause markers before all other tags are
    replaced by spaces; entities are decoded afterwards.
    """

    @property
    def name(self) -> str:
        return "heuristic"

    def extract(self, markup: str) -> str:
        def _break_to_marker(match: "re.Match") -> str:
            time_match = _TIME_ATTRIBUTE_RE.search(match.group(1))
            return " {} ".format(pause_marker(time_match.group(1) if time_match else None))

        text = _BREAK_TAG_RE.sub(_break_to_marker, markup)
        text = _TAG_RE.sub(" ", text)
        return html.unescape(text)


def select_strategy(markup: str) -> ExtractionStrategy:
    """Pick the tree walk for well-formed markup, the heuristic otherwise."""
    try:
        parse_fragment(markup)
    except MarkupSyntaxError as exc:
        logger.debug("Markup not well-formed (%s), using heuristic extraction", exc)
        return HeuristicExtractionStrategy()
    return TreeExtractionStrategy()


def clean_text(markup: str, config: NormalizerConfig = DEFAULT_NORMALIZER_CONFIG) -> str:
    """Extract and normalize a single utterance (no caption handling)."""
    if not markup or not markup.strip():
        return ""
    strategy = select_strategy(markup)
    return normalize_artifacts(strategy.extract(markup), config)


def looks_like_caption_file(text: str) -> bool:
    """True if any blank-line separated block carries a cue timestamp line."""
    for block in _BLOCK_SEPARATOR_RE.split(text.strip()):
        lines = _LINE_SEPARATOR_RE.split(block.strip())
        if any(CAPTION_TIMESTAMP_RE.search(line) for line in lines[:2]):
            return True
    return False


def _clean_caption_block(block: str, config: NormalizerConfig) -> str:
    lines = [line.strip() for line in _LINE_SEPARATOR_RE.split(block.strip())]
    if lines[0].startswith(_VERBATIM_BLOCK_PREFIXES):
        return "\n".join(lines)

    if CAPTION_TIMESTAMP_RE.search(lines[0]):
        head, body = lines[:1], lines[1:]
    elif len(lines) >= 2 and CAPTION_TIMESTAMP_RE.search(lines[1]):
        head, body = lines[:2], lines[2:]
    else:
        return clean_text(block, config)

    cleaned = clean_text(" ".join(body), config)
    if cleaned:
        head.append(cleaned)
    return "\n".join(head)


def to_plain_text(markup: str, config: NormalizerConfig = DEFAULT_NORMALIZER_CONFIG) -> str:
    """Convert markup (or a whole caption file) to displayable text.

    WHY: Callers hand over whatever they have: validated markup, broken
    LLM output or the caption file the synthesizer returned, and always
    need something displayable back.

    HOW: Caption files are cleaned block by block with timing preserved;
    anything else goes through clean_text().

    Args:
        markup: Markup, plain text, or SRT/WebVTT caption content.
        config: Pause-descriptor display policy.

    Returns:
        Cleaned text; caption files come back as blocks joined by a blank
        line. Empty input gives "".
    """
    if not markup or not markup.strip():
        return ""

    trimmed = markup.strip()
    if looks_like_caption_file(trimmed):
        blocks = [
            _clean_caption_block(block, config)
            for block in _BLOCK_SEPARATOR_RE.split(trimmed)
            if block.strip()
        ]
        return "\n\n".join(block for block in blocks if block).strip()

    return clean_text(trimmed, config)
