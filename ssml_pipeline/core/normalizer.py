"""Repair of markup-token artifacts in extracted and caption text.

WHY: Text coming back from the synthesis path (caption tracks, format
converters, tag-stripped fallbacks) sometimes carries pieces of the markup
vocabulary glued onto real words: "speakHello", "worldspeak",
"time400ms", "volumemediumHello". Captions and transcripts must show
readable prose, so these tokens have to be cut out without mangling the
words around them or the pause information they encode.

HOW: normalize_artifacts() runs one cleaning pass repeatedly until the text
stops changing (at most _MAX_PASSES times). One pass is:
  1. pause-like substrings ("[pause]", "[pause 400ms]", "time 400ms",
     "time400ms") become numbered placeholders with a parsed duration
  2. markup keywords glued to a word (as prefix or suffix) are stripped,
     together with any attribute value glued to them ("rate100", "volumeloud")
  3. camelCase boundaries get a space
  4. unit suffixes (ms, s, hz, khz) glued to a number are split from a
     following letter, then letters and digits are split apart
  5. markup keywords standing alone are dropped
  6. stray markup punctuation is dropped and whitespace collapsed
  7. placeholders are restored: nothing, or "[long silence]" when enabled
     and the pause is at least the configured threshold
  8. bare duration tokens ("400 ms", "2 s") and unit words are dropped

RULES:
- Never raises; always returns a string
- Idempotent: normalize_artifacts(normalize_artifacts(x)) == normalize_artifacts(x)
- Pause extraction runs before token stripping so durations survive it
- Apostrophes inside words ("don't") are kept; other quotes are dropped
- Prefix stripping needs a visible boundary (camelCase or digit) after the
  keyword, except for speak/break/prosody glued to a lowercase remainder
  that does not continue an ordinary word
- Suffix stripping skips keywords that commonly end English words
- An "s" glued between a number and a letter is a unit, except in ordinals
  ("21st")
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional

from ssml_pipeline.config import (
    DEFAULT_NORMALIZER_CONFIG,
    LONG_SILENCE_DESCRIPTOR,
    NormalizerConfig,
)

logger = logging.getLogger(__name__)

_MAX_PASSES = 10

# ---------------------------------------------------------------------------
# Vocabulary
# ---------------------------------------------------------------------------

MARKUP_KEYWORDS = (
    "speak", "break", "prosody", "rate", "pitch", "volume", "say-as", "time",
    "strength", "level", "alias", "interpret-as", "lex", "voice", "phoneme", "sub",
)
"""Element and attribute names that leak into text output."""

# Keywords whose glued attribute values are noise too ("rate100", "levelstrong").
_ATTRIBUTE_KEYWORDS = ("rate", "pitch", "volume", "strength", "level", "time")

_ATTRIBUTE_VALUES = (
    "x-slow", "slow", "medium", "x-fast", "fast", "default", "x-low", "low",
    "x-high", "high", "silent", "x-soft", "soft", "x-loud", "loud", "none",
    "x-weak", "weak", "x-strong", "strong", "moderate", "reduced",
)

# These end ordinary words too often ("pirate", "lifetime", "Alex", "bilevel").
_NO_SUFFIX_STRIP = frozenset({"rate", "time", "lex", "level"})

_SUFFIX_STRIP_EXCEPTIONS = frozenset({
    "invoice", "outbreak", "daybreak", "heartbreak", "jailbreak", "windbreak",
    "doublespeak", "newspeak",
})

# Lowercase "speak/break/prosody" + remainder is glued only when the remainder
# does not continue an ordinary word ("speaker", "breakfast", "breakthrough").
_PREFIX_WORD_CONTINUATIONS = (
    "s", "er", "ing", "able", "age", "easy", "fast", "through", "down", "out",
    "away", "water", "point", "neck", "up", "off", "even", "man", "men",
    "beat", "dance",
)


def _alternation(words) -> str:
    return "|".join(re.escape(w) for w in sorted(words, key=len, reverse=True))


_KW = _alternation(MARKUP_KEYWORDS)
_SUFFIX_KW = _alternation(w for w in MARKUP_KEYWORDS if w not in _NO_SUFFIX_STRIP)
_ATTR_KW = _alternation(_ATTRIBUTE_KEYWORDS)
_VALUES = _alternation(_ATTRIBUTE_VALUES)

# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

_PLACEHOLDER_OPEN = "\ue000"
_PLACEHOLDER_CLOSE = "\ue001"
_PLACEHOLDER_RE = re.compile("{}(\\d+){}".format(_PLACEHOLDER_OPEN, _PLACEHOLDER_CLOSE))

_PAUSE_RE = re.compile(
    r"\[\s*pause\b([^\[\]]*)\]"
    r"|(?<![^\W_])time\s*=?\s*[\"']?(\d+(?:\.\d+)?\s*(?:ms|s(?![a-z])))(?![0-9])[\"']?",
    re.IGNORECASE,
)
_DURATION_RE = re.compile(r"^(\d+(?:\.\d+)?)\s*(ms|s)?$", re.IGNORECASE)

# Leaked attribute assignments such as rate="120%" or pitch='+2st'.
_ATTRIBUTE_ASSIGNMENT_RE = re.compile(
    r"(?<![^\W_])(?i:{})\s*=\s*(?:\"[^\"\n]{{0,40}}\"|'[^'\n]{{0,40}}'|[^\s\"'<>/]*)".format(_KW)
)

_TOKEN_RE = re.compile(r"[A-Za-z0-9]+(?:-[A-Za-z0-9]+)*")
_GLUED_ATTRIBUTE_VALUE_RE = re.compile(
    r"^(?i:{attr})(?:[+-]?\d+(?:\.\d+)?(?:%|(?i:st|db|khz|hz|ms|s)(?![a-z]))?"
    r"|(?i:{values})(?![a-z]))".format(attr=_ATTR_KW, values=_VALUES)
)
_GLUED_PREFIX_RE = re.compile(
    r"^(?:(?i:{}))+(?:(?<=[a-z])(?=[A-Z])|(?=[0-9]))".format(_KW)
)
_LOWERCASE_GLUED_PREFIX_RE = re.compile(
    r"^(?i:prosody|speak|break)(?=[a-z]{{2}})(?!(?:{}))".format(
        _alternation(_PREFIX_WORD_CONTINUATIONS)
    )
)
_GLUED_SUFFIX_RE = re.compile(r"(?<=[a-z0-9])(?:(?i:{}))+$".format(_SUFFIX_KW))

_CAMEL_RE = re.compile(r"(?<=[a-z])(?=[A-Z])")
_UNIT_BEFORE_LETTER_RE = re.compile(r"(?<=[0-9])((?i:khz|hz|ms|s(?!t\b)))(?=[A-Za-z])")
_LETTER_DIGIT_RE = re.compile(r"(?<=[A-Za-z])(?=[0-9])")
_DIGIT_LETTER_RE = re.compile(r"(?<=[0-9])(?=[A-Za-z])(?!(?:st|nd|rd|th)\b)")

_STANDALONE_KEYWORD_RE = re.compile(r"(?<![\w'-])(?i:{})(?![\w'-])".format(_KW))
_STRAY_PUNCTUATION_RE = re.compile(r"[<>()\"*=/]|(?<![A-Za-z])'|'(?![A-Za-z])")
_WHITESPACE_RE = re.compile(r"\s+")

_BARE_DURATION_RE = re.compile(r"(?<![\w.'-])\d+(?:\.\d+)?\s*(?:ms|s)(?![\w'-])")
_BARE_UNIT_RE = re.compile(r"(?<![\w'-])(?:k?[Hh]z|ms|s)(?![\w'-])")


# ---------------------------------------------------------------------------
# Pause markers
# ---------------------------------------------------------------------------

def parse_pause_duration(value: Optional[str]) -> Optional[int]:
    """Parse a pause duration such as "400ms", "1.5s" or "250" into ms.

    RULES:
    - "ms" or no unit: milliseconds; "s": seconds
    - Returns None (unknown) for anything else, including None and ""
    """
    if not value:
        return None
    match = _DURATION_RE.match(value.strip())
    if match is None:
        return None
    amount = float(match.group(1))
    if (match.group(2) or "ms").lower() == "s":
        amount *= 1000
    return int(round(amount))


class _PauseTable:
    """Placeholders for the pauses found during one cleaning pass."""

    def __init__(self) -> None:
        self.durations: List[Optional[int]] = []

    def capture(self, match: "re.Match") -> str:
        raw = match.group(1) if match.group(1) is not None else match.group(2)
        self.durations.append(parse_pause_duration(raw))
        return " {}{}{} ".format(
            _PLACEHOLDER_OPEN, len(self.durations) - 1, _PLACEHOLDER_CLOSE
        )

    def restore(self, text: str, config: NormalizerConfig) -> str:
        def _replacement(match: "re.Match") -> str:
            duration = self.durations[int(match.group(1))]
            if (
                config.show_pause_descriptors
                and duration is not None
                and duration >= config.pause_descriptor_threshold_ms
            ):
                return " {} ".format(LONG_SILENCE_DESCRIPTOR)
            return " "

        return _PLACEHOLDER_RE.sub(_replacement, text)


# ---------------------------------------------------------------------------
# Cleaning steps
# ---------------------------------------------------------------------------

def _strip_glued_keywords(token_match: "re.Match") -> str:
    token = token_match.group(0)
    token = _GLUED_ATTRIBUTE_VALUE_RE.sub("", token, count=1)
    token = _GLUED_PREFIX_RE.sub("", token, count=1)
    token = _LOWERCASE_GLUED_PREFIX_RE.sub("", token, count=1)
    if token.lower() not in _SUFFIX_STRIP_EXCEPTIONS:
        token = _GLUED_SUFFIX_RE.sub("", token, count=1)
    return token


def _collapse(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def _normalize_once(text: str, config: NormalizerConfig) -> str:
    pauses = _PauseTable()
    text = _PAUSE_RE.sub(pauses.capture, text)

    text = _ATTRIBUTE_ASSIGNMENT_RE.sub(" ", text)
    text = _TOKEN_RE.sub(_strip_glued_keywords, text)

    text = _CAMEL_RE.sub(" ", text)

    text = _UNIT_BEFORE_LETTER_RE.sub(r"\1 ", text)
    text = _LETTER_DIGIT_RE.sub(" ", text)
    text = _DIGIT_LETTER_RE.sub(" ", text)

    text = _STANDALONE_KEYWORD_RE.sub(" ", text)

    text = _STRAY_PUNCTUATION_RE.sub(" ", text)
    text = _collapse(text)

    text = pauses.restore(text, config)

    text = _BARE_DURATION_RE.sub(" ", text)
    text = _BARE_UNIT_RE.sub(" ", text)
    return _collapse(text)


def normalize_artifacts(
    text: str,
    config: NormalizerConfig = DEFAULT_NORMALIZER_CONFIG,
) -> str:
    """Remove leaked markup tokens from text and resolve pause markers.

    WHY: This is the single cleanup entry point for both the markup text
    extractor and the caption parsers, so captions and plain-text output
    read the same way regardless of which path produced them.

    HOW: Applies the cleaning pass until the output is stable, which makes
    the function idempotent even when one removal exposes another artifact.

    Args:
        text: Any string; may contain markup fragments or caption text.
        config: Pause-descriptor display policy.

    Returns:
        Cleaned, whitespace-collapsed text (possibly empty).
    """
    if not text:
        return ""

    current = text.replace(_PLACEHOLDER_OPEN, "").replace(_PLACEHOLDER_CLOSE, "")
    for _ in range(_MAX_PASSES):
        cleaned = _normalize_once(current, config)
        if cleaned == current:
            return cleaned
        current = cleaned

    logger.debug("Artifact normalization did not settle after %d passes", _MAX_PASSES)
    return current
