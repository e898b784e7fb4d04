"""SSML Pipeline — markup validation and caption text cleanup.

WHY: Text sent to a speech synthesizer arrives as user-supplied or
LLM-produced markup, and the caption tracks that come back sometimes carry
markup tokens glued onto real words. This package guards the way in
(validation) and cleans the way out (plain text, caption cues, word timing).

HOW: Leaf-first pipeline of pure functions:
  validate_markup()   size/forbidden/well-formed/whitelist checks, <speak> wrap
  to_plain_text()     markup or caption file → readable text
  parse_captions()    SRT/WebVTT → list of Cue
  word_timings()      Cue → evenly split WordTiming list

RULES:
- Only validate_markup() raises for bad input; text cleaning never fails
- Configuration is read once at import (see ssml_pipeline.config)
"""

__version__ = "0.1.0"

from ssml_pipeline.config import NormalizerConfig, load_normalizer_config
from ssml_pipeline.core.extractor import to_plain_text
from ssml_pipeline.core.ir import Cue, WordTiming
from ssml_pipeline.core.normalizer import normalize_artifacts
from ssml_pipeline.core.prosody import build_prosody_markup
from ssml_pipeline.core.timing import find_active_cue, find_active_word, word_timings
from ssml_pipeline.core.validator import (
    MarkupValidationError,
    ValidatedMarkup,
    ValidationErrorKind,
    validate_markup,
)
from ssml_pipeline.parsers import CaptionParseError, parse_captions

__all__ = [
    "CaptionParseError",
    "Cue",
    "MarkupValidationError",
    "NormalizerConfig",
    "ValidatedMarkup",
    "ValidationErrorKind",
    "WordTiming",
    "build_prosody_markup",
    "find_active_cue",
    "find_active_word",
    "load_normalizer_config",
    "normalize_artifacts",
    "parse_captions",
    "to_plain_text",
    "validate_markup",
    "word_timings",
]
