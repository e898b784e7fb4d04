"""Configuration constants, markup whitelist, and .env loading.

WHY: The pipeline has exactly one runtime-tunable behaviour (whether long
pauses show up in extracted text as a "[long silence]" descriptor) plus a
handful of fixed limits (input ceiling, allowed elements). Keeping them here
as plain data makes them easy to find and lets every other module receive
them as explicit arguments instead of reading the environment ad hoc.

HOW: python-dotenv loads the .env file on import. The pause-descriptor
settings are read once into a frozen NormalizerConfig and exposed as
DEFAULT_NORMALIZER_CONFIG. load_normalizer_config() builds the same object
from any mapping so callers (CLI flags, tests) can derive their own without
touching os.environ.

RULES:
- SSML_SHOW_PAUSE_DESCRIPTORS: "true", "1", "yes", "on" enable (default off)
- SSML_PAUSE_DESCRIPTOR_THRESHOLD_MS: integer ms, default 800
- Invalid or negative thresholds fall back to the default with a warning
- DEFAULT_NORMALIZER_CONFIG is built once at import and never re-read
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Load .env from the project root (where the process is started from)
load_dotenv()

# ---------------------------------------------------------------------------
# Markup limits
# ---------------------------------------------------------------------------

MAX_MARKUP_LENGTH = 32 * 1024
"""Input ceiling for validate_markup(), in characters (32 KiB)."""

ALLOWED_ELEMENTS: frozenset = frozenset({
    "speak",
    "voice",
    "prosody",
    "break",
    "emphasis",
    "say-as",
    "phoneme",
    "sub",
    "p",
    "s",
    "w",
    "lex",
})
"""Element names accepted by the validator (compared lower-cased)."""

# ---------------------------------------------------------------------------
# Pause descriptors
# ---------------------------------------------------------------------------

LONG_SILENCE_DESCRIPTOR = "[long silence]"
DEFAULT_PAUSE_THRESHOLD_MS = 800

SHOW_PAUSES_ENV = "SSML_SHOW_PAUSE_DESCRIPTORS"
PAUSE_THRESHOLD_ENV = "SSML_PAUSE_DESCRIPTOR_THRESHOLD_MS"

_TRUTHY = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True)
class NormalizerConfig:
    """Pause-descriptor display policy for the artifact normalizer.

    WHY: Pauses are invisible in extracted text by default. Some consumers
    (transcript viewers) want to see that a long silence happened, so the
    normalizer can optionally render long pauses as a descriptor.

    RULES:
    - show_pause_descriptors: False means every pause resolves to nothing
    - pause_descriptor_threshold_ms: pauses at or above this duration get
      the descriptor when enabled; shorter or unknown pauses never do
    """

    show_pause_descriptors: bool = False
    pause_descriptor_threshold_ms: int = DEFAULT_PAUSE_THRESHOLD_MS


def _parse_threshold(raw: Optional[str]) -> int:
    if raw is None or not raw.strip():
        return DEFAULT_PAUSE_THRESHOLD_MS
    try:
        value = int(raw.strip())
    except ValueError:
        logger.warning(
            "Ignoring invalid %s=%r, using %d ms",
            PAUSE_THRESHOLD_ENV, raw, DEFAULT_PAUSE_THRESHOLD_MS,
        )
        return DEFAULT_PAUSE_THRESHOLD_MS
    if value < 0:
        logger.warning(
            "Ignoring negative %s=%d, using %d ms",
            PAUSE_THRESHOLD_ENV, value, DEFAULT_PAUSE_THRESHOLD_MS,
        )
        return DEFAULT_PAUSE_THRESHOLD_MS
    return value


def load_normalizer_config(environ: Optional[Mapping[str, str]] = None) -> NormalizerConfig:
    """Build a NormalizerConfig from environment-style settings.

    Args:
        environ: Mapping to read from. Defaults to os.environ (already
                 populated from .env by python-dotenv).

    Returns:
        A frozen NormalizerConfig.
    """
    if environ is None:
        environ = os.environ
    show = environ.get(SHOW_PAUSES_ENV, "").strip().lower() in _TRUTHY
    threshold = _parse_threshold(environ.get(PAUSE_THRESHOLD_ENV))
    return NormalizerConfig(
        show_pause_descriptors=show,
        pause_descriptor_threshold_ms=threshold,
    )


DEFAULT_NORMALIZER_CONFIG = load_normalizer_config()
"""Process-wide configuration, read once at import."""
