"""Prosody wrapping of plain text for the synthesizer.

Request fields carry rate, pitch and volume in loose user-facing forms
("1.2", "2", "0.8", "fast", "-6dB"). These helpers turn them into markup
attribute values and wrap escaped text in a <speak><prosody> envelope.
Prosody semantics stay opaque: unknown strings containing letters are
passed through for the synthesizer to judge.
"""

from __future__ import annotations

import html
import math
import re
from typing import List, Optional

RATE_KEYWORDS = frozenset({"x-slow", "slow", "medium", "fast", "x-fast", "default"})
PITCH_KEYWORDS = frozenset({"x-low", "low", "medium", "high", "x-high", "default"})
VOLUME_KEYWORDS = frozenset({"silent", "x-soft", "soft", "medium", "loud", "x-loud", "default"})

_HAS_LETTER_RE = re.compile(r"[a-zA-Z]")
_SEMITONE_RE = re.compile(r"^[+-]?\d+(?:\.\d+)?st$")
_DECIBEL_RE = re.compile(r"^-?\d+(?:\.\d+)?db$")


def _to_number(value: str) -> Optional[float]:
    try:
        number = float(value)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number


def _format_number(number: float) -> str:
    if number == int(number):
        return str(int(number))
    return repr(number)


def _percent(number: float) -> str:
    # Round half up
    return "{}%".format(int(math.floor(number * 100 + 0.5)))


def normalize_rate(rate: Optional[str]) -> Optional[str]:
    """Map a rate value to a prosody attribute ("1.2" -> "120%")."""
    if not rate or not rate.strip():
        return None
    value = rate.strip().lower()
    if value in RATE_KEYWORDS:
        return value
    if value.endswith("%") or _HAS_LETTER_RE.search(value):
        return value
    number = _to_number(value)
    if number is None:
        return None
    return _percent(number)


def normalize_pitch(pitch: Optional[str]) -> Optional[str]:
    """Map a pitch value to a prosody attribute ("2" -> "+2st")."""
    if not pitch or not pitch.strip():
        return None
    value = pitch.strip()
    if value.lower() in PITCH_KEYWORDS:
        return value.lower()
    if _SEMITONE_RE.match(value) or _HAS_LETTER_RE.search(value):
        return value
    number = _to_number(value)
    if number is None:
        return None
    sign = "+" if number >= 0 else ""
    return "{}{}st".format(sign, _format_number(number))


def normalize_volume(volume: Optional[str]) -> Optional[str]:
    """Map a volume value to a prosody attribute ("0.8" -> "80%")."""
    if not volume or not volume.strip():
        return None
    value = volume.strip().lower()
    if value in VOLUME_KEYWORDS:
        return value
    if _DECIBEL_RE.match(value) or value.endswith("%"):
        return value
    number = _to_number(value)
    if number is None:
        return None
    return _percent(number)


def build_prosody_markup(
    text: str,
    rate: Optional[str] = None,
    pitch: Optional[str] = None,
    volume: Optional[str] = None,
) -> str:
    """Wrap plain text in <speak><prosody> with the normalized attributes.

    Args:
        text: Plain text; XML special characters are escaped.
        rate: Raw rate value, see normalize_rate().
        pitch: Raw pitch value, see normalize_pitch().
        volume: Raw volume value, see normalize_volume().

    Returns:
        ``<speak><prosody ...>text</prosody></speak>``, or
        ``<speak>text</speak>`` when no attribute survives normalization.
    """
    attributes: List[str] = []
    for name, value in (
        ("rate", normalize_rate(rate)),
        ("pitch", normalize_pitch(pitch)),
        ("volume", normalize_volume(volume)),
    ):
        if value is not None:
            attributes.append(' {}="{}"'.format(name, html.escape(value, quote=True)))

    body = html.escape(text)
    if not attributes:
        return "<speak>{}</speak>".format(body)
    return "<speak><prosody{}>{}</prosody></speak>".format("".join(attributes), body)
