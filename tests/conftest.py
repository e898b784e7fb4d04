"""Shared test fixtures for the ssml_pipeline test suite.

WHY: Parser, extractor and CLI tests need the same small caption files and
the same pause-descriptor configurations. Centralizing them keeps the
expected values in one place.

RULES:
- Tests never depend on the process environment: configs are built
  explicitly instead of using DEFAULT_NORMALIZER_CONFIG.
- Caption samples use "\\n" line endings; CRLF variants are derived in tests.
"""

import pytest

from ssml_pipeline.config import NormalizerConfig
from ssml_pipeline.core.ir import Cue


SAMPLE_SRT = (
    "1\n"
    "00:00:00,000 --> 00:00:01,500\n"
    "Hello world\n"
    "\n"
    "2\n"
    "00:00:01,500 --> 00:00:04,000\n"
    "speakThis caption\n"
    "spans two lines\n"
)

SAMPLE_VTT = (
    "WEBVTT\n"
    "\n"
    "NOTE generated by the synthesizer\n"
    "\n"
    "intro\n"
    "00:00:00.000 --> 00:00:02.000 align:start\n"
    "Hi there\n"
    "\n"
    "00:02.000 --> 00:03.250\n"
    "second cue\n"
    "with a second line\n"
)

SPEAKING_MARKUP = '<speak>Hello<break time="400ms"/>world</speak>'


@pytest.fixture
def quiet_config():
    """Pauses resolve to nothing."""
    return NormalizerConfig(show_pause_descriptors=False)


@pytest.fixture
def descriptor_config():
    """Pauses of 300 ms or more render as "[long silence]"."""
    return NormalizerConfig(show_pause_descriptors=True, pause_descriptor_threshold_ms=300)


@pytest.fixture
def sample_srt():
    return SAMPLE_SRT


@pytest.fixture
def sample_vtt():
    return SAMPLE_VTT


@pytest.fixture
def two_word_cue():
    return Cue(id="1", start_ms=0, end_ms=1000, text="a b")
