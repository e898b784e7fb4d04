"""Unit tests for artifact normalization (ssml_pipeline.core.normalizer).

WHY: Caption text that comes back from the synthesis path can carry markup
keywords glued onto real words. The normalizer has to remove them without
damaging ordinary words that merely contain a keyword, and it must resolve
pause markers according to the configured display policy.

HOW: Grouped by cleaning step, followed by pause restoration and an
idempotency check over a corpus of noisy inputs.
"""

import pytest

from ssml_pipeline.config import NormalizerConfig
from ssml_pipeline.core.normalizer import normalize_artifacts, parse_pause_duration


class TestGluedKeywords:

    @pytest.mark.parametrize("text,expected", [
        ("speakHello", "Hello"),
        ("Hello worldspeak", "Hello world"),
        ("prosodyGood morning", "Good morning"),
        ("volumemediumHello", "Hello"),
        ("rate120Faster please", "Faster please"),
        ("voiceMary had a lamb", "Mary had a lamb"),
        ("speakhello world", "hello world"),
        ("prosodygood morning", "good morning"),
        ("okay breakthen we go", "okay then we go"),
    ])
    def test_glued_keyword_removed(self, text, expected):
        assert normalize_artifacts(text) == expected

    @pytest.mark.parametrize("word", [
        "invoice", "pirate", "lifetime", "Alex", "substance", "outbreak",
        "subway", "timeline", "voiceover",
        "speaker", "speaking", "speaks", "breakfast", "breakthrough", "breakdown",
        "breakeven", "speakeasy",
    ])
    def test_ordinary_words_survive(self, word):
        assert normalize_artifacts("the {} here".format(word)) == "the {} here".format(word)


class TestSplitting:

    def test_camel_case_boundary(self):
        assert normalize_artifacts("helloWorld") == "hello World"

    def test_letters_and_digits_split(self):
        assert normalize_artifacts("abc123def") == "abc 123 def"

    def test_ordinals_kept(self):
        assert normalize_artifacts("the 21st century") == "the 21st century"

    def test_unit_split_then_dropped(self):
        assert normalize_artifacts("wait 400msHello") == "wait Hello"

    def test_seconds_unit_split_then_dropped(self):
        assert normalize_artifacts("wait 2shello") == "wait hello"

    def test_ordinal_st_not_taken_for_seconds(self):
        assert normalize_artifacts("on the 1st of May") == "on the 1st of May"


class TestStandaloneAndPunctuation:

    def test_standalone_keywords_dropped(self):
        assert normalize_artifacts("Hello speak prosody world") == "Hello world"

    def test_leaked_attribute_assignment_dropped(self):
        assert normalize_artifacts('Hello rate="fast" world') == "Hello world"

    def test_markup_punctuation_dropped(self):
        assert normalize_artifacts('say "hello" (now)*') == "say hello now"

    def test_apostrophes_inside_words_kept(self):
        assert normalize_artifacts("don't stop") == "don't stop"

    def test_whitespace_collapsed(self):
        assert normalize_artifacts("  a \n\t b  ") == "a b"


class TestPauses:

    def test_pauses_invisible_by_default(self, quiet_config):
        assert normalize_artifacts("Hello [pause 400ms] world", quiet_config) == "Hello world"

    def test_inline_time_marker(self, quiet_config):
        assert normalize_artifacts("Wait time400ms then go", quiet_config) == "Wait then go"
        assert normalize_artifacts("Wait time 2s then go", quiet_config) == "Wait then go"

    def test_descriptor_at_or_above_threshold(self):
        config = NormalizerConfig(show_pause_descriptors=True, pause_descriptor_threshold_ms=800)
        assert normalize_artifacts("a [pause 800ms] b", config) == "a [long silence] b"
        assert normalize_artifacts("a [pause 1.5s] b", config) == "a [long silence] b"

    def test_no_descriptor_below_threshold(self):
        config = NormalizerConfig(show_pause_descriptors=True, pause_descriptor_threshold_ms=800)
        assert normalize_artifacts("a [pause 799ms] b", config) == "a b"

    def test_unknown_duration_never_described(self, descriptor_config):
        assert normalize_artifacts("a [pause] b", descriptor_config) == "a b"
        assert normalize_artifacts("a [pause soon] b", descriptor_config) == "a b"

    def test_unitless_duration_is_milliseconds(self, descriptor_config):
        assert normalize_artifacts("a [pause 900] b", descriptor_config) == "a [long silence] b"
        assert normalize_artifacts("a [pause 200] b", descriptor_config) == "a b"

    def test_bare_duration_tokens_swept(self, quiet_config):
        assert normalize_artifacts("Hello 400 ms world", quiet_config) == "Hello world"


class TestParsePauseDuration:

    @pytest.mark.parametrize("value,expected", [
        ("400ms", 400),
        ("1.5s", 1500),
        ("2 S", 2000),
        ("250", 250),
        ("", None),
        (None, None),
        ("soon", None),
        ("3min", None),
    ])
    def test_values(self, value, expected):
        assert parse_pause_duration(value) == expected


NOISY_CORPUS = [
    "",
    "plain sentence.",
    "speakHello worldspeak",
    "speakspeakspeak",
    "time400mstime400ms",
    'rate="x-fast"pitch=\'+2st\'volume=loud',
    "[pause][pause 1s][pause soon]",
    "<speak><prosody rate='90%'>Hi</prosody></speak>",
    "a[pause 900ms]b time 2s c",
    "ABC123xyzPROSODYspeak",
    "don't 'quote' \"me\"",
    "the 1990s and 3rd and 44khzAudio",
    "x-speak say-as interpret-as=\"date\" lex sub",
    "\ue000" + "0" + "\ue001 stray sentinels",
]


class TestIdempotency:

    @pytest.mark.parametrize("text", NOISY_CORPUS)
    @pytest.mark.parametrize("show", [False, True])
    def test_normalize_twice_is_normalize_once(self, text, show):
        config = NormalizerConfig(show_pause_descriptors=show, pause_descriptor_threshold_ms=300)
        once = normalize_artifacts(text, config)
        assert normalize_artifacts(once, config) == once

    @pytest.mark.parametrize("text", NOISY_CORPUS)
    def test_always_returns_string(self, text):
        assert isinstance(normalize_artifacts(text), str)
