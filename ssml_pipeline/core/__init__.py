"""Core text pipeline: validation, extraction, normalization, timing.

WHY: These modules hold the pipeline's invariants. They are pure functions
over strings and small dataclasses, with no I/O, so they are safe to call
from any thread and easy to test in isolation.

HOW: markup.py parses markup into a TextNode/Element tree, validator.py
checks user markup before synthesis, extractor.py and normalizer.py turn
markup and caption text back into readable prose, timing.py approximates
word timing inside cues and prosody.py wraps plain text for synthesis.

RULES:
- Nothing here reads the environment; configuration arrives as arguments
- Only validate_markup() raises for bad input; text cleaning never fails
"""
