"""Command-line interface for the markup text pipeline.

WHY: The pipeline functions are meant to be embedded in a service, but
checking a piece of markup, cleaning a caption file, or previewing the
prosody envelope from the terminal is how problems get reproduced. The CLI
exposes each pipeline entry point as one subcommand.

HOW: argparse with four subcommands:
  validate INPUT   validate_markup(), prints the wrapped markup
  text INPUT       to_plain_text(), prints the cleaned text
  cues INPUT       parse_captions(), prints cues as JSON records
  prosody TEXT     build_prosody_markup(), prints the wrapped markup
INPUT is a file path, or "-" for stdin. Command output goes to stdout;
status and error messages go to stderr.

RULES:
- Exit code 0 on success, 1 on any error (via sys.exit)
- --verbose switches logging to DEBUG (default INFO)
- text: --show-pauses/--pause-threshold override the environment config
  for this invocation only
- cues: format from --format, else the input file's extension, else srt
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from ssml_pipeline import __version__
from ssml_pipeline.adapters import cues_to_records
from ssml_pipeline.config import DEFAULT_NORMALIZER_CONFIG, NormalizerConfig
from ssml_pipeline.core.extractor import to_plain_text
from ssml_pipeline.core.prosody import build_prosody_markup
from ssml_pipeline.core.validator import MarkupValidationError, validate_markup
from ssml_pipeline.parsers import PARSERS, parse_captions

logger = logging.getLogger(__name__)

STDIN_MARKER = "-"
DEFAULT_CAPTION_FORMAT = "srt"


def _status(msg: str) -> None:
    """Print a status message to stderr.

    WHY: Status output must not pollute stdout so the CLI can be piped.
    """
    print(msg, file=sys.stderr, flush=True)


def _fail(msg: str) -> None:
    """Print an error message to stderr and exit with code 1."""
    print("Error: {}".format(msg), file=sys.stderr)
    sys.exit(1)


def _read_input(source: str) -> str:
    """Read a file path as UTF-8 text, or stdin for "-"."""
    if source == STDIN_MARKER:
        return sys.stdin.read()

    path = Path(source)
    if not path.is_file():
        _fail("File not found: {}".format(path))
    return path.read_text(encoding="utf-8")


def _resolve_caption_format(source: str, explicit: Optional[str]) -> str:
    """Pick the caption format: explicit flag, file extension, then srt."""
    if explicit:
        return explicit
    if source != STDIN_MARKER:
        ext = Path(source).suffix.lower().lstrip(".")
        if ext in PARSERS:
            return ext
    return DEFAULT_CAPTION_FORMAT


def _text_config(args: argparse.Namespace) -> NormalizerConfig:
    """Build the normalizer config for `text`, applying flag overrides."""
    config = DEFAULT_NORMALIZER_CONFIG
    if args.show_pauses is not None:
        config = dataclasses.replace(config, show_pause_descriptors=args.show_pauses)
    if args.pause_threshold is not None:
        if args.pause_threshold < 0:
            _fail("--pause-threshold must be >= 0")
        config = dataclasses.replace(
            config, pause_descriptor_threshold_ms=args.pause_threshold
        )
    return config


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------

def _cmd_validate(args: argparse.Namespace) -> None:
    content = _read_input(args.input)
    try:
        result = validate_markup(content)
    except MarkupValidationError as e:
        print("Error ({}): {}".format(e.kind.value, e.message), file=sys.stderr)
        sys.exit(1)
    print(result.wrapped)


def _cmd_text(args: argparse.Namespace) -> None:
    config = _text_config(args)
    content = _read_input(args.input)
    print(to_plain_text(content, config))


def _cmd_cues(args: argparse.Namespace) -> None:
    fmt = _resolve_caption_format(args.input, args.format)
    content = _read_input(args.input)
    cues = parse_captions(content, fmt)
    _status("Parsed {} cue(s) as {}".format(len(cues), fmt))
    records = cues_to_records(cues, include_words=args.words)
    print(json.dumps(records, indent=2, ensure_ascii=False))


def _cmd_prosody(args: argparse.Namespace) -> None:
    print(build_prosody_markup(
        args.text,
        rate=args.rate,
        pitch=args.pitch,
        volume=args.volume,
    ))


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() makes the CLI
    testable: tests can inspect the parser without running a command.
    """
    parser = argparse.ArgumentParser(
        prog="ssml_pipeline",
        description="Validate speech markup, extract plain text, and parse "
                    "caption files into timed cues.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s {}".format(__version__),
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    validate = subparsers.add_parser(
        "validate",
        help="Validate markup and print it wrapped in <speak>.",
    )
    validate.add_argument("input", help="Markup file path, or '-' for stdin.")
    validate.set_defaults(handler=_cmd_validate)

    text = subparsers.add_parser(
        "text",
        help="Print the plain text of markup or a caption file.",
    )
    text.add_argument("input", help="Markup or caption file path, or '-' for stdin.")
    text.add_argument(
        "--show-pauses",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Render long pauses as '[long silence]' (default: from environment).",
    )
    text.add_argument(
        "--pause-threshold",
        type=int,
        default=None,
        metavar="MS",
        help="Minimum pause length in ms for the descriptor (default: from environment).",
    )
    text.set_defaults(handler=_cmd_text)

    cues = subparsers.add_parser(
        "cues",
        help="Parse a caption file and print its cues as JSON.",
    )
    cues.add_argument("input", help="Caption file path, or '-' for stdin.")
    cues.add_argument(
        "--format",
        choices=sorted(PARSERS.keys()),
        default=None,
        help="Caption format (default: from file extension, else srt).",
    )
    cues.add_argument(
        "--words",
        action="store_true",
        help="Include approximate per-word timings.",
    )
    cues.set_defaults(handler=_cmd_cues)

    prosody = subparsers.add_parser(
        "prosody",
        help="Wrap plain text in a <prosody> envelope.",
    )
    prosody.add_argument("text", help="Plain text to wrap.")
    prosody.add_argument("--rate", default=None, help="Rate, e.g. 1.2, fast, 90%%.")
    prosody.add_argument("--pitch", default=None, help="Pitch, e.g. 2, -1st, high.")
    prosody.add_argument("--volume", default=None, help="Volume, e.g. 0.8, -6dB, loud.")
    prosody.set_defaults(handler=_cmd_prosody)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    try:
        args.handler(args)
    except (OSError, UnicodeDecodeError, ValueError) as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        _fail(str(e))


if __name__ == "__main__":
    main()
