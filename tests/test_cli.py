"""Tests for the command-line interface (ssml_pipeline.cli).

WHY: The CLI is how pipeline problems are reproduced by hand. Its output
must be pipeable (results on stdout, status on stderr), its exit codes
reliable, and its JSON cue output must match the published schema.

HOW: main() is called with an explicit argv; capsys captures output and
tmp_path holds input files. JSON output is validated with jsonschema
against cue_records_schema.json.
"""

import io
import json
from pathlib import Path

import jsonschema
import pytest

from ssml_pipeline import __version__
from ssml_pipeline.cli import build_parser, main

from conftest import SAMPLE_SRT, SAMPLE_VTT, SPEAKING_MARKUP

SCHEMA_PATH = Path(__file__).resolve().parent.parent / "cue_records_schema.json"


def _load_schema():
    with open(SCHEMA_PATH) as f:
        return json.load(f)


def _write(tmp_path, name, content):
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    return str(path)


class TestParser:

    def test_subcommands_registered(self):
        parser = build_parser()
        args = parser.parse_args(["cues", "x.srt", "--words"])
        assert args.command == "cues"
        assert args.words is True
        assert args.format is None

    def test_command_required(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main([])
        assert excinfo.value.code == 2

    def test_version(self, capsys):
        with pytest.raises(SystemExit):
            main(["--version"])
        assert __version__ in capsys.readouterr().out


class TestValidateCommand:

    def test_wraps_fragment(self, tmp_path, capsys):
        main(["validate", _write(tmp_path, "in.ssml", "Hello")])
        assert capsys.readouterr().out == "<speak>Hello</speak>\n"

    def test_rejection_exit_code_and_message(self, tmp_path, capsys):
        path = _write(tmp_path, "in.ssml", "<speak><unknown/></speak>")
        with pytest.raises(SystemExit) as excinfo:
            main(["validate", path])
        assert excinfo.value.code == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Error (disallowed_element)" in captured.err

    def test_missing_file(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["validate", str(tmp_path / "nope.ssml")])
        assert excinfo.value.code == 1
        assert "File not found" in capsys.readouterr().err

    def test_reads_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO("<p>Hi</p>"))
        main(["validate", "-"])
        assert capsys.readouterr().out == "<speak><p>Hi</p></speak>\n"


class TestTextCommand:

    def test_pauses_hidden(self, tmp_path, capsys):
        main(["text", _write(tmp_path, "in.ssml", SPEAKING_MARKUP), "--no-show-pauses"])
        assert capsys.readouterr().out == "Hello world\n"

    def test_pauses_shown_with_threshold(self, tmp_path, capsys):
        path = _write(tmp_path, "in.ssml", SPEAKING_MARKUP)
        main(["text", path, "--show-pauses", "--pause-threshold", "300"])
        assert capsys.readouterr().out == "Hello [long silence] world\n"

    def test_threshold_above_pause(self, tmp_path, capsys):
        path = _write(tmp_path, "in.ssml", SPEAKING_MARKUP)
        main(["text", path, "--show-pauses", "--pause-threshold", "500"])
        assert capsys.readouterr().out == "Hello world\n"

    def test_negative_threshold_rejected(self, tmp_path, capsys):
        path = _write(tmp_path, "in.ssml", SPEAKING_MARKUP)
        with pytest.raises(SystemExit) as excinfo:
            main(["text", path, "--pause-threshold", "-1"])
        assert excinfo.value.code == 1

    def test_caption_file_keeps_timing(self, tmp_path, capsys):
        main(["text", _write(tmp_path, "in.srt", SAMPLE_SRT), "--no-show-pauses"])
        out = capsys.readouterr().out
        assert "00:00:01,500 --> 00:00:04,000\nThis caption spans two lines" in out


class TestCuesCommand:

    def test_srt_output_matches_schema(self, tmp_path, capsys):
        main(["cues", _write(tmp_path, "captions.srt", SAMPLE_SRT)])
        captured = capsys.readouterr()
        records = json.loads(captured.out)
        jsonschema.validate(instance=records, schema=_load_schema())
        assert [r["id"] for r in records] == ["1", "2"]
        assert records[0] == {"id": "1", "startMs": 0, "endMs": 1500, "text": "Hello world"}
        assert "Parsed 2 cue(s) as srt" in captured.err

    def test_format_from_extension(self, tmp_path, capsys):
        main(["cues", _write(tmp_path, "captions.vtt", SAMPLE_VTT)])
        records = json.loads(capsys.readouterr().out)
        assert [r["text"] for r in records] == ["Hi there", "second cue with a second line"]

    def test_explicit_format_overrides_extension(self, tmp_path, capsys):
        main(["cues", _write(tmp_path, "captions.txt", SAMPLE_VTT), "--format", "vtt"])
        assert len(json.loads(capsys.readouterr().out)) == 2

    def test_unknown_extension_defaults_to_srt(self, tmp_path, capsys):
        main(["cues", _write(tmp_path, "captions.txt", SAMPLE_SRT)])
        assert len(json.loads(capsys.readouterr().out)) == 2

    def test_words_match_schema(self, tmp_path, capsys):
        main(["cues", _write(tmp_path, "captions.srt", SAMPLE_SRT), "--words"])
        records = json.loads(capsys.readouterr().out)
        jsonschema.validate(instance=records, schema=_load_schema())
        assert records[0]["words"] == [
            {"word": "Hello", "startMs": 0, "endMs": 750},
            {"word": "world", "startMs": 750, "endMs": 1500},
        ]


class TestProsodyCommand:

    def test_wraps_text(self, capsys):
        main(["prosody", "Hi & bye", "--rate", "1.2", "--pitch", "-1"])
        assert capsys.readouterr().out == (
            '<speak><prosody rate="120%" pitch="-1st">Hi &amp; bye</prosody></speak>\n'
        )

    def test_no_options(self, capsys):
        main(["prosody", "Hi"])
        assert capsys.readouterr().out == "<speak>Hi</speak>\n"
