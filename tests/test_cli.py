"""Tests for the command-line interface.

HOW:
  - TestTranscriptInput: a saved .json transcript, no API involved
  - TestAudioInput: audio chunks with WhisperClient patched out
  - TestErrors: exit codes and messages for bad input
  - TestOutputPaths: conflict-free output naming
  - TestParser: argument defaults

RULES:
- Output goes to pytest's tmp_path
- The Whisper API is never called
"""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from whisper_srt.cli import _resolve_output_path, build_parser, main
from whisper_srt.core.schema import combine_chunks, parse_transcript

HELLO_SRT = "1\n00:00.000 --> 00:01.000\nHello world.\n\n"
FUZZY_ARGS = ["--words-per-cue", "5", "--punctuation", "--consider-punctuation"]


@pytest.fixture
def transcript_file(tmp_path, hello_world_response) -> Path:
    path = tmp_path / "talk.json"
    path.write_text(json.dumps(hello_world_response), encoding="utf-8")
    return path


class _FakeWhisperClient:
    """Replaces WhisperClient in the CLI; one canned response per chunk."""

    responses = []
    calls = []

    def __init__(self, settings=None):
        self.settings = settings

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return None

    async def transcribe_chunks(self, file_paths, on_status=None):
        _FakeWhisperClient.calls.append([Path(p).name for p in file_paths])
        return combine_chunks(parse_transcript(r) for r in self.responses)


# ---------------------------------------------------------------------------
# TestTranscriptInput
# ---------------------------------------------------------------------------


class TestTranscriptInput:
    def test_writes_srt_next_to_input(self, transcript_file):
        main([str(transcript_file)] + FUZZY_ARGS)
        out = transcript_file.parent / "talk.srt"
        assert out.read_text(encoding="utf-8") == HELLO_SRT

    def test_second_run_does_not_overwrite(self, transcript_file):
        main([str(transcript_file)] + FUZZY_ARGS)
        main([str(transcript_file), "--words-per-cue", "1"])
        assert (transcript_file.parent / "talk.srt").read_text(encoding="utf-8") == HELLO_SRT
        second = (transcript_file.parent / "talk-2.srt").read_text(encoding="utf-8")
        assert second.count(" --> ") == 3

    def test_output_dir_and_formats(self, transcript_file, tmp_path):
        out_dir = tmp_path / "out"
        out_dir.mkdir()
        main([
            str(transcript_file), "--output-dir", str(out_dir),
            "--formats", "srt,plain_text,word_timings",
        ] + FUZZY_ARGS)
        assert sorted(p.name for p in out_dir.iterdir()) == [
            "talk-transcript.txt", "talk-words.json", "talk.srt",
        ]
        words = json.loads((out_dir / "talk-words.json").read_text(encoding="utf-8"))
        assert words["alignment"] == "fuzzy"

    def test_status_goes_to_stderr(self, transcript_file, capsys):
        main([str(transcript_file)] + FUZZY_ARGS)
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Saved" in captured.err
        assert "Done. 1 file(s) written." in captured.err

    def test_raw_comparison(self, tmp_path):
        path = tmp_path / "lower.json"
        path.write_text(json.dumps({
            "text": "hello",
            "words": [{"word": "Hello", "start": 0.0, "end": 0.5}],
        }), encoding="utf-8")
        main([str(path), "--punctuation", "--compare", "raw"])
        assert (tmp_path / "lower.srt").read_text(encoding="utf-8") == ""


# ---------------------------------------------------------------------------
# TestAudioInput
# ---------------------------------------------------------------------------


class TestAudioInput:
    def test_chunks_transcribed_in_order(self, tmp_path, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        first = tmp_path / "part1.mp3"
        second = tmp_path / "part2.mp3"
        first.write_bytes(b"a")
        second.write_bytes(b"b")

        _FakeWhisperClient.calls = []
        _FakeWhisperClient.responses = [
            {"text": "Hello", "words": [{"word": "Hello", "start": 0.0, "end": 0.5}]},
            {"text": "world.", "words": [{"word": "world", "start": 0.6, "end": 1.0}]},
        ]
        with patch("whisper_srt.cli.WhisperClient", _FakeWhisperClient):
            main([str(first), str(second)] + FUZZY_ARGS)

        assert _FakeWhisperClient.calls == [["part1.mp3", "part2.mp3"]]
        assert (tmp_path / "part1.srt").read_text(encoding="utf-8") == HELLO_SRT

    def test_missing_api_key(self, tmp_path, monkeypatch, capsys):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        audio = tmp_path / "clip.wav"
        audio.write_bytes(b"RIFF")
        with pytest.raises(SystemExit) as exc_info:
            main([str(audio)])
        assert exc_info.value.code == 1
        assert "OPENAI_API_KEY" in capsys.readouterr().err

    def test_ctrl_c_exits_130(self, tmp_path, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        audio = tmp_path / "clip.mp3"
        audio.write_bytes(b"x")

        class _Interrupted(_FakeWhisperClient):
            async def transcribe_chunks(self, file_paths, on_status=None):
                raise KeyboardInterrupt

        with patch("whisper_srt.cli.WhisperClient", _Interrupted):
            with pytest.raises(SystemExit) as exc_info:
                main([str(audio)])
        assert exc_info.value.code == 130


# ---------------------------------------------------------------------------
# TestErrors
# ---------------------------------------------------------------------------


class TestErrors:
    def _exit_code(self, argv, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(argv)
        return exc_info.value.code, capsys.readouterr().err

    def test_word_limit_out_of_range(self, transcript_file, capsys):
        code, err = self._exit_code([str(transcript_file), "--words-per-cue", "9"], capsys)
        assert code == 1
        assert "Error: words per cue must be between 1 and 5." in err

    def test_break_without_alignment(self, transcript_file, capsys):
        code, err = self._exit_code([str(transcript_file), "--consider-punctuation"], capsys)
        assert code == 1
        assert "requires punctuation-aware alignment" in err

    def test_missing_file(self, tmp_path, capsys):
        code, err = self._exit_code([str(tmp_path / "nope.mp3")], capsys)
        assert code == 1
        assert "File not found" in err

    def test_unsupported_extension(self, tmp_path, capsys):
        doc = tmp_path / "notes.txt"
        doc.write_text("hi")
        code, err = self._exit_code([str(doc)], capsys)
        assert code == 1
        assert "Unsupported file type '.txt'" in err

    def test_json_only_as_single_input(self, transcript_file, tmp_path, capsys):
        audio = tmp_path / "clip.mp3"
        audio.write_bytes(b"x")
        code, err = self._exit_code([str(transcript_file), str(audio)], capsys)
        assert code == 1
        assert "Unsupported file type '.json'" in err

    def test_invalid_json(self, tmp_path, capsys):
        bad = tmp_path / "bad.json"
        bad.write_text("{not json", encoding="utf-8")
        code, err = self._exit_code([str(bad)], capsys)
        assert code == 1
        assert "not valid JSON" in err

    def test_invalid_transcript_shape(self, tmp_path, capsys):
        bad = tmp_path / "bad.json"
        bad.write_text(json.dumps({"text": "Hello"}), encoding="utf-8")
        code, err = self._exit_code([str(bad)], capsys)
        assert code == 1
        assert "Invalid transcript format" in err

    def test_unknown_format(self, transcript_file, capsys):
        code, err = self._exit_code([str(transcript_file), "--formats", "srt,vtt"], capsys)
        assert code == 1
        assert "Unknown format 'vtt'" in err

    def test_missing_output_dir(self, transcript_file, tmp_path, capsys):
        code, err = self._exit_code(
            [str(transcript_file), "--output-dir", str(tmp_path / "missing")], capsys,
        )
        assert code == 1
        assert "Output directory does not exist" in err


# ---------------------------------------------------------------------------
# TestOutputPaths
# ---------------------------------------------------------------------------


class TestOutputPaths:
    def test_free_name_used_as_is(self, tmp_path):
        assert _resolve_output_path("talk", ".srt", tmp_path) == tmp_path / "talk.srt"

    def test_counter_before_extension(self, tmp_path):
        (tmp_path / "talk.srt").write_text("")
        assert _resolve_output_path("talk", ".srt", tmp_path) == tmp_path / "talk-2.srt"

    def test_counter_after_suffix_name(self, tmp_path):
        (tmp_path / "talk-words.json").write_text("")
        (tmp_path / "talk-words-2.json").write_text("")
        assert _resolve_output_path("talk", "-words.json", tmp_path) == tmp_path / "talk-words-3.json"


# ---------------------------------------------------------------------------
# TestParser
# ---------------------------------------------------------------------------


class TestParser:
    def test_defaults(self):
        args = build_parser().parse_args(["clip.mp3"])
        assert args.inputs == ["clip.mp3"]
        assert args.words_per_cue == 3
        assert args.punctuation is False
        assert args.consider_punctuation is False
        assert args.compare == "normalized"
        assert args.formats is None
        assert args.verbose is False

    def test_negated_flags(self):
        args = build_parser().parse_args(["a.mp3", "--punctuation", "--no-punctuation"])
        assert args.punctuation is False

    def test_compare_choices_enforced(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["a.mp3", "--compare", "fuzzy"])
