"""Command-line interface for Whisper SRT.

WHY: Users need a simple way to turn a recording (or a transcript they
already have) into a subtitle file from the terminal. The CLI wires
together the whole pipeline: file validation, Whisper transcription of
one or more chunks, alignment and cue layout, pluggable formatter
output, and file saving.

HOW: Uses argparse to accept input paths, layout options, output format
selection, and an output directory. A single ``.json`` input is read as a
transcript and skips the API; audio inputs are transcribed concurrently
via asyncio.run() and combined in the order given. Status messages go
to stderr; output files are saved next to the first input (or to
--output-dir).

RULES:
- Positional arguments: audio/video chunk paths, or one .json transcript
- Validates every extension against SUPPORTED_FORMATS before any API call
- --formats: comma-separated formatter keys (default: srt)
- Output naming: {stem}{suffix}, numeric suffix for conflicts (-2.srt)
- Status output goes to stderr (not stdout)
- Errors print "Error: ..." and exit 1; Ctrl-C exits 130
- Python 3.9 compatible: no match/case, no X | Y unions, no slots=True
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from whisper_srt.api.client import WhisperAPIError, WhisperClient
from whisper_srt.config import DEFAULT_WORDS_PER_CUE, SUPPORTED_FORMATS, Settings
from whisper_srt.core.compare import COMPARERS, DEFAULT_COMPARER, get_comparer
from whisper_srt.core.errors import SubtitleError
from whisper_srt.core.ir import LayoutRules, Transcript
from whisper_srt.core.schema import parse_transcript
from whisper_srt.formatters import DEFAULT_FORMATS, FORMATTERS
from whisper_srt.formatters.base import FormatterOutput
from whisper_srt.timing import timed

logger = logging.getLogger(__name__)


class CLIError(Exception):
    """A user-facing error that ends the run with exit code 1."""


def _status(msg: str) -> None:
    """Print a status message to stderr.

    WHY: Status output must not pollute stdout so the CLI can be piped.
    """
    print(msg, file=sys.stderr, flush=True)


def _resolve_output_path(
    stem: str,
    suffix: str,
    output_dir: Path,
) -> Path:
    """Resolve the output file path, adding numeric suffix on conflict.

    WHY: Users may run the tool several times on the same recording with
    different layouts. Overwriting previous output would lose work.

    RULES:
    - First attempt: {stem}{suffix} (e.g. interview.srt)
    - Conflict: split suffix at last dot, insert counter before extension
      (e.g. interview-2.srt, interview-words-2.json)
    - Counter starts at 2 and increments

    Returns:
        A Path that does not yet exist.
    """
    base_path = output_dir / "{}{}".format(stem, suffix)
    if not base_path.exists():
        return base_path

    dot_idx = suffix.rfind(".")
    if dot_idx >= 0:
        suffix_name = suffix[:dot_idx]
        suffix_ext = suffix[dot_idx:]
    else:
        suffix_name = suffix
        suffix_ext = ""

    counter = 2
    while True:
        candidate = output_dir / "{}{}-{}{}".format(stem, suffix_name, counter, suffix_ext)
        if not candidate.exists():
            return candidate
        counter += 1


def _save_output(output: FormatterOutput, stem: str, output_dir: Path) -> Path:
    """Write one formatter output as UTF-8 and return where it went."""
    path = _resolve_output_path(stem, output.suffix, output_dir)
    path.write_text(output.content, encoding="utf-8")
    return path


def _parse_formats(formats: Optional[str]) -> List[str]:
    if not formats:
        return list(DEFAULT_FORMATS)
    format_keys = [f.strip() for f in formats.split(",") if f.strip()]
    for key in format_keys:
        if key not in FORMATTERS:
            raise CLIError(
                "Unknown format '{}'. Available formats: {}".format(
                    key, ", ".join(sorted(FORMATTERS))
                )
            )
    return format_keys


def _load_transcript_file(path: Path) -> Transcript:
    """Read a Whisper verbose_json transcript from disk."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise CLIError("{} is not valid JSON: {}".format(path.name, exc))
    return parse_transcript(data)


def _validate_inputs(paths: List[Path]) -> bool:
    """Check the inputs exist and have usable extensions.

    Returns:
        True when the input is a transcript JSON file, False for audio.
    """
    for path in paths:
        if not path.is_file():
            raise CLIError("File not found: {}".format(path))

    if len(paths) == 1 and paths[0].suffix.lower() == ".json":
        return True

    for path in paths:
        ext = path.suffix.lower()
        if ext not in SUPPORTED_FORMATS:
            raise CLIError(
                "Unsupported file type '{}'. Supported formats: {} "
                "(or a single .json transcript)".format(
                    ext, ", ".join(sorted(SUPPORTED_FORMATS))
                )
            )
    return False


async def _transcribe(paths: List[Path], settings: Settings) -> Transcript:
    async with WhisperClient(settings) as client:
        with timed("Transcription of {} chunk(s)".format(len(paths)), logger):
            transcript = await client.transcribe_chunks(paths, on_status=_status)
    return transcript


def _run(args: argparse.Namespace) -> List[Path]:
    """Execute the pipeline for parsed arguments.

    RULES:
    - Layout is validated before any API call
    - Returns the paths of the files written
    """
    paths = [Path(p).resolve() for p in args.inputs]
    is_transcript = _validate_inputs(paths)

    output_dir = Path(args.output_dir).resolve() if args.output_dir else paths[0].parent
    if not output_dir.is_dir():
        raise CLIError("Output directory does not exist: {}".format(output_dir))

    format_keys = _parse_formats(args.formats)
    rules = LayoutRules(
        max_words_per_cue=args.words_per_cue,
        break_on_punctuation=args.consider_punctuation,
        align_punctuation=args.punctuation,
    )
    comparer = get_comparer(args.compare)

    if is_transcript:
        _status("Reading transcript {}...".format(paths[0].name))
        transcript = _load_transcript_file(paths[0])
    else:
        settings = Settings.from_env()
        transcript = asyncio.run(_transcribe(paths, settings))
    _status("  {} words, {} tokens".format(
        len(transcript.canonical_words), len(transcript.tokens)
    ))

    stem = paths[0].stem
    saved: List[Path] = []
    with timed("Subtitle generation", logger):
        for key in format_keys:
            formatter = FORMATTERS[key](comparer=comparer)
            _status("Generating {}...".format(formatter.name))
            for output in formatter.format(transcript, rules):
                path = _save_output(output, stem, output_dir)
                _status("  Saved {}".format(path))
                saved.append(path)
    return saved


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() makes the CLI
    testable; tests can inspect the parser without running the pipeline.
    """
    parser = argparse.ArgumentParser(
        prog="whisper_srt",
        description="Transcribe audio/video with Whisper and produce subtitle "
                    "cues with word-aligned timing.",
    )

    parser.add_argument(
        "inputs",
        nargs="+",
        help="Audio/video chunks of one recording, in order, or a single "
             "Whisper verbose_json transcript (.json).",
    )

    parser.add_argument(
        "--words-per-cue",
        type=int,
        default=DEFAULT_WORDS_PER_CUE,
        help="Maximum words per subtitle cue, 1-5 (default: %(default)s, from DEFAULT_WORDS_PER_CUE when set).",
    )

    parser.add_argument(
        "--punctuation",
        action=argparse.BooleanOptionalAction,
        default=False,
        help="Align transcript words (with punctuation) against the word "
             "tokens (default: %(default)s).",
    )

    parser.add_argument(
        "--consider-punctuation",
        action=argparse.BooleanOptionalAction,
        default=False,
        help="Close a cue after a word ending in '.', '!' or '?'. "
             "Requires --punctuation (default: %(default)s).",
    )

    parser.add_argument(
        "--compare",
        choices=sorted(COMPARERS),
        default=DEFAULT_COMPARER,
        help="Text comparison used by punctuation alignment (default: %(default)s).",
    )

    parser.add_argument(
        "--formats",
        default=None,
        help="Comma-separated list of output formats. "
             "Available: {}. Default: {}.".format(
                 ", ".join(sorted(FORMATTERS)), ", ".join(DEFAULT_FORMATS)
             ),
    )

    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory to save output files (default: same as the first input).",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log alignment details and stage timings.",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:]).
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        saved = _run(args)
    except KeyboardInterrupt:
        _status("\nCancelled by user.")
        sys.exit(130)
    except (CLIError, SubtitleError, WhisperAPIError, ValueError) as e:
        # ValueError covers config errors such as a missing API key
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        logger.debug("Unexpected failure", exc_info=True)
        print("Error: {}".format(e), file=sys.stderr)
        sys.exit(1)

    _status("Done. {} file(s) written.".format(len(saved)))


if __name__ == "__main__":
    main()
