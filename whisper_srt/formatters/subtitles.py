"""Subtitle file formatter.

WHY: The subtitle file is the product of the whole pipeline. This
formatter is the bridge between the registry used by the CLI/API and the
core generator.

HOW: Calls generate() with the transcript, the layout rules, and the
formatter's comparer, and wraps the body in a FormatterOutput.

RULES:
- Registered as "srt" in the FORMATTERS dict
- Suffix ".srt", media type "application/x-subrip"
- Empty alignment gives an empty file, not an error
"""

from __future__ import annotations

from whisper_srt.core.generator import generate
from whisper_srt.core.ir import LayoutRules, Transcript
from whisper_srt.formatters.base import BaseFormatter, FormatterOutput


class SubtitleFormatter(BaseFormatter):
    """Formatter that produces the numbered, time-ranged subtitle file."""

    suffix = ".srt"

    @property
    def name(self) -> str:
        return "SRT Subtitles"

    def format(self, transcript: Transcript, rules: LayoutRules) -> list[FormatterOutput]:
        content = generate(transcript, rules, comparer=self.comparer)
        return [
            FormatterOutput(
                suffix=self.suffix,
                content=content,
                media_type="application/x-subrip",
            )
        ]
