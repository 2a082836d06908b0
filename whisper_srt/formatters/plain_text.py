"""Plain text transcript formatter.

WHY: Editors often want the transcript text on its own next to the
subtitles, for review or archival. Whisper's text is already clean, so
this is the simplest formatter.

RULES:
- Content is the transcript text, stripped, with one trailing newline
- Layout rules are ignored
- Output suffix: "-transcript.txt"
- Media type: "text/plain"
"""

from __future__ import annotations

from whisper_srt.core.ir import LayoutRules, Transcript
from whisper_srt.formatters.base import BaseFormatter, FormatterOutput


class PlainTextFormatter(BaseFormatter):
    """Formatter that writes the transcript text as a .txt file."""

    suffix = "-transcript.txt"

    @property
    def name(self) -> str:
        return "Plain Text"

    def format(self, transcript: Transcript, rules: LayoutRules) -> list[FormatterOutput]:
        content = (transcript.text or "").strip()
        if content:
            content += "\n"

        return [
            FormatterOutput(
                suffix=self.suffix,
                content=content,
                media_type="text/plain",
            )
        ]
