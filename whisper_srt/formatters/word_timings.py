"""Word timing JSON formatter.

WHY: When subtitles look off, the first question is how each word was
timed. This formatter writes the aligner's output directly, one entry
per resolved word, so alignment quality can be checked without reading
the subtitle file.

HOW: Runs resolve_words() in the mode the layout rules select and
serializes the result as JSON.

RULES:
- One entry per resolved word: {"text", "start", "end"}
- Times in seconds, rounded to milliseconds
- Output suffix: "-words.json", media type "application/json"
"""

from __future__ import annotations

import json

from whisper_srt.core.aligner import resolve_words
from whisper_srt.core.ir import LayoutRules, Transcript
from whisper_srt.formatters.base import BaseFormatter, FormatterOutput


class WordTimingsFormatter(BaseFormatter):
    """Formatter that dumps resolved word timings as JSON."""

    suffix = "-words.json"

    @property
    def name(self) -> str:
        return "Word Timings JSON"

    def format(self, transcript: Transcript, rules: LayoutRules) -> list[FormatterOutput]:
        words = resolve_words(
            transcript,
            align_punctuation=rules.align_punctuation,
            comparer=self.comparer,
        )
        payload = {
            "alignment": "fuzzy" if rules.align_punctuation else "direct",
            "comparison": self.comparer.name,
            "words": [
                {
                    "text": w.text,
                    "start": round(w.start_time, 3),
                    "end": round(w.end_time, 3),
                }
                for w in words
            ],
        }
        return [
            FormatterOutput(
                suffix=self.suffix,
                content=json.dumps(payload, ensure_ascii=False, indent=2),
                media_type="application/json",
            )
        ]
