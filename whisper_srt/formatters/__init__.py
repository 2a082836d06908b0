"""Output formatter registry.

WHY: The CLI and HTTP API need a single lookup to find the right
formatter by name. A central dict makes it trivial to add new formats:
create the formatter class, import it here, add one line.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
Callers instantiate as needed: ``formatter = FORMATTERS["srt"]()``.

RULES:
- Keys are snake_case identifiers (used in CLI flags and API form fields)
- Values are BaseFormatter subclasses (not instances)
- DEFAULT_FORMATS is what runs when the caller doesn't choose
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from whisper_srt.formatters.plain_text import PlainTextFormatter
from whisper_srt.formatters.subtitles import SubtitleFormatter
from whisper_srt.formatters.word_timings import WordTimingsFormatter

if TYPE_CHECKING:
    from whisper_srt.formatters.base import BaseFormatter

FORMATTERS: dict[str, type[BaseFormatter]] = {
    "srt": SubtitleFormatter,
    "plain_text": PlainTextFormatter,
    "word_timings": WordTimingsFormatter,
}

DEFAULT_FORMATS = ["srt"]
