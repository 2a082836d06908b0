"""Whisper API response dataclasses.

WHY: The transcription endpoint returns a verbose_json dict. Typed
objects make the fields the rest of the system relies on explicit and
catch shape mismatches at the edge instead of inside the aligner.

HOW: TranscriptionResponse.from_dict validates the payload through the
core transcript schema, then keeps the optional metadata (language,
duration) alongside the decoded Transcript.

RULES:
- text and words are required (InvalidTranscriptFormat otherwise)
- language and duration are None when the service omits them
- segments in the response are ignored; word timing is what matters
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple

from whisper_srt.core.ir import RecognizerToken, Transcript
from whisper_srt.core.schema import parse_transcript


@dataclass(frozen=True)
class TranscriptionResponse:
    """A verbose_json transcription result with word timestamps."""

    text: str
    words: Tuple[RecognizerToken, ...]
    language: Optional[str] = None
    duration: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Any) -> TranscriptionResponse:
        """Parse a TranscriptionResponse from a raw API response dict.

        Raises:
            InvalidTranscriptFormat: If text or words are missing or ill-typed.
        """
        transcript = parse_transcript(data)
        duration = data.get("duration")
        return cls(
            text=transcript.text,
            words=transcript.tokens,
            language=data.get("language"),
            duration=float(duration) if duration is not None else None,
        )

    def to_transcript(self) -> Transcript:
        """The core Transcript for this response."""
        return Transcript(text=self.text, tokens=self.words)
