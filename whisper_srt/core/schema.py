"""Boundary decoding of transcript JSON into the typed IR.

WHY: Transcription responses arrive as plain dicts whose shape is only a
contract with an external service. Letting those dicts flow into the
aligner would turn a shape mismatch into an obscure KeyError deep in the
core. Validating once, at the edge, gives one clear error instead.

HOW: The payload is checked against TRANSCRIPT_SCHEMA with jsonschema,
then copied into RecognizerToken / Transcript dataclasses. Chunked
transcriptions are merged with combine_chunks().

RULES:
- Required keys: "text" (non-empty string) and "words" (list)
- Each word needs "word" (string), "start" and "end" (numbers)
- Extra keys (segments, language, duration, ...) are ignored
- Any violation raises InvalidTranscriptFormat
"""

from __future__ import annotations

from typing import Any, Iterable, List

import jsonschema
from jsonschema.exceptions import best_match

from whisper_srt.core.errors import InvalidTranscriptFormat
from whisper_srt.core.ir import RecognizerToken, Transcript

TRANSCRIPT_SCHEMA = {
    "type": "object",
    "required": ["text", "words"],
    "properties": {
        "text": {"type": "string", "minLength": 1},
        "words": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["word", "start", "end"],
                "properties": {
                    "word": {"type": "string"},
                    "start": {"type": "number"},
                    "end": {"type": "number"},
                },
            },
        },
    },
}

_VALIDATOR = jsonschema.Draft7Validator(TRANSCRIPT_SCHEMA)


def parse_transcript(data: Any) -> Transcript:
    """Validate a transcript payload and decode it into a Transcript.

    Args:
        data: Parsed JSON, normally a Whisper verbose_json response.

    Returns:
        Transcript with the text and one RecognizerToken per word entry.

    Raises:
        InvalidTranscriptFormat: If the payload does not match the schema.
    """
    error = best_match(_VALIDATOR.iter_errors(data))
    if error is not None:
        location = "/".join(str(p) for p in error.absolute_path) or "transcript"
        raise InvalidTranscriptFormat(
            "Invalid transcript format at {}: {}".format(location, error.message)
        )

    tokens = tuple(
        RecognizerToken(
            word=w["word"],
            start=float(w["start"]),
            end=float(w["end"]),
        )
        for w in data["words"]
    )
    return Transcript(text=data["text"], tokens=tokens)


def combine_chunks(chunks: Iterable[Transcript]) -> Transcript:
    """Merge per-chunk transcripts into one, in the order given.

    WHY: Long recordings may be transcribed as several chunks in parallel.
    The results must be stitched back in chunk order, not in the order the
    requests happened to finish.

    RULES:
    - Texts joined with a single space
    - Token lists concatenated in chunk order
    - Timestamps are passed through as-is; the producer is responsible for
      putting every chunk on one timeline
    """
    chunk_list: List[Transcript] = list(chunks)
    if not chunk_list:
        raise InvalidTranscriptFormat("Cannot combine an empty list of transcript chunks")

    tokens: List[RecognizerToken] = []
    for chunk in chunk_list:
        tokens.extend(chunk.tokens)

    return Transcript(
        text=" ".join(chunk.text for chunk in chunk_list),
        tokens=tuple(tokens),
    )
