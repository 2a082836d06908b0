"""Pydantic request/response models for the HTTP API.

WHY: The FastAPI endpoints need typed schemas for request validation,
response serialization, and automatic OpenAPI documentation.

HOW: Each endpoint has its own response model; the synchronous render
endpoint also has a request model. Enums represent closed sets (output
formats, comparison strategies).

RULES:
- All models use Field(description=...) for OpenAPI documentation
- Enum values match the FORMATTERS / COMPARERS registry keys exactly
- The transcript in RenderRequest stays a plain dict; the core schema
  decodes it so shape errors come back as InvalidTranscriptFormat
- Python 3.9+ compatible (no PEP 604 unions, use Optional from typing)
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, StrictBool, StrictInt


class OutputFormat(str, Enum):
    """Available output format identifiers (keys of FORMATTERS)."""

    srt = "srt"
    plain_text = "plain_text"
    word_timings = "word_timings"


class Comparison(str, Enum):
    """Available comparison strategies for fuzzy alignment (keys of COMPARERS)."""

    normalized = "normalized"
    raw = "raw"


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class RenderRequest(BaseModel):
    """Transcript plus layout settings for synchronous subtitle rendering.

    RULES:
    - transcript must contain "text" and "words" (Whisper verbose_json)
    - words_per_line is required, 1-5
    - consider_punctuation requires punctuation
    """

    transcript: Dict[str, Any] = Field(
        description="Transcript JSON: {text, words: [{word, start, end}, ...]}.",
    )
    words_per_line: StrictInt = Field(
        description="Maximum words per subtitle cue (1-5).",
    )
    punctuation: StrictBool = Field(
        default=False,
        description="Align transcript words (with punctuation) against word tokens.",
    )
    consider_punctuation: StrictBool = Field(
        default=False,
        description="Close a cue after a word ending in '.', '!' or '?'. Requires punctuation.",
    )
    compare: Comparison = Field(
        default=Comparison.normalized,
        description="Text comparison strategy used by punctuation-aware alignment.",
    )

    model_config = {"json_schema_extra": {
        "examples": [
            {
                "transcript": {
                    "text": "Hello world.",
                    "words": [
                        {"word": "Hello", "start": 0.0, "end": 0.5},
                        {"word": "world", "start": 0.6, "end": 1.0},
                    ],
                },
                "words_per_line": 5,
                "punctuation": True,
                "consider_punctuation": True,
            }
        ]
    }}


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class RenderResponse(BaseModel):
    """Rendered subtitle body."""

    content: str = Field(description="Subtitle file body.")
    cue_count: int = Field(description="Number of cues in the body.")


class JobResponse(BaseModel):
    """Subtitle job status response.

    RULES:
    - error is only set when status is 'failed'
    - output_files is only populated when status is 'completed'
    """

    id: str = Field(description="Unique job identifier (UUID).")
    status: str = Field(description="Current job status.")
    filename: str = Field(description="Original uploaded filename.")
    created_at: float = Field(description="Job creation timestamp (Unix epoch seconds).")
    config: Dict[str, Any] = Field(description="Layout and format configuration for this job.")
    error: Optional[str] = Field(
        default=None,
        description="Error message, only present when status is 'failed'.",
    )
    output_files: Optional[List[str]] = Field(
        default=None,
        description="List of output filenames, only present when status is 'completed'.",
    )


class JobCreatedResponse(BaseModel):
    """Response returned when a new subtitle job is submitted."""

    id: str = Field(description="Unique job identifier (UUID) for polling status.")
    status: str = Field(description="Initial job status (always 'pending').")
    filename: str = Field(description="Original uploaded filename.")


class FileInfo(BaseModel):
    """Metadata for a single output file."""

    filename: str = Field(description="Output filename.")
    media_type: str = Field(description="MIME type of the file content.")
    size: int = Field(description="File size in bytes.")


class FileListResponse(BaseModel):
    """List of output files for a completed job."""

    job_id: str = Field(description="The job ID these files belong to.")
    files: List[FileInfo] = Field(description="Available output files.")


class FormatInfo(BaseModel):
    """Description of an available output format."""

    key: str = Field(description="Format identifier used in API requests.")
    name: str = Field(description="Human-readable format name.")
    suffix: str = Field(description="File suffix produced (e.g. '.srt').")


class ErrorResponse(BaseModel):
    """Standard error response body."""

    detail: str = Field(description="Human-readable error description.")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    version: str = Field(description="API version string.", json_schema_extra={"example": "0.1.0"})
