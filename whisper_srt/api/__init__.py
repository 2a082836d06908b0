"""Whisper API client package — async HTTP interface to the transcription service.

WHY: Subtitle generation starts from a transcript with word timestamps.
This package encapsulates all communication with the transcription API
behind an async client class.

HOW: Uses httpx.AsyncClient for non-blocking HTTP. Response data is
decoded into typed dataclasses defined in models.py.

RULES:
- All HTTP calls go through WhisperClient (no direct httpx usage elsewhere)
- Authentication is via Bearer token from Settings
"""

from whisper_srt.api.client import WhisperAPIError, WhisperClient
from whisper_srt.api.models import TranscriptionResponse

__all__ = ["WhisperAPIError", "WhisperClient", "TranscriptionResponse"]
