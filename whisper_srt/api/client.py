"""Async HTTP client for the OpenAI Whisper transcription endpoint.

WHY: Subtitle generation needs a transcript with word-level timestamps.
This module wraps the single transcription request (and the fan-out over
several audio chunks) behind one client class so callers (CLI, HTTP API,
tests) don't need to know HTTP details.

HOW: Uses httpx.AsyncClient for non-blocking HTTP. WhisperClient is an
async context manager: enter it to get an authenticated client, exit to
close the connection pool. transcribe() posts one file as multipart
form data and decodes the verbose_json response. transcribe_chunks()
runs several transcriptions concurrently and stitches the results back
together in input order.

RULES:
- Always use the async context manager (async with WhisperClient(...) as client:)
- Connection settings come from an explicit Settings object
- response_format is verbose_json with word timestamp granularity
- Only SUPPORTED_FORMATS extensions are uploaded
- Non-2xx responses raise WhisperAPIError; no retries
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from pathlib import Path

import httpx

from whisper_srt.api.models import TranscriptionResponse
from whisper_srt.config import SUPPORTED_FORMATS, Settings, content_type_for
from whisper_srt.core.ir import Transcript
from whisper_srt.core.schema import combine_chunks


class WhisperAPIError(Exception):
    """Raised when the transcription API returns an error response.

    WHY: Callers need a typed exception to distinguish API errors from
    network errors or bad input.

    RULES:
    - Always include status_code and message
    - message is the response body text
    """

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"Whisper API error {status_code}: {message}")


class WhisperClient:
    """Async client for the Whisper transcription API.

    RULES:
    - Use as: async with WhisperClient(settings) as client: ...
    - settings defaults to Settings.from_env()
    - transport is only for tests (httpx.MockTransport)
    """

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or Settings.from_env()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> WhisperClient:
        settings = self._settings
        self._client = httpx.AsyncClient(
            base_url=settings.base_url.rstrip("/"),
            headers={"Authorization": f"Bearer {settings.api_key}"},
            timeout=httpx.Timeout(settings.timeout_s, connect=settings.connect_timeout_s),
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        """Return the active httpx client, raising if not in context manager."""
        if self._client is None:
            raise RuntimeError(
                "WhisperClient must be used as an async context manager: "
                "async with WhisperClient() as client: ..."
            )
        return self._client

    async def transcribe(
        self,
        file_path: Path,
        on_status: Callable[[str], None] | None = None,
    ) -> TranscriptionResponse:
        """Transcribe one audio/video file with word timestamps.

        Args:
            file_path: Path to a file with a supported extension.
            on_status: Optional callback for status updates.

        Returns:
            The decoded verbose_json response.

        Raises:
            ValueError: If the file extension is not supported.
            WhisperAPIError: On a non-2xx response.
            InvalidTranscriptFormat: If the response lacks text or words.
        """
        client = self._ensure_client()
        file_path = Path(file_path)
        suffix = file_path.suffix.lower()
        if suffix not in SUPPORTED_FORMATS:
            raise ValueError(
                "Unsupported file type '{}'. Supported formats: {}".format(
                    suffix, ", ".join(sorted(SUPPORTED_FORMATS))
                )
            )

        if on_status:
            on_status("Transcribing {}...".format(file_path.name))

        content = file_path.read_bytes()
        resp = await client.post(
            "/audio/transcriptions",
            files={"file": ("audio{}".format(suffix), content, content_type_for(suffix))},
            data={
                "model": self._settings.model,
                "response_format": "verbose_json",
                "timestamp_granularities[]": "word",
                "prompt": self._settings.prompt,
            },
        )

        if resp.status_code != 200:
            raise WhisperAPIError(resp.status_code, resp.text)

        return TranscriptionResponse.from_dict(resp.json())

    async def transcribe_chunks(
        self,
        file_paths: Sequence[Path],
        on_status: Callable[[str], None] | None = None,
    ) -> Transcript:
        """Transcribe several chunks of one recording concurrently.

        WHY: Chunks transcribe independently, so the requests can overlap.
        The combined transcript still has to follow chunk order.

        HOW: asyncio.gather keeps results in argument order no matter
        which request finishes first; combine_chunks joins them.

        RULES:
        - Order of file_paths is the order of the combined transcript
        - Any failing chunk fails the whole call
        """
        responses = await asyncio.gather(
            *(self.transcribe(path, on_status=on_status) for path in file_paths)
        )
        return combine_chunks(r.to_transcript() for r in responses)
