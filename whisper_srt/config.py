"""Configuration constants, supported formats, and .env loading.

WHY: Centralizes all configurable values so they are easy to find,
update, and override. API defaults, supported file formats, and layout
limits are plain data, not buried in logic.

HOW: python-dotenv loads the .env file on import. Constants are
module-level values read from the environment with defaults. Settings
bundles the values the Whisper client needs into one explicit object
that callers build once and pass along.

RULES:
- API key is loaded from .env via python-dotenv, never hardcoded
- All defaults can be overridden via environment variables
- Layout limits come from the core IR (single source of truth)
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from whisper_srt.core.ir import MAX_WORDS_PER_CUE, MIN_WORDS_PER_CUE

# Load .env from the project root (where the script is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Supported audio/video file extensions
# ---------------------------------------------------------------------------

CONTENT_TYPES: dict[str, str] = {
    ".mp4": "video/mp4",
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
}
"""Upload MIME type per file extension (lowercase, with dot)."""

DEFAULT_CONTENT_TYPE = "application/octet-stream"

SUPPORTED_FORMATS: set[str] = set(CONTENT_TYPES)
"""Audio/video file extensions accepted for transcription."""


def content_type_for(suffix: str) -> str:
    """Return the upload MIME type for a file extension."""
    return CONTENT_TYPES.get(suffix.lower(), DEFAULT_CONTENT_TYPE)


# ---------------------------------------------------------------------------
# API configuration defaults
# ---------------------------------------------------------------------------

OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
WHISPER_MODEL = os.getenv("WHISPER_MODEL", "whisper-1")
WHISPER_PROMPT = os.getenv("WHISPER_PROMPT", "Bu bir video transkripsiyonudur.")
REQUEST_TIMEOUT_S = float(os.getenv("REQUEST_TIMEOUT_S", "300"))
CONNECT_TIMEOUT_S = float(os.getenv("CONNECT_TIMEOUT_S", "5"))

# ---------------------------------------------------------------------------
# Layout defaults
# ---------------------------------------------------------------------------

_FALLBACK_WORDS_PER_CUE = 3


def load_words_per_cue() -> int:
    """Read DEFAULT_WORDS_PER_CUE from the environment.

    RULES:
    - Values outside MIN_WORDS_PER_CUE..MAX_WORDS_PER_CUE are clamped
    - A value that isn't an integer falls back to 3
    """
    raw = os.getenv("DEFAULT_WORDS_PER_CUE", str(_FALLBACK_WORDS_PER_CUE))
    try:
        value = int(raw)
    except ValueError:
        return _FALLBACK_WORDS_PER_CUE
    return max(MIN_WORDS_PER_CUE, min(value, MAX_WORDS_PER_CUE))


DEFAULT_WORDS_PER_CUE = load_words_per_cue()


def load_api_key() -> str:
    """Load the OpenAI API key from the environment.

    RULES:
    - Raises ValueError if the key is missing or empty
    - Never returns a default/placeholder value
    """
    key = os.getenv("OPENAI_API_KEY", "").strip()
    if not key:
        raise ValueError(
            "OpenAI API key not configured. "
            "Add OPENAI_API_KEY to the .env file in the app folder."
        )
    return key


@dataclass(frozen=True)
class Settings:
    """Connection settings for the Whisper transcription client.

    WHY: HTTP clients used to be built at import time from globals, which
    made them impossible to swap in tests and shared across every caller.
    A Settings value is built once by the entry point (CLI run, app
    factory) and handed to whatever needs it.

    RULES:
    - api_key is required; from_env() raises ValueError when it's missing
    - Everything else defaults to the module-level constants
    """

    api_key: str
    base_url: str = OPENAI_BASE_URL
    model: str = WHISPER_MODEL
    prompt: str = WHISPER_PROMPT
    timeout_s: float = REQUEST_TIMEOUT_S
    connect_timeout_s: float = CONNECT_TIMEOUT_S

    @classmethod
    def from_env(cls) -> Settings:
        """Build Settings from the environment (populated by python-dotenv)."""
        return cls(api_key=load_api_key())
