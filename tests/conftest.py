"""Shared test fixtures for the whisper_srt test suite.

WHY: Most test modules need the same small Whisper verbose_json samples:
one where the tokens line up with the text word for word, one where the
recognizer split words into fragments and emitted punctuation as its own
tokens. Centralizing them keeps every test on the same data.

HOW: Module-level dicts hold the raw responses; fixtures hand out copies
and the decoded Transcript objects.

RULES:
- Raw samples use the Whisper verbose_json shape: {text, words[{word, start, end}]}
- Fixtures return fresh copies so tests may mutate them
"""

from __future__ import annotations

import copy
from typing import Any, Dict

import pytest

from whisper_srt.core.ir import Transcript
from whisper_srt.core.schema import parse_transcript


# ---------------------------------------------------------------------------
# Raw samples
# ---------------------------------------------------------------------------

HELLO_WORLD: Dict[str, Any] = {
    "text": "Hello world.",
    "words": [
        {"word": "Hello", "start": 0.0, "end": 0.5},
        {"word": "world", "start": 0.6, "end": 1.0},
        {"word": ".", "start": 1.0, "end": 1.0},
    ],
}

# Recognizer split "fantastic" and "today" into fragments and emitted
# punctuation as separate tokens.
FRAGMENTED: Dict[str, Any] = {
    "text": "How are you today? I am fantastic, thanks.",
    "language": "english",
    "duration": 2.2,
    "words": [
        {"word": "How", "start": 0.12, "end": 0.25},
        {"word": "are", "start": 0.26, "end": 0.38},
        {"word": "you", "start": 0.39, "end": 0.51},
        {"word": "to", "start": 0.52, "end": 0.60},
        {"word": "day", "start": 0.60, "end": 0.92},
        {"word": "?", "start": 0.92, "end": 0.94},
        {"word": "I", "start": 1.20, "end": 1.26},
        {"word": "am", "start": 1.27, "end": 1.38},
        {"word": "fan", "start": 1.39, "end": 1.52},
        {"word": "tastic", "start": 1.52, "end": 1.78},
        {"word": ",", "start": 1.78, "end": 1.80},
        {"word": "thanks", "start": 1.81, "end": 2.10},
        {"word": ".", "start": 2.10, "end": 2.12},
    ],
}

# Same number of words and tokens, so direct alignment pairs them 1:1.
PLAIN: Dict[str, Any] = {
    "text": "one two three four five six seven",
    "words": [
        {"word": "one", "start": 0.0, "end": 0.4},
        {"word": "two", "start": 0.5, "end": 0.9},
        {"word": "three", "start": 1.0, "end": 1.4},
        {"word": "four", "start": 1.5, "end": 1.9},
        {"word": "five", "start": 2.0, "end": 2.4},
        {"word": "six", "start": 2.5, "end": 2.9},
        {"word": "seven", "start": 3.0, "end": 3.4},
    ],
}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def hello_world_response() -> Dict[str, Any]:
    return copy.deepcopy(HELLO_WORLD)


@pytest.fixture
def fragmented_response() -> Dict[str, Any]:
    return copy.deepcopy(FRAGMENTED)


@pytest.fixture
def hello_world_transcript() -> Transcript:
    return parse_transcript(HELLO_WORLD)


@pytest.fixture
def fragmented_transcript() -> Transcript:
    return parse_transcript(FRAGMENTED)


@pytest.fixture
def plain_transcript() -> Transcript:
    return parse_transcript(PLAIN)
