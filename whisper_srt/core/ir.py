"""Intermediate representation dataclasses for alignment and segmentation.

WHY: Whisper's verbose_json is a loosely-typed dict. The aligner and the
segmenter need a small set of well-typed values to work with: the tokens
as recognized, the transcript they belong to, the canonical words once
timing has been resolved, and the cues built from them. Keeping these in
one module makes them the stable contract between every stage.

HOW: Five dataclasses:
  RecognizerToken — one word or fragment as emitted by the recognizer
  Transcript      — authoritative text plus the ordered recognizer tokens
  ResolvedWord    — one canonical word of the text with resolved timing
  SubtitleCue     — one numbered, time-ranged subtitle entry
  LayoutRules     — cue layout limits for a single generation call

RULES:
- All times are float seconds
- Values are frozen; each generate() call allocates fresh ones
- LayoutRules validates itself on construction (InvalidConfiguration)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from whisper_srt.core.errors import InvalidConfiguration

MIN_WORDS_PER_CUE = 1
MAX_WORDS_PER_CUE = 5


@dataclass(frozen=True)
class RecognizerToken:
    """A single word or word fragment from the recognizer.

    WHY: Whisper word timestamps do not always line up with the words of
    its own text output. A token may be a fragment ("fan" + "tastic"),
    may carry no punctuation where the text does ("ready" vs "ready."),
    or may be punctuation alone.

    RULES:
    - word: raw token text, untouched
    - start <= end, both in seconds
    - Tokens are ordered by time within a Transcript
    """

    word: str
    start: float
    end: float


@dataclass(frozen=True)
class Transcript:
    """The authoritative text of a recording plus its recognizer tokens.

    RULES:
    - text is the human-readable rendering (spacing and punctuation correct)
    - Splitting the stripped text on single spaces yields the canonical words
    - tokens keep recognizer order
    """

    text: str
    tokens: Tuple[RecognizerToken, ...] = field(default_factory=tuple)

    @property
    def canonical_words(self) -> List[str]:
        """The whitespace-delimited words of ``text``, split on single spaces."""
        return self.text.strip().split(" ")


@dataclass(frozen=True)
class ResolvedWord:
    """One canonical word with timing taken from its recognizer tokens.

    RULES:
    - text: the canonical word exactly as it appears in the transcript text,
      punctuation included
    - start_time: start of the first contributing token
    - end_time: end of the last contributing token
    """

    text: str
    start_time: float
    end_time: float


@dataclass(frozen=True)
class SubtitleCue:
    """A numbered, time-ranged subtitle entry.

    RULES:
    - index starts at 1 and increases by exactly 1 per cue
    - start_time comes from the cue's first word, end_time from its last
    - text is the cue's words joined by single spaces
    """

    index: int
    start_time: float
    end_time: float
    text: str


@dataclass(frozen=True)
class LayoutRules:
    """Cue layout limits for one generation call.

    WHY: Callers choose how dense the subtitles are and whether sentence
    punctuation should close a cue early. Breaking on punctuation is only
    meaningful when the resolved words carry the transcript's punctuation,
    which only punctuation-aware alignment guarantees.

    RULES:
    - max_words_per_cue must lie in [MIN_WORDS_PER_CUE, MAX_WORDS_PER_CUE]
    - break_on_punctuation requires align_punctuation
    - align_punctuation selects fuzzy alignment; otherwise direct alignment
    """

    max_words_per_cue: int
    break_on_punctuation: bool = False
    align_punctuation: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.max_words_per_cue, bool) or not isinstance(self.max_words_per_cue, int):
            raise InvalidConfiguration(
                "max_words_per_cue must be an integer, got {!r}".format(
                    self.max_words_per_cue
                )
            )
        if not MIN_WORDS_PER_CUE <= self.max_words_per_cue <= MAX_WORDS_PER_CUE:
            raise InvalidConfiguration(
                "words per cue must be between {} and {}.".format(
                    MIN_WORDS_PER_CUE, MAX_WORDS_PER_CUE
                )
            )
        if self.break_on_punctuation and not self.align_punctuation:
            raise InvalidConfiguration(
                "Breaking cues on punctuation requires punctuation-aware alignment."
            )
