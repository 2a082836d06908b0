"""Error taxonomy for the alignment and segmentation core.

WHY: Callers (CLI, HTTP API, background jobs) need to tell bad input
apart from bad configuration so they can report each one properly.

RULES:
- Every core error subclasses SubtitleError
- Each is also a ValueError, so generic input-validation handlers
  (argparse-style ``except ValueError``) keep working
- Alignment drift is never raised; the aligner recovers and logs it
"""

from __future__ import annotations


class SubtitleError(Exception):
    """Base error for the subtitle core."""


class InvalidTranscriptFormat(SubtitleError, ValueError):
    """Raised when a transcript is missing its text or its word tokens."""


class InvalidConfiguration(SubtitleError, ValueError):
    """Raised when layout rules are out of range or contradictory.

    Two cases: the words-per-cue limit lies outside the allowed range, or
    punctuation-based cue breaking is requested without punctuation-aware
    alignment.
    """


class InvalidResolvedWordSequence(SubtitleError, ValueError):
    """Raised when cues were required but there are no resolved words."""
