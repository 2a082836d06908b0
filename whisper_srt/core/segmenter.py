"""Cue segmentation and subtitle text rendering.

WHY: Resolved words have to be grouped into short cues a viewer can read
at a glance, and each cue written out with its index and time range.

HOW: segment_words() walks the resolved words once, filling a buffer and
closing it on the last word, on sentence punctuation (when enabled), or
when the word limit is reached. render_cues() writes each cue as index,
time range, text, and a blank line.

RULES:
- Every resolved word lands in exactly one cue, in order
- Cue indices start at 1 and increase by 1
- Sentence punctuation is a trailing ".", "!" or "?"
- Times render as MM:SS.mmm (no hours field; minutes keep counting past 59)
"""

from __future__ import annotations

import math
from typing import List, Sequence

from whisper_srt.core.ir import LayoutRules, ResolvedWord, SubtitleCue

_SENTENCE_ENDINGS = (".", "!", "?")


def pad(num: int, length: int = 2) -> str:
    """Zero-pad a non-negative integer to ``length`` digits."""
    return str(num).zfill(length)


def format_time(seconds: float) -> str:
    """Format a time in seconds as ``MM:SS.mmm``.

    Milliseconds are rounded half-up from the fractional part. A fraction
    that rounds to a full second is carried into the seconds field.
    """
    whole = int(math.floor(seconds))
    millis = int(math.floor((seconds - whole) * 1000 + 0.5))
    if millis >= 1000:
        whole += 1
        millis -= 1000
    minutes = whole // 60
    secs = whole % 60
    return "{}:{}.{}".format(pad(minutes), pad(secs), pad(millis, 3))


def ends_sentence(text: str) -> bool:
    """True if the word ends with ".", "!" or "?"."""
    return text.endswith(_SENTENCE_ENDINGS)


def segment_words(
    words: Sequence[ResolvedWord],
    rules: LayoutRules,
) -> List[SubtitleCue]:
    """Partition resolved words into subtitle cues.

    Args:
        words: Resolved words in transcript order.
        rules: Layout limits (words per cue, punctuation breaking).

    Returns:
        Cues of 1..rules.max_words_per_cue words each. Empty input gives
        an empty list.
    """
    cues: List[SubtitleCue] = []
    buffer: List[str] = []
    start_time = 0.0
    last_index = len(words) - 1

    for i, word in enumerate(words):
        if not buffer:
            start_time = word.start_time
        buffer.append(word.text)

        is_last = i == last_index
        at_sentence_end = rules.break_on_punctuation and ends_sentence(word.text)
        is_full = len(buffer) == rules.max_words_per_cue

        if is_last or at_sentence_end or is_full:
            cues.append(SubtitleCue(
                index=len(cues) + 1,
                start_time=start_time,
                end_time=word.end_time,
                text=" ".join(buffer),
            ))
            buffer = []

    return cues


def render_cue(cue: SubtitleCue) -> str:
    """Render one cue: index, time range, text, blank line."""
    return "{}\n{} --> {}\n{}\n\n".format(
        cue.index,
        format_time(cue.start_time),
        format_time(cue.end_time),
        cue.text,
    )


def render_cues(cues: Sequence[SubtitleCue]) -> str:
    """Concatenate rendered cues into the subtitle file body."""
    return "".join(render_cue(cue) for cue in cues)
