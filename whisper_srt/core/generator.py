"""Transcript → subtitle file body, end to end.

WHY: Every caller (formatters, CLI, HTTP API) needs the same two steps in
the same order: resolve words, then segment and render. One entry point
keeps them from drifting apart.

HOW: resolve_words() with the alignment mode from the layout rules, then
segment_words() and render_cues().

RULES:
- Pure: no I/O, nothing retained between calls
- Empty resolved-word sequences give an empty body unless require_cues
- Errors: InvalidTranscriptFormat (from the aligner),
  InvalidResolvedWordSequence (require_cues with nothing to show)
"""

from __future__ import annotations

import logging
from typing import List, Optional

from whisper_srt.core.aligner import resolve_words
from whisper_srt.core.compare import BaseComparer
from whisper_srt.core.errors import InvalidResolvedWordSequence
from whisper_srt.core.ir import LayoutRules, SubtitleCue, Transcript
from whisper_srt.core.segmenter import render_cues, segment_words

logger = logging.getLogger(__name__)


def build_cues(
    transcript: Transcript,
    rules: LayoutRules,
    comparer: Optional[BaseComparer] = None,
    require_cues: bool = False,
) -> List[SubtitleCue]:
    """Align a transcript and segment it into cues.

    Raises:
        InvalidTranscriptFormat: If the transcript lacks text or tokens.
        InvalidResolvedWordSequence: If require_cues is set and alignment
            produced no words.
    """
    words = resolve_words(
        transcript,
        align_punctuation=rules.align_punctuation,
        comparer=comparer,
    )
    if not words and require_cues:
        raise InvalidResolvedWordSequence(
            "Alignment produced no words; cannot build subtitle cues"
        )

    cues = segment_words(words, rules)
    logger.debug("Built %d cue(s) from %d resolved word(s)", len(cues), len(words))
    return cues


def generate(
    transcript: Transcript,
    rules: LayoutRules,
    comparer: Optional[BaseComparer] = None,
    require_cues: bool = False,
) -> str:
    """Generate the subtitle file body for a transcript.

    Args:
        transcript: Authoritative text plus recognizer tokens.
        rules: Layout limits and alignment mode.
        comparer: Normalization strategy for fuzzy alignment.
        require_cues: Raise instead of returning an empty body when there
            is nothing to show.

    Returns:
        Rendered cues concatenated into one string.
    """
    return render_cues(build_cues(transcript, rules, comparer, require_cues))
