"""Word alignment between transcript text and recognizer tokens.

WHY: Subtitles must show the transcript's clean text (correct spacing and
punctuation) but need per-word timing, which only the recognizer tokens
carry. Whisper's word tokens don't map one-to-one onto the words of its
own text: a token can be a fragment of a word, can drop the word's
punctuation, or can be a bare punctuation mark.

HOW: Two modes.
  Direct — canonical word i takes the timing of token i.
  Fuzzy  — a two-cursor walk. Tokens accumulate while they fit inside the
           current canonical word (substring test on normalized text); once
           the accumulated tokens spell the whole word, a ResolvedWord is
           emitted with the word's original text and the first/last token
           timing. A token that doesn't fit closes the current word early
           (drift recovery) and is retried against the next word.

RULES:
- A transcript without text or tokens raises InvalidTranscriptFormat
- Fuzzy mode gives one ResolvedWord per canonical word it could match
- Direct mode covers every word and every token, whichever is longer
- Fuzzy mode stops when either cursor runs out; trailing canonical words
  are dropped
- Drift is recovered, logged, and never raised
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from whisper_srt.core.compare import BaseComparer, NormalizedComparer
from whisper_srt.core.errors import InvalidTranscriptFormat
from whisper_srt.core.ir import RecognizerToken, ResolvedWord, Transcript

logger = logging.getLogger(__name__)


def _validate(transcript: Transcript) -> None:
    if not transcript.text or transcript.tokens is None:
        raise InvalidTranscriptFormat(
            "Transcript must have both text and word tokens"
        )


def _resolve(text: str, group: Sequence[RecognizerToken]) -> ResolvedWord:
    return ResolvedWord(
        text=text,
        start_time=group[0].start,
        end_time=group[-1].end,
    )


def align_direct(
    canonical_words: Sequence[str],
    tokens: Sequence[RecognizerToken],
) -> List[ResolvedWord]:
    """Pair canonical words with tokens by position.

    Only correct when the recognizer tokenized exactly like the text. When
    the counts differ, everything past the first divergence is mistimed,
    but nothing is lost: surplus tokens are emitted with their own text,
    and surplus words borrow the last token's timing.
    """
    if not tokens:
        return []
    if len(canonical_words) != len(tokens):
        logger.warning(
            "Direct alignment with %d words and %d tokens; timing past the "
            "first divergence will be off",
            len(canonical_words),
            len(tokens),
        )

    resolved: List[ResolvedWord] = []
    last = len(tokens) - 1
    for index in range(max(len(canonical_words), len(tokens))):
        token = tokens[min(index, last)]
        text = canonical_words[index] if index < len(canonical_words) else token.word
        resolved.append(ResolvedWord(text=text, start_time=token.start, end_time=token.end))
    return resolved


def align_fuzzy(
    canonical_words: Sequence[str],
    tokens: Sequence[RecognizerToken],
    comparer: Optional[BaseComparer] = None,
) -> List[ResolvedWord]:
    """Reconcile canonical words with tokens whose boundaries differ.

    Args:
        canonical_words: Words of the transcript text, punctuation included.
        tokens: Recognizer tokens in time order.
        comparer: Normalization strategy; NormalizedComparer by default.

    Returns:
        ResolvedWords in text order, carrying the canonical word text.
    """
    comparer = comparer or NormalizedComparer()
    resolved: List[ResolvedWord] = []
    group: List[RecognizerToken] = []
    word_index = 0
    token_index = 0
    drift_count = 0

    while word_index < len(canonical_words) and token_index < len(tokens):
        word = canonical_words[word_index]
        token = tokens[token_index]
        target = comparer.normalize(word)
        piece = comparer.normalize(token.word)

        if piece in target:
            group.append(token)
            combined = "".join(comparer.normalize(t.word) for t in group)
            if combined == target:
                resolved.append(_resolve(word, group))
                group = []
                word_index += 1
            token_index += 1
        else:
            if group:
                # Partial match: keep what we have and move on.
                drift_count += 1
                logger.debug(
                    "Alignment drift at word %d (%r): token %r does not fit, "
                    "emitting partial match of %d token(s)",
                    word_index,
                    word,
                    token.word,
                    len(group),
                )
                resolved.append(_resolve(word, group))
            group = []
            word_index += 1

    dropped = len(canonical_words) - word_index
    if drift_count or dropped:
        logger.warning(
            "Fuzzy alignment recovered from %d drift(s); %d trailing word(s) "
            "had no matching tokens",
            drift_count,
            dropped,
        )

    return resolved


def resolve_words(
    transcript: Transcript,
    align_punctuation: bool = False,
    comparer: Optional[BaseComparer] = None,
) -> List[ResolvedWord]:
    """Produce the ResolvedWord sequence for a transcript.

    Args:
        transcript: Authoritative text plus recognizer tokens.
        align_punctuation: Use fuzzy alignment instead of positional pairing.
        comparer: Normalization strategy for fuzzy mode.

    Raises:
        InvalidTranscriptFormat: If text or tokens are missing.
    """
    _validate(transcript)

    canonical_words = transcript.canonical_words
    if align_punctuation:
        return align_fuzzy(canonical_words, transcript.tokens, comparer)
    return align_direct(canonical_words, transcript.tokens)
