"""Whisper SRT — word-aligned subtitle generation from Whisper transcripts.

WHY: Whisper's verbose_json response carries two views of the same speech:
a clean, punctuated text and a list of word tokens with timestamps whose
boundaries don't always match that text. Subtitle files need the clean text
with the token timing. This package reconciles the two and lays the result
out as numbered, time-ranged cues.

HOW: Three-stage pipeline: ingest (Whisper API client or a saved JSON
transcript), align (core word aligner), segment + render (core cue
segmenter, exposed through pluggable formatters).

RULES:
- The core (whisper_srt.core) is pure: no I/O, no shared state
- Transcript JSON is decoded into typed dataclasses at the boundary
- Adding an output format = one new formatter module, no core changes
"""

__version__ = "0.1.0"
