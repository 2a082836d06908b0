"""Core alignment, segmentation, and intermediate representation modules.

WHY: The core package holds the only part of the system with real design
content: reconciling transcript text with recognizer tokens and laying
the result out as subtitle cues. Everything else is I/O around it.

HOW: ir.py defines the value types, schema.py decodes transcript JSON
into them, compare.py holds the normalization strategies, aligner.py
resolves canonical words, segmenter.py groups and renders cues, and
generator.py wires aligner and segmenter together.

RULES:
- Pure functions over immutable input, no I/O, no module state
- Errors raised here come from errors.py only
"""

from whisper_srt.core.errors import (
    InvalidConfiguration,
    InvalidResolvedWordSequence,
    InvalidTranscriptFormat,
    SubtitleError,
)
from whisper_srt.core.generator import generate
from whisper_srt.core.ir import (
    LayoutRules,
    RecognizerToken,
    ResolvedWord,
    SubtitleCue,
    Transcript,
)

__all__ = [
    "generate",
    "LayoutRules",
    "RecognizerToken",
    "ResolvedWord",
    "SubtitleCue",
    "Transcript",
    "SubtitleError",
    "InvalidConfiguration",
    "InvalidResolvedWordSequence",
    "InvalidTranscriptFormat",
]
