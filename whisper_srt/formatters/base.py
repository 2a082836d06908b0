"""Abstract base formatter and output container.

WHY: Every output format consumes the same Transcript and LayoutRules but
produces different file content. This base class enforces a consistent
interface so the CLI and HTTP API can work with any formatter generically.

HOW: BaseFormatter is an ABC with two requirements: a ``name`` property
and a ``format()`` method. FormatterOutput is a plain dataclass that
bundles a file suffix with its content and MIME type.

RULES:
- Subclasses MUST implement ``name`` (human-readable) and ``format()``
- ``format()`` returns a list, even for a single file
- ``suffix`` is appended to the source stem, e.g. ``".srt"`` or
  ``"-transcript.txt"``
- The caller is responsible for prepending the source filename stem
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from whisper_srt.core.compare import BaseComparer, NormalizedComparer
from whisper_srt.core.ir import LayoutRules, Transcript


@dataclass
class FormatterOutput:
    """One output file produced by a formatter.

    Attributes:
        suffix: File suffix appended to the source stem,
                e.g. ``".srt"`` → ``"interview.srt"``.
        content: The file content.
        media_type: MIME type for the content, e.g. ``"application/x-subrip"``.
    """

    suffix: str
    content: str
    media_type: str


class BaseFormatter(ABC):
    """Abstract base for all output formatters.

    To add a new output format:
    1. Create a new file in formatters/
    2. Subclass BaseFormatter
    3. Implement format() and name
    4. Register in FORMATTERS dict in formatters/__init__.py
    """

    # Suffix of the file this formatter writes, e.g. ".srt"
    suffix: str = ""

    def __init__(self, comparer: BaseComparer | None = None) -> None:
        self.comparer = comparer or NormalizedComparer()

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'SRT Subtitles'."""

    @abstractmethod
    def format(self, transcript: Transcript, rules: LayoutRules) -> list[FormatterOutput]:
        """Convert a transcript into one or more output files.

        Args:
            transcript: Authoritative text plus recognizer tokens.
            rules: Layout limits and alignment mode.

        Returns:
            List of FormatterOutput objects.
        """
