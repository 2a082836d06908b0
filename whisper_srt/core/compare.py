"""Text comparison strategies for fuzzy word alignment.

WHY: The fuzzy aligner decides whether a recognizer token belongs to a
canonical word by substring and equality checks. Whisper's text and its
word tokens disagree on case and punctuation ("Ready." vs "ready"), so a
raw comparison drifts on every punctuated word. Earlier deployments
disagreed on which behaviour was wanted, so both stay available.

HOW: BaseComparer defines normalize(); the aligner applies it to both
sides before comparing. NormalizedComparer strips a fixed punctuation
set, lower-cases, and trims. RawComparer compares text as-is.

RULES:
- normalize() must be idempotent: normalize(normalize(x)) == normalize(x)
- NormalizedComparer is the default everywhere
- Register new strategies in COMPARERS (keys are used by CLI and API)
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Dict, Type

# Characters removed before comparison: . , ! ? ' "
_STRIP_PUNCTUATION_RE = re.compile(r"[.,!?'\"]")


class BaseComparer(ABC):
    """Abstract normalization strategy used by the fuzzy aligner."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Registry key of the strategy, e.g. 'normalized'."""

    @abstractmethod
    def normalize(self, text: str) -> str:
        """Return the comparison form of ``text``."""


class NormalizedComparer(BaseComparer):
    """Case- and punctuation-insensitive comparison."""

    @property
    def name(self) -> str:
        return "normalized"

    def normalize(self, text: str) -> str:
        return _STRIP_PUNCTUATION_RE.sub("", text).lower().strip()


class RawComparer(BaseComparer):
    """Exact comparison; tokens must match the text character for character."""

    @property
    def name(self) -> str:
        return "raw"

    def normalize(self, text: str) -> str:
        return text


COMPARERS: Dict[str, Type[BaseComparer]] = {
    "normalized": NormalizedComparer,
    "raw": RawComparer,
}

DEFAULT_COMPARER = "normalized"


def get_comparer(name: str) -> BaseComparer:
    """Instantiate a registered comparer by key.

    Raises:
        ValueError: If ``name`` is not a registered strategy.
    """
    if name not in COMPARERS:
        raise ValueError(
            "Unknown comparison strategy '{}'. Available: {}".format(
                name, ", ".join(sorted(COMPARERS))
            )
        )
    return COMPARERS[name]()
