"""Stage timing for the transcription pipeline."""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Iterator, Optional

logger = logging.getLogger(__name__)


@contextmanager
def timed(label: str, log: Optional[logging.Logger] = None) -> Iterator[None]:
    """Log how long the wrapped block took, at INFO level.

    The duration is logged even when the block raises.
    """
    log = log or logger
    start = time.perf_counter()
    try:
        yield
    finally:
        log.info("%s took %.3fs", label, time.perf_counter() - start)
