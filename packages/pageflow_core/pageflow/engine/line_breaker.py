"""Greedy line breaking on word boundaries."""

from __future__ import annotations

import logging
from typing import List, Sequence, Tuple

from .text_metrics import FontSpec, TextMetricsEngine

logger = logging.getLogger(__name__)


class LineBreaker:
    """Simple greedy line breaker.

    A word wider than the line is never split; it gets a line of its own
    and overflows rather than being lost.
    """

    def __init__(self, metrics_engine: TextMetricsEngine):
        self.metrics_engine = metrics_engine

    def next_line(
        self,
        words: Sequence[str],
        start: int,
        max_width: float,
        font: FontSpec,
    ) -> Tuple[str, int]:
        """Take as many words from ``words[start:]`` as fit in ``max_width``.

        Returns the line text and the index of the first unconsumed word.
        At least one word is always consumed while any remain.
        """
        if start >= len(words):
            return "", start

        current_line = words[start]
        index = start + 1
        if not self.metrics_engine.fits(current_line, font, max_width):
            logger.debug(f"Word '{current_line[:30]}' wider than {max_width:.2f}mm, placed alone")
            return current_line, index

        while index < len(words):
            candidate = f"{current_line} {words[index]}"
            if not self.metrics_engine.fits(candidate, font, max_width):
                break
            current_line = candidate
            index += 1
        return current_line, index

    def break_text(self, text: str, max_width: float, font: FontSpec) -> List[str]:
        """Wrap ``text`` into lines no wider than ``max_width``."""
        words = text.split()
        lines: List[str] = []
        index = 0
        while index < len(words):
            line, index = self.next_line(words, index, max_width, font)
            lines.append(line)
        return lines
