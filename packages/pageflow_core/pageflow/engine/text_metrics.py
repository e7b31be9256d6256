"""

TextMetricsEngine - text width measurement.

Uses ReportLab's standard font metrics. Font sizes are points, returned
widths are millimetres so they compare directly with page geometry.

"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from reportlab.pdfbase import pdfmetrics

from .geometry import points_to_mm


BASE_FONT = "Helvetica"
BOLD_FONT = "Helvetica-Bold"
WIDTH_CACHE_SIZE = 8192


@lru_cache(maxsize=WIDTH_CACHE_SIZE)
def _string_width(text: str, font_name: str, size: float) -> float:
    return points_to_mm(pdfmetrics.stringWidth(text, font_name, size))


@dataclass(slots=True, frozen=True)
class FontSpec:
    """Font state used for measuring and drawing a text run."""
    size: float = 11.0
    bold: bool = False

    @property
    def font_name(self) -> str:
        return BOLD_FONT if self.bold else BASE_FONT


class TextMetricsEngine:
    """

    Engine for calculating text widths.

    Widths are cached per (text, font) in a bounded LRU cache shared by
    all engines, since wrapping measures the same prefixes repeatedly.

    """

    def text_width(self, text: str, font: FontSpec) -> float:
        """Width of ``text`` in millimetres."""
        if not text:
            return 0.0
        return _string_width(text, font.font_name, font.size)

    def fits(self, text: str, font: FontSpec, max_width: float) -> bool:
        return self.text_width(text, font) <= max_width

    def truncate(self, text: str, font: FontSpec, max_width: float, ellipsis: str = "...") -> str:
        """Shorten ``text`` with ``ellipsis`` until it fits ``max_width``."""
        if self.fits(text, font, max_width):
            return text
        for end in range(len(text) - 1, 0, -1):
            candidate = text[:end].rstrip() + ellipsis
            if self.fits(candidate, font, max_width):
                return candidate
        return ellipsis if self.fits(ellipsis, font, max_width) else ""
