"""Single-slot tracker for floating image regions."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal, Optional

from .geometry import Column, PageGeometry

logger = logging.getLogger(__name__)

FloatSide = Literal["left", "right"]


@dataclass(slots=True, frozen=True)
class FloatRegion:
    """Band reserved by a floating image on one side of the text column.

    ``width`` already includes the image margin on the text-facing side.
    """

    side: FloatSide
    width: float
    end_y: float


class FloatTracker:
    """Holds zero or one active :class:`FloatRegion`.

    Placing a float while another is active replaces it (last write wins).
    The region clears itself lazily the first time a column is requested
    at or below its ``end_y``.
    """

    def __init__(self, geometry: PageGeometry):
        self.geometry = geometry
        self._region: Optional[FloatRegion] = None

    @property
    def active(self) -> Optional[FloatRegion]:
        return self._region

    def place(self, side: FloatSide, width: float, end_y: float) -> FloatRegion:
        if self._region is not None:
            logger.debug(f"Float {self._region} overwritten by new {side} float")
        self._region = FloatRegion(side=side, width=width, end_y=end_y)
        logger.debug(f"Float placed: side={side}, width={width:.2f}, end_y={end_y:.2f}")
        return self._region

    def clear(self) -> None:
        self._region = None

    def effective_column(self, cursor_y: float) -> Column:
        """Return the text column in effect at ``cursor_y``."""
        region = self._region
        if region is None:
            return self.geometry.full_column()
        if cursor_y >= region.end_y:
            self._region = None
            return self.geometry.full_column()

        margin = self.geometry.margin
        width = self.geometry.usable_width - region.width
        if region.side == "left":
            return Column(margin + region.width, width)
        return Column(margin, width)
