"""Geometry primitives and page geometry for layout calculations.

All values are millimetres with a top-left origin; y grows down the page.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from reportlab.lib import pagesizes

from ..exceptions import ConfigurationError


MM_PER_PIXEL = 0.264583  # 96 dpi
MM_PER_POINT = 25.4 / 72.0

PAGE_FORMATS = {
    "a4": pagesizes.A4,
    "letter": pagesizes.letter,
    "legal": pagesizes.legal,
}


@dataclass(slots=True, frozen=True)
class Size:
    width: float
    height: float

    @classmethod
    def from_tuple(cls, value: Iterable[float]) -> "Size":
        width, height = value
        return cls(float(width), float(height))


@dataclass(slots=True, frozen=True)
class Column:
    """Horizontal band available to text at a given cursor position."""

    start_x: float
    width: float

    @property
    def end_x(self) -> float:
        return self.start_x + self.width


def px_to_mm(value: Optional[float]) -> float:
    if value is None:
        return 0.0
    return float(value) * MM_PER_PIXEL


def points_to_mm(value: Optional[float]) -> float:
    if value is None:
        return 0.0
    return float(value) * MM_PER_POINT


def mm_to_points(value: Optional[float]) -> float:
    if value is None:
        return 0.0
    return float(value) / MM_PER_POINT


@dataclass(slots=True, frozen=True)
class PageGeometry:
    """Page size, uniform margin and header/footer band heights.

    Derived bounds::

        usable_width    = width - 2 * margin
        content_start_y = header_height + margin
        content_max_y   = height - footer_height - margin

    Invalid combinations raise :class:`ConfigurationError` on construction,
    so a geometry that exists is always usable for layout.
    """

    width: float = 210.0
    height: float = 297.0
    margin: float = 15.0
    header_height: float = 25.0
    footer_height: float = 30.0

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ConfigurationError(
                "Page dimensions must be positive",
                f"width={self.width}, height={self.height}",
            )
        for name in ("margin", "header_height", "footer_height"):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"{name} must not be negative", str(getattr(self, name)))
        if self.usable_width <= 0:
            raise ConfigurationError(
                "Margins leave no usable content width",
                f"width={self.width}, margin={self.margin}",
            )
        if self.content_max_y <= self.content_start_y:
            raise ConfigurationError(
                "Header and footer bands overlap the content area",
                f"content_start_y={self.content_start_y}, content_max_y={self.content_max_y}",
            )

    @classmethod
    def from_format(cls, name: str = "a4", **kwargs) -> "PageGeometry":
        """Build a portrait geometry from a named ReportLab page size."""
        try:
            width_pt, height_pt = PAGE_FORMATS[name.lower()]
        except KeyError:
            raise ConfigurationError(
                f"Unknown page format '{name}'",
                f"expected one of {sorted(PAGE_FORMATS)}",
            ) from None
        return cls(width=round(points_to_mm(width_pt), 2), height=round(points_to_mm(height_pt), 2), **kwargs)

    @property
    def size(self) -> Size:
        return Size(self.width, self.height)

    @property
    def usable_width(self) -> float:
        return self.width - 2 * self.margin

    @property
    def content_start_y(self) -> float:
        return self.header_height + self.margin

    @property
    def content_max_y(self) -> float:
        return self.height - self.footer_height - self.margin

    @property
    def content_height(self) -> float:
        return self.content_max_y - self.content_start_y

    @property
    def footer_start_y(self) -> float:
        return self.height - self.footer_height

    def full_column(self) -> Column:
        return Column(self.margin, self.usable_width)
