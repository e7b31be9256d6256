"""
Header and footer emission.

Both emitters are consulted once per page by the pagination controller
and write straight into that page's instruction stream. Logos are
resolved before layout begins; an emitter given no logo simply lays out
its text-only variant.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from .draw_instructions import HorizontalLine, ImagePlacement, LayoutPage, TextRun
from .geometry import PageGeometry, px_to_mm
from .text_metrics import FontSpec, TextMetricsEngine
from .visibility import VisibilityPolicy
from ..media.image_resolver import PhysicalImage

logger = logging.getLogger(__name__)


class HeaderEmitter:
    """Logo slot, title text and separator rule at the bottom of the band."""

    LOGO_WIDTH = 20.0
    LOGO_HEIGHT = 20.0
    LOGO_Y = 5.0
    TITLE_GAP = 5.0
    TITLE_Y_WITH_LOGO = 13.0
    TITLE_Y_CENTERED = 10.0
    TITLE_FONT = FontSpec(size=12.0, bold=True)
    RULE_WIDTH = 0.5

    def __init__(
        self,
        geometry: PageGeometry,
        policy: VisibilityPolicy,
        title: str = "",
        logo: Optional[PhysicalImage] = None,
        metrics: Optional[TextMetricsEngine] = None,
    ):
        self.geometry = geometry
        self.policy = policy
        self.title = title
        self.logo = logo
        self.metrics = metrics or TextMetricsEngine()

    def emit(self, page: LayoutPage) -> bool:
        """Write the header for ``page``; returns False when hidden."""
        if not self.policy.should_show(page.number):
            return False

        g = self.geometry
        if self.logo is not None:
            page.add(ImagePlacement(
                page=page.number,
                x=g.margin,
                y=self.LOGO_Y,
                width=self.LOGO_WIDTH,
                height=self.LOGO_HEIGHT,
                image=self.logo,
                band="header",
            ))
            title_x = g.margin + self.LOGO_WIDTH + self.TITLE_GAP
            available = g.width - g.margin - title_x
            if self.title:
                page.add(TextRun(
                    page=page.number,
                    x=title_x,
                    y=self.TITLE_Y_WITH_LOGO,
                    text=self.metrics.truncate(self.title, self.TITLE_FONT, available),
                    font_size=self.TITLE_FONT.size,
                    bold=True,
                    band="header",
                ))
        elif self.title:
            page.add(TextRun(
                page=page.number,
                x=g.width / 2,
                y=self.TITLE_Y_CENTERED,
                text=self.metrics.truncate(self.title, self.TITLE_FONT, g.usable_width),
                font_size=self.TITLE_FONT.size,
                bold=True,
                align="center",
                band="header",
            ))

        page.add(HorizontalLine(
            page=page.number,
            x1=g.margin,
            y=g.header_height,
            x2=g.width - g.margin,
            line_width=self.RULE_WIDTH,
            band="header",
        ))
        return True


@dataclass(slots=True, frozen=True)
class FooterLogoFit:
    width: float
    height: float
    scale: float


class FooterEmitter:
    """Left-aligned logo scaled into the band, right-aligned page label."""

    PADDING = 3.0
    LABEL_OFFSET_FROM_BOTTOM = 10.0
    LABEL_FONT = FontSpec(size=10.0, bold=False)

    def __init__(
        self,
        geometry: PageGeometry,
        policy: VisibilityPolicy,
        logo: Optional[PhysicalImage] = None,
        label_format: str = "Page {page}",
    ):
        self.geometry = geometry
        self.policy = policy
        self.logo = logo
        self.label_format = label_format
        self._fit = self.fit_logo(logo) if logo is not None else None
        if logo is not None and self._fit is None:
            logger.warning(f"Footer logo {logo!r} cannot be measured; footer shows page label only")

    @property
    def available_size(self) -> Tuple[float, float]:
        g = self.geometry
        return g.usable_width, g.footer_height - 2 * self.PADDING

    def fit_logo(self, logo: PhysicalImage) -> Optional[FooterLogoFit]:
        """Largest scale <= 1 that fits both the footer width and padded height."""
        width_mm = px_to_mm(logo.width)
        height_mm = px_to_mm(logo.height)
        max_width, max_height = self.available_size
        if width_mm <= 0 or height_mm <= 0 or max_width <= 0 or max_height <= 0:
            return None
        scale = min(max_width / width_mm, max_height / height_mm, 1.0)
        return FooterLogoFit(width=width_mm * scale, height=height_mm * scale, scale=scale)

    def emit(self, page: LayoutPage) -> bool:
        """Write the footer for ``page``; returns False when hidden."""
        if not self.policy.should_show(page.number):
            return False

        g = self.geometry
        logo_top = g.footer_start_y + self.PADDING
        if self.logo is not None and self._fit is not None:
            page.add(ImagePlacement(
                page=page.number,
                x=g.margin,
                y=logo_top,
                width=self._fit.width,
                height=self._fit.height,
                image=self.logo,
                band="footer",
            ))
            label_y = logo_top + self._fit.height + self.PADDING
        else:
            label_y = g.height - self.LABEL_OFFSET_FROM_BOTTOM

        page.add(TextRun(
            page=page.number,
            x=g.width - g.margin,
            y=label_y,
            text=self.label_format.format(page=page.number),
            font_size=self.LABEL_FONT.size,
            bold=False,
            align="right",
            band="footer",
        ))
        return True
