"""Pagination controller: current page, vertical cursor and page breaks.

This controller handles:
- the vertical cursor (only grows within a page)
- page-fit checks before every vertical advance
- header/footer emission for each new page
- dropping the active float on a page break
"""

from __future__ import annotations

import logging
from typing import Optional

from .draw_instructions import DrawInstruction, LayoutPage, LayoutResult
from .float_tracker import FloatTracker
from .geometry import PageGeometry
from .header_footer import FooterEmitter, HeaderEmitter
from ..exceptions import LayoutError

logger = logging.getLogger(__name__)


class PaginationController:
    """Owns the cursor and the page sequence of one layout run."""

    def __init__(
        self,
        geometry: PageGeometry,
        result: LayoutResult,
        floats: FloatTracker,
        header: Optional[HeaderEmitter] = None,
        footer: Optional[FooterEmitter] = None,
    ):
        self.geometry = geometry
        self.result = result
        self.floats = floats
        self.header = header
        self.footer = footer
        self.cursor_y = geometry.content_start_y
        self._page: Optional[LayoutPage] = None
        self._has_body = False

    @property
    def page(self) -> LayoutPage:
        if self._page is None:
            raise RuntimeError("Pagination not started - call start() first.")
        return self._page

    @property
    def page_number(self) -> int:
        return self.page.number

    @property
    def page_is_empty(self) -> bool:
        """True until body content has been placed on the current page."""
        return not self._has_body

    def start(self) -> LayoutPage:
        """Open page 1 and emit its header/footer before any content."""
        if self._page is not None:
            raise RuntimeError("Pagination already started.")
        return self._open_page()

    def remaining_space(self) -> float:
        return max(0.0, self.geometry.content_max_y - self.cursor_y)

    def fits(self, required_height: float) -> bool:
        return self.cursor_y + required_height <= self.geometry.content_max_y

    def check_new_page(self, required_height: float) -> bool:
        """Break to a new page if ``required_height`` does not fit.

        A page that has no body content yet is never abandoned: the unit
        is placed there even if it overflows, so layout always advances.
        Returns True when a break occurred.
        """
        if self.fits(required_height) or self.page_is_empty:
            return False
        self.new_page()
        return True

    def new_page(self) -> LayoutPage:
        logger.debug(
            f"Page break after page {self.page_number} at y={self.cursor_y:.2f} "
            f"(max {self.geometry.content_max_y:.2f})"
        )
        return self._open_page()

    def advance(self, height: float) -> None:
        if height < 0:
            raise LayoutError("Cursor can only move down the page", f"height={height}")
        self.cursor_y += height

    def add(self, instruction: DrawInstruction) -> None:
        self.page.add(instruction)
        self._has_body = True

    def _open_page(self) -> LayoutPage:
        self._page = self.result.new_page()
        self.cursor_y = self.geometry.content_start_y
        self._has_body = False
        self.floats.clear()
        if self.header is not None:
            self.header.emit(self._page)
        if self.footer is not None:
            self.footer.emit(self._page)
        return self._page
