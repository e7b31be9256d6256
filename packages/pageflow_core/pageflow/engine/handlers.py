"""
Node handlers - one layout rule per content kind.

Each handler declares whether its text reflows around an active float
(``reflows_around_floats``). Paragraphs and bare text do; headings and
lists always use the full column even while a float is active.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from .draw_instructions import ImagePlacement, TextRun
from .geometry import Column, px_to_mm
from .text_metrics import FontSpec
from ..exceptions import ResourceError
from ..models.content import ContentNode, FloatMode, NodeKind, collapse_whitespace

if TYPE_CHECKING:
    from .layout_engine import LayoutContext

logger = logging.getLogger(__name__)


BODY_FONT = FontSpec(size=11.0, bold=False)
LINE_FIT_HEIGHT = 7.0


class NodeHandler:
    """Base class for node handlers."""

    reflows_around_floats = False

    def column(self, ctx: "LayoutContext") -> Column:
        if self.reflows_around_floats:
            return ctx.floats.effective_column(ctx.pagination.cursor_y)
        return ctx.geometry.full_column()

    async def layout(self, node: ContentNode, ctx: "LayoutContext") -> None:
        raise NotImplementedError


@dataclass(frozen=True)
class HeadingStyle:
    font_size: float
    fit_height: float
    gap_before: float
    line_step: float
    gap_after: float


HEADING_STYLES = {
    NodeKind.HEADING_1: HeadingStyle(font_size=20.0, fit_height=12.0, gap_before=0.0, line_step=10.0, gap_after=5.0),
    NodeKind.HEADING_2: HeadingStyle(font_size=16.0, fit_height=10.0, gap_before=3.0, line_step=8.0, gap_after=3.0),
    NodeKind.HEADING_3: HeadingStyle(font_size=14.0, fit_height=8.0, gap_before=2.0, line_step=7.0, gap_after=2.0),
}


class HeadingHandler(NodeHandler):
    """Bold heading wrapped to the full width.

    Page fit is checked once for the whole block, before the first line;
    a heading taller than the remaining page is not split.
    """

    def __init__(self, style: HeadingStyle):
        self.style = style

    async def layout(self, node: ContentNode, ctx: "LayoutContext") -> None:
        style = self.style
        pagination = ctx.pagination
        pagination.check_new_page(style.fit_height)
        pagination.advance(style.gap_before)

        font = FontSpec(size=style.font_size, bold=True)
        ctx.font = font
        column = self.column(ctx)
        lines = ctx.breaker.break_text(node.text_content(), column.width, font)
        if not lines:
            # an empty heading still occupies one line
            pagination.advance(style.line_step)
        for line in lines:
            pagination.add(TextRun(
                page=pagination.page_number,
                x=column.start_x,
                y=pagination.cursor_y,
                text=line,
                font_size=font.size,
                bold=True,
            ))
            pagination.advance(style.line_step)
        pagination.advance(style.gap_after)


class FlowTextHandler(NodeHandler):
    """Shared line loop for text that reflows beside floats.

    Every line is broken against the column in effect at that line's
    cursor position, so text widens again once a float has been passed.
    """

    reflows_around_floats = True
    line_step = 7.0

    def flow(self, text: str, font: FontSpec, ctx: "LayoutContext") -> int:
        pagination = ctx.pagination
        words = text.split()
        index = 0
        emitted = 0
        while index < len(words):
            pagination.check_new_page(LINE_FIT_HEIGHT)
            column = self.column(ctx)
            line, index = ctx.breaker.next_line(words, index, column.width, font)
            pagination.add(TextRun(
                page=pagination.page_number,
                x=column.start_x,
                y=pagination.cursor_y,
                text=line,
                font_size=font.size,
                bold=font.bold,
            ))
            pagination.advance(self.line_step)
            emitted += 1
        return emitted


class ParagraphHandler(FlowTextHandler):
    line_step = 6.0
    gap_after = 3.0

    async def layout(self, node: ContentNode, ctx: "LayoutContext") -> None:
        ctx.pagination.check_new_page(LINE_FIT_HEIGHT)
        ctx.font = BODY_FONT
        if not self.flow(node.text_content(), BODY_FONT, ctx):
            ctx.pagination.advance(self.line_step)
        ctx.pagination.advance(self.gap_after)


class TextHandler(FlowTextHandler):
    """Bare text outside any recognised element; keeps the current font."""

    line_step = 7.0

    async def layout(self, node: ContentNode, ctx: "LayoutContext") -> None:
        text = collapse_whitespace(node.text)
        if text:
            self.flow(text, ctx.font, ctx)


class ListHandler(NodeHandler):
    """Bulleted or numbered list; children are the items."""

    BULLET = "•"
    MARKER_OFFSET = 2.0
    TEXT_INDENT = 10.0
    line_step = 6.0
    gap_after = 3.0

    def marker(self, ordered: bool, index: int) -> str:
        return f"{index}." if ordered else self.BULLET

    async def layout(self, node: ContentNode, ctx: "LayoutContext") -> None:
        pagination = ctx.pagination
        font = BODY_FONT
        ctx.font = font
        column = self.column(ctx)
        text_x = column.start_x + self.TEXT_INDENT
        wrap_width = column.width - self.TEXT_INDENT

        for index, item in enumerate(node.children, start=1):
            lines = ctx.breaker.break_text(item.text_content(), wrap_width, font) or [""]
            for line_index, line in enumerate(lines):
                pagination.check_new_page(LINE_FIT_HEIGHT)
                y = pagination.cursor_y
                if line_index == 0:
                    pagination.add(TextRun(
                        page=pagination.page_number,
                        x=column.start_x + self.MARKER_OFFSET,
                        y=y,
                        text=self.marker(node.ordered, index),
                        font_size=font.size,
                    ))
                if line:
                    pagination.add(TextRun(
                        page=pagination.page_number,
                        x=text_x,
                        y=y,
                        text=line,
                        font_size=font.size,
                    ))
                pagination.advance(self.line_step)
        pagination.advance(self.gap_after)


class ImageHandler(NodeHandler):
    """Inline or floating image.

    Floating images register a float region and leave the cursor where it
    is; following siblings flow beside them.
    """

    DEFAULT_MARGIN = 2.0
    FLOAT_WIDTH_RATIO = 0.5
    GAP_AFTER = 5.0

    @staticmethod
    def _margin(value: Optional[float], default: float) -> float:
        return px_to_mm(value) if value is not None else default

    async def layout(self, node: ContentNode, ctx: "LayoutContext") -> None:
        if not node.source:
            return
        try:
            image = await ctx.resolve_image(node.source)
        except ResourceError as exc:
            ctx.report("image", f"Image skipped: {exc}", source=node.source)
            return

        width_px, height_px = node.width, node.height
        if (width_px is None or height_px is None) and (image.width <= 0 or image.height <= 0):
            ctx.report("image", f"Image skipped: invalid size {image.width}x{image.height}", source=node.source)
            return
        if width_px is None and height_px is None:
            width_px, height_px = image.width, image.height
        elif width_px is None:
            width_px = height_px * image.width / image.height
        elif height_px is None:
            height_px = width_px * image.height / image.width

        width = px_to_mm(width_px)
        height = px_to_mm(height_px)
        if width <= 0 or height <= 0:
            ctx.report("image", "Image skipped: zero display size", source=node.source)
            return

        geometry = ctx.geometry
        floating = node.float_side is not FloatMode.NONE
        max_width = geometry.usable_width * self.FLOAT_WIDTH_RATIO if floating else geometry.usable_width
        if width > max_width:
            scale = max_width / width
            width = max_width
            height = height * scale

        margin_left = self._margin(node.margin_left, self.DEFAULT_MARGIN)
        margin_right = self._margin(node.margin_right, self.DEFAULT_MARGIN)
        margin_bottom = self._margin(node.margin_bottom, self.DEFAULT_MARGIN)

        pagination = ctx.pagination
        pagination.check_new_page(height)
        y = pagination.cursor_y

        if node.float_side is FloatMode.LEFT:
            x = geometry.margin
            ctx.floats.place("left", width + margin_right, y + height + margin_bottom)
        elif node.float_side is FloatMode.RIGHT:
            x = geometry.width - geometry.margin - width
            ctx.floats.place("right", width + margin_left, y + height + margin_bottom)
        else:
            x = geometry.margin + (geometry.usable_width - width) / 2

        pagination.add(ImagePlacement(
            page=pagination.page_number,
            x=x,
            y=y,
            width=width,
            height=height,
            image=image,
        ))
        logger.debug(f"Image {width:.2f}mm x {height:.2f}mm, float: {node.float_side.value}")

        if not floating:
            pagination.advance(height + self.GAP_AFTER)
            ctx.floats.clear()


class ContainerHandler(NodeHandler):
    """No layout of its own; lays out children in document order."""

    async def layout(self, node: ContentNode, ctx: "LayoutContext") -> None:
        for child in node.children:
            await ctx.walk(child)
