"""

LayoutEngine - walks a content tree and produces paginated draw instructions.

Traversal is depth-first, pre-order and strictly sequential: siblings are
laid out in document order because the cursor, the float slot and page
breaks are all order-dependent state. The only suspension point is image
resolution, which is awaited before the image's layout continues, so at
most one resolution is ever in flight.

"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Union

from .draw_instructions import Diagnostic, LayoutResult
from .float_tracker import FloatTracker
from .geometry import PageGeometry
from .handlers import (
    BODY_FONT,
    HEADING_STYLES,
    ContainerHandler,
    HeadingHandler,
    ImageHandler,
    ListHandler,
    NodeHandler,
    ParagraphHandler,
    TextHandler,
)
from .header_footer import FooterEmitter, HeaderEmitter
from .line_breaker import LineBreaker
from .pagination import PaginationController
from .text_metrics import FontSpec, TextMetricsEngine
from .visibility import VisibilityPolicy, VisibilitySpec
from ..exceptions import ResourceError
from ..media.image_resolver import DefaultImageResolver, ImageResolver, PhysicalImage
from ..models.content import ContentNode, NodeKind

logger = logging.getLogger(__name__)

LogoSource = Union[str, PhysicalImage, None]


@dataclass
class LayoutContext:
    """Mutable state of a single layout run."""

    engine: "LayoutEngine"
    geometry: PageGeometry
    result: LayoutResult
    pagination: PaginationController
    floats: FloatTracker
    breaker: LineBreaker
    font: FontSpec = field(default=BODY_FONT)

    async def walk(self, node: ContentNode) -> None:
        await self.engine.walk(node, self)

    async def resolve_image(self, reference: str) -> PhysicalImage:
        return await self.engine.resolver.resolve(reference)

    def report(self, kind: str, message: str, source: Optional[str] = None) -> None:
        page_number = self.result.pages[-1].number if self.result.pages else None
        self.result.diagnostics.append(
            Diagnostic(kind=kind, message=message, source=source, page_number=page_number)
        )
        logger.warning(f"{message} (source={(source or '')[:80]}, page={page_number})")


class LayoutEngine:
    """

    Layout and pagination engine.

    Args:
        geometry: Page geometry (A4 with default bands when omitted)
        header_policy / footer_policy: Visibility rule for each band
        header_text: Title shown in the header band
        header_logo / footer_logo: Logo reference or already decoded image
        resolver: Image resolver for logos and inline images

    """

    def __init__(
        self,
        geometry: Optional[PageGeometry] = None,
        *,
        header_policy: VisibilitySpec = "all",
        footer_policy: VisibilitySpec = "all",
        header_text: str = "",
        header_logo: LogoSource = None,
        footer_logo: LogoSource = None,
        resolver: Optional[ImageResolver] = None,
        metrics: Optional[TextMetricsEngine] = None,
    ):
        self.geometry = geometry or PageGeometry()
        self.header_policy = VisibilityPolicy.from_spec(header_policy)
        self.footer_policy = VisibilityPolicy.from_spec(footer_policy)
        self.header_text = header_text
        self.header_logo = header_logo
        self.footer_logo = footer_logo
        self.resolver: ImageResolver = resolver or DefaultImageResolver()
        self.metrics = metrics or TextMetricsEngine()
        self.handlers: Dict[NodeKind, NodeHandler] = {
            NodeKind.TEXT: TextHandler(),
            NodeKind.PARAGRAPH: ParagraphHandler(),
            NodeKind.LIST: ListHandler(),
            NodeKind.IMAGE: ImageHandler(),
            NodeKind.CONTAINER: ContainerHandler(),
        }
        for kind, style in HEADING_STYLES.items():
            self.handlers[kind] = HeadingHandler(style)

    def register_handler(self, kind: NodeKind, handler: NodeHandler) -> None:
        self.handlers[kind] = handler

    async def layout(self, root: ContentNode) -> LayoutResult:
        """Lay out ``root`` and return every page's instruction stream."""
        result = LayoutResult(geometry=self.geometry)
        header_logo = await self._resolve_logo(self.header_logo, "header-logo", result)
        footer_logo = await self._resolve_logo(self.footer_logo, "footer-logo", result)

        floats = FloatTracker(self.geometry)
        pagination = PaginationController(
            self.geometry,
            result,
            floats,
            header=HeaderEmitter(self.geometry, self.header_policy, self.header_text, header_logo, self.metrics),
            footer=FooterEmitter(self.geometry, self.footer_policy, footer_logo),
        )
        ctx = LayoutContext(
            engine=self,
            geometry=self.geometry,
            result=result,
            pagination=pagination,
            floats=floats,
            breaker=LineBreaker(self.metrics),
        )

        pagination.start()
        await self.walk(root, ctx)

        logger.info(
            f"Layout finished: {result.page_count} page(s), "
            f"{sum(len(p.instructions) for p in result.pages)} instruction(s), "
            f"{len(result.diagnostics)} diagnostic(s)"
        )
        return result

    async def walk(self, node: ContentNode, ctx: LayoutContext) -> None:
        handler = self.handlers.get(node.kind)
        if handler is None:
            logger.debug(f"No handler for {node.kind}, laying out children")
            handler = self.handlers[NodeKind.CONTAINER]
        await handler.layout(node, ctx)

    async def _resolve_logo(
        self, logo: LogoSource, kind: str, result: LayoutResult
    ) -> Optional[PhysicalImage]:
        if logo is None or isinstance(logo, PhysicalImage):
            return logo
        try:
            return await self.resolver.resolve(logo)
        except ResourceError as exc:
            result.diagnostics.append(
                Diagnostic(kind=kind, message=f"Logo omitted: {exc}", source=logo[:80])
            )
            logger.warning(f"Failed to load {kind}: {exc}")
            return None
