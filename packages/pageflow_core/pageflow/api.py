"""
High-level API.

    from pageflow import ContentNode, DocumentOptions, render_to_pdf

    content = ContentNode.from_dict([
        {"kind": "h1", "text": "Quarterly report"},
        {"kind": "p", "text": "..."},
    ])
    result = render_to_pdf(content, DocumentOptions(header_text="ACME"))
    print(result.output_path, result.page_count)
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Union

from .config import DocumentOptions
from .engine.draw_instructions import Diagnostic, LayoutResult
from .engine.layout_engine import LayoutEngine
from .engine.pdf import PDFCompiler
from .media.image_resolver import DefaultImageResolver, ImageResolver
from .models.content import ContentNode

logger = logging.getLogger(__name__)

ContentInput = Union[ContentNode, dict, list, str]


@dataclass
class GenerationResult:
    """Outcome of a successful generation; omitted images are listed in ``diagnostics``."""

    output_path: Path
    layout: LayoutResult

    @property
    def page_count(self) -> int:
        return self.layout.page_count

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return self.layout.diagnostics


def _as_tree(content: ContentInput) -> ContentNode:
    if isinstance(content, ContentNode):
        return content
    return ContentNode.from_dict(content)


def build_engine(
    options: Optional[DocumentOptions] = None,
    resolver: Optional[ImageResolver] = None,
    base_path: Optional[Path] = None,
) -> LayoutEngine:
    """Create a layout engine configured from ``options``."""
    options = options or DocumentOptions()
    if resolver is None:
        resolver = DefaultImageResolver(timeout=options.image_timeout, base_path=base_path)
    return LayoutEngine(
        options.build_geometry(),
        header_policy=options.header_policy(),
        footer_policy=options.footer_policy(),
        header_text=options.header_text,
        header_logo=options.header_logo,
        footer_logo=options.footer_logo,
        resolver=resolver,
    )


async def layout_document(
    content: ContentInput,
    options: Optional[DocumentOptions] = None,
    resolver: Optional[ImageResolver] = None,
    base_path: Optional[Path] = None,
) -> LayoutResult:
    """Paginate ``content`` without writing any output."""
    engine = build_engine(options, resolver, base_path)
    return await engine.layout(_as_tree(content))


async def generate_pdf(
    content: ContentInput,
    options: Optional[DocumentOptions] = None,
    resolver: Optional[ImageResolver] = None,
    output_path: Optional[Union[str, Path]] = None,
    base_path: Optional[Path] = None,
) -> GenerationResult:
    """Lay out ``content`` and write it as a PDF.

    Resource problems (unloadable logos or images) never fail the call;
    any other error propagates and no result is returned.
    """
    options = options or DocumentOptions()
    layout = await layout_document(content, options, resolver, base_path)
    target = Path(output_path) if output_path is not None else Path(options.filename)
    compiler = PDFCompiler(target, title=options.header_text or None)
    path = compiler.compile(layout)
    return GenerationResult(output_path=path, layout=layout)


def render_to_pdf(content: ContentInput, options: Optional[DocumentOptions] = None, **kwargs: Any) -> GenerationResult:
    """Synchronous wrapper around :func:`generate_pdf`."""
    return asyncio.run(generate_pdf(content, options, **kwargs))
