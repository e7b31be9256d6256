"""
pageflow - paginated PDF reports from structured content.

Lays out a tree of headings, paragraphs, lists and images onto fixed-size
pages, wraps text around floated images, repeats a header and footer
according to per-band visibility rules and writes the result as PDF.

Features:
- Page breaking with measured text (ReportLab font metrics)
- Left / right floated images with text reflow
- Header / footer visibility policies (all, first, all-except-first, custom)
- Image loading from URLs, files, data URIs and raw base64
- Deterministic JSON export of the computed layout

Quick Start:
    from pageflow import ContentNode, DocumentOptions, render_to_pdf

    content = ContentNode.container(
        ContentNode.heading(1, "Report"),
        ContentNode.paragraph("Lorem ipsum ..."),
    )
    render_to_pdf(content, DocumentOptions(filename="report.pdf"))
"""

from .version import __version__, __version_info__

from .exceptions import (
    ConfigurationError,
    ContentError,
    LayoutError,
    PageflowError,
    RenderingError,
    ResourceError,
)

from .api import (
    GenerationResult,
    build_engine,
    generate_pdf,
    layout_document,
    render_to_pdf,
)
from .config import DocumentOptions
from .engine import (
    LayoutEngine,
    LayoutResult,
    LayoutValidator,
    PageGeometry,
    VisibilityPolicy,
)
from .engine.pdf import PDFCompiler
from .export import LayoutJSONExporter
from .media import DefaultImageResolver, PhysicalImage
from .models import ContentNode, FloatMode, NodeKind

__all__ = [
    "__version__",
    "__version_info__",
    # Exceptions
    "PageflowError",
    "ConfigurationError",
    "ContentError",
    "ResourceError",
    "LayoutError",
    "RenderingError",
    # API
    "GenerationResult",
    "build_engine",
    "generate_pdf",
    "layout_document",
    "render_to_pdf",
    "DocumentOptions",
    # Engine
    "LayoutEngine",
    "LayoutResult",
    "LayoutValidator",
    "PageGeometry",
    "VisibilityPolicy",
    "PDFCompiler",
    "LayoutJSONExporter",
    # Content / media
    "ContentNode",
    "FloatMode",
    "NodeKind",
    "DefaultImageResolver",
    "PhysicalImage",
]
