"""
Layout engine: geometry, visibility, floats, pagination and node handlers.
"""

from .draw_instructions import (
    Diagnostic,
    DrawingBackend,
    DrawInstruction,
    HorizontalLine,
    ImagePlacement,
    LayoutPage,
    LayoutResult,
    TextRun,
    replay,
)
from .float_tracker import FloatRegion, FloatTracker
from .geometry import Column, PageGeometry, Size
from .layout_engine import LayoutEngine
from .layout_validator import LayoutValidator
from .pagination import PaginationController
from .visibility import VisibilityPolicy

__all__ = [
    "Column",
    "Diagnostic",
    "DrawingBackend",
    "DrawInstruction",
    "FloatRegion",
    "FloatTracker",
    "HorizontalLine",
    "ImagePlacement",
    "LayoutEngine",
    "LayoutPage",
    "LayoutResult",
    "LayoutValidator",
    "PageGeometry",
    "PaginationController",
    "Size",
    "TextRun",
    "VisibilityPolicy",
    "replay",
]
