"""

Draw instructions - final, absolutely positioned output of the layout engine.

Every instruction belongs to one page and carries its own coordinates
(millimetres, top-left origin). Order inside a page is draw order and
must be preserved by the consumer: later instructions may deliberately
overlap earlier ones.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Literal, Protocol, Union

from .geometry import PageGeometry
from ..media.image_resolver import PhysicalImage


TextAlign = Literal["left", "center", "right"]
BandKind = Literal["body", "header", "footer"]


@dataclass(slots=True, frozen=True)
class TextRun:
    """Single line of text; ``y`` is the baseline."""

    page: int
    x: float
    y: float
    text: str
    font_size: float
    bold: bool = False
    align: TextAlign = "left"
    band: BandKind = "body"

    kind = "text"


@dataclass(slots=True, frozen=True)
class ImagePlacement:
    """Image drawn into the box whose top-left corner is (x, y)."""

    page: int
    x: float
    y: float
    width: float
    height: float
    image: PhysicalImage
    band: BandKind = "body"

    kind = "image"


@dataclass(slots=True, frozen=True)
class HorizontalLine:
    page: int
    x1: float
    y: float
    x2: float
    line_width: float = 0.5
    band: BandKind = "body"

    kind = "line"


DrawInstruction = Union[TextRun, ImagePlacement, HorizontalLine]


@dataclass(slots=True)
class Diagnostic:
    """Recoverable problem reported during layout (never fatal)."""

    kind: str
    message: str
    source: str | None = None
    page_number: int | None = None


@dataclass(slots=True)
class LayoutPage:
    """Page with its ordered instruction stream."""

    number: int
    instructions: List[DrawInstruction] = field(default_factory=list)

    def add(self, instruction: DrawInstruction) -> None:
        self.instructions.append(instruction)

    def in_band(self, band: BandKind) -> List[DrawInstruction]:
        return [instr for instr in self.instructions if instr.band == band]


@dataclass
class LayoutResult:
    """Paginated layout of an entire document."""

    geometry: PageGeometry
    pages: List[LayoutPage] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def new_page(self) -> LayoutPage:
        page = LayoutPage(number=len(self.pages) + 1)
        self.pages.append(page)
        return page

    def add(self, instruction: DrawInstruction) -> None:
        if not self.pages:
            raise RuntimeError("No active page - call new_page() before adding instructions.")
        self.pages[-1].add(instruction)

    def iter_instructions(self) -> Iterator[DrawInstruction]:
        for page in self.pages:
            yield from page.instructions


class DrawingBackend(Protocol):
    """Consumer of the instruction stream (PDF writer, recorder, ...)."""

    def new_page(self) -> None: ...

    def draw(self, instruction: DrawInstruction) -> None: ...

    def finish(self) -> None: ...


def replay(result: LayoutResult, backend: DrawingBackend) -> None:
    """Feed ``result`` to ``backend`` page by page, in draw order.

    ``new_page()`` is called between pages, never before the first one.
    """
    for index, page in enumerate(result.pages):
        if index:
            backend.new_page()
        for instruction in page.instructions:
            backend.draw(instruction)
    backend.finish()
