"""

PDFCompiler - renders a LayoutResult into a PDF file with ReportLab.

Layout coordinates are millimetres from the top-left corner; ReportLab
works in points from the bottom-left corner, so every instruction is
converted on the way out. No layout decisions are made here.

"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Dict, Optional, Union

from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from ..draw_instructions import (
    DrawInstruction,
    HorizontalLine,
    ImagePlacement,
    LayoutResult,
    TextRun,
    replay,
)
from ..geometry import PageGeometry
from ..text_metrics import BASE_FONT, BOLD_FONT
from ...exceptions import RenderingError

logger = logging.getLogger(__name__)


class PDFCompiler:
    """

    Drawing backend writing to a ReportLab canvas.

    Implements the ``DrawingBackend`` protocol (``new_page`` / ``draw`` /
    ``finish``); :meth:`compile` replays a whole layout and saves the file.

    """

    def __init__(
        self,
        output_path: Union[str, Path] = "report.pdf",
        *,
        title: Optional[str] = None,
        author: Optional[str] = None,
    ):
        self.output_path = Path(output_path)
        self.title = title
        self.author = author
        self._canvas: Optional[canvas.Canvas] = None
        self._geometry: Optional[PageGeometry] = None
        self._image_readers: Dict[str, ImageReader] = {}
        self.pages_written = 0

    def compile(self, result: LayoutResult) -> Path:
        """Render ``result`` and write the PDF.

        Raises:
            RenderingError: If the layout is empty or ReportLab fails
        """
        if not result.pages:
            raise RenderingError("Cannot compile a layout without pages")

        self.begin(result.geometry)
        try:
            replay(result, self)
        except RenderingError:
            raise
        except Exception as e:
            logger.error(f"Failed to write PDF file to {self.output_path}: {e}")
            raise RenderingError("Failed to write PDF file", str(e)) from e
        finally:
            self._canvas = None
            self._image_readers.clear()

        logger.info(f"PDF written: {self.output_path} ({self.pages_written} page(s))")
        return self.output_path

    def begin(self, geometry: PageGeometry) -> None:
        self._geometry = geometry
        self.pages_written = 0
        if self.output_path.parent and not self.output_path.parent.exists():
            self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self._canvas = canvas.Canvas(
            str(self.output_path),
            pagesize=(geometry.width * mm, geometry.height * mm),
            pageCompression=1,
        )
        self._canvas.setCreator("pageflow")
        if self.title:
            self._canvas.setTitle(self.title)
        if self.author:
            self._canvas.setAuthor(self.author)

    # DrawingBackend --------------------------------------------------------

    def new_page(self) -> None:
        self._require_canvas().showPage()
        self.pages_written += 1

    def draw(self, instruction: DrawInstruction) -> None:
        if isinstance(instruction, TextRun):
            self._draw_text(instruction)
        elif isinstance(instruction, ImagePlacement):
            self._draw_image(instruction)
        elif isinstance(instruction, HorizontalLine):
            self._draw_line(instruction)
        else:
            raise RenderingError("Unsupported draw instruction", type(instruction).__name__)

    def finish(self) -> None:
        c = self._require_canvas()
        c.showPage()
        self.pages_written += 1
        c.save()

    # Helpers ---------------------------------------------------------------

    def _require_canvas(self) -> canvas.Canvas:
        if self._canvas is None:
            raise RenderingError("PDF canvas not initialised - call begin() first")
        return self._canvas

    def _to_pdf_y(self, y_mm: float) -> float:
        assert self._geometry is not None
        return (self._geometry.height - y_mm) * mm

    def _draw_text(self, run: TextRun) -> None:
        c = self._require_canvas()
        c.setFont(BOLD_FONT if run.bold else BASE_FONT, run.font_size)
        x = run.x * mm
        y = self._to_pdf_y(run.y)
        if run.align == "center":
            c.drawCentredString(x, y, run.text)
        elif run.align == "right":
            c.drawRightString(x, y, run.text)
        else:
            c.drawString(x, y, run.text)

    def _draw_image(self, placement: ImagePlacement) -> None:
        c = self._require_canvas()
        image = placement.image
        reader = self._image_readers.get(image.digest)
        if reader is None:
            reader = ImageReader(io.BytesIO(image.data))
            self._image_readers[image.digest] = reader
        c.drawImage(
            reader,
            placement.x * mm,
            self._to_pdf_y(placement.y + placement.height),
            width=placement.width * mm,
            height=placement.height * mm,
            mask="auto",
        )

    def _draw_line(self, line: HorizontalLine) -> None:
        c = self._require_canvas()
        c.setLineWidth(line.line_width * mm)
        y = self._to_pdf_y(line.y)
        c.line(line.x1 * mm, y, line.x2 * mm, y)
