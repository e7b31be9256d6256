"""

JSON exporter for LayoutResult.

Images are exported by reference and SHA-256 digest (deduplicated in a
separate ``media`` list) rather than by content, so two runs over the
same input produce byte-identical output.

"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..engine.draw_instructions import (
    DrawInstruction,
    HorizontalLine,
    ImagePlacement,
    LayoutResult,
    TextRun,
)
from ..version import __version__

logger = logging.getLogger(__name__)


def _round(value: float) -> float:
    return round(float(value), 4)


class LayoutJSONExporter:
    """Serialises a LayoutResult to a plain, deterministic dict / JSON."""

    def __init__(self, indent: Optional[int] = 2):
        self.indent = indent
        self._media_index: Dict[str, int] = {}
        self._media_list: List[Dict[str, Any]] = []

    def to_dict(self, result: LayoutResult) -> Dict[str, Any]:
        self._media_index.clear()
        self._media_list.clear()

        geometry = result.geometry
        pages = [
            {
                "number": page.number,
                "instructions": [self._instruction(instr) for instr in page.instructions],
            }
            for page in result.pages
        ]
        return {
            "version": __version__,
            "geometry": {
                "width": geometry.width,
                "height": geometry.height,
                "margin": geometry.margin,
                "header_height": geometry.header_height,
                "footer_height": geometry.footer_height,
                "content_start_y": _round(geometry.content_start_y),
                "content_max_y": _round(geometry.content_max_y),
            },
            "page_count": result.page_count,
            "media": list(self._media_list),
            "pages": pages,
            "diagnostics": [
                {
                    "kind": diag.kind,
                    "message": diag.message,
                    "source": diag.source,
                    "page": diag.page_number,
                }
                for diag in result.diagnostics
            ],
        }

    def to_json(self, result: LayoutResult) -> str:
        return json.dumps(self.to_dict(result), indent=self.indent, ensure_ascii=False)

    def export(self, result: LayoutResult, output_path: Path) -> Path:
        output_path = Path(output_path)
        output_path.write_text(self.to_json(result), encoding="utf-8")
        logger.info(f"Layout exported to {output_path}")
        return output_path

    def _media_id(self, instr: ImagePlacement) -> int:
        digest = instr.image.digest
        if digest not in self._media_index:
            self._media_index[digest] = len(self._media_list)
            self._media_list.append({
                "id": len(self._media_list),
                "source": instr.image.source,
                "sha256": digest,
                "pixel_width": instr.image.width,
                "pixel_height": instr.image.height,
            })
        return self._media_index[digest]

    def _instruction(self, instr: DrawInstruction) -> Dict[str, Any]:
        if isinstance(instr, TextRun):
            return {
                "type": "text",
                "band": instr.band,
                "x": _round(instr.x),
                "y": _round(instr.y),
                "text": instr.text,
                "font_size": instr.font_size,
                "bold": instr.bold,
                "align": instr.align,
            }
        if isinstance(instr, ImagePlacement):
            return {
                "type": "image",
                "band": instr.band,
                "x": _round(instr.x),
                "y": _round(instr.y),
                "width": _round(instr.width),
                "height": _round(instr.height),
                "media": self._media_id(instr),
            }
        if isinstance(instr, HorizontalLine):
            return {
                "type": "line",
                "band": instr.band,
                "x1": _round(instr.x1),
                "y": _round(instr.y),
                "x2": _round(instr.x2),
                "line_width": instr.line_width,
            }
        raise TypeError(f"Unsupported instruction: {type(instr).__name__}")
