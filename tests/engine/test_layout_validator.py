"""Tests for LayoutValidator."""

import pytest

from pageflow.engine import LayoutResult, LayoutValidator
from pageflow.engine.draw_instructions import HorizontalLine, ImagePlacement, LayoutPage, TextRun
from pageflow.media import PhysicalImage
from pageflow.models import ContentNode


def text(page, y, x=15.0, band="body"):
    return TextRun(page=page, x=x, y=y, text="x", font_size=11, band=band)


class TestLayoutValidator:
    """Test suite for LayoutValidator."""

    def test_empty_result_is_invalid(self, geometry):
        is_valid, errors, _ = LayoutValidator(LayoutResult(geometry)).validate()

        assert not is_valid
        assert "no pages" in errors[0]

    def test_valid_page(self, geometry):
        result = LayoutResult(geometry)
        result.new_page()
        result.add(text(1, 40.0))
        result.add(HorizontalLine(page=1, x1=15, y=25, x2=195, band="header"))

        assert LayoutValidator(result).validate() == (True, [], [])

    def test_body_above_content_area(self, geometry):
        result = LayoutResult(geometry)
        result.new_page()
        result.add(text(1, 30.0))

        is_valid, errors, _ = LayoutValidator(result).validate()

        assert not is_valid
        assert "above the content area" in errors[0]

    def test_overflow_is_a_warning(self, geometry, png_bytes):
        result = LayoutResult(geometry)
        result.new_page()
        image = PhysicalImage(data=png_bytes(2, 2), width=2, height=2)
        result.add(ImagePlacement(page=1, x=15, y=40, width=50, height=250, image=image))

        is_valid, _, warnings = LayoutValidator(result).validate()

        assert is_valid
        assert any("overflows" in w for w in warnings)

    def test_off_page_instruction(self, geometry):
        result = LayoutResult(geometry)
        result.new_page()
        result.add(text(1, 100.0, x=250.0))

        is_valid, errors, _ = LayoutValidator(result).validate()

        assert not is_valid
        assert "horizontally" in errors[0]

    def test_page_number_mismatch(self, geometry):
        result = LayoutResult(geometry)
        result.pages.append(LayoutPage(number=2))
        result.add(text(2, 50.0))

        is_valid, errors, _ = LayoutValidator(result).validate()

        assert not is_valid
        assert "position 1" in errors[0]

    def test_page_without_body_warns(self, geometry):
        result = LayoutResult(geometry)
        result.new_page()
        result.add(text(1, 287.0, band="footer"))

        _, _, warnings = LayoutValidator(result).validate()

        assert warnings == ["Page 1 has no body content"]

    @pytest.mark.asyncio
    async def test_oversized_image_layout_warns(self, engine_factory):
        result = await engine_factory().layout(ContentNode.container(ContentNode.image("tall:300x1000")))

        is_valid, _, warnings = LayoutValidator(result).validate()

        assert is_valid
        assert len(warnings) == 1
