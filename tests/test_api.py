"""Tests for the high-level API."""

import pytest

from pageflow import (
    ContentNode,
    DocumentOptions,
    GenerationResult,
    generate_pdf,
    layout_document,
    render_to_pdf,
)
from pageflow.exceptions import ContentError


CONTENT = [
    {"kind": "h1", "text": "Quarterly report"},
    {"kind": "img", "src": "chart:300x200", "float": "left"},
    {"kind": "p", "text": " ".join(["revenue"] * 300)},
    {"kind": "ul", "children": ["North", "South"]},
]


class TestLayoutDocument:
    """Test suite for layout_document()."""

    @pytest.mark.asyncio
    async def test_accepts_plain_data(self, resolver):
        result = await layout_document(CONTENT, DocumentOptions(header_text="ACME"), resolver=resolver)

        assert result.page_count >= 1
        header = result.pages[0].in_band("header")
        assert header[0].text == "ACME"
        assert resolver.calls == ["chart:300x200"]

    @pytest.mark.asyncio
    async def test_options_visibility(self, resolver):
        options = DocumentOptions(show_header_on="none", show_footer_on="none")

        result = await layout_document(ContentNode.paragraph("x"), options, resolver=resolver)

        assert [i.band for i in result.pages[0].instructions] == ["body"]

    @pytest.mark.asyncio
    async def test_invalid_content(self, resolver):
        with pytest.raises(ContentError):
            await layout_document({"kind": "table"}, resolver=resolver)


class TestGeneratePdf:
    """Test suite for generate_pdf() / render_to_pdf()."""

    @pytest.mark.asyncio
    async def test_generate_pdf(self, resolver, tmp_path):
        options = DocumentOptions(filename=str(tmp_path / "report.pdf"), footer_logo_url="missing-footer.png")

        result = await generate_pdf(CONTENT, options, resolver=resolver)

        assert isinstance(result, GenerationResult)
        assert result.output_path.read_bytes().startswith(b"%PDF")
        assert result.page_count == result.layout.page_count
        assert [d.kind for d in result.diagnostics] == ["footer-logo"]

    def test_render_to_pdf_sync(self, resolver, tmp_path):
        target = tmp_path / "sync.pdf"

        result = render_to_pdf(CONTENT, resolver=resolver, output_path=target)

        assert result.output_path == target
        assert target.exists()
