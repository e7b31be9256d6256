"""Tests for LayoutEngine: pagination properties and header/footer policies."""

import pytest

from pageflow.engine import LayoutEngine, LayoutValidator
from pageflow.engine.handlers import NodeHandler
from pageflow.export import LayoutJSONExporter
from pageflow.media import PhysicalImage
from pageflow.models import ContentNode, NodeKind


def short_paragraphs(count):
    return [ContentNode.paragraph(f"Paragraph {n}") for n in range(count)]


def mixed_document():
    children = [ContentNode.heading(1, "Annual report")]
    for n in range(12):
        children.append(ContentNode.heading(2, f"Section {n}"))
        children.append(ContentNode.paragraph(" ".join(["layout"] * (40 + 10 * n))))
        if n % 3 == 0:
            children.append(ContentNode.image("chart:300x200", float_side="left" if n % 2 else "right"))
        children.append(ContentNode.list_of([f"Point {i}" for i in range(n % 5)], ordered=bool(n % 2)))
    return ContentNode.container(*children)


class TestLayoutEngine:
    """Test suite for LayoutEngine."""

    @pytest.mark.asyncio
    async def test_empty_document_has_one_page(self, engine_factory):
        result = await engine_factory().layout(ContentNode.container())

        assert result.page_count == 1
        assert result.pages[0].instructions == []

    @pytest.mark.asyncio
    async def test_layout_terminates_and_stays_valid(self, engine_factory):
        result = await engine_factory(header_text="Report", header_policy="all").layout(mixed_document())

        assert result.page_count > 1
        is_valid, errors, warnings = LayoutValidator(result).validate()
        assert is_valid, errors
        assert warnings == []

    @pytest.mark.asyncio
    async def test_no_blank_pages(self, engine_factory):
        result = await engine_factory().layout(ContentNode.container(*short_paragraphs(120)))

        assert result.page_count >= 3
        assert all(page.in_band("body") for page in result.pages)

    @pytest.mark.asyncio
    async def test_header_on_first_page_only(self, engine_factory):
        engine = engine_factory(header_policy="first", footer_policy="all", header_text="Report")

        result = await engine.layout(ContentNode.container(*short_paragraphs(120)))

        assert result.page_count >= 3
        assert result.pages[0].in_band("header")
        assert all(not page.in_band("header") for page in result.pages[1:])
        assert all(page.in_band("footer") for page in result.pages)

    @pytest.mark.asyncio
    async def test_footer_except_first_page(self, engine_factory):
        engine = engine_factory(footer_policy="all-except-first")

        result = await engine.layout(ContentNode.container(*short_paragraphs(60)))

        labels = [[i.text for i in page.in_band("footer")] for page in result.pages]
        assert labels[0] == []
        assert labels[1:] == [[f"Page {n}"] for n in range(2, result.page_count + 1)]

    @pytest.mark.asyncio
    async def test_bands_precede_body_on_each_page(self, engine_factory):
        engine = engine_factory(header_policy="all", footer_policy="all", header_text="Report")

        result = await engine.layout(ContentNode.container(*short_paragraphs(60)))

        for page in result.pages:
            bands = [instr.band for instr in page.instructions]
            first_body = bands.index("body")
            assert set(bands[:first_body]) == {"header", "footer"}
            assert set(bands[first_body:]) == {"body"}

    @pytest.mark.asyncio
    async def test_tall_image_moves_to_next_page(self, engine_factory):
        """Heading, 500 words, then an image that fits a page but not the rest of page 2."""
        content = ContentNode.container(
            ContentNode.heading(1, "Report"),
            ContentNode.paragraph(" ".join(["layout"] * 500)),
            ContentNode.image("tall:300x760"),
        )

        result = await engine_factory().layout(content)

        assert result.page_count == 3
        page_two_text = [i for i in result.pages[1].in_band("body") if i.kind == "text"]
        assert len(page_two_text) == 2
        (image,) = result.pages[2].in_band("body")
        assert image.kind == "image"
        assert image.y == 40.0
        assert image.height <= result.geometry.content_height

    @pytest.mark.asyncio
    async def test_layout_is_deterministic(self, engine_factory):
        exporter = LayoutJSONExporter()

        first = await engine_factory(header_text="Report", header_policy="all").layout(mixed_document())
        second = await engine_factory(header_text="Report", header_policy="all").layout(mixed_document())

        assert exporter.to_json(first) == exporter.to_json(second)

    @pytest.mark.asyncio
    async def test_logos_resolved_once(self, engine_factory, resolver):
        engine = engine_factory(
            header_policy="all",
            footer_policy="all",
            header_logo="logo:64x64",
            footer_logo="footer:400x100",
        )

        result = await engine.layout(ContentNode.container(*short_paragraphs(60)))

        assert result.page_count > 1
        assert resolver.calls.count("logo:64x64") == 1
        assert resolver.calls.count("footer:400x100") == 1
        for page in result.pages:
            assert [i.kind for i in page.in_band("header")] == ["image", "line"]
            assert [i.kind for i in page.in_band("footer")] == ["image", "text"]

    @pytest.mark.asyncio
    async def test_decoded_logo_is_used_directly(self, engine_factory, resolver, png_bytes):
        logo = PhysicalImage(data=png_bytes(10, 10), width=10, height=10, source="inline")
        engine = engine_factory(header_policy="all", header_logo=logo)

        result = await engine.layout(ContentNode.container())

        assert resolver.calls == []
        assert result.pages[0].in_band("header")[0].image is logo

    @pytest.mark.asyncio
    async def test_failed_header_logo_falls_back_to_title(self, engine_factory):
        engine = engine_factory(header_policy="all", header_text="Report", header_logo="missing-logo.png")

        result = await engine.layout(ContentNode.container(ContentNode.paragraph("Body")))

        title, rule = result.pages[0].in_band("header")
        assert title.align == "center"
        assert rule.kind == "line"
        assert [d.kind for d in result.diagnostics] == ["header-logo"]

    @pytest.mark.asyncio
    async def test_failed_footer_logo_keeps_label(self, engine_factory):
        engine = engine_factory(footer_policy="all", footer_logo="missing-footer.png")

        result = await engine.layout(ContentNode.container())

        (label,) = result.pages[0].in_band("footer")
        assert label.y == 287.0
        assert [d.kind for d in result.diagnostics] == ["footer-logo"]

    @pytest.mark.asyncio
    async def test_float_does_not_cross_page_break(self, engine_factory):
        filler = short_paragraphs(16)
        content = ContentNode.container(
            *filler,
            ContentNode.image("photo:250x250", float_side="left"),
            ContentNode.paragraph(" ".join(["layout"] * 200)),
        )

        result = await engine_factory().layout(content)

        assert result.page_count == 2
        for line in [i for i in result.pages[1].in_band("body") if i.kind == "text"]:
            assert line.x == 15.0

    @pytest.mark.asyncio
    async def test_register_handler(self, engine_factory):
        seen = []

        class RecordingHandler(NodeHandler):
            async def layout(self, node, ctx):
                seen.append((node.text, ctx.pagination.page_number))

        engine = engine_factory()
        engine.register_handler(NodeKind.PARAGRAPH, RecordingHandler())

        await engine.layout(ContentNode.container(ContentNode.paragraph("a"), ContentNode.paragraph("b")))

        assert seen == [("a", 1), ("b", 1)]

    @pytest.mark.asyncio
    async def test_engine_reusable_across_runs(self, engine_factory):
        engine = engine_factory()

        first = await engine.layout(ContentNode.container(*short_paragraphs(60)))
        second = await engine.layout(ContentNode.container(ContentNode.paragraph("Only")))

        assert first.page_count > 1
        assert second.page_count == 1

    def test_default_geometry(self):
        engine = LayoutEngine()

        assert engine.geometry.content_start_y == 40.0
        assert engine.header_policy.rule == "all"
