"""Tests for page layout and footer stamping."""

import pytest

from resume_builder.export.layout import (
    LayoutEngine,
    TextMeasurer,
    safe_text,
    stamp_footers,
    to_fpdf_markdown,
)
from resume_builder.export.markdown_blocks import Span, parse_blocks
from resume_builder.export.styles import MARGIN, PAGE_HEIGHT, PAGE_WIDTH, STYLES

PRINTABLE_BOTTOM = PAGE_HEIGHT - MARGIN - 30

LOREM = (
    "Designed and operated event-driven services that processed customer orders, "
    "coordinated with product teams on roadmap planning, and mentored new engineers "
    "through code review and pairing sessions across several quarters."
)


@pytest.fixture(scope="module")
def measurer():
    return TextMeasurer()


def _layout(markdown, measurer):
    return LayoutEngine(measurer).layout(parse_blocks(markdown))


def _long_document(sections=12):
    parts = ["# Jane Doe"]
    for i in range(sections):
        parts.append(f"## Section {i}")
        parts.append(LOREM)
        parts.append(f"- Bullet point for section {i}")
    return "\n".join(parts)


class TestSinglePage:
    def test_heading_and_paragraph(self, measurer):
        doc = _layout("# Jane Doe\nBackend engineer.", measurer)

        assert doc.page_count == 1
        kinds = [b.kind for b in doc.pages[0].blocks]
        assert kinds == ["h1", "paragraph"]
        heading, paragraph = doc.pages[0].blocks
        assert heading.lines[0].x == MARGIN
        assert heading.lines[0].y == MARGIN
        assert heading.lines[0].text == "Jane Doe"
        assert paragraph.top >= heading.bottom
        assert doc.pages[0].content_height > 0

    def test_empty_document_has_one_page(self, measurer):
        doc = _layout("", measurer)
        assert doc.page_count == 1
        assert doc.pages[0].blocks == []

    def test_long_paragraph_wraps_within_margins(self, measurer):
        doc = _layout(LOREM, measurer)
        block = doc.pages[0].blocks[0]
        assert len(block.lines) > 1
        assert block.align == "J"
        for line in block.lines:
            assert line.x == MARGIN
            assert line.x + line.width == pytest.approx(PAGE_WIDTH - MARGIN)
        ys = [line.y for line in block.lines]
        assert ys == sorted(set(ys))

    def test_wrapped_lines_keep_every_word(self, measurer):
        doc = _layout(LOREM, measurer)
        lines = doc.pages[0].blocks[0].lines
        assert " ".join(line.text for line in lines).split() == LOREM.split()

    def test_overlong_word_is_split(self, measurer):
        doc = _layout("x" * 400, measurer)
        lines = doc.pages[0].blocks[0].lines
        assert len(lines) > 1
        assert "".join(line.text for line in lines) == "x" * 400

    def test_heading_markers_stay_literal(self, measurer):
        doc = _layout("## **Skills** -- core", measurer)
        heading = doc.pages[0].blocks[0]
        assert not heading.markdown
        assert heading.lines[0].text == "**Skills** -- core"


class TestBullets:
    def test_bullet_with_bold_and_link(self, measurer):
        doc = _layout("- **Bold** item [link](http://x.test)", measurer)

        blocks = doc.pages[0].blocks
        assert [b.kind for b in blocks] == ["bullet"]
        assert blocks[0].markdown
        lines = blocks[0].lines
        assert len(lines) == 1
        assert lines[0].text.startswith("- ")
        assert "**Bold**" in lines[0].text
        assert "[link](http://x.test)" in lines[0].text

    def test_bullet_is_indented(self, measurer):
        doc = _layout("- item", measurer)
        line = doc.pages[0].blocks[0].lines[0]
        assert line.x == MARGIN + 10
        assert line.width == pytest.approx(PAGE_WIDTH - 2 * MARGIN - 10)

    def test_wrapped_bullet_keeps_indent(self, measurer):
        doc = _layout(f"- {LOREM}", measurer)
        lines = doc.pages[0].blocks[0].lines
        assert len(lines) > 1
        assert {line.x for line in lines} == {MARGIN + 10}


class TestFpdfMarkdown:
    def test_bold_and_link(self):
        spans = [Span("Built "), Span("Go", bold=True), Span(" see "), Span("docs", url="https://x.test")]
        assert to_fpdf_markdown(spans) == "Built **Go** see [docs](https://x.test)"

    def test_literal_markers_are_escaped(self):
        assert to_fpdf_markdown([Span("2019 -- 2021 __init__")]) == "2019 \\-- 2021 \\__init\\__"

    def test_empty_spans_are_dropped(self):
        assert to_fpdf_markdown([Span(""), Span("x", bold=True)]) == "**x**"

    def test_dashes_in_paragraph_survive_wrapping(self, measurer):
        doc = _layout("Acme 2019 -- 2021", measurer)
        assert doc.pages[0].blocks[0].lines[0].text == "Acme 2019 \\-- 2021"


class TestPagination:
    def test_long_document_spans_pages(self, measurer):
        doc = _layout(_long_document(), measurer)
        assert doc.page_count > 1

    def test_content_stays_above_printable_bottom(self, measurer):
        doc = _layout(_long_document(), measurer)
        for page in doc.pages:
            for block in page.blocks:
                for line in block.lines:
                    assert line.y + line.height <= PRINTABLE_BOTTOM + 1e-6

    def test_section_headings_never_end_a_page(self, measurer):
        doc = _layout(_long_document(20), measurer)
        for page in doc.pages[:-1]:
            assert page.blocks[-1].kind not in ("h2", "h3")

    def test_heading_breaks_when_lookahead_does_not_fit(self, measurer):
        engine = LayoutEngine(measurer)
        doc = engine.layout(parse_blocks(_long_document(20)))
        body_line = STYLES["body"].line_height
        h2 = STYLES["h2"]
        for page, following in zip(doc.pages, doc.pages[1:]):
            first = following.blocks[0]
            if first.kind != "h2":
                continue
            previous_bottom = max(b.bottom for b in page.blocks)
            needed = engine.heading_height(first.lines[0].text, h2) + 3 * body_line
            gap = STYLES["body"].paragraph_gap_pt
            assert previous_bottom + gap + needed > PRINTABLE_BOTTOM

    def test_blocks_flow_top_to_bottom(self, measurer):
        doc = _layout(_long_document(), measurer)
        for page in doc.pages:
            tops = [b.top for b in page.blocks]
            assert tops == sorted(tops)
            assert tops[0] == MARGIN


class TestFooters:
    def test_every_page_gets_page_i_of_n(self, measurer):
        doc = stamp_footers(_layout(_long_document(), measurer))

        assert doc.stamped
        total = doc.page_count
        texts = [p.footer.lines[0].text for p in doc.pages]
        assert texts == [f"Page {i} of {total}" for i in range(1, total + 1)]

    def test_footer_is_centred_in_bottom_margin(self, measurer):
        doc = stamp_footers(_layout("# Jane", measurer))
        footer = doc.pages[0].footer
        line = footer.lines[0]
        assert footer.align == "C"
        assert line.x + line.width / 2 == pytest.approx(PAGE_WIDTH / 2)
        assert line.y == PAGE_HEIGHT - MARGIN / 2
        assert footer.style == STYLES["footer"]

    def test_stamping_does_not_mutate_input(self, measurer):
        laid_out = _layout("# Jane", measurer)
        stamp_footers(laid_out)
        assert not laid_out.stamped
        assert laid_out.pages[0].footer is None


class TestSafeText:
    def test_typographic_punctuation(self):
        assert safe_text("“Hi” – it’s") == '"Hi" - it\'s'

    def test_unencodable_characters_are_replaced(self):
        assert safe_text("Go ✓") == "Go ?"
