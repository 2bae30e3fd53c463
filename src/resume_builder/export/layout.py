"""Lay out parsed Markdown blocks onto US Letter pages.

Line breaking and text heights come from fpdf2's ``multi_cell`` dry run;
this module only decides where each line lands. Layout is buffered: every
block is placed first, then stamp_footers() walks the finished pages and
adds "Page i of N", because N is only known once the last block has been
placed.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, replace

from fpdf import FPDF
from fpdf.enums import MethodReturnValue

from resume_builder.export.markdown_blocks import (
    Block,
    Bullet,
    Heading,
    Paragraph,
    Span,
    parse_spans,
)
from resume_builder.export.styles import (
    BULLET_INDENT,
    BULLET_MARKER,
    FONT_FAMILY,
    FOOTER_RESERVE,
    LINE_GAP,
    LOOKAHEAD_LINES,
    MARGIN,
    PAGE_HEIGHT,
    PAGE_WIDTH,
    STYLES,
    StyleRule,
)

logger = logging.getLogger(__name__)

_FPDF_MARKERS = re.compile(r"(\*\*|__|--|~~)")
_TYPOGRAPHIC = str.maketrans({
    "\u2018": "'", "\u2019": "'", "\u201c": '"', "\u201d": '"',
    "\u2013": "-", "\u2014": "-", "\u2022": "-", "\u2026": "...", "\u00a0": " ",
})


def safe_text(text: str) -> str:
    """Map text onto what the core Helvetica font can encode."""
    text = text.translate(_TYPOGRAPHIC)
    try:
        text.encode("latin-1")
        return text
    except UnicodeEncodeError:
        return text.encode("latin-1", errors="replace").decode("latin-1")


def to_fpdf_markdown(spans: list[Span]) -> str:
    """Serialize spans into fpdf2's markdown: **bold** and [text](url).

    Literal marker pairs in the text are backslash-escaped so fpdf2 does not
    read "2019 -- 2021" as underlined.
    """
    parts = []
    for span in spans:
        if not span.text:
            continue
        text = _FPDF_MARKERS.sub(r"\\\1", span.text)
        if span.url:
            parts.append(f"[{text}]({span.url})")
        elif span.bold:
            parts.append(f"**{text}**")
        else:
            parts.append(text)
    return safe_text("".join(parts))


class ResumePDF(FPDF):
    """fpdf2 document in points on US Letter; links keep the link colour, no underline."""

    MARKDOWN_LINK_UNDERLINE = False
    MARKDOWN_LINK_COLOR = STYLES["link"].color_hex

    def __init__(self):
        super().__init__(unit="pt", format="letter")
        self.set_margins(MARGIN, MARGIN, MARGIN)
        self.set_auto_page_break(False, margin=MARGIN)
        self.c_margin = 0

    def use_style(self, style: StyleRule) -> None:
        self.set_font(FONT_FAMILY, style=style.font_style, size=style.size_pt)
        self.set_text_color(*style.rgb)


@dataclass
class PositionedLine:
    """One wrapped line. Body and bullet text is fpdf2 markdown, headings are plain."""

    text: str
    x: float
    y: float
    width: float
    height: float


@dataclass
class TextBlock:
    kind: str  # h1, h2, h3, bullet, paragraph, footer
    style: StyleRule
    lines: list[PositionedLine] = field(default_factory=list)
    top: float = 0.0
    bottom: float = 0.0
    align: str = "L"
    markdown: bool = False


@dataclass
class Page:
    index: int
    blocks: list[TextBlock] = field(default_factory=list)
    content_height: float = 0.0
    footer: TextBlock | None = None


@dataclass
class RenderedDocument:
    pages: list[Page]
    stamped: bool = False

    @property
    def page_count(self) -> int:
        return len(self.pages)


class TextMeasurer:
    """Wrapped lines and heights from fpdf2, without drawing anything."""

    def __init__(self):
        self._pdf = ResumePDF()
        self._pdf.add_page()

    def lines(self, text: str, style: StyleRule, width: float, *, markdown: bool = False, align: str = "L") -> list[str]:
        self._pdf.use_style(style)
        return self._pdf.multi_cell(
            width, style.line_height + LINE_GAP, text,
            align=align, markdown=markdown, dry_run=True, output=MethodReturnValue.LINES,
        )

    def height(self, text: str, style: StyleRule, width: float) -> float:
        self._pdf.use_style(style)
        return self._pdf.multi_cell(
            width, style.line_height + LINE_GAP, safe_text(text),
            align="L", dry_run=True, output=MethodReturnValue.HEIGHT,
        )


class LayoutEngine:
    """Place blocks top to bottom, breaking pages at the printable bottom."""

    def __init__(self, measurer: TextMeasurer | None = None, styles: dict[str, StyleRule] | None = None):
        self.measurer = measurer or TextMeasurer()
        self.styles = styles or STYLES
        self.top = MARGIN
        self.left = MARGIN
        self.content_width = PAGE_WIDTH - 2 * MARGIN
        self.printable_bottom = PAGE_HEIGHT - MARGIN - FOOTER_RESERVE
        self.pages: list[Page] = []
        self.y = self.top

    def layout(self, blocks: list[Block]) -> RenderedDocument:
        self.pages = [Page(index=0)]
        self.y = self.top
        body = self.styles["body"]
        for block in blocks:
            if isinstance(block, Heading):
                self._place_heading(block)
            elif isinstance(block, Bullet):
                text = to_fpdf_markdown(parse_spans(f"{BULLET_MARKER} {block.text}"))
                self._place("bullet", text, body, indent=BULLET_INDENT, align="L", markdown=True,
                            paragraph_gap=body.paragraph_gap_pt)
            elif isinstance(block, Paragraph):
                text = to_fpdf_markdown(parse_spans(block.text))
                self._place("paragraph", text, body, indent=0.0, align="J", markdown=True,
                            paragraph_gap=body.paragraph_gap_pt)

        for page in self.pages:
            if page.blocks:
                page.content_height = max(b.bottom for b in page.blocks) - self.top
        logger.debug("Laid out %d block(s) on %d page(s)", len(blocks), len(self.pages))
        return RenderedDocument(pages=self.pages)

    def heading_height(self, text: str, style: StyleRule) -> float:
        return self.measurer.height(text, style, self.content_width)

    def _place_heading(self, heading: Heading) -> None:
        style = self.styles[f"h{heading.level}"]
        if heading.level in (2, 3):
            needed = self.heading_height(heading.text, style) + LOOKAHEAD_LINES * self.styles["body"].line_height
            if self.y > self.top and self.y + needed > self.printable_bottom:
                logger.debug("Breaking page before heading %r", heading.text)
                self._new_page()
            if style.pre_gap_pt and self.y > self.top:
                self.y += style.pre_gap_pt
        self._place(f"h{heading.level}", safe_text(heading.text), style, indent=0.0, align="L",
                    markdown=False, paragraph_gap=style.paragraph_gap_pt)

    def _place(
        self,
        kind: str,
        text: str,
        style: StyleRule,
        *,
        indent: float,
        align: str,
        markdown: bool,
        paragraph_gap: float,
    ) -> None:
        width = self.content_width - indent
        wrapped = self.measurer.lines(text, style, width, markdown=markdown, align=align)
        block = None
        for line in wrapped:
            if not line:
                continue
            if self.y > self.top and self.y + style.line_height > self.printable_bottom:
                self._new_page()
                block = None
            if block is None:
                block = TextBlock(kind=kind, style=style, top=self.y, bottom=self.y,
                                  align=align, markdown=markdown)
                self.pages[-1].blocks.append(block)
            block.lines.append(PositionedLine(line, self.left + indent, self.y, width, style.line_height))
            self.y += style.line_height + LINE_GAP
            block.bottom = self.y
        if block is not None:
            self.y += paragraph_gap

    def _new_page(self) -> None:
        self.pages.append(Page(index=len(self.pages)))
        self.y = self.top


def stamp_footers(document: RenderedDocument) -> RenderedDocument:
    """Add "Page i of N" to every page of an already paginated document.

    The footer spans the full page width, centred, halfway down the bottom
    margin band.
    """
    style = STYLES["footer"]
    total = document.page_count
    y = PAGE_HEIGHT - MARGIN / 2
    pages = []
    for page in document.pages:
        line = PositionedLine(f"Page {page.index + 1} of {total}", 0.0, y, PAGE_WIDTH, style.line_height)
        footer = TextBlock(kind="footer", style=style, lines=[line], top=y,
                           bottom=y + style.line_height, align="C")
        pages.append(replace(page, footer=footer))
    return RenderedDocument(pages=pages, stamped=True)
