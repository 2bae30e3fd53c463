"""Render the supported Markdown subset to a paginated PDF with fpdf2."""

from __future__ import annotations

import logging
from pathlib import Path

from fpdf.errors import FPDFException

from resume_builder.errors import InputError, RenderError
from resume_builder.export.layout import (
    LayoutEngine,
    RenderedDocument,
    ResumePDF,
    TextBlock,
    TextMeasurer,
    stamp_footers,
)
from resume_builder.export.markdown_blocks import parse_blocks
from resume_builder.export.styles import LINE_GAP

logger = logging.getLogger(__name__)


def render(markdown_text: str, measurer: TextMeasurer | None = None) -> RenderedDocument:
    """Parse and lay out Markdown. Footers are not stamped yet."""
    return LayoutEngine(measurer).layout(parse_blocks(markdown_text))


def render_pdf(markdown_text: str) -> bytes:
    """Convert Markdown to finished PDF bytes."""
    return paint(stamp_footers(render(markdown_text)))


def paint(document: RenderedDocument) -> bytes:
    """Draw a stamped document and return the PDF bytes."""
    if not document.stamped:
        raise RenderError("Footers must be stamped before painting")
    pdf = ResumePDF()
    try:
        for page in document.pages:
            pdf.add_page()
            for block in page.blocks:
                _draw_block(pdf, block)
            if page.footer is not None:
                _draw_block(pdf, page.footer)
        return bytes(pdf.output())
    except FPDFException as e:
        raise RenderError(f"PDF generation failed: {e}") from e


def _draw_block(pdf: ResumePDF, block: TextBlock) -> None:
    """Draw one block's lines on the current page.

    Justified text is handed back as a single string so fpdf2 spreads every
    line but the last; it wraps at the same points it reported during layout.
    """
    if not block.lines:
        return
    first = block.lines[0]
    pdf.use_style(block.style)
    pdf.set_xy(first.x, first.y)
    separator = " " if block.align == "J" else "\n"
    pdf.multi_cell(
        first.width,
        first.height + LINE_GAP,
        separator.join(line.text for line in block.lines),
        align=block.align,
        markdown=block.markdown,
    )


def write_pdf(markdown_text: str, output_path: str | Path) -> Path:
    """Render Markdown and write the PDF file.

    Raises:
        RenderError: rendering or writing the file failed
    """
    output_path = Path(output_path)
    data = render_pdf(markdown_text)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(data)
    except OSError as e:
        raise RenderError(f"Could not write {output_path}: {e}") from e
    logger.info("Wrote %s (%d bytes)", output_path, len(data))
    return output_path


def convert_markdown_file(input_path: str | Path, output_path: str | Path | None = None) -> Path:
    """Convert a .md file to PDF; the default output swaps .md for .pdf.

    Raises:
        InputError: the input is missing or is not a .md file
        RenderError: rendering or writing the file failed
    """
    input_path = Path(input_path)
    if not input_path.exists():
        raise InputError(f"Input file '{input_path}' does not exist")
    if input_path.suffix != ".md":
        raise InputError("Input file must have .md extension")
    if output_path is None:
        output_path = input_path.with_suffix(".pdf")
    return write_pdf(input_path.read_text(encoding="utf-8"), output_path)
