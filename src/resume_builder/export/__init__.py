"""PDF export module for resume-builder."""
from resume_builder.export.pdf_renderer import (
    convert_markdown_file,
    render,
    render_pdf,
    write_pdf,
)

__all__ = ["render", "render_pdf", "write_pdf", "convert_markdown_file"]
