"""Persist validated application documents."""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path

from resume_builder.export.pdf_renderer import write_pdf
from resume_builder.models.generation import DocumentKind
from resume_builder.output.naming import application_folder, file_name
from resume_builder.pipeline.orchestrator import ApplicationResult

logger = logging.getLogger(__name__)


def save_application(
    result: ApplicationResult,
    output_dir: str | Path,
    person: str,
    on: date | None = None,
) -> list[Path]:
    """Write every document that passed validation; return the written paths.

    Documents whose generation failed are skipped, never written in part.

    Raises:
        RenderError: the resume PDF could not be written
    """
    on = on or date.today()
    job = result.job
    folder = application_folder(output_dir, job.role, job.company, on)
    folder.mkdir(parents=True, exist_ok=True)

    def path_for(kind: DocumentKind, ext: str) -> Path:
        return folder / file_name(kind.value, person, job.role, job.company, ext, on)

    written: list[Path] = []
    if result.summary_error is None:
        summary_path = path_for(DocumentKind.JOB_SUMMARY, "txt")
        summary_path.write_text(job.summary, encoding="utf-8")
        written.append(summary_path)

    resume = result.documents.get(DocumentKind.RESUME)
    if resume is not None and resume.succeeded:
        md_path = path_for(DocumentKind.RESUME, "md")
        md_path.write_text(resume.text, encoding="utf-8")
        written.append(md_path)
        written.append(write_pdf(resume.text, path_for(DocumentKind.RESUME, "pdf")))

    cover_letter = result.documents.get(DocumentKind.COVER_LETTER)
    if cover_letter is not None and cover_letter.succeeded:
        letter_path = path_for(DocumentKind.COVER_LETTER, "txt")
        letter_path.write_text(cover_letter.text, encoding="utf-8")
        written.append(letter_path)

    for path in written:
        logger.info("Saved %s", path)
    return written
