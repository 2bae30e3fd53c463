"""Main pipeline orchestrator - runs each document's generation independently."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

from resume_builder.clients.llm_client import LLMClient
from resume_builder.errors import GenerationExhaustedError, ServiceError, TransportError
from resume_builder.models.generation import DocumentKind
from resume_builder.models.job import JobSummary
from resume_builder.pipeline.content_validator import ContentValidator
from resume_builder.pipeline.cover_letter_writer import CoverLetterWriter
from resume_builder.pipeline.job_summarizer import JobSummarizer
from resume_builder.pipeline.resume_writer import ResumeWriter
from resume_builder.pipeline.retry_loop import RetryLoop

logger = logging.getLogger(__name__)


@dataclass
class DocumentOutcome:
    """Terminal result of one document's generation."""

    kind: DocumentKind
    text: str | None = None
    attempts: int = 0
    error: str | None = None
    input_tokens: int = 0
    output_tokens: int = 0
    elapsed_seconds: float = 0.0

    @property
    def succeeded(self) -> bool:
        return self.text is not None


@dataclass
class ApplicationResult:
    """Everything produced for one job application."""

    job: JobSummary
    documents: dict[DocumentKind, DocumentOutcome] = field(default_factory=dict)
    summary_error: str | None = None
    elapsed_seconds: float = 0.0

    @property
    def succeeded(self) -> bool:
        return self.summary_error is None and all(d.succeeded for d in self.documents.values())

    def errors(self) -> list[str]:
        errors = [f"job summary: {self.summary_error}"] if self.summary_error else []
        errors.extend(d.error for d in self.documents.values() if d.error)
        return errors


class ApplicationOrchestrator:
    """Summarize the job, then generate and validate each requested document."""

    def __init__(
        self,
        llm: LLMClient,
        *,
        max_attempts: int = 3,
        inject_fabrication: bool = False,
    ):
        self.summarizer = JobSummarizer(llm)
        self.resume_writer = ResumeWriter(llm)
        self.cover_letter_writer = CoverLetterWriter(llm, inject_fabrication=inject_fabrication)
        self.validator = ContentValidator(llm)
        self.max_attempts = max_attempts

    async def run(
        self,
        master_text: str,
        target_context: str,
        *,
        role: str | None = None,
        include_cover_letter: bool = False,
        on_phase: callable | None = None,
    ) -> ApplicationResult:
        """Run the full application pipeline.

        Args:
            master_text: The master resume, the only source of facts.
            target_context: Job description, or the role string when no
                description was supplied.
            role: Explicit role title; overrides the summarized one.
            include_cover_letter: Also generate a cover letter.
            on_phase: Optional callback(phase_name, detail) for progress.
        """
        start = time.monotonic()

        def _notify(phase: str, detail: str = ""):
            if on_phase:
                on_phase(phase, detail)

        _notify("summary", "Summarizing job description")
        summary_error = None
        try:
            job = await self.summarizer.summarize(target_context, role=role)
        except (TransportError, ServiceError) as e:
            logger.error("Job summary failed: %s", e)
            summary_error = str(e)
            job = JobSummary(role=role or "role", company="company")

        result = ApplicationResult(job=job, summary_error=summary_error)

        result.documents[DocumentKind.RESUME] = await self.generate_document(
            DocumentKind.RESUME, master_text, target_context, _notify,
        )
        if include_cover_letter:
            result.documents[DocumentKind.COVER_LETTER] = await self.generate_document(
                DocumentKind.COVER_LETTER, master_text, target_context, _notify,
            )

        result.elapsed_seconds = time.monotonic() - start
        _notify("done", f"Finished in {result.elapsed_seconds:.1f}s")
        return result

    async def generate_document(
        self,
        kind: DocumentKind,
        master_text: str,
        target_context: str,
        notify: callable,
    ) -> DocumentOutcome:
        """Run a fresh retry loop for one document kind.

        A failure is recorded on the outcome rather than raised so the
        other documents of the run still get generated.
        """
        write = (
            self.resume_writer.write
            if kind is DocumentKind.RESUME
            else self.cover_letter_writer.write
        )
        label = kind.value.replace("-", " ")

        def on_attempt(attempt: int, max_attempts: int) -> None:
            notify(kind.value, f"Generating {label} (attempt {attempt}/{max_attempts})")

        loop = RetryLoop(
            kind,
            write,
            self.validator,
            master_text,
            target_context,
            max_attempts=self.max_attempts,
            on_attempt=on_attempt,
        )
        start = time.monotonic()
        outcome = DocumentOutcome(kind=kind)
        try:
            succeeded = await loop.run()
            outcome.text = succeeded.text
            outcome.attempts = succeeded.attempts
        except GenerationExhaustedError as e:
            logger.error("%s", e)
            outcome.error = str(e)
            outcome.attempts = e.attempts
        outcome.input_tokens = loop.input_tokens
        outcome.output_tokens = loop.output_tokens
        outcome.elapsed_seconds = time.monotonic() - start
        return outcome
