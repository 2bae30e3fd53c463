"""Cover Letter Writer - generates a plain-text cover letter."""

from __future__ import annotations

import logging

from resume_builder.clients.llm_client import LLMClient
from resume_builder.models.generation import GenerationRequest, GenerationResult
from resume_builder.pipeline.feedback import format_prior_failures

logger = logging.getLogger(__name__)

COVER_LETTER_RULES = """\
You are an experienced career coach. Write a concise, professional cover letter for
the target job using only the experience in the master resume.

Rules:
1. Output plain text only: no Markdown headings, no code fences.
2. Keep it to three or four short paragraphs.
3. Mention only skills, technologies, employers, years of experience, projects,
   achievements and certifications that appear in the master resume.
4. Do not claim experience the master resume does not show, even if the job asks for it."""

# Appended to the first draft when exercising the rejection path.
FABRICATED_CLAIM = (
    "In addition, I hold a PhD in Quantum Computing from MIT and have led "
    "a 40-person Rust team for over fifteen years."
)


class CoverLetterWriter:
    def __init__(self, llm: LLMClient, *, inject_fabrication: bool = False):
        self.llm = llm
        self.inject_fabrication = inject_fabrication

    def build_prompt(self, request: GenerationRequest) -> str:
        parts = [
            COVER_LETTER_RULES,
            f"## Master resume\n{request.source_text}",
            f"## Target job\n{request.target_context}",
        ]
        feedback = format_prior_failures(request.prior_failure_reasons)
        if feedback:
            parts.append(feedback)
        parts.append("Write the cover letter below:")
        return "\n\n".join(parts)

    async def write(self, request: GenerationRequest) -> GenerationResult:
        """Generate one cover letter draft for the given attempt."""
        logger.info("Writing cover letter (attempt %d)", request.attempt_number)
        result = await self.llm.generate(self.build_prompt(request))
        if self.inject_fabrication and request.attempt_number == 1:
            logger.warning("Injecting a fabricated claim into cover letter attempt 1")
            result = result.model_copy(update={"text": f"{result.text}\n\n{FABRICATED_CLAIM}"})
        return result
