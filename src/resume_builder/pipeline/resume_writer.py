"""Resume Writer - generates a tailored resume in Markdown."""

from __future__ import annotations

import logging

from resume_builder.clients.llm_client import LLMClient
from resume_builder.models.generation import GenerationRequest, GenerationResult
from resume_builder.pipeline.feedback import format_prior_failures

logger = logging.getLogger(__name__)

RESUME_RULES = """\
You are an expert resume writer specializing in ATS-compatible resumes. Using the
master resume and the target job below, write a tailored resume.

Rules:
1. Output plain Markdown text only. Do not wrap the output in code fences.
2. Use "#" for the name, "##" for section headings, "###" for entries, and "- " for bullets.
3. The summary may be rephrased to fit the job. Every other section may only reuse
   content that is present in the master resume. Do not add skills, technologies,
   employers, dates, projects, achievements or certifications.
4. Omit any section for which the master resume has no relevant content. Never pad
   a section.
5. Copy the contact information formatting exactly as it appears in the master resume.
6. When a professional experience entry has a single achievement, write it as a plain
   paragraph, not as a one-item bullet list.
7. Use keywords from the job only where the master resume supports them."""


class ResumeWriter:
    def __init__(self, llm: LLMClient):
        self.llm = llm

    def build_prompt(self, request: GenerationRequest) -> str:
        parts = [
            RESUME_RULES,
            f"## Master resume\n{request.source_text}",
            f"## Target job\n{request.target_context}",
        ]
        feedback = format_prior_failures(request.prior_failure_reasons)
        if feedback:
            parts.append(feedback)
        parts.append("Write the tailored resume in Markdown below:")
        return "\n\n".join(parts)

    async def write(self, request: GenerationRequest) -> GenerationResult:
        """Generate one resume draft for the given attempt."""
        logger.info("Writing resume (attempt %d)", request.attempt_number)
        return await self.llm.generate(self.build_prompt(request))
