"""Job Summarizer - extracts company, role and a short summary from a posting."""

from __future__ import annotations

import logging

from resume_builder.clients.llm_client import LLMClient
from resume_builder.models.job import JobSummary
from resume_builder.utils.text_cleaning import extract_json

logger = logging.getLogger(__name__)

SUMMARY_PROMPT = """\
Read the job posting below and respond with JSON only, in this shape:
{{
  "company": "hiring company name, or \\"unknown\\"",
  "role": "job title",
  "summary": "plain-text summary: responsibilities, required skills, nice-to-haves"
}}

Do not infer anything the posting does not state.

---
{posting}
---"""


class JobSummarizer:
    def __init__(self, llm: LLMClient):
        self.llm = llm

    async def summarize(self, posting: str, role: str | None = None) -> JobSummary:
        """Summarize a job posting. An explicit role overrides the extracted one."""
        result = await self.llm.generate(SUMMARY_PROMPT.format(posting=posting))
        try:
            data = extract_json(result.text)
        except ValueError:
            logger.warning("Job summary was not JSON; keeping it as plain text")
            data = {"summary": result.text}
        if not isinstance(data, dict):
            data = {"summary": str(data)}

        summary = JobSummary(**{k: str(v) for k, v in data.items() if k in JobSummary.model_fields and v})
        if role:
            summary = summary.model_copy(update={"role": role})
        logger.info("Job summary: %s at %s", summary.role, summary.company)
        return summary
