"""Content Validator - checks a generated draft against the master resume."""

from __future__ import annotations

import logging
import re

from resume_builder.clients.llm_client import LLMClient
from resume_builder.errors import ProtocolError
from resume_builder.models.generation import DocumentKind
from resume_builder.models.verdict import ValidationVerdict

logger = logging.getLogger(__name__)

VALIDATION_RULES = """\
You are a strict fact checker. Compare the generated {kind} with the master resume.

Flag ONLY fabricated factual claims: content in the generated {kind} that the
master resume does not support. Fabrications include:
- technologies, tools or skills that the master resume does not mention
- years of experience that are not stated or derivable from the master resume
- projects, achievements, metrics or certifications that are not in the master resume
- employers, titles or dates that differ from the master resume

Do NOT flag:
- omitted content
- reordered sections or entries
- rephrased wording that keeps the same facts
- generic alignment statements such as "I am applying for the X role"

Answer with exactly one of:
VALID
INVALID: <one or two sentences naming each unsupported claim>"""

_VALID = re.compile(r"^VALID\b")
_INVALID_PREFIX = "INVALID:"
_MISSING_REASON = "the validator flagged the draft without naming the unsupported claim"


def parse_verdict(response_text: str) -> ValidationVerdict:
    """Parse a validator reply into a verdict.

    Raises:
        ProtocolError: the reply starts with neither "VALID" nor "INVALID:"
    """
    text = response_text.strip()
    if text.startswith(_INVALID_PREFIX):
        reason = text[len(_INVALID_PREFIX):].strip()
        return ValidationVerdict.reject(reason or _MISSING_REASON)
    if _VALID.match(text):
        return ValidationVerdict.accept()
    raise ProtocolError("Validator reply did not start with VALID or INVALID:", response_text)


class ContentValidator:
    def __init__(self, llm: LLMClient):
        self.llm = llm

    def build_prompt(self, master_text: str, candidate_text: str, kind: DocumentKind) -> str:
        label = kind.value.replace("-", " ")
        return "\n\n".join([
            VALIDATION_RULES.format(kind=label),
            f"## Master resume\n{master_text}",
            f"## Generated {label}\n{candidate_text}",
        ])

    async def validate(
        self,
        master_text: str,
        candidate_text: str,
        kind: DocumentKind,
    ) -> ValidationVerdict:
        """Ask the service whether the draft contains fabricated claims.

        The returned verdict carries the token usage of the validation call.
        """
        logger.info("Validating %s against master resume...", kind.value)
        result = await self.llm.generate(self.build_prompt(master_text, candidate_text, kind))
        try:
            verdict = parse_verdict(result.text)
        except ProtocolError as e:
            e.input_tokens, e.output_tokens = result.input_tokens, result.output_tokens
            raise
        verdict = verdict.model_copy(
            update={"input_tokens": result.input_tokens, "output_tokens": result.output_tokens}
        )
        if verdict.valid:
            logger.info("Validator accepted %s", kind.value)
        else:
            logger.warning("Validator rejected %s: %s", kind.value, verdict.reason)
        return verdict
