"""Pydantic models for generation attempts."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class DocumentKind(str, Enum):
    RESUME = "resume"
    COVER_LETTER = "cover-letter"
    JOB_SUMMARY = "job-summary"


class GenerationRequest(BaseModel):
    """Input for one generation attempt. Built fresh for every attempt."""

    source_text: str
    target_context: str  # job description or role string
    prior_failure_reasons: list[str] = Field(default_factory=list)
    attempt_number: int = 1

    model_config = {"frozen": True}


class GenerationResult(BaseModel):
    """Completion text with fences and comment lines removed."""

    text: str
    raw_text: str = ""
    input_tokens: int = 0
    output_tokens: int = 0
