"""Data models for the resume builder pipeline."""

from resume_builder.models.generation import (
    DocumentKind,
    GenerationRequest,
    GenerationResult,
)
from resume_builder.models.job import JobSummary
from resume_builder.models.verdict import ValidationVerdict

__all__ = [
    "DocumentKind",
    "GenerationRequest",
    "GenerationResult",
    "JobSummary",
    "ValidationVerdict",
]
