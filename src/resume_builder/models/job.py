"""Pydantic models for the job summary step."""

from __future__ import annotations

from pydantic import BaseModel


class JobSummary(BaseModel):
    company: str = "company"
    role: str = "role"
    summary: str = ""
