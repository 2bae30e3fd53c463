"""Usage logging data models."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class UsageLog(BaseModel):
    """One document generation within a run."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    run_id: str = "anonymous"
    timestamp: datetime = Field(default_factory=datetime.now)
    kind: str  # "resume" | "cover-letter"
    company_name: str | None = None
    role: str | None = None
    model: str | None = None
    attempts: int = 0
    elapsed_seconds: float = 0.0
    input_tokens: int = 0
    output_tokens: int = 0
    success: bool = True
    error_message: str | None = None
