"""Pydantic model for the validator's verdict."""

from __future__ import annotations

from pydantic import BaseModel, model_validator


class ValidationVerdict(BaseModel):
    """Either valid, or invalid with the validator's explanation."""

    valid: bool
    reason: str | None = None
    input_tokens: int = 0
    output_tokens: int = 0

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _reason_only_when_invalid(self) -> "ValidationVerdict":
        if self.valid and self.reason is not None:
            raise ValueError("a valid verdict carries no reason")
        if not self.valid and not self.reason:
            raise ValueError("an invalid verdict needs a reason")
        return self

    @classmethod
    def accept(cls) -> "ValidationVerdict":
        return cls(valid=True)

    @classmethod
    def reject(cls, reason: str) -> "ValidationVerdict":
        return cls(valid=False, reason=reason)
