"""Exceptions raised by the generation pipeline and the PDF renderer."""

from __future__ import annotations


class ResumeBuilderError(Exception):
    """Base class for all resume-builder errors."""


class TransportError(ResumeBuilderError):
    """The generation service could not be reached (network, timeout)."""


class ServiceError(ResumeBuilderError):
    """The generation service answered, but not with a usable completion.

    Attributes:
        status_code: HTTP status of the response, if one was received
    """

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        if status_code is not None:
            message = f"{message} (HTTP {status_code})"
        super().__init__(message)


class ProtocolError(ResumeBuilderError):
    """The validator replied without a VALID / INVALID: prefix."""

    def __init__(self, message: str, response_text: str = ""):
        self.response_text = response_text
        # Tokens the unparseable reply cost; set by the validator.
        self.input_tokens = 0
        self.output_tokens = 0
        snippet = response_text[:200] + "..." if len(response_text) > 200 else response_text
        if snippet:
            message = f"{message}: {snippet!r}"
        super().__init__(message)


class ValidationFailure(ResumeBuilderError):
    """The validator flagged fabricated content in a draft."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class RenderError(ResumeBuilderError):
    """Writing the PDF document failed."""


class InputError(ResumeBuilderError):
    """A required input (master document, argument, credential) is missing or invalid."""


class GenerationExhaustedError(ResumeBuilderError):
    """Every attempt for a document was rejected or failed.

    Attributes:
        kind: Document kind ("resume", "cover-letter")
        attempts: Number of attempts made
        last_reason: The last validation reason or error message
    """

    def __init__(self, kind: str, attempts: int, last_reason: str):
        self.kind = kind
        self.attempts = attempts
        self.last_reason = last_reason
        super().__init__(
            f"{kind} generation failed after {attempts} attempt(s): {last_reason}"
        )
