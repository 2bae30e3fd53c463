"""Generate-then-validate loop for a single document.

The loop is a small state machine::

    Attempting(n) --VALID--------------------------> Succeeded(text)
    Attempting(n) --rejected/error, n < max--------> Attempting(n + 1)
    Attempting(n) --rejected/error, n == max-------> Failed(last_error)

Every rejection reason (or error message) is appended to the loop's
accumulator and fed into the next attempt's prompt. One loop instance
serves one document, so accumulators are never shared between kinds.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Union

from resume_builder.errors import (
    GenerationExhaustedError,
    ProtocolError,
    ServiceError,
    TransportError,
    ValidationFailure,
)
from resume_builder.models.generation import DocumentKind, GenerationRequest, GenerationResult
from resume_builder.models.verdict import ValidationVerdict
from resume_builder.pipeline.content_validator import ContentValidator

logger = logging.getLogger(__name__)

PROTOCOL_VIOLATION = "validator protocol violation"

WriteFn = Callable[[GenerationRequest], Awaitable[GenerationResult]]


@dataclass(frozen=True)
class Attempting:
    attempt: int


@dataclass(frozen=True)
class Succeeded:
    text: str
    attempts: int


@dataclass(frozen=True)
class Failed:
    last_error: str
    attempts: int


LoopState = Union[Attempting, Succeeded, Failed]


class RetryLoop:
    """Drive up to max_attempts generate/validate cycles for one document."""

    def __init__(
        self,
        kind: DocumentKind,
        write: WriteFn,
        validator: ContentValidator,
        master_text: str,
        target_context: str,
        *,
        max_attempts: int = 3,
        on_attempt: Callable[[int, int], None] | None = None,
    ):
        self.kind = kind
        self.write = write
        self.validator = validator
        self.master_text = master_text
        self.target_context = target_context
        self.max_attempts = max_attempts
        self.on_attempt = on_attempt
        self.failure_reasons: list[str] = []
        self.input_tokens = 0
        self.output_tokens = 0

    def request_for(self, attempt: int) -> GenerationRequest:
        return GenerationRequest(
            source_text=self.master_text,
            target_context=self.target_context,
            prior_failure_reasons=list(self.failure_reasons),
            attempt_number=attempt,
        )

    def _charge(self, usage: GenerationResult | ValidationVerdict | ProtocolError) -> None:
        self.input_tokens += usage.input_tokens
        self.output_tokens += usage.output_tokens

    async def step(self, state: Attempting) -> LoopState:
        """Run one attempt and return the next state."""
        n = state.attempt
        if self.on_attempt:
            self.on_attempt(n, self.max_attempts)

        try:
            result = await self.write(self.request_for(n))
            self._charge(result)
            verdict = await self.validator.validate(self.master_text, result.text, self.kind)
            self._charge(verdict)
            if not verdict.valid:
                raise ValidationFailure(verdict.reason)
        except ProtocolError as e:
            self._charge(e)
            logger.warning("%s attempt %d/%d: %s", self.kind.value, n, self.max_attempts, e)
            self.failure_reasons.append(PROTOCOL_VIOLATION)
            last_error = str(e)
        except (TransportError, ServiceError, ValidationFailure) as e:
            logger.warning("%s attempt %d/%d failed: %s", self.kind.value, n, self.max_attempts, e)
            self.failure_reasons.append(str(e))
            last_error = str(e)
        else:
            logger.info("%s accepted on attempt %d", self.kind.value, n)
            return Succeeded(text=result.text, attempts=n)

        if n < self.max_attempts:
            return Attempting(n + 1)
        return Failed(last_error=last_error, attempts=n)

    async def run(self) -> Succeeded:
        """Run the loop to a terminal state.

        Raises:
            GenerationExhaustedError: every attempt was rejected or failed
        """
        self.failure_reasons = []
        state: LoopState = Attempting(1)
        while isinstance(state, Attempting):
            state = await self.step(state)
        if isinstance(state, Failed):
            raise GenerationExhaustedError(self.kind.value, state.attempts, state.last_error)
        return state
