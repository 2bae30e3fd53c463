"""Chat-completions HTTP client for the generation service."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from resume_builder.config import LLMConfig
from resume_builder.errors import ServiceError, TransportError
from resume_builder.models.generation import GenerationResult
from resume_builder.utils.text_cleaning import clean_completion

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SamplingParams:
    """Model and sampling settings sent with every request."""

    model: str
    max_tokens: int = 2000
    temperature: float = 0.7

    @classmethod
    def from_config(cls, config: LLMConfig) -> "SamplingParams":
        return cls(
            model=config.model,
            max_tokens=config.max_tokens,
            temperature=config.temperature,
        )


class LLMClient:
    """Async client issuing one POST per generate() call.

    Retries are left to the caller; a failed call raises TransportError or
    ServiceError and leaves no state behind apart from the token log.
    """

    def __init__(self, config: LLMConfig, transport: httpx.AsyncBaseTransport | None = None):
        self.config = config
        self.sampling = SamplingParams.from_config(config)
        self._transport = transport
        self._token_log: list[tuple[str, int, int]] = []  # (model, input_tokens, output_tokens)

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
        }

    async def _post(self, payload: dict) -> httpx.Response:
        kwargs: dict = {"timeout": self.config.timeout}
        if self._transport is not None:
            kwargs["transport"] = self._transport
        async with httpx.AsyncClient(**kwargs) as client:
            return await client.post(self.config.api_url, json=payload, headers=self._headers())

    async def generate(
        self,
        prompt: str,
        sampling: SamplingParams | None = None,
    ) -> GenerationResult:
        """Send a prompt and return the cleaned completion text with usage."""
        params = sampling or self.sampling
        payload = {
            "messages": [{"role": "user", "content": prompt}],
            "model": params.model,
            "max_tokens": params.max_tokens,
            "temperature": params.temperature,
        }
        logger.debug("LLM call: model=%s, prompt=%d chars", params.model, len(prompt))
        try:
            response = await self._post(payload)
        except httpx.RequestError as e:
            logger.error("LLM call failed", exc_info=True)
            raise TransportError(f"Request to generation service failed: {e}") from e

        if not response.is_success:
            logger.error("LLM call returned HTTP %d: %s", response.status_code, response.text[:200])
            raise ServiceError("Generation service returned an error", status_code=response.status_code)

        try:
            data = response.json()
            raw_text = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ServiceError(f"Malformed response body: missing choices[0].message.content ({e!r})") from e
        if not isinstance(raw_text, str):
            raise ServiceError("Malformed response body: completion content is not text")

        usage = data.get("usage") or {}
        if not isinstance(usage, dict):
            raise ServiceError("Malformed response body: usage is not an object")
        try:
            input_tokens = int(usage.get("prompt_tokens", 0) or 0)
            output_tokens = int(usage.get("completion_tokens", 0) or 0)
        except (TypeError, ValueError) as e:
            raise ServiceError(f"Malformed response body: bad token counts ({e!r})") from e
        logger.debug("LLM response: %d input, %d output tokens", input_tokens, output_tokens)
        self._token_log.append((params.model, input_tokens, output_tokens))

        return GenerationResult(
            text=clean_completion(raw_text),
            raw_text=raw_text,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )

    def get_token_summary(self) -> dict:
        """Return accumulated token usage and reset the log."""
        summary = {
            "input": sum(t[1] for t in self._token_log),
            "output": sum(t[2] for t in self._token_log),
            "calls": list(self._token_log),
        }
        self._token_log.clear()
        return summary
