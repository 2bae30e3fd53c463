"""Tests for LLMClient (chat-completions HTTP wrapper)."""

from __future__ import annotations

import json

import httpx
import pytest

from resume_builder.clients.llm_client import LLMClient, SamplingParams
from resume_builder.errors import ServiceError, TransportError


def _completion(text: str, prompt_tokens: int = 100, completion_tokens: int = 50) -> dict:
    return {
        "choices": [{"message": {"role": "assistant", "content": text}}],
        "usage": {"prompt_tokens": prompt_tokens, "completion_tokens": completion_tokens},
    }


def _client(llm_config, handler) -> LLMClient:
    return LLMClient(llm_config, transport=httpx.MockTransport(handler))


class TestLLMClientRequest:
    async def test_posts_chat_payload_with_bearer_token(self, llm_config):
        """One POST with the fixed request shape and the bearer header."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=_completion("hello"))

        await _client(llm_config, handler).generate("say hello")

        assert len(seen) == 1
        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == llm_config.api_url
        assert request.headers["Authorization"] == "Bearer test-key"
        assert json.loads(request.content) == {
            "messages": [{"role": "user", "content": "say hello"}],
            "model": "test-model",
            "max_tokens": 1500,
            "temperature": 0.5,
        }

    async def test_explicit_sampling_params_override_config(self, llm_config):
        bodies: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json=_completion("ok"))

        params = SamplingParams(model="other-model", max_tokens=10, temperature=0.0)
        await _client(llm_config, handler).generate("prompt", params)

        assert bodies[0]["model"] == "other-model"
        assert bodies[0]["max_tokens"] == 10
        assert bodies[0]["temperature"] == 0.0

    def test_sampling_params_from_config(self, llm_config):
        params = SamplingParams.from_config(llm_config)
        assert params == SamplingParams(model="test-model", max_tokens=1500, temperature=0.5)


class TestLLMClientResponse:
    async def test_returns_cleaned_text_and_usage(self, llm_config):
        def handler(request):
            return httpx.Response(200, json=_completion("```markdown\n# Jane\n```", 20, 8))

        result = await _client(llm_config, handler).generate("prompt")

        assert result.text == "# Jane"
        assert result.raw_text == "```markdown\n# Jane\n```"
        assert result.input_tokens == 20
        assert result.output_tokens == 8

    async def test_missing_usage_defaults_to_zero(self, llm_config):
        def handler(request):
            return httpx.Response(200, json={"choices": [{"message": {"content": "text"}}]})

        result = await _client(llm_config, handler).generate("prompt")
        assert result.input_tokens == 0
        assert result.output_tokens == 0

    async def test_token_log_accumulates_and_resets(self, llm_config):
        def handler(request):
            return httpx.Response(200, json=_completion("x", 10, 5))

        llm = _client(llm_config, handler)
        await llm.generate("one")
        await llm.generate("two")

        summary = llm.get_token_summary()
        assert summary["input"] == 20
        assert summary["output"] == 10
        assert summary["calls"] == [("test-model", 10, 5), ("test-model", 10, 5)]
        assert llm.get_token_summary()["calls"] == []


class TestLLMClientErrors:
    async def test_network_failure_raises_transport_error(self, llm_config):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(TransportError):
            await _client(llm_config, handler).generate("prompt")

    async def test_timeout_raises_transport_error(self, llm_config):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(TransportError):
            await _client(llm_config, handler).generate("prompt")

    @pytest.mark.parametrize("status", [401, 429, 500, 503])
    async def test_non_2xx_raises_service_error(self, llm_config, status):
        def handler(request):
            return httpx.Response(status, json={"error": {"message": "nope"}})

        with pytest.raises(ServiceError) as exc_info:
            await _client(llm_config, handler).generate("prompt")
        assert exc_info.value.status_code == status

    @pytest.mark.parametrize(
        "body",
        [
            {"choices": []},
            {"choices": [{"message": {}}]},
            {"result": "text"},
            {"choices": [{"message": {"content": None}}]},
            [1, 2, 3],
        ],
    )
    async def test_malformed_body_raises_service_error(self, llm_config, body):
        def handler(request):
            return httpx.Response(200, json=body)

        with pytest.raises(ServiceError):
            await _client(llm_config, handler).generate("prompt")

    @pytest.mark.parametrize(
        "usage",
        ["n/a", [1], {"prompt_tokens": "lots"}, {"completion_tokens": {"n": 1}}],
    )
    async def test_malformed_usage_raises_service_error(self, llm_config, usage):
        def handler(request):
            return httpx.Response(200, json={"choices": [{"message": {"content": "VALID"}}], "usage": usage})

        llm = _client(llm_config, handler)
        with pytest.raises(ServiceError, match="Malformed response body"):
            await llm.generate("prompt")
        assert llm.get_token_summary()["calls"] == []

    async def test_non_json_body_raises_service_error(self, llm_config):
        def handler(request):
            return httpx.Response(200, text="<html>gateway</html>")

        with pytest.raises(ServiceError):
            await _client(llm_config, handler).generate("prompt")

    async def test_failed_call_is_not_logged(self, llm_config):
        def handler(request):
            return httpx.Response(500)

        llm = _client(llm_config, handler)
        with pytest.raises(ServiceError):
            await llm.generate("prompt")
        assert llm.get_token_summary()["calls"] == []
