"""Shared test fixtures."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from resume_builder.clients.llm_client import LLMClient
from resume_builder.config import LLMConfig
from resume_builder.models.generation import GenerationResult


@pytest.fixture
def llm_config() -> LLMConfig:
    return LLMConfig(
        api_url="https://llm.example.test/v1/chat/completions",
        api_key="test-key",
        model="test-model",
        max_tokens=1500,
        temperature=0.5,
        timeout=10,
    )


@pytest.fixture
def sample_master_text() -> str:
    return """# Jane Doe
jane@example.com | (555) 010-2000 | [github.com/janedoe](https://github.com/janedoe)

## Summary
Backend engineer with 5 years of experience building data services.

## Skills
Python, Go

## Experience
### Acme Corp - Backend Engineer (2020 - present)
- Built an order-processing service in Go handling 2M events per day
- Cut API latency by 35% by adding caching to the Python gateway

### Initech - Software Engineer (2018 - 2020)
Maintained the internal billing tools written in Python.

## Education
B.S. Computer Science, State University (2018)
"""


@pytest.fixture
def sample_jd_text() -> str:
    return """Globex - Senior Backend Engineer

We are looking for a backend engineer to build high-throughput services.

Requirements:
- 5+ years of backend experience
- Rust or Go
- Experience with event-driven systems
"""


@pytest.fixture
def sample_resume_markdown() -> str:
    return """# Jane Doe
jane@example.com | (555) 010-2000 | [github.com/janedoe](https://github.com/janedoe)

## Summary
Backend engineer with 5 years of experience building event-driven data services.

## Skills
Python, Go

## Experience
### Acme Corp - Backend Engineer (2020 - present)
- Built an order-processing service in **Go** handling 2M events per day
- Cut API latency by 35% by adding caching to the Python gateway
"""


def make_result(text: str, input_tokens: int = 100, output_tokens: int = 50) -> GenerationResult:
    return GenerationResult(text=text, raw_text=text, input_tokens=input_tokens, output_tokens=output_tokens)


@pytest.fixture
def mock_llm_client() -> LLMClient:
    """Create a mock LLM client."""
    client = AsyncMock(spec=LLMClient)
    client.generate = AsyncMock(return_value=make_result("VALID"))
    client.get_token_summary.return_value = {"input": 0, "output": 0, "calls": []}
    return client


@pytest.fixture
def result_factory():
    """Build GenerationResult objects for fake LLM responses."""
    return make_result
