"""Application configuration loaded from config.yaml and the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path

import yaml

from resume_builder.errors import InputError

ENV_API_KEY = "RESUME_BUILDER_API_KEY"
ENV_API_URL = "RESUME_BUILDER_API_URL"
ENV_MODEL = "RESUME_BUILDER_MODEL"


@dataclass(frozen=True)
class LLMConfig:
    api_url: str = ""
    api_key: str = ""
    model: str = "gpt-4o-mini"
    max_tokens: int = 2000
    temperature: float = 0.7
    timeout: int = 60

    def __post_init__(self):
        if self.timeout < 1:
            raise ValueError(f"llm.timeout must be >= 1, got {self.timeout}")
        if self.max_tokens < 1:
            raise ValueError(f"llm.max_tokens must be >= 1, got {self.max_tokens}")
        if not 0 <= self.temperature <= 2:
            raise ValueError(f"llm.temperature must be between 0 and 2, got {self.temperature}")


@dataclass(frozen=True)
class PipelineConfig:
    max_attempts: int = 3

    def __post_init__(self):
        if not 1 <= self.max_attempts <= 10:
            raise ValueError(f"pipeline.max_attempts must be between 1 and 10, got {self.max_attempts}")


@dataclass(frozen=True)
class OutputConfig:
    output_dir: str = "output"
    person_name: str | None = None

    @property
    def resolved_output_dir(self) -> Path:
        return Path(self.output_dir).expanduser()


@dataclass(frozen=True)
class UsageConfig:
    enabled: bool = True
    db_path: str = "~/.resume-builder/usage.db"

    @property
    def resolved_db_path(self) -> Path:
        return Path(self.db_path).expanduser()


@dataclass(frozen=True)
class AppConfig:
    llm: LLMConfig = field(default_factory=LLMConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    usage: UsageConfig = field(default_factory=UsageConfig)

    def require_credentials(self) -> None:
        """Raise InputError unless an API key and URL are configured."""
        if not self.llm.api_key:
            raise InputError(
                f"API key required. Set {ENV_API_KEY} or llm.api_key in config.yaml."
            )
        if not self.llm.api_url:
            raise InputError(
                f"API URL required. Set {ENV_API_URL} or llm.api_url in config.yaml."
            )


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file, falling back to defaults.

    Environment variables override the llm credentials from the file.
    """
    if path is None:
        # Look for config.yaml relative to the project root
        candidates = [
            Path.cwd() / "config.yaml",
            Path(__file__).resolve().parent.parent.parent / "config.yaml",
        ]
        for c in candidates:
            if c.exists():
                path = c
                break

    raw: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            raw = yaml.safe_load(p.read_text()) or {}

    llm = LLMConfig(**raw.get("llm", {}))
    overrides = {
        name: os.environ[var]
        for name, var in (("api_key", ENV_API_KEY), ("api_url", ENV_API_URL), ("model", ENV_MODEL))
        if os.environ.get(var)
    }
    if overrides:
        llm = replace(llm, **overrides)

    return AppConfig(
        llm=llm,
        pipeline=PipelineConfig(**raw.get("pipeline", {})),
        output=OutputConfig(**raw.get("output", {})),
        usage=UsageConfig(**raw.get("usage", {})),
    )
