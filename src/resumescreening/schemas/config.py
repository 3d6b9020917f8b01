"""Pydantic configuration schema for CLI YAML input."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class LLMConfig(BaseModel):
    endpoint: str | None = None
    api_key: str | None = None
    model: str | None = None
    timeout: float | None = None
    temperature: float | None = None
    max_tokens: int | None = None


class StoreConfig(BaseModel):
    kind: Literal["local", "rest"] = "local"
    path: str | None = None
    url: str | None = None
    api_key: str | None = None


class RetryConfig(BaseModel):
    max_attempts: int | None = Field(default=None, ge=1)
    base_delay: float | None = Field(default=None, ge=0)
    max_delay: float | None = Field(default=None, ge=0)
    jitter: bool | None = None
    retry_on: list[str] | None = None
    kind_delays: dict[str, float] | None = None


class CoverageConfig(BaseModel):
    min_similarity: float | None = Field(default=None, ge=0, le=100)


class AppConfig(BaseModel):
    llm: LLMConfig = Field(default_factory=LLMConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    coverage: CoverageConfig = Field(default_factory=CoverageConfig)

    def to_settings(self) -> dict[str, Any]:
        settings: dict[str, Any] = {}
        for section in ("llm", "retry", "coverage"):
            values = getattr(self, section).model_dump(exclude_none=True)
            if values:
                settings[section] = values
        settings["store"] = self.store.model_dump(exclude_none=True)
        return settings


def load_config(raw: Any) -> AppConfig:
    if raw is None:
        return AppConfig()
    if not isinstance(raw, dict):
        raise ValueError("Config must be a mapping")
    return AppConfig.model_validate(raw)
