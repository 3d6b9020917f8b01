"""Dependency injection container for the screening system."""

from __future__ import annotations

from typing import Any

from dependency_injector import containers, providers

from .assistant import RecruiterAssistant
from .core import RequirementCoverage, RequirementCoverageConfig
from .extraction import DocumentTextExtractor
from .llm import HTTPLLMClient, ScoringClient
from .pipeline import BatchScreeningPipeline
from .retry import RetryPolicy
from .stores import LocalCandidateStore, RestCandidateStore

DEFAULT_STORE_PATH = "data"


class ScreeningContainer(containers.DeclarativeContainer):
    """Dependency-injector container definition."""

    llm_client = providers.Singleton(HTTPLLMClient)
    scoring_client = providers.Singleton(ScoringClient, llm_client=llm_client)

    store = providers.Singleton(LocalCandidateStore, root=DEFAULT_STORE_PATH)

    extractor = providers.Singleton(DocumentTextExtractor)
    coverage = providers.Singleton(RequirementCoverage)
    retry_policy = providers.Singleton(RetryPolicy)

    pipeline = providers.Factory(
        BatchScreeningPipeline,
        store=store,
        scorer=scoring_client,
        extractor=extractor,
        coverage=coverage,
        retry_policy=retry_policy,
    )

    assistant = providers.Factory(
        RecruiterAssistant,
        llm_client=llm_client,
        store=store,
    )


def create_container(*, settings: dict[str, Any] | None = None) -> ScreeningContainer:
    """Instantiate container with optional overrides."""

    container = ScreeningContainer()

    if not settings:
        return container

    llm_settings = settings.get("llm") or {}
    if llm_settings:
        container.llm_client.override(providers.Singleton(HTTPLLMClient, **llm_settings))

    retry_settings = settings.get("retry") or {}
    if retry_settings:
        container.retry_policy.override(
            providers.Singleton(RetryPolicy.from_settings, retry_settings)
        )

    coverage_settings = settings.get("coverage") or {}
    if coverage_settings:
        coverage_config = RequirementCoverageConfig(**coverage_settings)
        container.coverage.override(
            providers.Singleton(RequirementCoverage, config=coverage_config)
        )

    store_settings = settings.get("store") or {}
    if store_settings.get("kind") == "rest":
        container.store.override(
            providers.Singleton(
                RestCandidateStore,
                url=store_settings.get("url"),
                api_key=store_settings.get("api_key"),
            )
        )
    elif store_settings.get("path"):
        container.store.override(
            providers.Singleton(LocalCandidateStore, root=store_settings["path"])
        )

    return container
