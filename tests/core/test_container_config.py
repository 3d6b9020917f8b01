from __future__ import annotations

from pathlib import Path

import pytest

from resumescreening.container import create_container
from resumescreening.llm import DEFAULT_MODEL
from resumescreening.pipeline import BatchScreeningPipeline
from resumescreening.stores import LocalCandidateStore, RestCandidateStore


def test_create_container_defaults():
    container = create_container()

    store = container.store()
    assert isinstance(store, LocalCandidateStore)
    assert store._root == Path("data")
    assert container.llm_client()._model == DEFAULT_MODEL
    assert container.retry_policy().max_attempts == 3
    assert isinstance(container.pipeline(), BatchScreeningPipeline)


def test_create_container_with_overrides(tmp_path: Path):
    container = create_container(
        settings={
            "llm": {"api_key": "sk-test", "model": "openai/gpt-4o-mini", "max_tokens": 900},
            "retry": {"max_attempts": 5, "base_delay": 0.1, "retry_on": ["unavailable"]},
            "coverage": {"min_similarity": 65},
            "store": {"kind": "local", "path": str(tmp_path)},
        }
    )

    llm = container.llm_client()
    policy = container.retry_policy()
    pipeline = container.pipeline()

    assert llm._model == "openai/gpt-4o-mini"
    assert llm._max_tokens == 900
    assert policy.max_attempts == 5
    assert policy.retry_on == frozenset({"unavailable"})
    assert pipeline._coverage._config.min_similarity == 65
    assert pipeline._retry_policy is policy
    assert container.store()._root == tmp_path
    assert container.scoring_client()._llm is llm
    assert container.assistant()._llm is llm


def test_create_container_with_rest_store():
    container = create_container(
        settings={"store": {"kind": "rest", "url": "https://db.test", "api_key": "anon"}}
    )

    store = container.store()
    assert isinstance(store, RestCandidateStore)
    assert store._base_url == "https://db.test/rest/v1"


def test_rest_store_without_credentials_fails_on_use():
    container = create_container(settings={"store": {"kind": "rest"}})

    with pytest.raises(ValueError):
        container.store()
