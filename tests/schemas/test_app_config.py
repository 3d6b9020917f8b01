from __future__ import annotations

import pytest
from pydantic import ValidationError

from resumescreening.container import create_container
from resumescreening.llm import RateLimited
from resumescreening.schemas.config import AppConfig, load_config


def test_load_config_defaults_for_empty_file():
    config = load_config(None)

    assert isinstance(config, AppConfig)
    assert config.to_settings() == {"store": {"kind": "local"}}


def test_to_settings_drops_unset_fields():
    config = load_config(
        {
            "llm": {"model": "openai/gpt-4o-mini", "max_tokens": 1500},
            "store": {"kind": "rest", "url": "https://db.test", "api_key": "k"},
            "retry": {"max_attempts": 5, "retry_on": ["rate_limited"]},
            "coverage": {"min_similarity": 70},
        }
    )

    assert config.to_settings() == {
        "llm": {"model": "openai/gpt-4o-mini", "max_tokens": 1500},
        "retry": {"max_attempts": 5, "retry_on": ["rate_limited"]},
        "coverage": {"min_similarity": 70.0},
        "store": {"kind": "rest", "url": "https://db.test", "api_key": "k"},
    }


def test_load_config_rejects_non_mapping():
    with pytest.raises(ValueError):
        load_config(["llm"])


@pytest.mark.parametrize(
    "raw",
    [
        {"store": {"kind": "sqlite"}},
        {"retry": {"max_attempts": 0}},
        {"coverage": {"min_similarity": 150}},
    ],
)
def test_load_config_validates_sections(raw):
    with pytest.raises(ValidationError):
        load_config(raw)


def test_retry_kind_delays_reach_the_policy():
    settings = load_config(
        {"retry": {"kind_delays": {"rate_limited": 4, "unavailable": 0.5}, "jitter": False}}
    ).to_settings()

    policy = create_container(settings=settings).retry_policy()

    assert settings["retry"]["kind_delays"] == {"rate_limited": 4.0, "unavailable": 0.5}
    assert policy.kind_delays == {"rate_limited": 4.0, "unavailable": 0.5}
    assert policy.delay_for(1, RateLimited("busy"), lambda: 1.0) == 4.0
