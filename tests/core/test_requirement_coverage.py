from __future__ import annotations

from resumescreening.core import RequirementCoverage, RequirementCoverageConfig, coverage_ratio

RESUME = """Alice Smith
Senior backend engineer, 6 years of Python
Deployed services with docker compose and Kubernetes clusters
"""


def test_substring_and_fuzzy_matches():
    coverage = RequirementCoverage().evaluate(RESUME, ["python", "Docker", "Kubernetes clusters", "Terraform"])

    assert coverage == {"python": 1.0, "Docker": 1.0, "Kubernetes clusters": 1.0, "Terraform": 0.0}


def test_token_set_similarity_threshold():
    text = "Built data pipelines with Apache Spark"
    strict = RequirementCoverage(config=RequirementCoverageConfig(min_similarity=100.0))
    lenient = RequirementCoverage(config=RequirementCoverageConfig(min_similarity=45.0))

    assert strict.evaluate(text, ["Spark pipelines"]) == {"Spark pipelines": 1.0}
    assert strict.evaluate(text, ["Spark streaming"]) == {"Spark streaming": 0.0}
    assert lenient.evaluate(text, ["Spark streaming"]) == {"Spark streaming": 1.0}


def test_blank_requirements_skipped():
    assert RequirementCoverage().evaluate(RESUME, ["", "  "]) == {}


def test_coverage_ratio():
    assert coverage_ratio({"a": 1.0, "b": 0.0}) == 0.5
    assert coverage_ratio({}) == 1.0
