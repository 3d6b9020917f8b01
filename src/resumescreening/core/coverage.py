"""Keyword coverage of job requirements in resume text."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from rapidfuzz import fuzz


@dataclass
class RequirementCoverageConfig:
    """Configuration for requirement matching."""

    min_similarity: float = 80.0


class RequirementCoverage:
    """Flag which job requirements appear in a resume.

    A requirement counts as covered when it occurs verbatim (case-insensitive)
    or when some resume line reaches ``min_similarity`` token-set similarity.
    """

    def __init__(self, *, config: RequirementCoverageConfig | None = None) -> None:
        self._config = config or RequirementCoverageConfig()

    def evaluate(self, text: str, requirements: Sequence[str]) -> dict[str, float]:
        lowered = text.lower()
        corpus = [line.strip() for line in lowered.splitlines() if line.strip()]
        coverage: dict[str, float] = {}
        for requirement in requirements:
            keyword = requirement.strip()
            if not keyword:
                continue
            coverage[keyword] = 1.0 if self._matches(keyword.lower(), lowered, corpus) else 0.0
        return coverage

    def _matches(self, keyword: str, lowered: str, corpus: Sequence[str]) -> bool:
        if keyword in lowered:
            return True
        return any(
            fuzz.token_set_ratio(keyword, line) >= self._config.min_similarity
            for line in corpus
        )


def coverage_ratio(coverage: dict[str, float]) -> float:
    if not coverage:
        return 1.0
    return sum(coverage.values()) / len(coverage)


__all__ = ["RequirementCoverage", "RequirementCoverageConfig", "coverage_ratio"]
