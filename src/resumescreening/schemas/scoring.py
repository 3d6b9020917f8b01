"""Scoring result models and the analysis payload requested from the LLM."""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

SCORE_MIN = 0.0
SCORE_MAX = 100.0


def clamp_score(value: float) -> float:
    """Clamp to [0, 100]; NaN and infinities become 0."""
    value = float(value)
    if not math.isfinite(value):
        return SCORE_MIN
    return min(max(value, SCORE_MIN), SCORE_MAX)


def _zero_if_missing(value: Any) -> Any:
    return 0.0 if value is None else value


class InterviewQuestion(BaseModel):
    question: str
    purpose: str = ""


class OverallMatch(BaseModel):
    score: float = 0.0
    summary: str = ""
    strengths: list[str] = Field(default_factory=list)
    gaps: list[str] = Field(default_factory=list)

    @field_validator("score", mode="before")
    @classmethod
    def _score_default(cls, value: Any) -> Any:
        return _zero_if_missing(value)


class SkillsAnalysis(BaseModel):
    matching_skills: list[str] = Field(default_factory=list)
    missing_skills: list[str] = Field(default_factory=list)
    additional_skills: list[str] = Field(default_factory=list)
    skill_scores: dict[str, float | None] = Field(default_factory=dict)


class ExperienceAnalysis(BaseModel):
    relevant_experience: list[str] = Field(default_factory=list)
    experience_gaps: list[str] = Field(default_factory=list)
    years_of_experience: float = 0.0
    area_scores: dict[str, float | None] = Field(default_factory=dict)

    @field_validator("years_of_experience", mode="before")
    @classmethod
    def _years_default(cls, value: Any) -> Any:
        return _zero_if_missing(value)


class AnalysisPayload(BaseModel):
    """JSON document the scoring model is instructed to return."""

    overall_match: OverallMatch
    skills_analysis: SkillsAnalysis = Field(default_factory=SkillsAnalysis)
    experience_analysis: ExperienceAnalysis = Field(default_factory=ExperienceAnalysis)
    interview_questions: list[InterviewQuestion] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")


class ScoringResult(BaseModel):
    """Assessment of one candidate against one job description.

    Every numeric field is clamped to [0, 100] (``years_of_experience`` only
    to be non-negative) so callers can render a result without null checks.
    Stored and serialized with camelCase keys (``matchScore`` ...).
    """

    match_score: float = 0.0
    summary: str = ""
    skills: dict[str, float] = Field(default_factory=dict)
    experience: dict[str, float] = Field(default_factory=dict)
    strengths: list[str] = Field(default_factory=list)
    gaps: list[str] = Field(default_factory=list)
    matching_skills: list[str] = Field(default_factory=list)
    missing_skills: list[str] = Field(default_factory=list)
    years_of_experience: float = 0.0
    interview_questions: list[InterviewQuestion] = Field(default_factory=list)
    requirement_coverage: dict[str, float] = Field(default_factory=dict)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @field_validator("match_score", mode="before")
    @classmethod
    def _clamp_match_score(cls, value: Any) -> float:
        return clamp_score(_zero_if_missing(value))

    @field_validator("years_of_experience", mode="before")
    @classmethod
    def _non_negative_years(cls, value: Any) -> float:
        years = float(_zero_if_missing(value))
        return years if math.isfinite(years) and years > 0 else 0.0

    @field_validator("skills", "experience", mode="before")
    @classmethod
    def _clamp_strengths(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        return {str(k): clamp_score(_zero_if_missing(v)) for k, v in value.items()}

    @classmethod
    def from_payload(cls, payload: AnalysisPayload) -> "ScoringResult":
        skills_analysis = payload.skills_analysis
        skills: dict[str, float | None] = dict(skills_analysis.skill_scores)
        for name in skills_analysis.matching_skills:
            skills.setdefault(name, SCORE_MAX)
        for name in skills_analysis.missing_skills:
            skills.setdefault(name, SCORE_MIN)

        return cls(
            match_score=payload.overall_match.score,
            summary=payload.overall_match.summary,
            skills=skills,
            experience=payload.experience_analysis.area_scores,
            strengths=payload.overall_match.strengths,
            gaps=payload.overall_match.gaps,
            matching_skills=skills_analysis.matching_skills,
            missing_skills=skills_analysis.missing_skills,
            years_of_experience=payload.experience_analysis.years_of_experience,
            interview_questions=payload.interview_questions,
        )

    @classmethod
    def failure(cls, message: str) -> "ScoringResult":
        """Zero-score placeholder for an item that could not be scored."""
        return cls(match_score=0.0, summary=f"Error: {message}")

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
