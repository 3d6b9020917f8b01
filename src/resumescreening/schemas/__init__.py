"""Pydantic schema definitions shared by the screening pipeline."""

from __future__ import annotations

from .candidate import (
    DOCX,
    MSWORD,
    PDF,
    AnalysisRecord,
    CandidateRecord,
    CandidateStatus,
    ChatMessage,
    SourceFile,
)
from .job import JobPosition
from .scoring import (
    AnalysisPayload,
    InterviewQuestion,
    ScoringResult,
    clamp_score,
)

__all__ = [
    "AnalysisPayload",
    "AnalysisRecord",
    "CandidateRecord",
    "CandidateStatus",
    "ChatMessage",
    "DOCX",
    "InterviewQuestion",
    "JobPosition",
    "MSWORD",
    "PDF",
    "ScoringResult",
    "SourceFile",
    "clamp_score",
]
