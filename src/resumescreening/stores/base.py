"""Persistence contract for candidates, analyses and chat messages."""

from __future__ import annotations

import re
import uuid
from typing import Protocol, runtime_checkable

from ..schemas import (
    AnalysisRecord,
    CandidateRecord,
    ChatMessage,
    JobPosition,
    ScoringResult,
)

CANDIDATE_STATUSES: frozenset[str] = frozenset({"new", "accepted", "rejected"})


class StoreError(Exception):
    """Base class for persistence failures."""

    kind = "store_error"


class JobPositionNotFound(StoreError):
    kind = "job_position_not_found"

    def __init__(self, job_position_id: str):
        super().__init__(f"Job position not found: {job_position_id}")
        self.job_position_id = job_position_id


class CandidateNotFound(StoreError):
    kind = "candidate_not_found"

    def __init__(self, candidate_id: str):
        super().__init__(f"Candidate not found: {candidate_id}")
        self.candidate_id = candidate_id


class InvalidJobPosition(StoreError):
    kind = "invalid_job_position"

    def __init__(self, job_position_id: str, reason: str):
        super().__init__(f"Job position {job_position_id} cannot be screened against: {reason}")
        self.job_position_id = job_position_id


class PersistenceError(StoreError):
    kind = "persistence_error"


@runtime_checkable
class CandidateStore(Protocol):
    """Hosted backend holding job positions, candidates and their analyses."""

    def get_job_position(self, job_position_id: str) -> JobPosition:
        """Return the job position or raise ``JobPositionNotFound``."""

    def list_job_positions(self) -> list[JobPosition]:
        """Return every job position, newest first."""

    def create_candidate(self, name: str) -> CandidateRecord:
        """Create a candidate with status ``new``."""

    def get_candidate(self, candidate_id: str) -> CandidateRecord:
        """Return the candidate or raise ``CandidateNotFound``."""

    def list_candidates(self, status: str | None = None) -> list[CandidateRecord]:
        """Return candidates, newest first, optionally only those with ``status``."""

    def update_candidate_status(self, candidate_id: str, status: str) -> CandidateRecord:
        """Set the candidate's review status."""

    def save_analysis(
        self,
        candidate_id: str,
        file_name: str,
        job_description: str,
        result: ScoringResult,
        *,
        candidate_name: str | None = None,
    ) -> AnalysisRecord:
        """Store a scoring result tied to a candidate."""

    def list_analyses(self, candidate_id: str) -> list[AnalysisRecord]:
        """Return a candidate's analyses, newest first."""

    def list_recent_analyses(self, limit: int = 10) -> list[AnalysisRecord]:
        """Return the ``limit`` most recent analyses across all candidates."""

    def save_chat_message(self, message: ChatMessage) -> ChatMessage:
        """Append a message to a chat session."""

    def list_chat_messages(self, session_id: str) -> list[ChatMessage]:
        """Return a chat session's messages, oldest first."""


def validate_status(status: str) -> str:
    if status not in CANDIDATE_STATUSES:
        raise ValueError(
            f"Unsupported candidate status {status!r}; expected one of {sorted(CANDIDATE_STATUSES)}"
        )
    return status


def placeholder_email(name: str) -> str:
    """Unique stand-in address; the candidates table requires a unique e-mail."""
    slug = re.sub(r"[^a-zA-Z0-9]+", "_", name).strip("_") or "candidate"
    return f"{slug}_{uuid.uuid4().hex[:12]}@placeholder.invalid"


def validate_limit(limit: int) -> int:
    if limit < 1:
        raise ValueError(f"limit must be a positive integer, got {limit}")
    return limit
