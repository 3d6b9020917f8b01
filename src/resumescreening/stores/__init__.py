"""Candidate persistence back ends."""

from __future__ import annotations

from .base import (
    CANDIDATE_STATUSES,
    CandidateNotFound,
    CandidateStore,
    InvalidJobPosition,
    JobPositionNotFound,
    PersistenceError,
    StoreError,
)
from .local import LocalCandidateStore
from .rest import RestCandidateStore

__all__ = [
    "CANDIDATE_STATUSES",
    "CandidateNotFound",
    "CandidateStore",
    "InvalidJobPosition",
    "JobPositionNotFound",
    "LocalCandidateStore",
    "PersistenceError",
    "RestCandidateStore",
    "StoreError",
]
