"""Per-item state for one batch run."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

import pendulum

from ..schemas import ScoringResult, SourceFile

ItemStatus = Literal["pending", "extracting", "scoring", "completed", "failed"]

TERMINAL_STATUSES: frozenset[str] = frozenset({"completed", "failed"})

_TRANSITIONS: dict[str, frozenset[str]] = {
    "pending": frozenset({"extracting"}),
    "extracting": frozenset({"scoring", "failed"}),
    "scoring": frozenset({"completed", "failed"}),
    "completed": frozenset(),
    "failed": frozenset(),
}


class InvalidTransition(ValueError):
    """Raised when an item is moved backwards or out of a terminal state."""


@dataclass(slots=True)
class BatchItem:
    """One uploaded document tracked through extract, score and persist."""

    index: int
    source: SourceFile
    status: ItemStatus = "pending"
    extracted_text: str | None = None
    result: ScoringResult | None = None
    error_kind: str | None = None
    candidate_id: str | None = None
    analysis_id: str | None = None
    finished_at: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def advance(self, status: ItemStatus) -> None:
        if status not in _TRANSITIONS[self.status]:
            raise InvalidTransition(f"item {self.index}: {self.status} -> {status}")
        self.status = status
        if status in TERMINAL_STATUSES:
            self.finished_at = pendulum.now("UTC").to_iso8601_string()

    def complete(
        self,
        result: ScoringResult,
        *,
        candidate_id: str | None = None,
        analysis_id: str | None = None,
    ) -> None:
        self.advance("completed")
        self.result = result
        self.candidate_id = candidate_id
        self.analysis_id = analysis_id

    def fail(self, exc: BaseException) -> None:
        """Mark failed with a zero-score result carrying the error message."""
        self.advance("failed")
        self.result = ScoringResult.failure(str(exc) or type(exc).__name__)
        self.error_kind = getattr(exc, "kind", None) or type(exc).__name__


__all__ = ["BatchItem", "InvalidTransition", "ItemStatus", "TERMINAL_STATUSES"]
