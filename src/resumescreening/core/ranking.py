"""Ranking of terminal batch items."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from ..schemas import ScoringResult
from .items import BatchItem

@dataclass(slots=True)
class RankedResult:
    """Scoring result of one batch item together with its rank in the batch."""

    rank: int
    item_index: int
    id: str
    file_name: str
    candidate_name: str
    status: str
    result: ScoringResult
    candidate_id: str | None = None
    error_kind: str | None = None
    created_at: str | None = None

    @property
    def match_score(self) -> float:
        return self.result.match_score

    def to_dict(self) -> dict[str, Any]:
        return {
            "rank": self.rank,
            "item_index": self.item_index,
            "id": self.id,
            "file_name": self.file_name,
            "candidate_name": self.candidate_name,
            "candidate_id": self.candidate_id,
            "status": self.status,
            "error_kind": self.error_kind,
            "created_at": self.created_at,
            "analysis_results": self.result.to_record(),
        }

def rank_items(items: Iterable[BatchItem]) -> list[RankedResult]:
    """Sort by match score descending and number the results 1..N.

    Ties keep input order, so equally scored items (failures included) rank
    in the order they were submitted.
    """

    ordered = sorted(items, key=lambda item: item.index)
    pending = [item.index for item in ordered if not item.is_terminal]
    if pending:
        raise ValueError(f"Cannot rank non-terminal items: {pending}")

    ordered.sort(key=lambda item: item.result.match_score, reverse=True)
    return [
        RankedResult(
            rank=position,
            item_index=item.index,
            id=item.analysis_id or _placeholder_id(item),
            file_name=item.source.file_name,
            candidate_name=item.source.stem,
            status=item.status,
            result=item.result,
            candidate_id=item.candidate_id,
            error_kind=item.error_kind,
            created_at=item.finished_at,
        )
        for position, item in enumerate(ordered, start=1)
    ]


def _placeholder_id(item: BatchItem) -> str:
    prefix = "error" if item.status == "failed" else "item"
    return f"{prefix}-{item.index}"


__all__ = ["RankedResult", "rank_items"]
