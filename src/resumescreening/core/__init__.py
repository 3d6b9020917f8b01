"""Batch item state, ranking and requirement coverage."""

from __future__ import annotations

from .coverage import RequirementCoverage, RequirementCoverageConfig, coverage_ratio
from .items import TERMINAL_STATUSES, BatchItem, InvalidTransition, ItemStatus
from .ranking import RankedResult, rank_items

__all__ = [
    "BatchItem",
    "InvalidTransition",
    "ItemStatus",
    "RankedResult",
    "RequirementCoverage",
    "RequirementCoverageConfig",
    "TERMINAL_STATUSES",
    "coverage_ratio",
    "rank_items",
]
