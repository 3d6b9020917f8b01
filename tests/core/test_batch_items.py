from __future__ import annotations

import pytest

from resumescreening.core import BatchItem, InvalidTransition, rank_items
from resumescreening.extraction import UnsupportedType
from resumescreening.schemas import PDF, ScoringResult, SourceFile


def make_item(index: int, name: str = "resume.pdf") -> BatchItem:
    return BatchItem(index=index, source=SourceFile(file_name=name, media_type=PDF, content=b""))


def completed(index: int, score: float, name: str = "resume.pdf") -> BatchItem:
    item = make_item(index, name)
    item.advance("extracting")
    item.advance("scoring")
    item.complete(ScoringResult(match_score=score), candidate_id=f"c-{index}", analysis_id=f"a-{index}")
    return item


def failed(index: int, name: str = "resume.pdf") -> BatchItem:
    item = make_item(index, name)
    item.advance("extracting")
    item.fail(UnsupportedType(name, "text/plain"))
    return item


def test_forward_transitions_only():
    item = make_item(0)
    item.advance("extracting")
    item.advance("scoring")
    item.advance("completed")

    assert item.is_terminal
    assert item.finished_at is not None
    with pytest.raises(InvalidTransition):
        item.advance("failed")


def test_cannot_skip_extraction():
    item = make_item(0)

    with pytest.raises(InvalidTransition):
        item.advance("scoring")


def test_failed_item_gets_zero_score_result():
    item = failed(2, "notes.txt")

    assert item.status == "failed"
    assert item.error_kind == "unsupported_type"
    assert item.result.match_score == 0
    assert item.result.summary.startswith("Error: Unsupported file type")
    with pytest.raises(InvalidTransition):
        item.advance("scoring")


def test_rank_items_sorts_descending_and_numbers_densely():
    items = [completed(0, 60, "a.pdf"), failed(1, "b.txt"), completed(2, 85, "c.pdf")]

    ranked = rank_items(items)

    assert [r.match_score for r in ranked] == [85, 60, 0]
    assert [r.rank for r in ranked] == [1, 2, 3]
    assert [r.item_index for r in ranked] == [2, 0, 1]
    assert ranked[2].id == "error-1"
    assert ranked[0].id == "a-2"
    assert ranked[0].candidate_name == "c"


def test_rank_items_keeps_input_order_for_ties():
    items = [failed(2, "x.txt"), completed(1, 70, "b.pdf"), failed(0, "w.txt"), completed(3, 70, "d.pdf")]

    ranked = rank_items(items)

    assert [r.item_index for r in ranked] == [1, 3, 0, 2]


def test_rank_items_rejects_unfinished_items():
    with pytest.raises(ValueError):
        rank_items([make_item(0)])


def test_rank_items_orders_non_finite_scores_as_zero():
    items = [completed(0, 10), completed(1, float("nan")), completed(2, 90), completed(3, float("inf"))]

    ranked = rank_items(items)

    assert [r.match_score for r in ranked] == [90, 10, 0, 0]
    assert [r.item_index for r in ranked] == [2, 0, 1, 3]
