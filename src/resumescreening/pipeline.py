"""Bulk resume screening: extract, score, persist and rank a batch of uploads."""

from __future__ import annotations

import json
import time
from pathlib import Path
from typing import Callable, Protocol, Sequence

import pendulum
import structlog

from . import __version__
from .core import BatchItem, RankedResult, RequirementCoverage, rank_items
from .extraction import DocumentTextExtractor
from .retry import RetryPolicy, call_with_retry
from .schemas import JobPosition, ScoringResult, SourceFile
from .stores import CandidateStore, InvalidJobPosition

ProgressCallback = Callable[[float], None]

EXTRACTION_SHARE = 50.0


class TextExtractor(Protocol):
    def extract(self, source: SourceFile) -> str: ...


class Scorer(Protocol):
    def score(self, candidate_text: str, job_description: str) -> ScoringResult: ...


class ProgressTracker:
    """Forward progress percentages to a callback, never letting them go down."""

    def __init__(self, callback: ProgressCallback | None):
        self._callback = callback
        self._value = 0.0

    @property
    def value(self) -> float:
        return self._value

    def report(self, value: float) -> None:
        value = min(max(value, self._value), 100.0)
        self._value = value
        if self._callback:
            self._callback(value)


class BatchScreeningPipeline:
    """Screen a batch of resumes against one job position.

    Every input file yields exactly one ranked result. A file that cannot be
    extracted, scored or stored is returned with status ``failed`` and a
    zero-score result instead of interrupting the batch; only a failed job
    position lookup aborts the run.
    """

    def __init__(
        self,
        *,
        store: CandidateStore,
        scorer: Scorer,
        extractor: TextExtractor | None = None,
        coverage: RequirementCoverage | None = None,
        retry_policy: RetryPolicy | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._store = store
        self._scorer = scorer
        self._extractor = extractor or DocumentTextExtractor()
        self._coverage = coverage or RequirementCoverage()
        self._retry_policy = retry_policy or RetryPolicy()
        self._sleep = sleep
        self._logger = structlog.get_logger(__name__)

    def run_batch(
        self,
        files: Sequence[SourceFile],
        job_position_id: str,
        on_progress: ProgressCallback | None = None,
    ) -> list[RankedResult]:
        job = self._store.get_job_position(job_position_id)
        if not job.description.strip():
            raise InvalidJobPosition(job.id, "description is empty")
        progress = ProgressTracker(on_progress)
        items = [BatchItem(index=idx, source=source) for idx, source in enumerate(files)]
        log = self._logger.bind(job_position_id=job.id, batch_size=len(items))
        log.info("batch.started")

        total = len(items)
        for done, item in enumerate(items, start=1):
            self._extract(item)
            progress.report(done / total * EXTRACTION_SHARE)

        survivors = [item for item in items if not item.is_terminal]
        for done, item in enumerate(survivors, start=1):
            self._score_and_persist(item, job)
            progress.report(
                EXTRACTION_SHARE + done / len(survivors) * (100.0 - EXTRACTION_SHARE)
            )

        ranked = rank_items(items)
        progress.report(100.0)
        log.info(
            "batch.completed",
            completed=sum(1 for result in ranked if result.status == "completed"),
            failed=sum(1 for result in ranked if result.status == "failed"),
        )
        return ranked

    def _extract(self, item: BatchItem) -> None:
        item.advance("extracting")
        try:
            text = self._extractor.extract(item.source)
        except Exception as exc:  # noqa: BLE001
            self._fail(item, exc, "item.extraction_failed")
            return
        item.extracted_text = text
        item.advance("scoring")

    def _score_and_persist(self, item: BatchItem, job: JobPosition) -> None:
        text = item.extracted_text or ""
        try:
            result = self._score(text, job.description)
            result = result.model_copy(
                update={
                    "requirement_coverage": self._coverage.evaluate(
                        text, job.requirements
                    )
                }
            )
            candidate = self._store.create_candidate(item.source.stem)
        except Exception as exc:  # noqa: BLE001
            self._fail(item, exc, "item.scoring_failed")
            return

        try:
            analysis = self._store.save_analysis(
                candidate.id,
                item.source.file_name,
                job.description,
                result,
                candidate_name=candidate.name,
            )
        except Exception as exc:  # noqa: BLE001
            # The candidate row stays behind without an analysis.
            item.candidate_id = candidate.id
            self._fail(item, exc, "item.analysis_save_failed", orphaned_candidate_id=candidate.id)
            return

        item.complete(result, candidate_id=candidate.id, analysis_id=analysis.id)
        self._logger.info(
            "item.completed",
            item_index=item.index,
            file_name=item.source.file_name,
            candidate_id=candidate.id,
            match_score=result.match_score,
        )

    def _fail(self, item: BatchItem, exc: Exception, event: str, **context: object) -> None:
        item.fail(exc)
        self._logger.warning(
            event,
            item_index=item.index,
            file_name=item.source.file_name,
            error_kind=item.error_kind,
            error=str(exc),
            **context,
        )

    def _score(self, text: str, job_description: str) -> ScoringResult:
        return call_with_retry(
            self._scorer.score,
            text,
            job_description,
            policy=self._retry_policy,
            sleep=self._sleep,
        )


class OutputWriter:
    """Persist a batch report as JSON."""

    def write(
        self,
        path: Path,
        results: Sequence[RankedResult],
        *,
        job_position_id: str,
    ) -> dict:
        payload = {
            "metadata": {
                "job_position_id": job_position_id,
                "item_count": len(results),
                "completed": sum(1 for result in results if result.status == "completed"),
                "failed": sum(1 for result in results if result.status == "failed"),
                "timestamp": pendulum.now().to_iso8601_string(),
                "app_version": __version__,
            },
            "results": [result.to_dict() for result in results],
        }
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(payload, ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
        return payload


__all__ = ["BatchScreeningPipeline", "OutputWriter", "ProgressTracker"]
