"""File-backed candidate store for offline runs."""

from __future__ import annotations

import json
import uuid
from pathlib import Path
from typing import Any, Iterator

import pendulum
import structlog
from pydantic import ValidationError

from ..schemas import (
    AnalysisRecord,
    CandidateRecord,
    ChatMessage,
    JobPosition,
    ScoringResult,
)
from .base import (
    CandidateNotFound,
    JobPositionNotFound,
    PersistenceError,
    placeholder_email,
    validate_limit,
    validate_status,
)


class LocalCandidateStore:
    """Store records under a directory.

    ``job_positions.json`` holds a JSON list of job positions. Candidates,
    analyses and chat messages are appended as JSON lines; a candidate update
    appends a new version and the last version wins on read. Later entries
    count as newer when listing.
    """

    JOBS_FILE = "job_positions.json"
    CANDIDATES_FILE = "candidates.jsonl"
    ANALYSES_FILE = "resume_analyses.jsonl"
    CHAT_FILE = "chat_messages.jsonl"

    def __init__(self, root: str | Path):
        self._root = Path(root)
        self._logger = structlog.get_logger(__name__)

    def get_job_position(self, job_position_id: str) -> JobPosition:
        for job in self._load_jobs():
            if job.id == job_position_id:
                return job
        raise JobPositionNotFound(job_position_id)

    def list_job_positions(self) -> list[JobPosition]:
        return list(reversed(self._load_jobs()))

    def create_candidate(self, name: str) -> CandidateRecord:
        candidate = CandidateRecord(
            id=str(uuid.uuid4()),
            name=name,
            email=placeholder_email(name),
            phone="",
            status="new",
            created_at=_now(),
        )
        self._append(self.CANDIDATES_FILE, candidate.model_dump(mode="json"))
        return candidate

    def get_candidate(self, candidate_id: str) -> CandidateRecord:
        latest: dict[str, Any] | None = None
        for record in self._read(self.CANDIDATES_FILE):
            if record.get("id") == candidate_id:
                latest = record
        if latest is None:
            raise CandidateNotFound(candidate_id)
        return CandidateRecord.model_validate(latest)

    def list_candidates(self, status: str | None = None) -> list[CandidateRecord]:
        if status is not None:
            validate_status(status)
        latest: dict[str, dict[str, Any]] = {}
        for record in self._read(self.CANDIDATES_FILE):
            latest[record["id"]] = record
        candidates = [CandidateRecord.model_validate(record) for record in reversed(latest.values())]
        if status is None:
            return candidates
        return [candidate for candidate in candidates if candidate.status == status]

    def update_candidate_status(self, candidate_id: str, status: str) -> CandidateRecord:
        validate_status(status)
        current = self.get_candidate(candidate_id)
        updated = current.model_copy(update={"status": status, "updated_at": _now()})
        self._append(self.CANDIDATES_FILE, updated.model_dump(mode="json"))
        return updated

    def save_analysis(
        self,
        candidate_id: str,
        file_name: str,
        job_description: str,
        result: ScoringResult,
        *,
        candidate_name: str | None = None,
    ) -> AnalysisRecord:
        record = AnalysisRecord(
            id=str(uuid.uuid4()),
            candidate_id=candidate_id,
            candidate_name=candidate_name,
            file_name=file_name,
            job_description=job_description,
            analysis_results=result,
            created_at=_now(),
        )
        self._append(self.ANALYSES_FILE, _analysis_row(record))
        return record

    def list_analyses(self, candidate_id: str) -> list[AnalysisRecord]:
        records = [
            AnalysisRecord.model_validate(row)
            for row in self._read(self.ANALYSES_FILE)
            if row.get("candidate_id") == candidate_id
        ]
        return list(reversed(records))

    def list_recent_analyses(self, limit: int = 10) -> list[AnalysisRecord]:
        validate_limit(limit)
        rows = list(self._read(self.ANALYSES_FILE))
        return [AnalysisRecord.model_validate(row) for row in reversed(rows[-limit:])]

    def save_chat_message(self, message: ChatMessage) -> ChatMessage:
        stored = message.model_copy(
            update={"id": message.id or str(uuid.uuid4()), "created_at": message.created_at or _now()}
        )
        self._append(self.CHAT_FILE, stored.model_dump(mode="json"))
        return stored

    def list_chat_messages(self, session_id: str) -> list[ChatMessage]:
        return [
            ChatMessage.model_validate(row)
            for row in self._read(self.CHAT_FILE)
            if row.get("session_id") == session_id
        ]

    def _load_jobs(self) -> list[JobPosition]:
        path = self._root / self.JOBS_FILE
        if not path.exists():
            return []
        try:
            records = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise PersistenceError(f"Invalid job positions file {path}: {exc}") from exc
        try:
            return [JobPosition.model_validate(record) for record in records or []]
        except ValidationError as exc:
            raise PersistenceError(f"Invalid job position in {path}: {exc}") from exc

    def _append(self, name: str, record: dict[str, Any]) -> None:
        path = self._root / name
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("a", encoding="utf-8") as handle:
                handle.write(json.dumps(record, ensure_ascii=False))
                handle.write("\n")
        except OSError as exc:
            self._logger.error("store.write_failed", path=str(path), error=str(exc))
            raise PersistenceError(f"Failed to write {path}: {exc}") from exc

    def _read(self, name: str) -> Iterator[dict[str, Any]]:
        path = self._root / name
        if not path.exists():
            return
        with path.open("r", encoding="utf-8") as handle:
            for idx, line in enumerate(handle, start=1):
                raw = line.strip()
                if not raw:
                    continue
                try:
                    yield json.loads(raw)
                except json.JSONDecodeError as exc:
                    raise PersistenceError(f"{path} line {idx}: invalid JSON ({exc})") from exc


def _analysis_row(record: AnalysisRecord) -> dict[str, Any]:
    row = record.model_dump(mode="json", exclude={"analysis_results"})
    row["analysis_results"] = record.analysis_results.to_record()
    return row


def _now() -> str:
    return pendulum.now("UTC").to_iso8601_string()
