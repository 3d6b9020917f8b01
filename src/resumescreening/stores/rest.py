"""Candidate store backed by a hosted Postgres REST interface."""

from __future__ import annotations

import json
from typing import Any
from urllib import error, parse, request

import pendulum
import structlog

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


class RestCandidateStore:
    """Talk to the backend's ``/rest/v1`` tables with an API key.

    Inserts and updates ask for ``return=representation`` so every write
    returns the stored row.
    """

    def __init__(self, url: str, api_key: str, *, timeout: float = 10.0):
        if not url or not api_key:
            raise ValueError("REST store requires both url and api_key")
        self._base_url = url.rstrip("/") + "/rest/v1"
        self._api_key = api_key
        self._timeout = timeout
        self._logger = structlog.get_logger(__name__)

    def get_job_position(self, job_position_id: str) -> JobPosition:
        rows = self._request("GET", "job_positions", params={"id": f"eq.{job_position_id}"})
        if not rows:
            raise JobPositionNotFound(job_position_id)
        return JobPosition.model_validate(rows[0])

    def list_job_positions(self) -> list[JobPosition]:
        rows = self._request("GET", "job_positions", params={"order": "created_at.desc"})
        return [JobPosition.model_validate(row) for row in rows]

    def create_candidate(self, name: str) -> CandidateRecord:
        rows = self._request(
            "POST",
            "candidates",
            body=[{"name": name, "status": "new", "email": placeholder_email(name), "phone": ""}],
        )
        return CandidateRecord.model_validate(_single(rows, "candidates"))

    def get_candidate(self, candidate_id: str) -> CandidateRecord:
        rows = self._request("GET", "candidates", params={"id": f"eq.{candidate_id}"})
        if not rows:
            raise CandidateNotFound(candidate_id)
        return CandidateRecord.model_validate(rows[0])

    def list_candidates(self, status: str | None = None) -> list[CandidateRecord]:
        params = {"order": "created_at.desc"}
        if status is not None:
            params["status"] = f"eq.{validate_status(status)}"
        rows = self._request("GET", "candidates", params=params)
        return [CandidateRecord.model_validate(row) for row in rows]

    def update_candidate_status(self, candidate_id: str, status: str) -> CandidateRecord:
        validate_status(status)
        rows = self._request(
            "PATCH",
            "candidates",
            params={"id": f"eq.{candidate_id}"},
            body={"status": status, "updated_at": pendulum.now("UTC").to_iso8601_string()},
        )
        if not rows:
            raise CandidateNotFound(candidate_id)
        return CandidateRecord.model_validate(rows[0])

    def save_analysis(
        self,
        candidate_id: str,
        file_name: str,
        job_description: str,
        result: ScoringResult,
        *,
        candidate_name: str | None = None,
    ) -> AnalysisRecord:
        rows = self._request(
            "POST",
            "resume_analyses",
            body=[
                {
                    "candidate_id": candidate_id,
                    "candidate_name": candidate_name,
                    "file_name": file_name,
                    "job_description": job_description,
                    "analysis_results": result.to_record(),
                }
            ],
        )
        return AnalysisRecord.model_validate(_single(rows, "resume_analyses"))

    def list_analyses(self, candidate_id: str) -> list[AnalysisRecord]:
        rows = self._request(
            "GET",
            "resume_analyses",
            params={"candidate_id": f"eq.{candidate_id}", "order": "created_at.desc"},
        )
        return [AnalysisRecord.model_validate(row) for row in rows]

    def list_recent_analyses(self, limit: int = 10) -> list[AnalysisRecord]:
        rows = self._request(
            "GET",
            "resume_analyses",
            params={"order": "created_at.desc", "limit": str(validate_limit(limit))},
        )
        return [AnalysisRecord.model_validate(row) for row in rows]

    def save_chat_message(self, message: ChatMessage) -> ChatMessage:
        rows = self._request(
            "POST",
            "chat_messages",
            body=[message.model_dump(mode="json", exclude_none=True)],
        )
        return ChatMessage.model_validate(_single(rows, "chat_messages"))

    def list_chat_messages(self, session_id: str) -> list[ChatMessage]:
        rows = self._request(
            "GET",
            "chat_messages",
            params={"session_id": f"eq.{session_id}", "order": "created_at.asc"},
        )
        return [ChatMessage.model_validate(row) for row in rows]

    def _request(
        self,
        method: str,
        table: str,
        *,
        params: dict[str, str] | None = None,
        body: Any = None,
    ) -> list[dict[str, Any]]:
        query = {"select": "*", **(params or {})}
        url = f"{self._base_url}/{table}?{parse.urlencode(query, safe='.,*')}"
        headers = {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._api_key}",
            "Accept": "application/json",
        }
        data = None
        if body is not None:
            data = json.dumps(body, ensure_ascii=False).encode("utf-8")
            headers["Content-Type"] = "application/json"
            headers["Prefer"] = "return=representation"

        req = request.Request(url, data=data, headers=headers, method=method)
        try:
            with request.urlopen(req, timeout=self._timeout) as resp:
                raw = resp.read().decode("utf-8")
        except error.HTTPError as exc:
            self._logger.warning("store.request_failed", table=table, method=method, status=exc.code)
            raise PersistenceError(f"{method} {table} failed with HTTP {exc.code}") from exc
        except error.URLError as exc:
            self._logger.warning("store.request_failed", table=table, method=method, error=str(exc))
            raise PersistenceError(f"{method} {table} failed: {exc.reason}") from exc

        try:
            payload = json.loads(raw) if raw else []
        except json.JSONDecodeError as exc:
            raise PersistenceError(f"{method} {table} returned invalid JSON") from exc
        if isinstance(payload, dict):
            return [payload]
        return payload


def _single(rows: list[dict[str, Any]], table: str) -> dict[str, Any]:
    if not rows:
        raise PersistenceError(f"Insert into {table} returned no rows")
    return rows[0]
