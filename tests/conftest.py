from __future__ import annotations

import io
import uuid
from typing import Any, Callable

import docx
import pymupdf
import pytest
import structlog

from resumescreening.schemas import (
    DOCX,
    PDF,
    AnalysisRecord,
    CandidateRecord,
    ChatMessage,
    JobPosition,
    ScoringResult,
    SourceFile,
)
from resumescreening.stores import CandidateNotFound, JobPositionNotFound, PersistenceError


class MemoryStore:
    def __init__(self, jobs: list[JobPosition]):
        self.jobs = {job.id: job for job in jobs}
        self.candidates: dict[str, CandidateRecord] = {}
        self.analyses: list[AnalysisRecord] = []
        self.messages: list[ChatMessage] = []
        self.fail_create_for: set[str] = set()
        self.fail_analysis_for: set[str] = set()
        self.job_lookups = 0

    def get_job_position(self, job_position_id: str) -> JobPosition:
        self.job_lookups += 1
        try:
            return self.jobs[job_position_id]
        except KeyError as exc:
            raise JobPositionNotFound(job_position_id) from exc

    def list_job_positions(self) -> list[JobPosition]:
        return list(reversed(self.jobs.values()))

    def create_candidate(self, name: str) -> CandidateRecord:
        if name in self.fail_create_for:
            raise PersistenceError(f"duplicate key value for {name}")
        candidate = CandidateRecord(id=str(uuid.uuid4()), name=name, email=f"{name}@example.com")
        self.candidates[candidate.id] = candidate
        return candidate

    def get_candidate(self, candidate_id: str) -> CandidateRecord:
        try:
            return self.candidates[candidate_id]
        except KeyError as exc:
            raise CandidateNotFound(candidate_id) from exc

    def list_candidates(self, status: str | None = None) -> list[CandidateRecord]:
        candidates = list(reversed(self.candidates.values()))
        return [c for c in candidates if status is None or c.status == status]

    def update_candidate_status(self, candidate_id: str, status: str) -> CandidateRecord:
        candidate = self.get_candidate(candidate_id).model_copy(update={"status": status})
        self.candidates[candidate_id] = candidate
        return candidate

    def save_analysis(
        self,
        candidate_id: str,
        file_name: str,
        job_description: str,
        result: ScoringResult,
        *,
        candidate_name: str | None = None,
    ) -> AnalysisRecord:
        if file_name in self.fail_analysis_for:
            raise PersistenceError(f"resume_analyses insert rejected for {file_name}")
        record = AnalysisRecord(
            id=f"analysis-{len(self.analyses) + 1}",
            candidate_id=candidate_id,
            candidate_name=candidate_name,
            file_name=file_name,
            job_description=job_description,
            analysis_results=result,
        )
        self.analyses.append(record)
        return record

    def list_analyses(self, candidate_id: str) -> list[AnalysisRecord]:
        return [a for a in reversed(self.analyses) if a.candidate_id == candidate_id]

    def list_recent_analyses(self, limit: int = 10) -> list[AnalysisRecord]:
        return list(reversed(self.analyses))[:limit]

    def save_chat_message(self, message: ChatMessage) -> ChatMessage:
        self.messages.append(message)
        return message

    def list_chat_messages(self, session_id: str) -> list[ChatMessage]:
        return [m for m in self.messages if m.session_id == session_id]


class StubScorer:
    """Return scripted results keyed by a marker contained in the resume text."""

    def __init__(self, responses: dict[str, Any]):
        self._responses = responses
        self.calls: list[tuple[str, str]] = []

    def score(self, candidate_text: str, job_description: str) -> ScoringResult:
        self.calls.append((candidate_text, job_description))
        for marker, response in self._responses.items():
            if marker in candidate_text:
                if isinstance(response, list):
                    response = response.pop(0)
                if isinstance(response, BaseException):
                    raise response
                if isinstance(response, (int, float)):
                    return ScoringResult(match_score=response, summary=f"{marker} scored")
                return response
        raise AssertionError(f"unexpected resume text: {candidate_text!r}")


class StubExtractor:
    def __init__(self, texts: dict[str, Any]):
        self._texts = texts
        self.calls: list[str] = []

    def extract(self, source: SourceFile) -> str:
        self.calls.append(source.file_name)
        value = self._texts[source.file_name]
        if isinstance(value, BaseException):
            raise value
        return value


@pytest.fixture
def job_position() -> JobPosition:
    return JobPosition(
        id="job-backend",
        title="Backend Engineer",
        description="Build and operate Python services on PostgreSQL and Docker.",
        requirements=["Python", "PostgreSQL", "Docker", "Kubernetes"],
    )


@pytest.fixture
def memory_store(job_position: JobPosition) -> MemoryStore:
    return MemoryStore([job_position])


@pytest.fixture
def make_scorer() -> Callable[[dict[str, Any]], StubScorer]:
    return StubScorer


@pytest.fixture
def make_extractor() -> Callable[[dict[str, Any]], StubExtractor]:
    return StubExtractor


@pytest.fixture
def make_pdf() -> Callable[[list[str]], bytes]:
    def build(pages: list[str]) -> bytes:
        document = pymupdf.open()
        for text in pages:
            page = document.new_page()
            if text:
                page.insert_text((72, 72), text)
        data = document.tobytes()
        document.close()
        return data

    return build


@pytest.fixture
def make_docx() -> Callable[[list[str]], bytes]:
    def build(paragraphs: list[str]) -> bytes:
        document = docx.Document()
        for text in paragraphs:
            document.add_paragraph(text)
        buffer = io.BytesIO()
        document.save(buffer)
        return buffer.getvalue()

    return build


@pytest.fixture
def pdf_source(make_pdf) -> Callable[..., SourceFile]:
    def build(file_name: str, *pages: str) -> SourceFile:
        return SourceFile(file_name=file_name, media_type=PDF, content=make_pdf(list(pages)))

    return build


@pytest.fixture
def docx_source(make_docx) -> Callable[..., SourceFile]:
    def build(file_name: str, *paragraphs: str) -> SourceFile:
        return SourceFile(file_name=file_name, media_type=DOCX, content=make_docx(list(paragraphs)))

    return build


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()
