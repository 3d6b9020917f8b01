from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .scoring import ScoringResult

PDF = "application/pdf"
MSWORD = "application/msword"
DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

_SUFFIX_MEDIA_TYPES: dict[str, str] = {
    ".pdf": PDF,
    ".doc": MSWORD,
    ".docx": DOCX,
    ".txt": "text/plain",
    ".md": "text/markdown",
    ".rtf": "application/rtf",
}

CandidateStatus = Literal["new", "accepted", "rejected"]


class SourceFile(BaseModel):
    """Uploaded document: raw bytes plus declared media type and display name."""

    file_name: str
    media_type: str
    content: bytes = Field(repr=False)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_path(cls, path: str | Path, media_type: str | None = None) -> "SourceFile":
        path = Path(path)
        declared = media_type or _SUFFIX_MEDIA_TYPES.get(
            path.suffix.lower(), "application/octet-stream"
        )
        return cls(file_name=path.name, media_type=declared, content=path.read_bytes())

    @property
    def stem(self) -> str:
        """File name with its final extension stripped."""
        name, dot, _ = self.file_name.rpartition(".")
        return name if dot and name else self.file_name


class CandidateRecord(BaseModel):
    """Candidate row in the hosted backend."""

    id: str
    name: str
    email: str | None = None
    phone: str | None = ""
    status: str = "new"
    created_at: str | None = None

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)


class AnalysisRecord(BaseModel):
    """Stored scoring result tied to a candidate."""

    id: str
    candidate_id: str
    candidate_name: str | None = None
    file_name: str
    job_description: str = ""
    analysis_results: ScoringResult
    created_at: str | None = None

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)


class ChatMessage(BaseModel):
    """One recruiter or assistant message in a candidate chat session."""

    session_id: str
    sender: Literal["user", "assistant"]
    content: str
    id: str | None = None
    created_at: str | None = None

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)
