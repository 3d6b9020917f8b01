from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from resumescreening.schemas import (
    DOCX,
    MSWORD,
    PDF,
    AnalysisRecord,
    JobPosition,
    ScoringResult,
    SourceFile,
)


@pytest.mark.parametrize(
    ("file_name", "stem"),
    [
        ("alice.pdf", "alice"),
        ("alice.smith.docx", "alice.smith"),
        ("README", "README"),
        (".profile", ".profile"),
    ],
)
def test_source_file_stem(file_name: str, stem: str):
    assert SourceFile(file_name=file_name, media_type=PDF, content=b"").stem == stem


def test_source_file_from_path_detects_media_type(tmp_path: Path):
    for name, expected in [("a.PDF", PDF), ("b.doc", MSWORD), ("c.docx", DOCX), ("d.bin", "application/octet-stream")]:
        path = tmp_path / name
        path.write_bytes(b"data")
        source = SourceFile.from_path(path)
        assert source.file_name == name
        assert source.media_type == expected
        assert source.content == b"data"


def test_source_file_declared_media_type_wins(tmp_path: Path):
    path = tmp_path / "resume.bin"
    path.write_bytes(b"%PDF")

    assert SourceFile.from_path(path, media_type=PDF).media_type == PDF


def test_source_file_is_immutable():
    source = SourceFile(file_name="a.pdf", media_type=PDF, content=b"")

    with pytest.raises(ValidationError):
        source.file_name = "b.pdf"


def test_scoring_result_clamps_every_score():
    result = ScoringResult(
        match_score=-5,
        skills={"Python": 140, "Go": None},
        experience={"Backend": -1},
        years_of_experience=-3,
    )

    assert result.match_score == 0
    assert result.skills == {"Python": 100, "Go": 0}
    assert result.experience == {"Backend": 0}
    assert result.years_of_experience == 0


def test_scoring_result_failure_placeholder():
    result = ScoringResult.failure("Unsupported file type: text/plain")

    assert result.match_score == 0
    assert result.summary == "Error: Unsupported file type: text/plain"
    assert result.skills == {}
    assert result.interview_questions == []


def test_scoring_result_record_uses_camel_case():
    record = ScoringResult(match_score=70, years_of_experience=4, requirement_coverage={"Python": 1.0}).to_record()

    assert record["matchScore"] == 70
    assert record["yearsOfExperience"] == 4
    assert record["requirementCoverage"] == {"Python": 1.0}
    assert "match_score" not in record
    assert ScoringResult.model_validate(record).match_score == 70


def test_job_position_keeps_extra_columns():
    job = JobPosition.model_validate({"id": 12, "title": "QA", "department": "Quality"})

    assert job.id == "12"
    assert job.requirements == []
    assert job.model_dump()["department"] == "Quality"


def test_analysis_record_reads_stored_row():
    record = AnalysisRecord.model_validate(
        {
            "id": 5,
            "candidate_id": "c-1",
            "file_name": "alice.pdf",
            "analysis_results": {"matchScore": 55, "summary": "ok"},
        }
    )

    assert record.id == "5"
    assert record.analysis_results.match_score == 55
