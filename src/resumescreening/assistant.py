"""Recruiter chat assistant grounded in stored candidate data."""

from __future__ import annotations

from typing import Sequence

import structlog

from .llm import HTTPLLMClient
from .schemas import AnalysisRecord, CandidateRecord, ChatMessage, JobPosition
from .stores import CandidateStore

DEFAULT_SESSION = "default-session"

_GUIDELINES = """RESPONSE GUIDELINES:
1. Answer only what is asked, directly and concisely.
2. Use bullet points for lists.
3. Keep answers to 3-4 sentences unless more detail is requested.
4. Quote stored data exactly when asked about it."""


def build_system_prompt(
    candidate: CandidateRecord | None = None,
    analyses: Sequence[AnalysisRecord] = (),
    job: JobPosition | None = None,
) -> str:
    lines = ["You are an AI recruitment assistant helping a recruiter assess candidates."]

    if candidate:
        lines += [
            "",
            "CANDIDATE DATA:",
            f"- Name: {candidate.name}",
            f"- Email: {candidate.email or 'Not provided'}",
            f"- Phone: {candidate.phone or 'Not provided'}",
            f"- Status: {candidate.status}",
        ]
        if analyses:
            latest = analyses[0].analysis_results
            lines += [
                "",
                "LATEST RESUME ANALYSIS:",
                f"- File: {analyses[0].file_name}",
                f"- Match score: {latest.match_score:g}",
                f"- Summary: {latest.summary}",
            ]
            if latest.strengths:
                lines.append(f"- Strengths: {', '.join(latest.strengths)}")
            if latest.gaps:
                lines.append(f"- Gaps: {', '.join(latest.gaps)}")
            if latest.matching_skills:
                lines.append(f"- Matching skills: {', '.join(latest.matching_skills)}")
            if latest.missing_skills:
                lines.append(f"- Missing skills: {', '.join(latest.missing_skills)}")
        else:
            lines += ["", "No resume analysis is available for this candidate."]

    if job:
        lines += ["", "JOB CONTEXT:", f"- Title: {job.title}"]
        if job.description:
            lines.append(f"- Description: {job.description}")
        if job.requirements:
            lines.append(f"- Requirements: {', '.join(job.requirements)}")

    lines += ["", _GUIDELINES]
    return "\n".join(lines)


class RecruiterAssistant:
    """Answer recruiter questions about a candidate and persist the exchange."""

    def __init__(self, *, llm_client: HTTPLLMClient, store: CandidateStore, max_tokens: int = 500):
        self._llm = llm_client
        self._store = store
        self._max_tokens = max_tokens
        self._logger = structlog.get_logger(__name__)

    def reply(
        self,
        message: str,
        *,
        candidate_id: str | None = None,
        job_position_id: str | None = None,
        history: Sequence[ChatMessage] | None = None,
    ) -> str:
        if not message.strip():
            raise ValueError("message must not be empty")

        session_id = candidate_id or DEFAULT_SESSION
        candidate = self._store.get_candidate(candidate_id) if candidate_id else None
        analyses = self._store.list_analyses(candidate_id) if candidate_id else []
        job = self._store.get_job_position(job_position_id) if job_position_id else None
        if history is None:
            history = self._store.list_chat_messages(session_id)

        messages = [{"role": "system", "content": build_system_prompt(candidate, analyses, job)}]
        messages += [
            {"role": entry.sender, "content": entry.content}
            for entry in history
        ]
        messages.append({"role": "user", "content": message})

        self._store.save_chat_message(
            ChatMessage(session_id=session_id, sender="user", content=message)
        )
        answer = self._llm.chat(messages, max_tokens=self._max_tokens)
        self._store.save_chat_message(
            ChatMessage(session_id=session_id, sender="assistant", content=answer)
        )
        self._logger.info(
            "assistant.replied",
            session_id=session_id,
            history_size=len(history),
        )
        return answer


__all__ = ["DEFAULT_SESSION", "RecruiterAssistant", "build_system_prompt"]
