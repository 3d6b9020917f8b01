"""Chat-completion client and resume scoring against a job description."""

from __future__ import annotations

import json
import re
import socket
from typing import Any, Sequence
from urllib import error, request

import structlog
from pydantic import ValidationError

from .schemas import AnalysisPayload, ScoringResult

DEFAULT_ENDPOINT = "https://openrouter.ai/api/v1/chat/completions"
DEFAULT_MODEL = "mistralai/mixtral-8x7b-instruct"

_CODE_FENCE = re.compile(r"^\s*```(?:json)?\s*\n?(.*?)\n?\s*```\s*$", re.DOTALL)


class ScoringError(Exception):
    """Failure reported by, or while talking to, the scoring model."""

    kind = "scoring_error"


class MalformedResponse(ScoringError):
    kind = "malformed_response"


class Unauthorized(ScoringError):
    kind = "unauthorized"


class RateLimited(ScoringError):
    kind = "rate_limited"

    def __init__(self, message: str, *, retry_after: float | None = None):
        super().__init__(message)
        self.retry_after = retry_after


class Unavailable(ScoringError):
    kind = "unavailable"


class HTTPLLMClient:
    """Minimal client for OpenAI-compatible chat-completion endpoints."""

    def __init__(
        self,
        endpoint: str | None = None,
        api_key: str | None = None,
        *,
        model: str | None = None,
        timeout: float = 60.0,
        temperature: float = 0.7,
        max_tokens: int = 2000,
        app_name: str = "Resume Screening",
    ):
        self._endpoint = endpoint or DEFAULT_ENDPOINT
        self._api_key = api_key
        self._model = model or DEFAULT_MODEL
        self._timeout = timeout
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._app_name = app_name
        self._logger = structlog.get_logger(__name__)

    def chat(
        self,
        messages: Sequence[dict[str, str]],
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """Send ``messages`` and return the first choice's content."""
        if not self._api_key:
            raise Unauthorized("LLM API key is not configured")

        payload = {
            "model": self._model,
            "messages": list(messages),
            "temperature": self._temperature if temperature is None else temperature,
            "max_tokens": self._max_tokens if max_tokens is None else max_tokens,
        }
        data = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._api_key}",
            "X-Title": self._app_name,
        }
        req = request.Request(self._endpoint, data=data, headers=headers, method="POST")

        try:
            with request.urlopen(req, timeout=self._timeout) as resp:
                body = resp.read().decode("utf-8")
        except error.HTTPError as exc:
            raise self._classify_http_error(exc) from exc
        except (error.URLError, socket.timeout, ConnectionError) as exc:
            self._logger.warning("llm.request_failed", endpoint=self._endpoint, error=str(exc))
            raise Unavailable(f"LLM endpoint unreachable: {exc}") from exc

        try:
            content = json.loads(body)["choices"][0]["message"]["content"]
        except (json.JSONDecodeError, KeyError, IndexError, TypeError) as exc:
            raise MalformedResponse("Invalid response format from LLM endpoint") from exc
        if not isinstance(content, str):
            raise MalformedResponse("LLM response content is not text")
        return content

    def _classify_http_error(self, exc: error.HTTPError) -> ScoringError:
        detail = _error_detail(exc)
        self._logger.warning(
            "llm.request_failed",
            endpoint=self._endpoint,
            status=exc.code,
            error=detail,
        )
        message = f"LLM API error: {exc.code} {detail}".strip()
        if exc.code in (401, 403):
            return Unauthorized(message)
        if exc.code == 429:
            return RateLimited(message, retry_after=_retry_after(exc))
        if exc.code == 408 or exc.code >= 500:
            return Unavailable(message)
        return ScoringError(message)


SCORING_SYSTEM_PROMPT = (
    "You are an expert HR professional and technical recruiter. "
    "Respond with valid JSON only."
)

SCORING_SCHEMA = """{
  "overall_match": {
    "score": number (0-100),
    "summary": "Brief summary of overall fit",
    "strengths": ["Key strengths that match the role"],
    "gaps": ["Potential gaps or missing requirements"]
  },
  "skills_analysis": {
    "matching_skills": ["Skills from the resume that match the job requirements"],
    "missing_skills": ["Required skills not found in the resume"],
    "additional_skills": ["Notable skills beyond the requirements"],
    "skill_scores": {"<skill name>": number (0-100)}
  },
  "experience_analysis": {
    "relevant_experience": ["Key relevant experience points"],
    "experience_gaps": ["Areas where experience might be lacking"],
    "years_of_experience": number,
    "area_scores": {"<experience area>": number (0-100)}
  },
  "interview_questions": [
    {"question": "Question to ask the candidate", "purpose": "What it evaluates"}
  ]
}"""


def build_scoring_messages(candidate_text: str, job_description: str) -> list[dict[str, str]]:
    prompt = (
        "Analyze the candidate's resume against the job role and description below.\n\n"
        f"Job Role and Description:\n{job_description}\n\n"
        f"Resume:\n{candidate_text}\n\n"
        "Reply with a JSON document in exactly this format:\n"
        f"{SCORING_SCHEMA}\n\n"
        "Base the scores on technical skills, relevant experience, years of "
        "experience in key areas and concrete achievements. Suggest three interview "
        "questions tailored to the candidate's background."
    )
    return [
        {"role": "system", "content": SCORING_SYSTEM_PROMPT},
        {"role": "user", "content": prompt},
    ]


def parse_scoring_response(content: str) -> ScoringResult:
    """Validate model output against the analysis schema.

    A Markdown code fence around the document is tolerated; anything else that
    is not a conforming JSON object raises ``MalformedResponse``.
    """

    fenced = _CODE_FENCE.match(content)
    raw = fenced.group(1) if fenced else content
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise MalformedResponse(f"Failed to parse AI response as JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise MalformedResponse("AI response is not a JSON object")
    try:
        payload = AnalysisPayload.model_validate(data)
    except ValidationError as exc:
        raise MalformedResponse(
            f"AI response does not match the analysis schema: {exc.error_count()} error(s)"
        ) from exc
    return ScoringResult.from_payload(payload)


class ScoringClient:
    """Score resume text against a job description with a chat model."""

    def __init__(self, llm_client: HTTPLLMClient, *, temperature: float | None = None):
        self._llm = llm_client
        self._temperature = temperature
        self._logger = structlog.get_logger(__name__)

    def score(self, candidate_text: str, job_description: str) -> ScoringResult:
        if not candidate_text.strip() or not job_description.strip():
            raise ValueError("candidate_text and job_description must be non-empty")
        messages = build_scoring_messages(candidate_text, job_description)
        content = self._llm.chat(messages, temperature=self._temperature)
        result = parse_scoring_response(content)
        self._logger.debug("scoring.completed", match_score=result.match_score)
        return result


def _error_detail(exc: error.HTTPError) -> str:
    try:
        body: Any = json.loads(exc.read().decode("utf-8") or "{}")
    except (ValueError, OSError, AttributeError):
        return exc.reason if isinstance(exc.reason, str) else ""
    if isinstance(body, dict):
        err = body.get("error")
        if isinstance(err, dict) and err.get("message"):
            return str(err["message"])
        if isinstance(err, str):
            return err
    return exc.reason if isinstance(exc.reason, str) else ""


def _retry_after(exc: error.HTTPError) -> float | None:
    value = exc.headers.get("Retry-After") if exc.headers else None
    try:
        return float(value) if value is not None else None
    except ValueError:
        return None


__all__ = [
    "HTTPLLMClient",
    "MalformedResponse",
    "RateLimited",
    "ScoringClient",
    "ScoringError",
    "Unauthorized",
    "Unavailable",
    "build_scoring_messages",
    "parse_scoring_response",
]
