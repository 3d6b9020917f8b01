"""Bounded retry with jittered exponential backoff."""

from __future__ import annotations

import random
import time
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

import structlog

T = TypeVar("T")

DEFAULT_RETRY_ON: frozenset[str] = frozenset({"rate_limited", "unavailable"})


@dataclass(frozen=True)
class RetryPolicy:
    """Retry settings keyed by the ``kind`` attribute of raised errors."""

    max_attempts: int = 3
    base_delay: float = 1.0
    max_delay: float = 10.0
    jitter: bool = True
    retry_on: frozenset[str] = DEFAULT_RETRY_ON
    kind_delays: dict[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        object.__setattr__(self, "retry_on", frozenset(self.retry_on))

    @classmethod
    def from_settings(cls, settings: dict[str, Any] | None = None) -> "RetryPolicy":
        return cls(**(settings or {}))

    def should_retry(self, exc: BaseException) -> bool:
        return getattr(exc, "kind", None) in self.retry_on

    def delay_for(self, attempt: int, exc: BaseException, rng: Callable[[], float]) -> float:
        """Delay before retry number ``attempt`` (1-based)."""
        base = self.kind_delays.get(getattr(exc, "kind", ""), self.base_delay)
        delay = min(base * (2 ** (attempt - 1)), self.max_delay)
        if self.jitter:
            delay *= rng()
        retry_after = getattr(exc, "retry_after", None)
        if retry_after:
            delay = max(delay, min(float(retry_after), self.max_delay))
        return delay


def call_with_retry(
    func: Callable[..., T],
    *args: Any,
    policy: RetryPolicy | None = None,
    sleep: Callable[[float], None] = time.sleep,
    rng: Callable[[], float] = random.random,
    **kwargs: Any,
) -> T:
    """Call ``func`` and retry retryable failures until attempts run out.

    The last error is re-raised unchanged once ``policy.max_attempts`` calls
    have failed, or immediately when the error kind is not retryable.
    """

    policy = policy or RetryPolicy()
    logger = structlog.get_logger(__name__)
    attempt = 1
    while True:
        try:
            return func(*args, **kwargs)
        except Exception as exc:
            if attempt >= policy.max_attempts or not policy.should_retry(exc):
                raise
            delay = policy.delay_for(attempt, exc, rng)
            logger.info(
                "retry.backoff",
                attempt=attempt,
                max_attempts=policy.max_attempts,
                kind=getattr(exc, "kind", type(exc).__name__),
                delay=round(delay, 3),
            )
            sleep(delay)
            attempt += 1


__all__ = ["DEFAULT_RETRY_ON", "RetryPolicy", "call_with_retry"]
