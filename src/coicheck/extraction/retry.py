"""
coicheck Retryable Invoker

Runs a remote extraction call with bounded exponential backoff.

- Up to `max_retries` additional attempts (4 calls in total by default)
- Waits base_delay_ms * 2**attempt between attempts: 1000, 2000, 4000 ms
- Errors whose message mentions "not configured", "invalid" or
  "unauthorized" are permanent and re-raised immediately
- A returned {"error": ...} payload is treated like a raised error
- The final error is always re-raised, never swallowed

The sleep function and clock are injectable so tests can run the full
schedule without waiting.
"""
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Mapping, Optional

from ..config import DEFAULT_MAX_RETRIES, DEFAULT_RETRY_BASE_DELAY_MS, Settings
from ..exceptions import ExtractionServiceError

logger = logging.getLogger(__name__)

NON_RETRIABLE_MARKERS = ("not configured", "invalid", "unauthorized")

RemoteCall = Callable[[], Awaitable[Any]]
SleepFn = Callable[[float], Awaitable[Any]]


@dataclass(frozen=True)
class RetryPolicy:
    """
    Backoff schedule and error triage.

    Attributes:
        max_retries: Additional attempts after the first call
        base_delay_ms: Delay before the first retry, doubled each time
        non_retriable_markers: Message fragments marking permanent errors
    """
    max_retries: int = DEFAULT_MAX_RETRIES
    base_delay_ms: int = DEFAULT_RETRY_BASE_DELAY_MS
    non_retriable_markers: tuple[str, ...] = NON_RETRIABLE_MARKERS

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {self.max_retries}")
        if self.base_delay_ms < 0:
            raise ValueError(f"base_delay_ms must be >= 0, got {self.base_delay_ms}")

    @classmethod
    def from_settings(cls, settings: Settings) -> "RetryPolicy":
        return cls(
            max_retries=settings.max_retries,
            base_delay_ms=settings.retry_base_delay_ms,
        )

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def delay_for(self, attempt: int) -> int:
        """Delay in ms after the failed attempt with 0-based index `attempt`."""
        return self.base_delay_ms * (2 ** attempt)

    def is_retriable(self, error: BaseException) -> bool:
        message = str(getattr(error, "message", None) or error).lower()
        return not any(marker in message for marker in self.non_retriable_markers)


@dataclass
class RetryStats:
    """What happened during the last invocation."""
    attempts: int = 0
    retries: int = 0
    total_wait_ms: int = 0
    waits_ms: list[int] = field(default_factory=list)
    elapsed_seconds: float = 0.0


def _error_from_result(result: Any) -> Optional[ExtractionServiceError]:
    """Convert a {data, error} result carrying an error into an exception."""
    if not isinstance(result, Mapping):
        return None
    error = result.get("error")
    if not error:
        return None
    if isinstance(error, Mapping):
        message = error.get("message") or "Failed to call extraction service"
        status_code = error.get("status")
    else:
        message = str(error)
        status_code = None
    return ExtractionServiceError(message=str(message), status_code=status_code)


class RetryableInvoker:
    """
    Wraps an async remote call with retry and backoff.

    Usage:
        invoker = RetryableInvoker(RetryPolicy(max_retries=3))
        result = await invoker.invoke(lambda: client.invoke("extract-coi", body))
        invoker.last_stats.retries  # 0 on first-try success

    `last_stats` is shared by every call on the invoker. Concurrent callers
    pass their own RetryStats to invoke() and read that instead.
    """

    def __init__(
        self,
        policy: Optional[RetryPolicy] = None,
        sleep: SleepFn = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.policy = policy or RetryPolicy()
        self._sleep = sleep
        self._clock = clock
        self.last_stats = RetryStats()

    async def invoke(
        self,
        call: RemoteCall,
        label: str = "remote call",
        stats: Optional[RetryStats] = None,
    ) -> Any:
        """
        Run `call` until it succeeds, fails permanently or runs out of attempts.

        `stats` is filled in as the call progresses; a fresh RetryStats is
        used when none is given.

        Raises:
            The last error raised by `call` (or ExtractionServiceError for a
            returned error payload).
        """
        policy = self.policy
        if stats is None:
            stats = RetryStats()
        self.last_stats = stats
        started = self._clock()
        last_error: Optional[BaseException] = None

        for attempt in range(policy.max_attempts):
            stats.attempts = attempt + 1
            try:
                result = await call()
                error = _error_from_result(result)
                if error is not None:
                    raise error
                stats.elapsed_seconds = self._clock() - started
                return result
            except Exception as exc:
                last_error = exc
                if not policy.is_retriable(exc):
                    stats.elapsed_seconds = self._clock() - started
                    raise

            if attempt < policy.max_retries:
                wait_ms = policy.delay_for(attempt)
                logger.info(
                    "%s attempt %d failed, retrying in %dms...",
                    label,
                    attempt + 1,
                    wait_ms,
                    extra={
                        "function": label,
                        "attempt": attempt + 1,
                        "max_attempts": policy.max_attempts,
                        "wait_ms": wait_ms,
                        "error": str(last_error),
                    },
                )
                stats.retries += 1
                stats.waits_ms.append(wait_ms)
                stats.total_wait_ms += wait_ms
                await self._sleep(wait_ms / 1000)

        stats.elapsed_seconds = self._clock() - started
        raise last_error  # type: ignore[misc]


async def invoke_with_retry(
    call: RemoteCall,
    policy: Optional[RetryPolicy] = None,
    sleep: SleepFn = asyncio.sleep,
) -> Any:
    """Convenience function: one-shot RetryableInvoker."""
    return await RetryableInvoker(policy, sleep=sleep).invoke(call)
