from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional, TypeVar

import openai

logger = logging.getLogger("uvicorn.error")

T = TypeVar("T")


def _status_of(exc: BaseException) -> Optional[int]:
    for attr in ("status_code", "status"):
        val = getattr(exc, attr, None)
        if isinstance(val, int):
            return val
    return None


def is_rate_limit_error(exc: BaseException) -> bool:
    if isinstance(exc, openai.RateLimitError):
        return True
    return _status_of(exc) == 429


def suggested_retry_delay(exc: BaseException) -> Optional[float]:
    """Provider-suggested wait in seconds, read from the error's response headers."""
    response = getattr(exc, "response", None)
    headers = getattr(response, "headers", None)
    if not headers:
        return None
    ms = headers.get("retry-after-ms")
    if ms:
        try:
            return float(ms) / 1000.0
        except ValueError:
            pass
    secs = headers.get("retry-after")
    if secs:
        try:
            return float(secs)
        except ValueError:
            return None
    return None


@dataclass
class RetryPolicy:
    max_attempts: int = 3
    base_delay: float = 5.0
    multiplier: float = 2.0
    jitter: float = 0.0
    is_retryable: Callable[[BaseException], bool] = is_rate_limit_error
    retry_delay: Callable[[BaseException], Optional[float]] = suggested_retry_delay
    sleep: Callable[[float], Awaitable[None]] = field(default=asyncio.sleep, repr=False)

    async def run(self, fn: Callable[[], Awaitable[T]]) -> T:
        """Call ``fn`` and retry it on retryable errors.

        ``max_attempts`` bounds the number of retries after the first call.
        Non-retryable errors are raised straight away; once retries are
        exhausted the last retryable error is raised unchanged.
        """
        retries = 0
        delay = self.base_delay
        while True:
            try:
                return await fn()
            except Exception as e:
                if not self.is_retryable(e) or retries >= self.max_attempts:
                    raise
                wait = self.retry_delay(e)
                if wait is None:
                    wait = delay
                if self.jitter:
                    wait += random.uniform(0, self.jitter)
                retries += 1
                logger.warning("llm rate limited attempt=%s/%s retry_in=%.2fs", retries, self.max_attempts, wait)
                await self.sleep(wait)
                delay *= self.multiplier
