"""
Retry with exponential backoff + jitter, shared by page rendering and the
browser lifecycle (launch / close).

    delay(attempt) = min(2**attempt * BASE, CAP) + uniform(0, JITTER)

``attempt`` is zero-based, so with the defaults the waits are roughly
1s, 2s, 4s, 8s, 8s … each plus up to one second of jitter.
"""
from __future__ import annotations

import asyncio
import random
from typing import Awaitable, Callable, TypeVar

from site_render.constants import BACKOFF_BASE_S, BACKOFF_CAP_S, BACKOFF_JITTER_S
from site_render.logger import log

T = TypeVar("T")

Sleeper = Callable[[float], Awaitable[None]]


def backoff_delay(
    attempt: int,
    *,
    base: float = BACKOFF_BASE_S,
    cap: float = BACKOFF_CAP_S,
    jitter: float = BACKOFF_JITTER_S,
) -> float:
    return min((2 ** attempt) * base, cap) + random.uniform(0, jitter)


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    *,
    retries: int,
    what: str,
    sleep: Sleeper = asyncio.sleep,
) -> T:
    """
    Await ``operation()`` up to ``retries + 1`` times.

    Every failure but the last is logged and followed by a backoff sleep; the
    last one is re-raised unchanged so callers can wrap it in their own error
    type. Cancellation is never retried.
    """
    tries = max(retries, 0) + 1
    for attempt in range(tries):
        try:
            return await operation()
        except Exception as exc:
            if attempt + 1 >= tries:
                log.error("✖ %s failed (attempt %d/%d): %s", what, attempt + 1, tries, exc)
                raise
            wait = backoff_delay(attempt)
            log.warning(
                "⏳ %s failed (attempt %d/%d): %s - retrying in %.1fs",
                what, attempt + 1, tries, exc, wait,
            )
            await sleep(wait)
    raise AssertionError("unreachable")  # pragma: no cover
