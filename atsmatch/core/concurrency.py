from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Sequence, TypeVar

from atsmatch.core.errors import MalformedResponse, ServiceUnavailable

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

TRANSIENT_ERRORS: tuple[type[BaseException], ...] = (ServiceUnavailable, MalformedResponse)


async def run_settled_batches(
    items: Sequence[T],
    worker: Callable[[T], Awaitable[R]],
    *,
    batch_size: int,
) -> list[R | BaseException]:
    """Run ``worker`` over ``items`` in fixed-size concurrent batches.

    Each batch is joined with all-settled semantics: a failing item is returned
    as its exception in place and never aborts its siblings. Output order
    matches input order.
    """
    if batch_size < 1:
        raise ValueError("batch_size must be >= 1")

    results: list[R | BaseException] = []
    for start in range(0, len(items), batch_size):
        batch = items[start : start + batch_size]
        settled = await asyncio.gather(*(worker(item) for item in batch), return_exceptions=True)
        failures = sum(1 for outcome in settled if isinstance(outcome, BaseException))
        if failures:
            logger.warning(
                "batch_partial_failure batch_start=%s size=%s failures=%s",
                start,
                len(batch),
                failures,
            )
        results.extend(settled)
    return results


async def call_with_retry(
    operation: Callable[[str], Awaitable[R]],
    *,
    model: str,
    substitute_model: str | None,
    max_attempts: int = 3,
    base_delay_s: float = 0.3,
    multiplier: float = 3.0,
    retry_on: tuple[type[BaseException], ...] = TRANSIENT_ERRORS,
) -> R:
    """Call ``operation(model)`` with exponential backoff between attempts.

    Attempt ``n`` (0-based) that fails with a ``retry_on`` error sleeps
    ``base_delay_s * multiplier**n`` before the next one. Retries use
    ``substitute_model`` when one is configured. Other errors propagate at once.
    """
    attempts = max(1, int(max_attempts))
    for attempt in range(attempts):
        current_model = model if attempt == 0 or not substitute_model else substitute_model
        try:
            return await operation(current_model)
        except retry_on as exc:
            if attempt == attempts - 1:
                raise
            delay = base_delay_s * (multiplier**attempt)
            logger.warning(
                "service_call_retry attempt=%s/%s model=%s delay_s=%.2f error=%s",
                attempt + 1,
                attempts,
                current_model,
                delay,
                exc,
            )
            await asyncio.sleep(delay)
    raise RuntimeError("unreachable")  # pragma: no cover
