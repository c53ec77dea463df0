"""Readiness polling for resources that provision asynchronously.

The backend acknowledges a create before the entity is usable; these
helpers keep the calling operation suspended until the entity reports
ready, the caller cancels, or an optional deadline passes.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum

from loguru import logger


class PollStatus(Enum):
    """Terminal states of a readiness poll."""

    READY = "ready"
    CANCELLED = "cancelled"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True, slots=True)
class PollResult[T]:
    status: PollStatus
    value: T | None
    attempts: int

    @property
    def ready(self) -> bool:
        return self.status is PollStatus.READY


async def _tick(interval: float, cancel: asyncio.Event | None) -> bool:
    """Sleep one interval. Returns True if ``cancel`` fired during the wait."""
    if cancel is None:
        await asyncio.sleep(interval)
        return False
    try:
        await asyncio.wait_for(cancel.wait(), timeout=interval)
    except TimeoutError:
        return False
    return True


async def poll_until_ready[T](
    poll_fn: Callable[[], Awaitable[T]],
    ready_check: Callable[[T], bool],
    *,
    interval: float = 1.0,
    timeout: float | None = None,
    cancel: asyncio.Event | None = None,
    description: str = "resource",
) -> PollResult[T]:
    """Query ``poll_fn`` every ``interval`` seconds until ``ready_check`` passes.

    The first query happens one interval after entry. Errors raised by
    ``poll_fn`` propagate unchanged and end the poll. Setting ``cancel``
    ends the poll with ``PollStatus.CANCELLED`` without waiting for the
    current interval to elapse. With ``timeout=None`` the poll has no
    deadline.

    Args:
        poll_fn: Async function returning the latest view of the resource.
        ready_check: Returns True when the resource is ready.
        interval: Seconds between queries.
        timeout: Maximum seconds to wait, or None to wait indefinitely.
        cancel: Event the caller sets to abandon the wait.
        description: Description for log messages.

    Returns:
        The terminal status, the last value seen, and the number of queries.
    """
    if interval <= 0:
        raise ValueError(f"interval must be positive, got {interval}")

    log = logger.bind(component="wait")
    loop = asyncio.get_running_loop()
    deadline = None if timeout is None else loop.time() + timeout
    attempts = 0
    last: T | None = None

    while True:
        if cancel is not None and cancel.is_set():
            log.debug("Stopped waiting for {what}: cancelled", what=description)
            return PollResult(PollStatus.CANCELLED, last, attempts)

        wait = interval
        if deadline is not None:
            remaining = deadline - loop.time()
            if remaining <= 0:
                log.warning(
                    "Timed out waiting for {what} after {n} queries",
                    what=description, n=attempts,
                )
                return PollResult(PollStatus.TIMED_OUT, last, attempts)
            wait = min(interval, remaining)

        if await _tick(wait, cancel):
            log.debug("Stopped waiting for {what}: cancelled", what=description)
            return PollResult(PollStatus.CANCELLED, last, attempts)

        if deadline is not None and wait < interval:
            continue

        last = await poll_fn()
        attempts += 1
        if ready_check(last):
            log.trace("{what} ready after {n} queries", what=description, n=attempts)
            return PollResult(PollStatus.READY, last, attempts)
