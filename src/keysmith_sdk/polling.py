"""Caller-side polling loops.

The client never waits on its own. These helpers re-run a single poll with a
fixed delay until it reports completion, optionally bounded by a deadline.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Callable, TypeVar

from .errors import PollTimeoutError

if TYPE_CHECKING:
    from .client import KeySmithClient
    from .models import Job

T = TypeVar("T")

DEFAULT_POLL_INTERVAL = 2.0


def poll_until(
    poll: Callable[[], T],
    done: Callable[[T], bool],
    *,
    interval: float = DEFAULT_POLL_INTERVAL,
    timeout: float | None = None,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> T:
    """Call ``poll`` until ``done`` accepts its result.

    Args:
        poll: Single poll attempt; its errors propagate unchanged.
        done: Predicate on the poll result.
        interval: Delay between attempts in seconds.
        timeout: Overall deadline in seconds, or None to wait forever.
        sleep: Sleep function.
        clock: Monotonic clock.

    Returns:
        The first accepted poll result.

    Raises:
        PollTimeoutError: If the deadline passes first.
    """
    deadline = None if timeout is None else clock() + timeout
    attempts = 0

    while True:
        result = poll()
        attempts += 1
        if done(result):
            return result

        if deadline is not None and clock() + interval > deadline:
            raise PollTimeoutError(timeout_seconds=timeout, attempts=attempts)
        sleep(interval)


def wait_for_authorization(
    client: KeySmithClient,
    *,
    timeout: float | None = None,
    interval: float | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """Block until the user completes the browser sign-in."""
    client.telemetry.logger.info("Waiting for user to sign in")
    poll_until(
        client.is_authenticated,
        bool,
        interval=client.config.poll_interval if interval is None else interval,
        timeout=timeout,
        sleep=sleep,
    )


def wait_for_job(
    client: KeySmithClient,
    job: Job,
    *,
    timeout: float | None = None,
    interval: float | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> str:
    """Block until a job is ready and return its result body."""
    client.telemetry.logger.info("Waiting for job", kind=job.kind.value, job_id=job.id)
    status = poll_until(
        lambda: client.poll_job(job),
        lambda s: s.ready,
        interval=client.config.poll_interval if interval is None else interval,
        timeout=timeout,
        sleep=sleep,
    )
    return status.result
