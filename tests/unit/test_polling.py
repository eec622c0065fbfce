"""Unit tests for caller-side polling helpers."""

from __future__ import annotations

import httpx
import pytest

from keysmith_sdk.core import SessionState
from keysmith_sdk.errors import PollTimeoutError, SessionExpiredError
from keysmith_sdk.models import Job, JobKind
from keysmith_sdk.polling import poll_until, wait_for_authorization, wait_for_job

from ..service_stub import script_approval, script_login, script_pending


class FakeClock:
    """Monotonic clock advanced only by sleeping."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class TestPollUntil:
    """Tests for poll_until."""

    def test_returns_first_accepted_result(self) -> None:
        clock = FakeClock()
        results = iter([1, 2, 3])

        value = poll_until(
            lambda: next(results),
            lambda v: v == 3,
            interval=1.5,
            sleep=clock.sleep,
            clock=clock,
        )

        assert value == 3
        assert clock.sleeps == [1.5, 1.5]

    def test_deadline(self) -> None:
        clock = FakeClock()

        with pytest.raises(PollTimeoutError) as exc_info:
            poll_until(
                lambda: False,
                bool,
                interval=2.0,
                timeout=5.0,
                sleep=clock.sleep,
                clock=clock,
            )

        assert exc_info.value.details == {"timeout_seconds": 5.0, "attempts": 3}
        assert clock.sleeps == [2.0, 2.0]

    def test_poll_errors_propagate(self) -> None:
        def poll() -> bool:
            raise SessionExpiredError()

        with pytest.raises(SessionExpiredError):
            poll_until(poll, bool, sleep=lambda s: None)


class TestWaitHelpers:
    """Tests for the client-level wait helpers."""

    def test_wait_for_authorization(self, make_client, service) -> None:
        script_login(service)
        script_pending(service, times=3)
        script_approval(service)
        client = make_client()
        client.get_login_url()
        sleeps: list[float] = []

        wait_for_authorization(client, sleep=sleeps.append)

        assert client.state == SessionState.AUTHENTICATED
        assert client.credentials.access_token == "A1"
        assert sleeps == [2.0, 2.0, 2.0]

    def test_wait_for_job(self, signed_in, service) -> None:
        service.json("POST", "/v1/signer/jobs", 202, {"id": "j1"})
        service.reply(
            "GET",
            "/v1/signer/jobs/j1",
            httpx.Response(202),
            httpx.Response(200, text="<signed/>"),
        )
        job = signed_in.submit_job(JobKind.SIGN, "<cpl/>")
        sleeps: list[float] = []

        result = wait_for_job(signed_in, job, interval=0.1, sleep=sleeps.append)

        assert result == "<signed/>"
        assert sleeps == [0.1]


def test_explicit_zero_interval_is_kept(signed_in, service) -> None:
    service.reply(
        "GET",
        "/v1/signer/jobs/j0",
        httpx.Response(202),
        httpx.Response(200, text="<signed/>"),
    )
    job = Job(id="j0", kind=JobKind.SIGN, submitted_payload="<cpl/>")
    sleeps: list[float] = []

    assert wait_for_job(signed_in, job, interval=0, sleep=sleeps.append) == "<signed/>"
    assert sleeps == [0]
