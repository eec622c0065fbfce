"""
Shared test fixtures for KeySmith SDK tests.

Provides the scripted service behind ``httpx.MockTransport``,
configuration and ready-made clients.
"""

from __future__ import annotations

from typing import Callable

import httpx
import pytest

from keysmith_sdk.client import KeySmithClient
from keysmith_sdk.config import KeySmithConfig, TelemetryConfig

from .service_stub import BASE_URL, FakeKeySmith, script_approval, script_login


@pytest.fixture
def config() -> KeySmithConfig:
    """Provide a basic SDK configuration for testing."""
    return KeySmithConfig(
        base_url=BASE_URL,
        client_id="test-client-id",
        revoke_on_close=False,
        telemetry=TelemetryConfig(enabled=False),
    )


@pytest.fixture
def service() -> FakeKeySmith:
    """Provide an empty scripted service."""
    return FakeKeySmith()


@pytest.fixture
def http_client(service: FakeKeySmith) -> httpx.Client:
    """Provide an HTTP client wired to the scripted service."""
    client = httpx.Client(transport=httpx.MockTransport(service))
    yield client
    client.close()


@pytest.fixture
def make_client(
    config: KeySmithConfig, http_client: httpx.Client
) -> Callable[..., KeySmithClient]:
    """Build clients bound to the scripted service."""

    def factory(
        refresh_token: str | None = None,
        *,
        config_override: KeySmithConfig | None = None,
    ) -> KeySmithClient:
        return KeySmithClient(
            config_override or config,
            refresh_token,
            http_client=http_client,
        )

    return factory


@pytest.fixture
def signed_in(
    service: FakeKeySmith, make_client: Callable[..., KeySmithClient]
) -> KeySmithClient:
    """Client that has completed the browser sign-in."""
    script_login(service)
    script_approval(service)
    client = make_client()
    client.get_login_url()
    assert client.is_authenticated() is True
    service.requests.clear()
    return client
