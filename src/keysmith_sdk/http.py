"""HTTP transport for the KeySmith SDK.

Thin wrapper over ``httpx`` that executes one request at a time, traces it
and maps transport failures onto SDK errors. Status codes are left to the
caller; nothing is retried.
"""

from __future__ import annotations

import ssl
from typing import TYPE_CHECKING, Any

import httpx

from .errors import ConfigurationError, NetworkError, RequestTimeoutError
from .telemetry import Telemetry

if TYPE_CHECKING:
    from .config import KeySmithConfig

USER_AGENT = "keysmith-sdk/0.1.0 Python"

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
XML_CONTENT_TYPE = "application/xml"


def create_http_client(config: KeySmithConfig) -> httpx.Client:
    """Create configured sync HTTP client.

    Args:
        config: SDK configuration.

    Returns:
        Configured httpx.Client. Server certificates are checked against
        ``config.ca_bundle`` when set, otherwise the default trust store.
    """
    return httpx.Client(
        timeout=httpx.Timeout(
            connect=config.connect_timeout,
            read=config.timeout,
            write=config.timeout,
            pool=config.timeout,
        ),
        headers={
            "User-Agent": USER_AGENT,
            "Accept": "application/json",
        },
        verify=_trust(config.ca_bundle),
        follow_redirects=False,
    )


def _trust(ca_bundle: str | None) -> ssl.SSLContext | bool:
    """TLS verification setting: the default trust store, or only the bundle."""
    if ca_bundle is None:
        return True
    try:
        return ssl.create_default_context(cafile=ca_bundle)
    except OSError as e:
        msg = f"CA bundle could not be loaded: {e}"
        raise ConfigurationError(msg, field="ca_bundle") from e


class HttpGateway:
    """Executes GET/POST/DELETE requests against absolute URLs."""

    def __init__(self, client: httpx.Client, telemetry: Telemetry | None = None) -> None:
        self._client = client
        self.telemetry = telemetry or Telemetry()
        self._logger = self.telemetry.logger

    @property
    def client(self) -> httpx.Client:
        return self._client

    def get(
        self,
        url: str,
        *,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        return self.request("GET", url, headers=headers)

    def post(
        self,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        data: dict[str, str] | None = None,
        content: str | bytes | None = None,
    ) -> httpx.Response:
        return self.request("POST", url, headers=headers, data=data, content=content)

    def delete(
        self,
        url: str,
        *,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        return self.request("DELETE", url, headers=headers)

    def request(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """Execute a single HTTP request.

        Args:
            method: HTTP method.
            url: Absolute request URL.
            **kwargs: Additional ``httpx`` request arguments.

        Returns:
            HTTP response, whatever its status.

        Raises:
            RequestTimeoutError: If the request timed out.
            NetworkError: On any other transport failure.
        """
        request_kwargs = {k: v for k, v in kwargs.items() if v is not None}

        with self.telemetry.span(
            "keysmith.http_request",
            attributes={"http.method": method, "http.url": url},
        ) as span:
            try:
                response = self._client.request(method, url, **request_kwargs)
            except httpx.TimeoutException as e:
                self._logger.warning("Request timed out", method=method, url=url)
                raise RequestTimeoutError(f"Request timed out: {e}", cause=e) from e
            except httpx.HTTPError as e:
                self._logger.warning(
                    "Request failed", method=method, url=url, error=str(e)
                )
                raise NetworkError(f"HTTP error: {e}", cause=e) from e

            span.set_attribute("http.status_code", response.status_code)
            self._logger.debug(
                "Request completed",
                method=method,
                url=url,
                status_code=response.status_code,
            )
            return response
