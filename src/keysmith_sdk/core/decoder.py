"""Response decoding for the KeySmith SDK.

Extracts typed fields from JSON response bodies and turns failure responses
into SDK errors with a consistent structure.
"""

from __future__ import annotations

import json
from typing import Any

import httpx

from ..errors import ResponseDecodeError, ServiceCode, ServiceError


class ResponseDecoder:
    """Stateless helpers shared by every component that reads responses."""

    @staticmethod
    def parse_json(response: httpx.Response) -> Any:
        """Parse the response body as JSON.

        Raises:
            ResponseDecodeError: If the body is empty or not JSON.
        """
        if not response.content:
            raise ResponseDecodeError(
                "Response body is empty", status_code=response.status_code
            )
        try:
            document = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ResponseDecodeError(
                f"Response body is not valid JSON: {e}",
                status_code=response.status_code,
            ) from e
        if document in ({}, []):
            raise ResponseDecodeError(
                "Response body is empty", status_code=response.status_code
            )
        return document

    @staticmethod
    def _field(response: httpx.Response, name: str) -> Any:
        document = ResponseDecoder.parse_json(response)
        if not isinstance(document, dict) or document.get(name) is None:
            raise ResponseDecodeError(
                f"Parsing {name} failed.",
                status_code=response.status_code,
                field=name,
            )
        return document[name]

    @staticmethod
    def get_str(response: httpx.Response, name: str) -> str:
        """Extract a string field; scalars are rendered as text."""
        value = ResponseDecoder._field(response, name)
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (dict, list)):
            raise ResponseDecodeError(
                f"Parsing {name} failed.",
                status_code=response.status_code,
                field=name,
            )
        return str(value)

    @staticmethod
    def get_bool(response: httpx.Response, name: str) -> bool:
        """Extract a boolean field, accepting ``"true"``/``"false"`` text."""
        value = ResponseDecoder._field(response, name)
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in ("true", "false"):
            return value.strip().lower() == "true"
        raise ResponseDecodeError(
            f"Parsing {name} failed.",
            status_code=response.status_code,
            field=name,
        )

    @staticmethod
    def get_int(response: httpx.Response, name: str) -> int:
        """Extract an integer field, accepting decimal text."""
        value = ResponseDecoder._field(response, name)
        if isinstance(value, bool):
            raise ResponseDecodeError(
                f"Parsing {name} failed.",
                status_code=response.status_code,
                field=name,
            )
        try:
            return int(value)
        except (TypeError, ValueError) as e:
            raise ResponseDecodeError(
                f"Parsing {name} failed.",
                status_code=response.status_code,
                field=name,
            ) from e

    @staticmethod
    def error_code(response: httpx.Response) -> ServiceCode:
        """Decode the service error code; unreadable bodies map to UNKNOWN."""
        try:
            return ServiceCode(ResponseDecoder.get_str(response, "code"))
        except ResponseDecodeError:
            return ServiceCode.UNKNOWN

    @staticmethod
    def raw_error_code(response: httpx.Response) -> str | None:
        try:
            return ResponseDecoder.get_str(response, "code")
        except ResponseDecodeError:
            return None

    @staticmethod
    def error_message(response: httpx.Response, field: str = "message") -> str:
        """Message from the body, falling back to the HTTP status line."""
        try:
            return ResponseDecoder.get_str(response, field)
        except ResponseDecodeError:
            return response.reason_phrase or f"HTTP {response.status_code}"

    @staticmethod
    def service_error(response: httpx.Response) -> ServiceError:
        """Create a ServiceError describing a non-success response."""
        return ServiceError(
            ResponseDecoder.error_message(response),
            status_code=response.status_code,
            service_code=ResponseDecoder.raw_error_code(response),
        )
