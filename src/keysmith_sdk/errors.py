"""Error classes for the KeySmith SDK.

Every failure surfaced by the SDK is a ``KeySmithError`` tagged with a
member of the closed ``ErrorCode`` enumeration. Error codes sent by the
service itself are decoded into ``ServiceCode``.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the KeySmith SDK."""

    # Configuration errors (1xxx)
    INVALID_CONFIG = "CFG_1001"

    # Authentication errors (2xxx)
    TOKEN_EXCHANGE_FAILED = "AUTH_2001"
    SESSION_EXPIRED = "AUTH_2002"
    ACCESS_DENIED = "AUTH_2003"
    NOT_AUTHENTICATED = "AUTH_2004"

    # Service errors (3xxx)
    SERVICE_ERROR = "SRV_3001"
    RESPONSE_INVALID = "SRV_3002"

    # Network errors (4xxx)
    NETWORK_ERROR = "NET_4001"
    TIMEOUT_ERROR = "NET_4002"

    # Job errors (5xxx)
    SUBMISSION_REJECTED = "JOB_5001"
    POLL_TIMEOUT = "JOB_5002"

    # Account state errors (6xxx)
    NO_COMPANY = "ACCT_6001"
    CERTIFICATE_UNAVAILABLE = "ACCT_6002"


class ServiceCode(StrEnum):
    """Error codes carried in the ``code`` field of service responses."""

    AUTH_PENDING = "AUTH2021"
    USER_DENIED = "AUTH4041"
    SESSION_EXPIRED = "AUTH4044"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def _missing_(cls, value: object) -> ServiceCode:
        return cls.UNKNOWN


class KeySmithError(Exception):
    """Base error for the KeySmith SDK with structured error information."""

    def __init__(
        self,
        message: str,
        code: ErrorCode | str,
        *,
        status_code: int | None = None,
        service_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code.value if isinstance(code, ErrorCode) else code
        self.status_code = status_code
        self.service_code = service_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error": self.message,
            "code": self.code,
            "status_code": self.status_code,
            "service_code": self.service_code,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class ConfigurationError(KeySmithError):
    """SDK configuration is invalid, e.g. a malformed service URL."""

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.INVALID_CONFIG,
            details={"field": field} if field else None,
        )
        self.field = field


class TokenExchangeError(KeySmithError):
    """Exchanging the refresh token for an access token failed."""

    def __init__(
        self,
        message: str = "Failed to exchange refresh token",
        *,
        status_code: int | None = None,
        service_code: str | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.TOKEN_EXCHANGE_FAILED,
            status_code=status_code,
            service_code=service_code,
        )


class NotAuthenticatedError(KeySmithError):
    """Operation requires a sign-in that has not happened (yet)."""

    def __init__(self, message: str = "Not signed in to KeySmith") -> None:
        super().__init__(message, ErrorCode.NOT_AUTHENTICATED)


class ServiceError(KeySmithError):
    """Service answered with a non-success status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        service_code: str | None = None,
        code: ErrorCode = ErrorCode.SERVICE_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message,
            code,
            status_code=status_code,
            service_code=service_code,
            details=details,
        )


class SessionExpiredError(ServiceError):
    """Sign-in session expired before the user authorized it."""

    def __init__(
        self,
        message: str = "KeySmith sign in session expired",
        *,
        status_code: int | None = None,
    ) -> None:
        super().__init__(
            message,
            status_code=status_code,
            service_code=ServiceCode.SESSION_EXPIRED.value,
            code=ErrorCode.SESSION_EXPIRED,
        )


class AccessDeniedError(ServiceError):
    """User denied the authorization request."""

    def __init__(
        self,
        message: str = "You have denied access",
        *,
        status_code: int | None = None,
    ) -> None:
        super().__init__(
            message,
            status_code=status_code,
            service_code=ServiceCode.USER_DENIED.value,
            code=ErrorCode.ACCESS_DENIED,
        )


class SubmissionRejectedError(ServiceError):
    """Service did not enqueue a submitted job."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        service_code: str | None = None,
        job_kind: str | None = None,
    ) -> None:
        super().__init__(
            message,
            status_code=status_code,
            service_code=service_code,
            code=ErrorCode.SUBMISSION_REJECTED,
            details={"job_kind": job_kind} if job_kind else None,
        )


class ResponseDecodeError(KeySmithError):
    """Response body is not the JSON document the client expects."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        field: str | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.RESPONSE_INVALID,
            status_code=status_code,
            details={"field": field} if field else None,
        )


class NetworkError(KeySmithError):
    """Network request failed."""

    def __init__(
        self,
        message: str = "Network request failed",
        *,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.NETWORK_ERROR,
            details={"cause": str(cause)} if cause else None,
        )
        self.__cause__ = cause


class RequestTimeoutError(NetworkError):
    """Request timed out."""

    def __init__(
        self,
        message: str = "Request timed out",
        *,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.code = ErrorCode.TIMEOUT_ERROR.value


class PollTimeoutError(KeySmithError):
    """Caller-level polling deadline expired."""

    def __init__(
        self,
        message: str = "Polling deadline expired",
        *,
        timeout_seconds: float | None = None,
        attempts: int | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if timeout_seconds is not None:
            details["timeout_seconds"] = timeout_seconds
        if attempts is not None:
            details["attempts"] = attempts
        super().__init__(message, ErrorCode.POLL_TIMEOUT, details=details)


class NoCompanyError(KeySmithError):
    """User account is not associated with any company."""

    def __init__(
        self,
        message: str = (
            "User doesn't have any company(s). Please edit your profile "
            "in KeySmith web page and try again"
        ),
    ) -> None:
        super().__init__(message, ErrorCode.NO_COMPANY)


class CertificateUnavailableError(KeySmithError):
    """Active company has not generated a certificate."""

    def __init__(
        self,
        message: str = (
            "Unable to get certificate chain since KeySmith user has not "
            "generated any certificate"
        ),
        *,
        company_id: int | None = None,
    ) -> None:
        super().__init__(
            message,
            ErrorCode.CERTIFICATE_UNAVAILABLE,
            details={"company_id": company_id} if company_id is not None else None,
        )
