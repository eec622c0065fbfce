"""Unit tests for error classes.

Tests error hierarchy, serialization, and error codes.
"""

import pytest

from keysmith_sdk.errors import (
    AccessDeniedError,
    CertificateUnavailableError,
    ConfigurationError,
    ErrorCode,
    KeySmithError,
    NetworkError,
    NoCompanyError,
    NotAuthenticatedError,
    PollTimeoutError,
    RequestTimeoutError,
    ResponseDecodeError,
    ServiceCode,
    ServiceError,
    SessionExpiredError,
    SubmissionRejectedError,
    TokenExchangeError,
)


class TestErrorCode:
    """Tests for ErrorCode enum."""

    def test_error_codes_are_strings(self) -> None:
        """Error codes should be string values."""
        assert ErrorCode.INVALID_CONFIG == "CFG_1001"
        assert ErrorCode.TOKEN_EXCHANGE_FAILED == "AUTH_2001"
        assert ErrorCode.SERVICE_ERROR == "SRV_3001"
        assert ErrorCode.NETWORK_ERROR == "NET_4001"
        assert ErrorCode.SUBMISSION_REJECTED == "JOB_5001"
        assert ErrorCode.NO_COMPANY == "ACCT_6001"

    def test_error_code_categories(self) -> None:
        """Error codes should follow category pattern."""
        assert ErrorCode.SESSION_EXPIRED.value.startswith("AUTH_2")
        assert ErrorCode.ACCESS_DENIED.value.startswith("AUTH_2")
        assert ErrorCode.TIMEOUT_ERROR.value.startswith("NET_4")
        assert ErrorCode.POLL_TIMEOUT.value.startswith("JOB_5")
        assert ErrorCode.CERTIFICATE_UNAVAILABLE.value.startswith("ACCT_6")


class TestServiceCode:
    """Tests for decoding wire error codes."""

    @pytest.mark.parametrize(
        ("wire", "expected"),
        [
            ("AUTH2021", ServiceCode.AUTH_PENDING),
            ("AUTH4041", ServiceCode.USER_DENIED),
            ("AUTH4044", ServiceCode.SESSION_EXPIRED),
        ],
    )
    def test_known_codes(self, wire: str, expected: ServiceCode) -> None:
        assert ServiceCode(wire) is expected

    def test_unknown_code_maps_to_unknown(self) -> None:
        assert ServiceCode("AUTH9999") is ServiceCode.UNKNOWN
        assert ServiceCode("") is ServiceCode.UNKNOWN


class TestKeySmithError:
    """Tests for base KeySmithError."""

    def test_basic_error(self) -> None:
        error = KeySmithError("Test error", ErrorCode.SERVICE_ERROR)

        assert str(error) == "Test error"
        assert error.message == "Test error"
        assert error.code == "SRV_3001"
        assert error.details == {}

    def test_to_dict(self) -> None:
        error = KeySmithError(
            "Test error",
            ErrorCode.SERVICE_ERROR,
            status_code=500,
            service_code="SRV500",
            details={"extra": "info"},
        )

        result = error.to_dict()

        assert result["error"] == "Test error"
        assert result["code"] == "SRV_3001"
        assert result["status_code"] == 500
        assert result["service_code"] == "SRV500"
        assert result["details"]["extra"] == "info"

    def test_repr(self) -> None:
        repr_str = repr(KeySmithError("Test", ErrorCode.NO_COMPANY))

        assert "KeySmithError" in repr_str
        assert "ACCT_6001" in repr_str


class TestErrorHierarchy:
    """Tests for the error taxonomy."""

    def test_polling_outcomes_are_service_errors(self) -> None:
        assert isinstance(SessionExpiredError(), ServiceError)
        assert isinstance(AccessDeniedError(), ServiceError)
        assert isinstance(SubmissionRejectedError("no"), ServiceError)

    def test_account_errors_are_not_service_errors(self) -> None:
        assert not isinstance(NoCompanyError(), ServiceError)
        assert not isinstance(CertificateUnavailableError(), ServiceError)

    def test_all_errors_share_base(self) -> None:
        errors = [
            ConfigurationError("bad"),
            TokenExchangeError(),
            NotAuthenticatedError(),
            ResponseDecodeError("bad body"),
            NetworkError(),
            PollTimeoutError(),
        ]
        assert all(isinstance(e, KeySmithError) for e in errors)

    def test_session_expired_defaults(self) -> None:
        error = SessionExpiredError(status_code=404)

        assert error.code == "AUTH_2002"
        assert error.service_code == "AUTH4044"
        assert error.status_code == 404
        assert "expired" in error.message

    def test_access_denied_defaults(self) -> None:
        error = AccessDeniedError()

        assert error.code == "AUTH_2003"
        assert error.service_code == "AUTH4041"
        assert error.message == "You have denied access"

    def test_configuration_error_field(self) -> None:
        error = ConfigurationError("Invalid URL", field="base_url")

        assert error.field == "base_url"
        assert error.details["field"] == "base_url"

    def test_submission_rejected_records_kind(self) -> None:
        error = SubmissionRejectedError("Invalid CPL", status_code=400, job_kind="sign")

        assert error.code == "JOB_5001"
        assert error.details["job_kind"] == "sign"

    def test_timeout_is_network_error(self) -> None:
        cause = RuntimeError("slow")
        error = RequestTimeoutError(cause=cause)

        assert isinstance(error, NetworkError)
        assert error.code == "NET_4002"
        assert error.__cause__ is cause

    def test_poll_timeout_details(self) -> None:
        error = PollTimeoutError(timeout_seconds=30.0, attempts=15)

        assert error.details == {"timeout_seconds": 30.0, "attempts": 15}

    def test_certificate_unavailable_company(self) -> None:
        error = CertificateUnavailableError(company_id=0)

        assert error.details == {"company_id": 0}
