"""
Property-based tests for error classes.

Every SDK error serializes with its code and keeps the service's code.
"""

from hypothesis import given, settings, strategies as st

from keysmith_sdk.errors import (
    ErrorCode,
    KeySmithError,
    ServiceError,
    SubmissionRejectedError,
)

messages = st.text(min_size=1, max_size=100)
statuses = st.integers(min_value=100, max_value=599)


class TestErrorSerializationProperties:
    """Property tests for to_dict."""

    @given(message=messages, code=st.sampled_from(list(ErrorCode)))
    @settings(max_examples=100)
    def test_to_dict_carries_code(self, message: str, code: ErrorCode) -> None:
        error = KeySmithError(message, code)

        data = error.to_dict()

        assert data["code"] == code.value
        assert data["error"] == message
        assert str(error) == message

    @given(message=messages, status=statuses, service_code=st.text(min_size=1, max_size=10))
    @settings(max_examples=100)
    def test_service_error_fields(
        self, message: str, status: int, service_code: str
    ) -> None:
        error = ServiceError(message, status_code=status, service_code=service_code)

        assert error.to_dict()["status_code"] == status
        assert error.to_dict()["service_code"] == service_code
        assert error.code == ErrorCode.SERVICE_ERROR

    @given(message=messages, kind=st.sampled_from(["sign", "upload_kdm"]))
    def test_submission_rejected_is_service_error(self, message: str, kind: str) -> None:
        error = SubmissionRejectedError(message, status_code=400, job_kind=kind)

        assert isinstance(error, ServiceError)
        assert error.code == ErrorCode.SUBMISSION_REJECTED
        assert error.details == {"job_kind": kind}
