"""KeySmith Python SDK."""

from .client import KeySmithClient
from .config import PRODUCTION_URL, STAGING_URL, KeySmithConfig, TelemetryConfig
from .core import SessionState, select_active_company
from .errors import (
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
from .models import AuthorizationSession, Company, Job, JobKind
from .polling import poll_until, wait_for_authorization, wait_for_job
from .telemetry import Telemetry
from .types import Credentials, Identity, JobStatus

__all__ = [
    "KeySmithClient",
    "KeySmithConfig",
    "TelemetryConfig",
    "PRODUCTION_URL",
    "STAGING_URL",
    "SessionState",
    "select_active_company",
    "AccessDeniedError",
    "CertificateUnavailableError",
    "ConfigurationError",
    "ErrorCode",
    "KeySmithError",
    "NetworkError",
    "NoCompanyError",
    "NotAuthenticatedError",
    "PollTimeoutError",
    "RequestTimeoutError",
    "ResponseDecodeError",
    "ServiceCode",
    "ServiceError",
    "SessionExpiredError",
    "SubmissionRejectedError",
    "TokenExchangeError",
    "AuthorizationSession",
    "Company",
    "Job",
    "JobKind",
    "poll_until",
    "wait_for_authorization",
    "wait_for_job",
    "Telemetry",
    "Credentials",
    "Identity",
    "JobStatus",
]

__version__ = "0.1.0"
