"""Pydantic models for the KeySmith SDK.

Frozen models for the documents the service returns and the records the
client keeps about sign-in attempts and submitted jobs.
"""

from __future__ import annotations

from enum import StrEnum
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field, field_validator


class JobKind(StrEnum):
    """Kinds of asynchronous server-side jobs."""

    SIGN = "sign"
    UPLOAD_KDM = "upload_kdm"

    @property
    def path(self) -> str:
        """Collection path jobs of this kind are submitted to."""
        if self is JobKind.SIGN:
            return "/v1/signer/jobs"
        return "/v1/dkdms"

    def job_path(self, job_id: str) -> str:
        """Resource path of a single job."""
        return f"{self.path}/{quote(job_id, safe='')}"


class TokenGrant(BaseModel):
    """Tokens issued by the authorization or token endpoint."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    access_token: str = Field(..., min_length=1)
    token_type: str = Field(..., min_length=1)
    refresh_token: str | None = None


class AuthorizationSession(BaseModel):
    """An in-progress browser sign-in started by ``begin_login``."""

    model_config = ConfigDict(frozen=True)

    session_code: str = Field(..., min_length=1)
    polling_endpoint: str = Field(..., min_length=1)
    login_url: str = Field(..., min_length=1)


class Company(BaseModel):
    """Company the signed-in user belongs to."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    id: int
    name: str
    role: str
    joined_on_invite: bool = Field(..., alias="joinedOnInvite")
    certificate_generated: bool = Field(..., alias="certificateGenerated")
    certificate: str = ""

    @field_validator("certificate", mode="before")
    @classmethod
    def null_certificate(cls, v: object) -> object:
        """Companies without a certificate may send null."""
        return "" if v is None else v


class Job(BaseModel):
    """A job accepted by the service."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    kind: JobKind
    submitted_payload: str
