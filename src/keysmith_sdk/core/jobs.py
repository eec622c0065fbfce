"""Asynchronous job protocol for the KeySmith SDK.

Asset signing and DKDM upload share one contract: the XML payload is
submitted and the service answers 202 with a job id; the job resource then
answers 202 while work is pending and 200 once it is done. A signing job's
result body is the signed asset. An uploaded DKDM cannot be retrieved, so for
upload jobs only readiness matters.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..errors import SubmissionRejectedError
from ..http import XML_CONTENT_TYPE
from ..models import Job, JobKind
from ..types import JobStatus
from .decoder import ResponseDecoder

if TYPE_CHECKING:
    from ..config import KeySmithConfig
    from ..http import HttpGateway
    from .token_store import TokenStore


class JobPoller:
    """Submits jobs and polls them until they are ready."""

    def __init__(
        self,
        config: KeySmithConfig,
        gateway: HttpGateway,
        tokens: TokenStore,
    ) -> None:
        self.config = config
        self._gateway = gateway
        self._tokens = tokens
        self._telemetry = gateway.telemetry
        self._logger = self._telemetry.logger

    def submit(self, kind: JobKind, payload: str) -> str:
        """Submit an XML payload and return the server-assigned job id.

        Raises:
            SubmissionRejectedError: Unless the service answers 202 Accepted.
        """
        self._tokens.require_access_token()
        with self._telemetry.span("keysmith.submit_job", attributes={"job.kind": kind.value}):
            response = self._gateway.post(
                self.config.api_url(kind.path),
                headers={
                    "Content-Type": XML_CONTENT_TYPE,
                    **self._tokens.authorization_header(),
                },
                content=payload.encode("utf-8"),
            )
            if response.status_code != 202:
                raise SubmissionRejectedError(
                    ResponseDecoder.error_message(response),
                    status_code=response.status_code,
                    service_code=ResponseDecoder.raw_error_code(response),
                    job_kind=kind.value,
                )
            job_id = ResponseDecoder.get_str(response, "id")

        self._logger.info("Job submitted", kind=kind.value, job_id=job_id)
        return job_id

    def submit_job(self, kind: JobKind, payload: str) -> Job:
        """Submit an XML payload and return the accepted job."""
        return Job(id=self.submit(kind, payload), kind=kind, submitted_payload=payload)

    def poll(self, kind: JobKind, job_id: str) -> JobStatus:
        """Check a job once.

        Returns:
            ``(True, body)`` when done, ``(False, "")`` while pending.

        Raises:
            ServiceError: On any status other than 200 or 202.
        """
        self._tokens.require_access_token()
        with self._telemetry.span(
            "keysmith.poll_job",
            attributes={"job.kind": kind.value, "job.id": job_id},
        ):
            response = self._gateway.get(
                self.config.api_url(kind.job_path(job_id)),
                headers={
                    "Accept": XML_CONTENT_TYPE,
                    **self._tokens.authorization_header(),
                },
            )
            if response.status_code == 200:
                self._logger.info("Job ready", kind=kind.value, job_id=job_id)
                return JobStatus(ready=True, result=response.text)
            if response.status_code == 202:
                return JobStatus(ready=False, result="")
            raise ResponseDecoder.service_error(response)
