"""KeySmith SDK client.

``KeySmithClient`` mediates exactly one signed-in identity. It is not safe to
share between threads: token refresh mutates the client's credentials.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Self

from .config import KeySmithConfig
from .core import AuthSession, JobPoller, ProfileCache, SessionState, TokenStore
from .errors import KeySmithError
from .http import HttpGateway, create_http_client
from .models import Job, JobKind
from .telemetry import Telemetry, traced

if TYPE_CHECKING:
    import httpx

    from .models import Company
    from .types import Credentials, Identity, JobStatus


class KeySmithClient:
    """Synchronous KeySmith client."""

    def __init__(
        self,
        config: KeySmithConfig,
        refresh_token: str | None = None,
        *,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialize client.

        Args:
            config: SDK configuration.
            refresh_token: Refresh token of a previous session to resume.
                If the service no longer accepts it the client starts
                signed out.
            http_client: Optional pre-built HTTP client. It is not closed
                by ``close``.
        """
        self.config = config
        self.telemetry = Telemetry(config.telemetry)
        self._owns_http = http_client is None
        self._http = http_client if http_client is not None else create_http_client(config)
        self._logger = self.telemetry.logger

        gateway = HttpGateway(self._http, self.telemetry)
        self._tokens = TokenStore(config, gateway)
        self._session = AuthSession(config, gateway, self._tokens, refresh_token)
        self._profile = ProfileCache(config, gateway, self._tokens)
        self._jobs = JobPoller(config, gateway, self._tokens)
        self._closed = False

    @classmethod
    def from_url(
        cls,
        base_url: str,
        client_id: str,
        refresh_token: str | None = None,
        **kwargs: Any,
    ) -> Self:
        """Create a client for a service URL.

        Raises:
            ConfigurationError: If the URL or client id is invalid.
        """
        config = KeySmithConfig.create(base_url=base_url, client_id=client_id, **kwargs)
        return cls(config, refresh_token)

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        """Sign out if still signed in and release the HTTP client.

        Sign-out here is best effort; failures are logged, not raised.
        """
        if self._closed:
            return
        self._closed = True

        if self.config.revoke_on_close and self._tokens.refresh_token:
            try:
                self._session.logout()
            except KeySmithError as e:
                self._logger.warning(
                    "Sign out on close failed", code=e.code, error=e.message
                )

        if self._owns_http:
            self._http.close()

    # Session

    @property
    def state(self) -> SessionState:
        """Get current sign-in state."""
        return self._session.state

    @property
    def credentials(self) -> Credentials:
        """Get the live credentials record."""
        return self._tokens.credentials

    @property
    def refresh_token(self) -> str | None:
        """Refresh token to persist for resuming the session later."""
        return self._tokens.refresh_token

    @traced("keysmith.get_login_url")
    def get_login_url(self) -> str:
        """Start a browser sign-in and return the URL to open."""
        return self._session.begin_login()

    @traced("keysmith.is_authenticated")
    def is_authenticated(self) -> bool:
        """Poll the sign-in started by ``get_login_url``."""
        return self._session.poll_authorization()

    def get_logout_url(self) -> str:
        """URL that ends the browser session with the service."""
        return self._session.logout_url()

    def ensure_access_token(self) -> str:
        """Force a refresh of the access token."""
        return self._tokens.ensure_access_token()

    @traced("keysmith.logout")
    def logout(self) -> None:
        """Revoke the session's tokens; the client is signed out even on failure."""
        self._session.logout()

    # Profile

    @traced("keysmith.get_user_info")
    def get_user_info(self) -> Identity:
        return self._profile.get_identity()

    def get_companies(self) -> list[Company]:
        return self._profile.get_companies()

    @traced("keysmith.get_certificate_chain")
    def get_certificate_chain(self) -> str:
        """PEM certificate chain (leaf, intermediate, root) of the active company."""
        return self._profile.get_certificate_chain()

    # Jobs

    def submit_job(self, kind: JobKind, payload: str) -> Job:
        return self._jobs.submit_job(kind, payload)

    def poll_job(self, job: Job) -> JobStatus:
        return self._jobs.poll(job.kind, job.id)

    def sign(self, asset_xml: str) -> str:
        """Submit a CPL or PKL for signing and return its job id."""
        return self._jobs.submit(JobKind.SIGN, asset_xml)

    def get_signed_asset_xml(self, asset_id: str) -> JobStatus:
        """Check a signing job; the result is the signed CPL or PKL."""
        return self._jobs.poll(JobKind.SIGN, asset_id)

    def upload_kdm(self, kdm_xml: str) -> str:
        """Upload a DKDM and return its job id."""
        return self._jobs.submit(JobKind.UPLOAD_KDM, kdm_xml)

    def get_kdm_upload_status(self, kdm_id: str) -> JobStatus:
        """Check a DKDM upload; once ready the DKDM is stored and signed."""
        return self._jobs.poll(JobKind.UPLOAD_KDM, kdm_id)
