"""Browser sign-in and logout for the KeySmith SDK.

Sign-in is a three phase polling flow: ``begin_login`` opens an
authorization session and yields the URL the user visits in a browser;
``poll_authorization`` is called repeatedly until the service reports the
session approved, denied or expired; approval issues the token pair.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING
from urllib.parse import urlencode, urlsplit, urlunsplit

from pydantic import ValidationError as PydanticValidationError

from ..errors import (
    AccessDeniedError,
    KeySmithError,
    NotAuthenticatedError,
    ResponseDecodeError,
    ServiceCode,
    SessionExpiredError,
)
from ..http import FORM_CONTENT_TYPE
from ..models import AuthorizationSession, TokenGrant
from .decoder import ResponseDecoder

if TYPE_CHECKING:
    from ..config import KeySmithConfig
    from ..http import HttpGateway
    from .token_store import TokenStore


class SessionState(StrEnum):
    """Sign-in states."""

    UNAUTHENTICATED = "unauthenticated"
    LOGIN_REQUESTED = "login_requested"
    POLLING = "polling"
    AUTHENTICATED = "authenticated"
    LOGGED_OUT = "logged_out"
    EXPIRED = "expired"


def compose_login_url(authorization_url: str, session_code: str) -> str:
    """Append the session code to the authorization URL as ``code``."""
    parts = urlsplit(authorization_url)
    query = urlencode({"code": session_code})
    if parts.query:
        query = f"{parts.query}&{query}"
    return urlunsplit(parts._replace(query=query))


class AuthSession:
    """Sign-in state machine for one identity."""

    def __init__(
        self,
        config: KeySmithConfig,
        gateway: HttpGateway,
        tokens: TokenStore,
        refresh_token: str | None = None,
    ) -> None:
        """Initialize the session, resuming from a stored refresh token.

        An unusable stored token is not an error: the session simply starts
        signed out.
        """
        self.config = config
        self._gateway = gateway
        self._tokens = tokens
        self._state = SessionState.UNAUTHENTICATED
        self._authorization: AuthorizationSession | None = None
        self._telemetry = gateway.telemetry
        self._logger = self._telemetry.logger

        if refresh_token:
            try:
                self._tokens.ensure_access_token(refresh_token)
            except KeySmithError as e:
                self._logger.warning(
                    "Stored refresh token rejected, sign in required",
                    code=e.code,
                    error=e.message,
                )
                self._tokens.clear()
            else:
                self._state = SessionState.AUTHENTICATED
                self._logger.info("Session resumed from stored refresh token")

    @property
    def state(self) -> SessionState:
        """Get current sign-in state."""
        return self._state

    @property
    def authorization(self) -> AuthorizationSession | None:
        """Get the in-progress authorization session, if any."""
        return self._authorization

    @property
    def is_authenticated(self) -> bool:
        return self._state == SessionState.AUTHENTICATED

    def begin_login(self) -> str:
        """Start a sign-in and return the URL the user must open.

        The authorization session is valid for a limited time (15 minutes on
        the production service).

        Raises:
            ServiceError: If the service refuses to start a session.
        """
        with self._telemetry.span("keysmith.begin_login"):
            response = self._gateway.post(
                self.config.authorization_request_endpoint or "",
                headers={
                    "Content-Type": FORM_CONTENT_TYPE,
                    **self._tokens.authorization_header(),
                },
                data={"client_id": self.config.client_id},
            )
            if response.status_code != 200:
                raise ResponseDecoder.service_error(response)

            session_code = ResponseDecoder.get_str(response, "code")
            self._authorization = AuthorizationSession(
                session_code=session_code,
                polling_endpoint=ResponseDecoder.get_str(response, "token_url"),
                login_url=compose_login_url(
                    ResponseDecoder.get_str(response, "authorization_url"),
                    session_code,
                ),
            )

        self._state = SessionState.LOGIN_REQUESTED
        self._logger.info("Sign in requested")
        return self._authorization.login_url

    def poll_authorization(self) -> bool:
        """Check whether the user has completed the browser sign-in.

        Returns:
            True once tokens have been issued, False while still pending.

        Raises:
            NotAuthenticatedError: If ``begin_login`` has not been called.
            SessionExpiredError: If the sign-in session expired.
            AccessDeniedError: If the user denied access.
            ServiceError: On any other failure response.
        """
        authorization = self._authorization
        if authorization is None:
            msg = "No sign in in progress; call begin_login first"
            raise NotAuthenticatedError(msg)

        with self._telemetry.span("keysmith.poll_authorization"):
            response = self._gateway.post(
                authorization.polling_endpoint,
                headers={
                    "Content-Type": FORM_CONTENT_TYPE,
                    **self._tokens.authorization_header(),
                },
                data={
                    "client_id": self.config.client_id,
                    "grant_type": "authorization_code",
                    "code": authorization.session_code,
                },
            )
            status = response.status_code

            if status not in (200, 202):
                code = ResponseDecoder.error_code(response)
                if code is ServiceCode.SESSION_EXPIRED:
                    self._end_attempt(SessionState.EXPIRED)
                    raise SessionExpiredError(status_code=status)
                if code is ServiceCode.USER_DENIED:
                    self._end_attempt(SessionState.UNAUTHENTICATED)
                    raise AccessDeniedError(status_code=status)
                raise ResponseDecoder.service_error(response)

            # 202 means both "still waiting" and "approved"; only the code tells
            if status == 202 and ResponseDecoder.error_code(response) is ServiceCode.AUTH_PENDING:
                self._state = SessionState.POLLING
                return False

            try:
                grant = TokenGrant(
                    access_token=ResponseDecoder.get_str(response, "access_token"),
                    refresh_token=ResponseDecoder.get_str(response, "refresh_token"),
                    token_type=ResponseDecoder.get_str(response, "token_type"),
                )
            except PydanticValidationError as e:
                raise ResponseDecodeError(
                    f"Token response could not be read: {e}", status_code=status
                ) from e

        self._tokens.store_grant(grant)
        self._authorization = None
        self._state = SessionState.AUTHENTICATED
        self._logger.info("Sign in completed", token_type=grant.token_type)
        return True

    def logout(self) -> None:
        """Revoke the session's tokens.

        Credentials are cleared before the revocation outcome is inspected,
        so a failed logout still leaves the client signed out.

        Raises:
            NotAuthenticatedError: If there is no session to end.
            TokenExchangeError: If the pre-revocation refresh fails.
            ServiceError: If the service rejects the revocation.
        """
        if not self._tokens.refresh_token:
            raise NotAuthenticatedError()

        with self._telemetry.span("keysmith.logout"):
            try:
                self._tokens.ensure_access_token()
                response = self._gateway.delete(
                    self.config.revocation_endpoint or "",
                    headers=self._tokens.authorization_header(),
                )
            finally:
                self._tokens.clear()
                self._authorization = None
                self._state = SessionState.LOGGED_OUT

            if response.status_code != 200:
                self._logger.warning(
                    "Token revocation rejected", status_code=response.status_code
                )
                raise ResponseDecoder.service_error(response)

        self._logger.info("Signed out")

    def logout_url(self) -> str:
        """URL that ends the user's browser session with the service."""
        return self.config.logout_endpoint or f"{self.config.base_url_str}/logout"

    def _end_attempt(self, state: SessionState) -> None:
        self._authorization = None
        self._state = state
        self._logger.info("Sign in attempt ended", state=state.value)
