"""Token storage and refresh for the KeySmith SDK."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from pydantic import ValidationError as PydanticValidationError

from ..errors import NotAuthenticatedError, ResponseDecodeError, TokenExchangeError
from ..http import FORM_CONTENT_TYPE
from ..models import TokenGrant
from ..types import Credentials
from .decoder import ResponseDecoder

if TYPE_CHECKING:
    from ..config import KeySmithConfig
    from ..http import HttpGateway


class TokenStore:
    """Holds the session's credentials and refreshes the access token.

    The service has no introspection endpoint, so freshness is never tracked
    locally. Token-sensitive operations call ``ensure_access_token`` which
    always performs a new exchange.
    """

    def __init__(
        self,
        config: KeySmithConfig,
        gateway: HttpGateway,
        credentials: Credentials | None = None,
    ) -> None:
        self.config = config
        self._gateway = gateway
        self._credentials = credentials or Credentials()
        self._reset_listeners: list[Callable[[], None]] = []
        self._telemetry = gateway.telemetry
        self._logger = self._telemetry.logger

    @property
    def credentials(self) -> Credentials:
        """Get current credentials."""
        return self._credentials

    @property
    def refresh_token(self) -> str | None:
        return self._credentials.refresh_token

    def authorization_header(self) -> dict[str, str]:
        return self._credentials.authorization_header()

    def add_reset_listener(self, listener: Callable[[], None]) -> None:
        """Call ``listener`` whenever the signed-in identity may have changed."""
        self._reset_listeners.append(listener)

    def _notify_reset(self) -> None:
        for listener in self._reset_listeners:
            listener()

    def store_grant(self, grant: TokenGrant) -> None:
        """Store tokens issued by a completed sign-in."""
        self._notify_reset()
        if grant.refresh_token:
            self._credentials.refresh_token = grant.refresh_token
        self._credentials.set_access(grant.access_token, grant.token_type)

    def ensure_access_token(self, refresh_token: str | None = None) -> str:
        """Exchange the refresh token for a new access token.

        The held access token is dropped before the request goes out, so
        nothing observes a stale token while the exchange is in flight.

        Args:
            refresh_token: Refresh token to exchange (defaults to the stored one).

        Returns:
            The new access token.

        Raises:
            TokenExchangeError: If no refresh token is available or the
                token endpoint rejects the exchange.
        """
        token = refresh_token or self._credentials.refresh_token
        if token != self._credentials.refresh_token:
            self._notify_reset()
        self._credentials.clear_access()
        if not token:
            msg = "No refresh token available"
            raise TokenExchangeError(msg)

        with self._telemetry.span("keysmith.token_exchange"):
            response = self._gateway.post(
                self.config.token_endpoint or "",
                headers={"Content-Type": FORM_CONTENT_TYPE},
                data={
                    "client_id": self.config.client_id,
                    "grant_type": "refresh_token",
                    "refresh_token": token,
                },
            )

            if response.status_code != 200:
                self._logger.warning(
                    "Token exchange rejected", status_code=response.status_code
                )
                raise TokenExchangeError(
                    ResponseDecoder.error_message(response),
                    status_code=response.status_code,
                    service_code=ResponseDecoder.raw_error_code(response),
                )

            try:
                grant = TokenGrant(
                    access_token=ResponseDecoder.get_str(response, "access_token"),
                    token_type=ResponseDecoder.get_str(response, "token_type"),
                )
            except (ResponseDecodeError, PydanticValidationError) as e:
                raise TokenExchangeError(
                    f"Token response could not be read: {e}",
                    status_code=response.status_code,
                ) from e

        self._credentials.refresh_token = token
        self._credentials.set_access(grant.access_token, grant.token_type)
        self._logger.debug("Access token refreshed", token_type=grant.token_type)
        return grant.access_token

    def require_access_token(self) -> str:
        """Get the held access token, deriving one if only a refresh token is held.

        Raises:
            NotAuthenticatedError: If neither token is available.
            TokenExchangeError: If deriving a new access token fails.
        """
        if self._credentials.access_token:
            return self._credentials.access_token
        if not self._credentials.refresh_token:
            raise NotAuthenticatedError()
        return self.ensure_access_token()

    def clear(self) -> None:
        """Clear stored tokens."""
        self._credentials.clear()
        self._notify_reset()
