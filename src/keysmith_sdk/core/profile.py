"""User profile and company lookup for the KeySmith SDK."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import ValidationError as PydanticValidationError

from ..errors import CertificateUnavailableError, NoCompanyError, ResponseDecodeError
from ..models import Company
from ..types import Identity
from .decoder import ResponseDecoder

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ..config import KeySmithConfig
    from ..http import HttpGateway
    from .token_store import TokenStore

USER_PATH = "/v1/users/me"
COMPANIES_PATH = "/v1/users/me/companies"


def select_active_company(companies: Sequence[Company]) -> Company:
    """Pick the company the client acts for.

    The service lists the user's active company first.

    Raises:
        NoCompanyError: If the sequence is empty.
    """
    if not companies:
        raise NoCompanyError()
    return companies[0]


class ProfileCache:
    """Lazily fetched identity and company list of the signed-in user.

    Companies are fetched at most once per signed-in identity. The cache is
    dropped whenever the token store signs out or takes on new tokens, so a
    later sign-in never sees the previous user's certificate.
    """

    def __init__(
        self,
        config: KeySmithConfig,
        gateway: HttpGateway,
        tokens: TokenStore,
    ) -> None:
        self.config = config
        self._gateway = gateway
        self._tokens = tokens
        self._companies: list[Company] | None = None
        tokens.add_reset_listener(self.clear)
        self._logger = gateway.telemetry.logger

    def get_identity(self) -> Identity:
        """Get the user's email and the active company's name."""
        self._tokens.require_access_token()
        response = self._gateway.get(
            self.config.api_url(USER_PATH),
            headers=self._tokens.authorization_header(),
        )
        if response.status_code != 200:
            raise ResponseDecoder.service_error(response)

        email = ResponseDecoder.get_str(response, "email")
        company = select_active_company(self.get_companies())
        return Identity(email=email, company_name=company.name)

    def get_companies(self) -> list[Company]:
        """Get the user's companies, fetching them on first use.

        Raises:
            NoCompanyError: If the user belongs to no company.
            ResponseDecodeError: If the company list cannot be read.
            ServiceError: On a failure response.
        """
        if self._companies is not None:
            return list(self._companies)

        self._tokens.require_access_token()
        response = self._gateway.get(
            self.config.api_url(COMPANIES_PATH),
            headers=self._tokens.authorization_header(),
        )
        if response.status_code != 200:
            raise ResponseDecoder.service_error(response)

        if not response.content:
            raise ResponseDecodeError(
                "KeySmith communication failed: Companies response body is empty",
                status_code=response.status_code,
            )
        try:
            document = response.json()
        except ValueError as e:
            raise ResponseDecodeError(
                "KeySmith communication : Parsing companies failed.",
                status_code=response.status_code,
            ) from e
        if not isinstance(document, list):
            raise ResponseDecodeError(
                "KeySmith communication : Parsing companies failed.",
                status_code=response.status_code,
            )

        try:
            companies = [Company.model_validate(entry) for entry in document]
        except PydanticValidationError as e:
            raise ResponseDecodeError(
                "KeySmith communication : Parsing companies failed.",
                status_code=response.status_code,
            ) from e

        if not companies:
            raise NoCompanyError()

        self._companies = companies
        self._logger.debug("Companies loaded", count=len(companies))
        return list(companies)

    def clear(self) -> None:
        """Forget the cached companies."""
        self._companies = None

    def get_certificate_chain(self) -> str:
        """Get the PEM certificate chain of the active company.

        The access token is refreshed first; a signing workflow that follows
        (CPL signing, KDM upload, PKL signing) is expected to finish within
        the new token's lifetime.

        Raises:
            TokenExchangeError: If the refresh fails.
            CertificateUnavailableError: If no certificate has been generated.
        """
        self._tokens.ensure_access_token()
        company = select_active_company(self.get_companies())
        if not company.certificate_generated:
            raise CertificateUnavailableError(company_id=company.id)
        return company.certificate
