"""Type definitions for the KeySmith SDK."""

from dataclasses import dataclass
from typing import NamedTuple, Optional


@dataclass
class Credentials:
    """Token state of one signed-in session.

    The access token is only meaningful together with its token type, so the
    two are always set and cleared as a pair.
    """

    refresh_token: Optional[str] = None
    access_token: Optional[str] = None
    token_type: Optional[str] = None

    def set_access(self, access_token: str, token_type: str) -> None:
        """Store a freshly issued access token and its type."""
        self.access_token = access_token
        self.token_type = token_type

    def clear_access(self) -> None:
        """Forget the access token and its type."""
        self.access_token = None
        self.token_type = None

    def clear(self) -> None:
        """Forget every token."""
        self.refresh_token = None
        self.clear_access()

    @property
    def has_access_token(self) -> bool:
        return bool(self.access_token)

    def authorization_header(self) -> dict[str, str]:
        """Authorization header for the held access token, if any."""
        if not self.access_token:
            return {}
        return {"Authorization": f"{self.token_type} {self.access_token}"}


class Identity(NamedTuple):
    """Signed-in user and the company acting on their behalf."""

    email: str
    company_name: str


class JobStatus(NamedTuple):
    """Outcome of one job poll; ``result`` is empty while pending."""

    ready: bool
    result: str = ""
