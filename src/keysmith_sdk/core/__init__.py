"""Core components for the KeySmith SDK.

Session, token, profile and job logic composed by ``KeySmithClient``.
"""

from __future__ import annotations

from .decoder import ResponseDecoder
from .jobs import JobPoller
from .profile import ProfileCache, select_active_company
from .session import AuthSession, SessionState, compose_login_url
from .token_store import TokenStore

__all__ = [
    "ResponseDecoder",
    "JobPoller",
    "ProfileCache",
    "select_active_company",
    "AuthSession",
    "SessionState",
    "compose_login_url",
    "TokenStore",
]
