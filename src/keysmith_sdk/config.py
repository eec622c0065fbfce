"""Configuration for the KeySmith SDK.

Uses Pydantic v2 for validation with sensible defaults. Endpoint URLs are
derived from the service and account base URLs unless set explicitly.
"""

from __future__ import annotations

import os
from typing import Annotated, Any, Self

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    ValidationError,
    field_validator,
    model_validator,
)

from .errors import ConfigurationError

PRODUCTION_URL = "https://api.keysmith.com"
STAGING_URL = "https://api.staging.keysmith.com"


class TelemetryConfig(BaseModel):
    """Logging and tracing configuration."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    service_name: str = "keysmith-sdk"
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a standard level name."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            msg = f"Unsupported log level: {v}"
            raise ValueError(msg)
        return level


class KeySmithConfig(BaseModel):
    """Main configuration for the KeySmith SDK."""

    model_config = ConfigDict(frozen=True, validate_default=True)

    # Required
    base_url: HttpUrl
    client_id: str = Field(..., min_length=1)

    # Authorization host; defaults to base_url
    account_url: HttpUrl | None = None

    # HTTP settings
    timeout: Annotated[float, Field(gt=0, le=300)] = 30.0
    connect_timeout: Annotated[float, Field(gt=0, le=60)] = 10.0
    ca_bundle: str | None = None

    # Session behaviour
    poll_interval: Annotated[float, Field(gt=0, le=60)] = 2.0
    revoke_on_close: bool = True

    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)

    # Endpoints (auto-derived if not set)
    authorization_request_endpoint: str | None = None
    token_endpoint: str | None = None
    revocation_endpoint: str | None = None
    logout_endpoint: str | None = None

    @field_validator("client_id")
    @classmethod
    def validate_client_id(cls, v: str) -> str:
        """Reject client ids made of whitespace only."""
        if not v.strip():
            msg = "client_id must not be blank"
            raise ValueError(msg)
        return v.strip()

    @model_validator(mode="after")
    def set_default_endpoints(self) -> Self:
        """Set default endpoints based on the configured hosts."""
        account = self.account_url_str

        # Use object.__setattr__ since model is frozen
        if self.authorization_request_endpoint is None:
            object.__setattr__(
                self,
                "authorization_request_endpoint",
                f"{account}/oauth2/authorization/request",
            )
        if self.token_endpoint is None:
            object.__setattr__(self, "token_endpoint", f"{account}/oauth2/authorization/token")
        if self.revocation_endpoint is None:
            object.__setattr__(self, "revocation_endpoint", f"{account}/oauth2/token")
        if self.logout_endpoint is None:
            object.__setattr__(self, "logout_endpoint", f"{self.base_url_str}/logout")

        return self

    @property
    def base_url_str(self) -> str:
        """Get base URL as string without trailing slash."""
        return str(self.base_url).rstrip("/")

    @property
    def account_url_str(self) -> str:
        """Get authorization host URL as string without trailing slash."""
        if self.account_url is None:
            return self.base_url_str
        return str(self.account_url).rstrip("/")

    def api_url(self, path: str) -> str:
        """Build an absolute URL for a service API path."""
        return f"{self.base_url_str}/{path.lstrip('/')}"

    @classmethod
    def create(cls, **kwargs: Any) -> Self:
        """Build a config, reporting validation failures as ConfigurationError."""
        try:
            return cls(**kwargs)
        except ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first.get("loc", ())) or None
            msg = f"Invalid KeySmith configuration: {first.get('msg', e)}"
            raise ConfigurationError(msg, field=field) from e

    @classmethod
    def from_env(cls, prefix: str = "KEYSMITH_") -> Self:
        """Create config from environment variables."""

        def get_env(key: str, default: Any = None) -> Any:
            return os.environ.get(f"{prefix}{key}", default)

        client_id = get_env("CLIENT_ID")
        if not client_id:
            msg = f"{prefix}CLIENT_ID environment variable is required"
            raise ConfigurationError(msg, field="client_id")

        kwargs: dict[str, Any] = {
            "base_url": get_env("BASE_URL", PRODUCTION_URL),
            "client_id": client_id,
            "account_url": get_env("ACCOUNT_URL"),
            "ca_bundle": get_env("CA_BUNDLE"),
        }
        try:
            kwargs["timeout"] = float(get_env("TIMEOUT", "30.0"))
            kwargs["poll_interval"] = float(get_env("POLL_INTERVAL", "2.0"))
        except ValueError as e:
            raise ConfigurationError(f"Invalid numeric setting: {e}") from e

        revoke = get_env("REVOKE_ON_CLOSE")
        if revoke is not None:
            kwargs["revoke_on_close"] = revoke.strip().lower() in {"1", "true", "yes"}

        return cls.create(**kwargs)
