"""
Configuration classes for the Conjur API client.
"""

from enum import Enum
from typing import Optional, Union

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .exceptions import ConfigurationError


class ServiceKind(str, Enum):
    """Logical services a client can be bound to."""
    DIRECTORY = "directory"
    AUTHN = "authn"
    SECRETS = "secrets"


class ClientConfig(BaseModel):
    """Configuration for Conjur API clients."""
    model_config = ConfigDict(extra="forbid")

    timeout: float = Field(30.0, description="Request timeout in seconds")
    max_connections: int = Field(10, description="Maximum number of connections")
    max_retries: int = Field(3, ge=1, description="Maximum attempts for execute_with_retry")
    retry_backoff_factor: float = Field(2.0, ge=0, description="Retry backoff factor")
    verify_ssl: bool = Field(True, description="Whether to verify SSL certificates")
    ca_bundle: Optional[str] = Field(None, description="Path to CA bundle file")
    follow_redirects: bool = Field(False, description="Whether httpx follows redirects")

    # Logging configuration
    log_requests: bool = Field(False, description="Whether to log HTTP requests")
    log_responses: bool = Field(False, description="Whether to log HTTP responses")

    @property
    def verify(self) -> Union[bool, str]:
        """Value for httpx's ``verify`` argument."""
        if self.verify_ssl and self.ca_bundle:
            return self.ca_bundle
        return self.verify_ssl


def _check_absolute(url: str) -> str:
    if not url:
        raise ConfigurationError("Endpoint URL must not be empty")
    parsed = httpx.URL(url)
    if not parsed.scheme or not parsed.host:
        raise ConfigurationError(f"Endpoint URL must be absolute: {url}")
    return url.rstrip("/")


class Endpoints(BaseModel):
    """Base URLs for each service of a Conjur appliance."""
    model_config = ConfigDict(frozen=True)

    directory: str = Field(..., description="Directory (core) service URL")
    authn: str = Field(..., description="Authentication service URL")
    secrets: str = Field(..., description="Secrets service URL")

    @field_validator("directory", "authn", "secrets")
    @classmethod
    def _absolute_url(cls, value: str) -> str:
        # ConfigurationError is not a ValueError, so pydantic lets it propagate.
        return _resolve_url(value)

    @classmethod
    def from_appliance_url(cls, appliance_url: str) -> "Endpoints":
        """
        Derive all service endpoints from a single appliance URL.

        Args:
            appliance_url: Base URL of the appliance, e.g. ``https://conjur.example.com``

        Returns:
            Endpoints with ``/api`` for the directory, ``/authn`` for
            authentication and the appliance URL itself for secrets
        """
        base = _resolve_url(appliance_url)
        return cls(
            directory=f"{base}/api",
            authn=f"{base}/authn",
            secrets=base,
        )

    def for_service(self, service: ServiceKind) -> str:
        """Return the URL bound to ``service``."""
        return getattr(self, ServiceKind(service).value)


def _resolve_url(url: str) -> str:
    try:
        return _check_absolute(url)
    except httpx.InvalidURL as e:
        raise ConfigurationError(f"Invalid endpoint URL {url!r}: {e}")


EndpointSource = Union[httpx.URL, str, Endpoints]


def resolve_endpoint(endpoint: EndpointSource, service: ServiceKind) -> str:
    """
    Resolve the base URL a client should target.

    Args:
        endpoint: An ``httpx.URL``, a URL string, or an ``Endpoints`` registry
        service: Which service to pick when ``endpoint`` is a registry

    Returns:
        The absolute base URL without a trailing slash

    Raises:
        ConfigurationError: If the URL is empty or not absolute
    """
    if isinstance(endpoint, httpx.URL):
        return _resolve_url(str(endpoint))
    if isinstance(endpoint, str):
        return _resolve_url(endpoint)
    if isinstance(endpoint, Endpoints):
        return endpoint.for_service(service)
    raise ConfigurationError(f"Unsupported endpoint type: {type(endpoint).__name__}")
