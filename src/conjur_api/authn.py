"""
Authentication service client.

Exchanges a login and password (or API key) for an access token. Used by
:class:`~conjur_api.auth.CredentialsAuth` as its token provider.
"""

import logging
from typing import Optional

import httpx

from .auth import AuthToken
from .config import ClientConfig, EndpointSource, ServiceKind, resolve_endpoint
from .exceptions import TransportError, error_for_status
from .models import Credentials
from .request import encode_path_segment

logger = logging.getLogger(__name__)


class AuthnClient:
    """Client for the authn service."""

    def __init__(
        self,
        endpoint: EndpointSource,
        config: Optional[ClientConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = resolve_endpoint(endpoint, ServiceKind.AUTHN)
        self.config = config or ClientConfig()
        self._client = httpx.Client(
            timeout=self.config.timeout,
            limits=httpx.Limits(
                max_keepalive_connections=self.config.max_connections,
                max_connections=self.config.max_connections,
            ),
            verify=self.config.verify,
            follow_redirects=self.config.follow_redirects,
            transport=transport,
        )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        """Close the HTTP client."""
        self._client.close()

    def login(self, credentials: Credentials) -> AuthToken:
        """
        Obtain a fresh token for ``credentials``.

        When only a password is held it is first exchanged for the API key.

        Raises:
            UnauthorizedError: If the credentials are rejected
            TransportError: If the authn service can't be reached
        """
        if credentials.api_key is not None:
            api_key = credentials.api_key.get_secret_value()
        else:
            api_key = self.get_api_key(credentials.login, credentials.password.get_secret_value())

        path = f"/users/{encode_path_segment(credentials.login)}/authenticate"
        response = self._send("POST", path, content=api_key.encode("utf-8"))
        logger.debug(f"Authenticated {credentials.login}")
        return AuthToken.from_json(response.text)

    def get_api_key(self, login: str, password: str) -> str:
        """Exchange a login and password for the user's API key."""
        response = self._send("GET", "/users/login", auth=httpx.BasicAuth(login, password))
        return response.text

    def _send(self, method: str, path: str, **kwargs) -> httpx.Response:
        url = f"{self.base_url}{path}"
        if self.config.log_requests:
            logger.debug(f"{method} {url}")
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            logger.error(f"Authentication request timed out: {method} {url}")
            raise TransportError(f"Request to {url} timed out: {e}") from e
        except httpx.RequestError as e:
            logger.error(f"Authentication request failed: {e}")
            raise TransportError(f"Failed to connect to {url}: {e}") from e

        if self.config.log_responses:
            logger.debug(f"{method} {url} -> {response.status_code}")
        if response.status_code >= 400:
            raise error_for_status(response.status_code, response.text or None)
        return response
