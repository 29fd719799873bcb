"""
Secrets client

Reads and writes raw secret values on the secrets service.
"""

import logging
from typing import Optional

import httpx

from .auth import AuthMethod, CredentialsAuth
from .authn import AuthnClient
from .client import AuthenticatedClient
from .config import ClientConfig, EndpointSource, Endpoints, ServiceKind
from .models import Credentials
from .request import encode_path_segment

logger = logging.getLogger(__name__)

SECRETS_PATH = "/secrets"


class SecretsClient:
    """Client for the secrets service."""

    def __init__(
        self,
        endpoint: EndpointSource,
        auth: AuthMethod,
        config: Optional[ClientConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.client = AuthenticatedClient(
            endpoint,
            auth,
            service=ServiceKind.SECRETS,
            config=config,
            transport=transport,
        )
        self._authn: Optional[AuthnClient] = None

    @classmethod
    def from_credentials(
        cls,
        login: str,
        password: str,
        endpoints: Endpoints,
        config: Optional[ClientConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> "SecretsClient":
        """
        Create a client that logs in with ``login`` and ``password``.

        The token is obtained from the authn service on first use and
        renewed once whenever the secrets service rejects it.
        """
        authn = AuthnClient(endpoints, config=config, transport=transport)
        auth = CredentialsAuth(Credentials(login=login, password=password), authn)
        client = cls(endpoints, auth, config=config, transport=transport)
        client._authn = authn
        return client

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        """Close the HTTP clients."""
        self.client.close()
        if self._authn is not None:
            self._authn.close()

    def retrieve_secret(self, variable_id: str) -> str:
        """Get the current secret value of a variable."""
        # The id is sent as given; only writes encode it.
        request = self.client.request("GET", f"{SECRETS_PATH}/{variable_id}")
        return self.client.execute(request)

    def add_secret(self, variable_id: str, secret: str) -> None:
        """Store a new secret value for a variable."""
        request = (
            self.client.request_builder("POST", f"{SECRETS_PATH}/{encode_path_segment(variable_id)}")
            .set_body(secret)
            .build()
        )
        logger.info(f"Adding secret to {variable_id}")
        self.client.execute(request)
