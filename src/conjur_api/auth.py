"""
Authentication methods for the Conjur API client.

An :class:`AuthMethod` supplies the ``Authorization`` header attached to every
request. :class:`TokenAuth` wraps a token obtained elsewhere and never
refreshes it; :class:`CredentialsAuth` exchanges long-lived credentials for a
token on first use and again after the service rejects it.
"""

import base64
import json
import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Optional, Protocol

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import DecodeError
from .models import Credentials

logger = logging.getLogger(__name__)

TOKEN_LIFETIME = timedelta(minutes=8)
TOKEN_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S UTC"


class AuthToken(BaseModel):
    """Opaque, time-bounded access token."""
    model_config = ConfigDict(frozen=True)

    value: str = Field(..., min_length=1, repr=False, description="Raw token")
    issued_at: Optional[datetime] = Field(None, description="Issue timestamp")
    expires_at: Optional[datetime] = Field(None, description="Expiration timestamp")

    @classmethod
    def from_json(cls, text: str, received_at: Optional[datetime] = None) -> "AuthToken":
        """
        Build a token from the JSON document returned by the authn service.

        The raw document is kept as the token value and its ``timestamp``, if
        readable, becomes ``issued_at``. Expiry is measured from
        ``received_at`` (default: now) on the local clock, so clock skew
        against the service doesn't shorten the token's life.

        Raises:
            DecodeError: If ``text`` is not a JSON object
        """
        try:
            document = json.loads(text)
        except ValueError as e:
            raise DecodeError("Authentication token is not valid JSON") from e
        if not isinstance(document, dict):
            raise DecodeError("Authentication token must be a JSON object")

        issued_at = None
        timestamp = document.get("timestamp")
        if isinstance(timestamp, str):
            try:
                issued_at = datetime.strptime(timestamp, TOKEN_TIMESTAMP_FORMAT).replace(
                    tzinfo=timezone.utc
                )
            except ValueError:
                logger.debug("Unrecognized token timestamp")

        return cls(
            value=text,
            issued_at=issued_at,
            expires_at=(received_at or datetime.now(timezone.utc)) + TOKEN_LIFETIME,
        )

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Whether the token's known expiry has passed."""
        if self.expires_at is None:
            return False
        return (now or datetime.now(timezone.utc)) >= self.expires_at

    def header_value(self) -> str:
        """Value for the ``Authorization`` header."""
        encoded = base64.b64encode(self.value.encode("utf-8")).decode("ascii")
        return f'Token token="{encoded}"'


class TokenProvider(Protocol):
    """Performs the authentication exchange."""

    def login(self, credentials: Credentials) -> AuthToken:
        ...


class AuthMethod(ABC):
    """Base class for authentication methods."""

    #: Whether a rejected token can be replaced by a fresh one.
    can_refresh: bool = False

    @abstractmethod
    def token(self) -> AuthToken:
        """Return the token to attach to the next request."""
        pass

    def invalidate(self, token: AuthToken) -> None:
        """Mark ``token`` as rejected by the service."""
        pass

    def get_headers(self, token: Optional[AuthToken] = None) -> Dict[str, str]:
        """Get authentication headers."""
        token = token or self.token()
        return {"Authorization": token.header_value()}


class TokenAuth(AuthMethod):
    """Static token authentication."""

    def __init__(self, token: AuthToken):
        """
        Initialize static token authentication.

        Args:
            token: A token obtained out of band; used verbatim for every request
        """
        self._token = token

    def token(self) -> AuthToken:
        return self._token


class CredentialsAuth(AuthMethod):
    """Login-backed authentication with a cached token."""

    can_refresh = True

    def __init__(
        self,
        credentials: Credentials,
        provider: TokenProvider,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize credential authentication.

        The first call to :meth:`token` performs the login exchange; the
        resulting token is reused until it is invalidated or expires.

        Args:
            credentials: Login plus password or API key
            provider: The authentication exchange, e.g. ``AuthnClient``
            clock: Returns the current UTC time; used for expiry checks
        """
        self.credentials = credentials
        self.provider = provider
        self._token: Optional[AuthToken] = None
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._lock = threading.Lock()

    def token(self) -> AuthToken:
        with self._lock:
            if self._token is None or self._token.is_expired(self._clock()):
                logger.info(f"Logging in as {self.credentials.login}")
                self._token = self.provider.login(self.credentials)
            return self._token

    def invalidate(self, token: AuthToken) -> None:
        with self._lock:
            # Another caller may already have replaced the rejected token.
            if self._token is token:
                self._token = None
