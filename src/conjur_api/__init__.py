"""
Conjur API Python client

Client library for the Conjur directory and secrets services. Provides user
and variable management, versioned variable values and raw secret access,
with HTTP failures mapped to a typed exception hierarchy.
"""

from .client import AuthenticatedClient
from .auth import AuthToken, AuthMethod, TokenAuth, CredentialsAuth
from .authn import AuthnClient
from .directory import DirectoryClient
from .secrets import SecretsClient
from .request import Request, RequestBuilder, encode_path_segment
from .exceptions import (
    ErrorKind,
    ConjurError,
    BadRequestError,
    UnauthorizedError,
    ForbiddenError,
    NotFoundError,
    ConflictError,
    ClientError,
    ServerError,
    TransportError,
    DecodeError,
    ConfigurationError,
)
from .models import Credentials, User, Variable
from .config import ClientConfig, Endpoints, ServiceKind

__version__ = "1.0.0"

__all__ = [
    "AuthenticatedClient",
    "AuthToken",
    "AuthMethod",
    "TokenAuth",
    "CredentialsAuth",
    "AuthnClient",
    "DirectoryClient",
    "SecretsClient",
    "Request",
    "RequestBuilder",
    "encode_path_segment",
    "ErrorKind",
    "ConjurError",
    "BadRequestError",
    "UnauthorizedError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
    "ClientError",
    "ServerError",
    "TransportError",
    "DecodeError",
    "ConfigurationError",
    "Credentials",
    "User",
    "Variable",
    "ClientConfig",
    "Endpoints",
    "ServiceKind",
]
