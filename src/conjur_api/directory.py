"""
Directory client

Access to the directory (core) service: users, variables and variable values.
All calls are authenticated with a token from the configured ``AuthMethod``.
"""

import logging
from typing import Optional

import httpx

from .auth import AuthMethod
from .client import AuthenticatedClient
from .config import ClientConfig, EndpointSource, ServiceKind
from .exceptions import ForbiddenError, NotFoundError
from .models import User, Variable, decode_record

logger = logging.getLogger(__name__)

USERS_PATH = "/users"
VARIABLES_PATH = "/variables"
DEFAULT_MIME_TYPE = "text/plain"


def _require_not_blank(value: Optional[str], name: str) -> None:
    if value is None or not value.strip():
        raise ValueError(f"{name} must not be blank")


class DirectoryClient:
    """Client for the directory service."""

    def __init__(
        self,
        endpoint: EndpointSource,
        auth: AuthMethod,
        config: Optional[ClientConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize the directory client.

        Args:
            endpoint: Directory URL, or an ``Endpoints`` registry
            auth: Authentication method to use
            config: Optional client configuration
            transport: Optional httpx transport
        """
        self.client = AuthenticatedClient(
            endpoint,
            auth,
            service=ServiceKind.DIRECTORY,
            config=config,
            transport=transport,
        )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        """Close the HTTP client."""
        self.client.close()

    # User Methods

    def create_user(self, login: str, password: Optional[str] = None) -> User:
        """
        Create a user with the given login and password.

        Args:
            login: The login for the new user
            password: The password for the new user. If ``None`` the user
                gets an API key but no password.

        Returns:
            The created user, including its API key

        Raises:
            ValueError: If ``login`` is blank, or ``password`` is given but blank
            ForbiddenError: When you don't have permission to create users
        """
        _require_not_blank(login, "Login")
        if password is not None:
            _require_not_blank(password, "Password")

        builder = self.client.request_builder("POST", USERS_PATH).add_parameter("login", login)
        builder.add_parameter("password", password)

        logger.info(f"Creating user {login}")
        return decode_record(User, self.client.execute(builder.build()))

    def get_user(self, login: str) -> User:
        """
        Get the user with the given login.

        Raises:
            NotFoundError: When the user doesn't exist
            ForbiddenError: When you don't have permission to read the user
        """
        request = self.client.request("GET", f"{USERS_PATH}/{login}")
        return decode_record(User, self.client.execute(request))

    def try_get_user(self, login: str) -> Optional[User]:
        """Like :meth:`get_user`, but returns ``None`` if the user doesn't exist."""
        try:
            return self.get_user(login)
        except NotFoundError:
            return None

    def user_exists(self, login: str) -> bool:
        """
        Check whether a user with the given login exists.

        Unlike checking :meth:`try_get_user` for ``None``, this returns
        ``True`` when reading the user is forbidden, since creating a user
        with that login would fail too.
        """
        try:
            return self.try_get_user(login) is not None
        except ForbiddenError:
            return True

    # Variable Methods

    def create_variable(
        self,
        kind: str,
        mime_type: Optional[str] = None,
        id: Optional[str] = None,
    ) -> Variable:
        """
        Create a variable.

        Args:
            kind: What kind of variable to create, e.g. ``"Secret Question"``
            mime_type: Mime type of the stored values, ``"text/plain"`` if ``None``
            id: The variable id. If ``None`` the service generates one; if
                given and taken the service rejects the request.

        Returns:
            The created variable, bound to this client
        """
        _require_not_blank(kind, "Kind")

        builder = (
            self.client.request_builder("POST", VARIABLES_PATH)
            .add_parameter("mime_type", DEFAULT_MIME_TYPE if mime_type is None else mime_type)
            .add_parameter("kind", kind)
            .add_parameter("id", id)
        )

        logger.info(f"Creating variable of kind {kind}")
        return decode_record(Variable, self.client.execute(builder.build())).bind(self)

    def get_variable(self, id: str) -> Variable:
        """
        Get the variable with the given id.

        Raises:
            NotFoundError: When the variable doesn't exist
        """
        request = self.client.request("GET", self._variable_path(id))
        return decode_record(Variable, self.client.execute(request)).bind(self)

    def try_get_variable(self, id: str) -> Optional[Variable]:
        """Like :meth:`get_variable`, but returns ``None`` if the variable doesn't exist."""
        try:
            return self.get_variable(id)
        except NotFoundError:
            return None

    def variable_exists(self, id: str) -> bool:
        """
        Check whether the variable exists.

        Returns ``True`` when reading the variable is forbidden, since
        creating it would fail as well.
        """
        try:
            return self.try_get_variable(id) is not None
        except ForbiddenError:
            return True

    # Variable Value Methods

    def add_variable_value(self, variable_id: str, value: str) -> None:
        """Store a new version of a variable's value."""
        request = (
            self.client.request_builder("POST", f"{self._variable_path(variable_id)}/values")
            .add_parameter("value", value)
            .build()
        )
        self.client.execute(request)

    def get_variable_value(self, variable_id: str, version: Optional[int] = None) -> str:
        """Get the latest value of a variable, or the given version."""
        request = (
            self.client.request_builder("GET", f"{self._variable_path(variable_id)}/value")
            .add_parameter("version", version)
            .build()
        )
        return self.client.execute(request)

    def _variable_path(self, variable_id: str) -> str:
        return f"{VARIABLES_PATH}/{variable_id}"
