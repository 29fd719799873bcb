"""
Data models for the Conjur API client.
"""

from typing import TYPE_CHECKING, Any, Optional, Type, TypeVar

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    SecretStr,
    ValidationError,
    model_validator,
)

from .exceptions import ConfigurationError, DecodeError

if TYPE_CHECKING:
    from .directory import DirectoryClient

RecordT = TypeVar("RecordT", bound=BaseModel)


class Credentials(BaseModel):
    """Long-lived credentials exchanged for an access token."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    login: str = Field(..., min_length=1, description="User or host login")
    password: Optional[SecretStr] = Field(None, description="Password")
    api_key: Optional[SecretStr] = Field(None, description="API key")

    @model_validator(mode="after")
    def _require_secret(self) -> "Credentials":
        if self.password is None and self.api_key is None:
            raise ValueError("Either password or api_key is required")
        return self


class User(BaseModel):
    """A directory user."""
    model_config = ConfigDict(extra="ignore")

    login: str = Field(..., description="User login")
    userid: Optional[str] = Field(None, description="Login of the creating user")
    ownerid: Optional[str] = Field(None, description="Owning role")
    uidnumber: Optional[int] = Field(None, description="Numeric user id")
    roleid: Optional[str] = Field(None, description="Role identifier")
    resource_identifier: Optional[str] = Field(None, description="Resource identifier")
    api_key: Optional[SecretStr] = Field(None, description="API key, only present on creation")


class Variable(BaseModel):
    """A secret-bearing directory variable."""
    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., description="Variable identifier")
    kind: str = Field(..., description="Variable kind, e.g. 'Secret Question'")
    mime_type: str = Field("text/plain", description="Mime type of stored values")
    userid: Optional[str] = Field(None, description="Login of the creating user")
    ownerid: Optional[str] = Field(None, description="Owning role")
    resource_identifier: Optional[str] = Field(None, description="Resource identifier")
    version_count: int = Field(
        0,
        validation_alias=AliasChoices("versions", "version_count"),
        description="Number of stored values",
    )

    _directory: Any = PrivateAttr(default=None)

    def bind(self, directory: "DirectoryClient") -> "Variable":
        """Attach the client used by :meth:`add_value` and :meth:`get_value`."""
        self._directory = directory
        return self

    def _client(self) -> "DirectoryClient":
        if self._directory is None:
            raise ConfigurationError(f"Variable {self.id} is not bound to a DirectoryClient")
        return self._directory

    def add_value(self, value: str) -> None:
        """Store a new value for this variable."""
        self._client().add_variable_value(self.id, value)

    def get_value(self, version: Optional[int] = None) -> str:
        """Fetch the latest value, or a specific version."""
        return self._client().get_variable_value(self.id, version=version)


def decode_record(model: Type[RecordT], body: str) -> RecordT:
    """
    Decode a JSON response body into a record.

    Raises:
        DecodeError: If the body is not valid JSON or doesn't match the model
    """
    try:
        return model.model_validate_json(body)
    except ValidationError as e:
        raise DecodeError(
            f"Malformed {model.__name__} record: {e.error_count()} validation error(s)",
            body=body,
        ) from e
