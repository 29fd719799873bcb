"""
Request descriptions for the Conjur API client.
"""

from dataclasses import dataclass
from typing import Optional, Tuple
from urllib.parse import quote

# Methods whose parameters travel in the query string.
QUERY_METHODS = frozenset({"GET", "HEAD", "DELETE"})


def encode_path_segment(value: str) -> str:
    """Percent-encode a caller-supplied path segment, including ``/``, except ``!*'()``."""
    return quote(value, safe="!*'()")


@dataclass(frozen=True)
class Request:
    """A single request against a resource path."""
    method: str
    path: str
    params: Tuple[Tuple[str, str], ...] = ()
    body: Optional[str] = None
    timeout: Optional[float] = None

    @property
    def params_in_query(self) -> bool:
        """Whether parameters are sent as a query string rather than a form body."""
        return self.method in QUERY_METHODS or self.body is not None


class RequestBuilder:
    """Builds a :class:`Request` one parameter at a time."""

    def __init__(self, method: str, path: str):
        self.method = method.upper()
        self.path = path
        self._params = []
        self._body: Optional[str] = None
        self._timeout: Optional[float] = None

    def add_parameter(self, name: str, value: Optional[object]) -> "RequestBuilder":
        """Append a parameter; ``None`` values are skipped."""
        if value is not None:
            self._params.append((name, str(value)))
        return self

    def set_body(self, body: str) -> "RequestBuilder":
        self._body = body
        return self

    def set_timeout(self, timeout: float) -> "RequestBuilder":
        self._timeout = timeout
        return self

    def build(self) -> Request:
        return Request(
            method=self.method,
            path=self.path,
            params=tuple(self._params),
            body=self._body,
            timeout=self._timeout,
        )
