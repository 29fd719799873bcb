"""
Authenticated Conjur client

Core request pipeline shared by the directory and secrets clients: builds
requests against a resolved service endpoint, attaches the auth token, sends
them over httpx and maps failed responses onto the exception hierarchy.
"""

import logging
from typing import Optional

import httpx
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from .auth import AuthMethod, AuthToken
from .config import ClientConfig, EndpointSource, ServiceKind, resolve_endpoint
from .exceptions import TransportError, error_for_status
from .request import Request, RequestBuilder

logger = logging.getLogger(__name__)


class AuthenticatedClient:
    """
    Client for one Conjur service, authenticating every request.

    A 401 response is retried once with a fresh token when the auth method
    can refresh; every other outcome is returned or raised as-is.
    """

    def __init__(
        self,
        endpoint: EndpointSource,
        auth: AuthMethod,
        service: ServiceKind = ServiceKind.DIRECTORY,
        config: Optional[ClientConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            endpoint: Service URL, as an ``httpx.URL``, a string or an ``Endpoints`` registry
            auth: Authentication method to use
            service: Which service of an ``Endpoints`` registry to target
            config: Optional client configuration
            transport: Optional httpx transport, e.g. ``httpx.MockTransport`` in tests
        """
        self.service = ServiceKind(service)
        self.base_url = resolve_endpoint(endpoint, self.service)
        self.auth = auth
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

    def request(self, method: str, path: str) -> Request:
        """Build a parameterless request for ``path``."""
        return self.request_builder(method, path).build()

    def request_builder(self, method: str, path: str) -> RequestBuilder:
        """Start building a request for ``path``."""
        if not path.startswith("/"):
            path = "/" + path
        return RequestBuilder(method, path)

    def execute(self, request: Request) -> str:
        """
        Send a request and return the response body.

        Raises:
            ConjurError: The subclass matching the failed status code
            TransportError: If no response was received
        """
        token = self.auth.token()
        response = self._send(request, token)
        if response.status_code == 401 and self.auth.can_refresh:
            logger.info(f"Token rejected by {self.service.value} service, re-authenticating")
            self.auth.invalidate(token)
            response = self._send(request, self.auth.token())
        return self._handle_response(response)

    def execute_with_retry(self, request: Request) -> str:
        """Like :meth:`execute`, retrying transport failures with backoff."""
        retrying = Retrying(
            stop=stop_after_attempt(self.config.max_retries),
            wait=wait_exponential(multiplier=self.config.retry_backoff_factor, max=10),
            retry=retry_if_exception_type(TransportError),
            reraise=True,
        )
        return retrying(self.execute, request)

    def _send(self, request: Request, token: AuthToken) -> httpx.Response:
        """Send a request once."""
        url = f"{self.base_url}{request.path}"
        headers = self.auth.get_headers(token)
        params = list(request.params) or None
        content = None

        if request.body is not None:
            content = request.body.encode("utf-8")
            headers["Content-Type"] = "text/plain"
        if not request.params_in_query:
            # Repeated names are kept, in order.
            content = str(httpx.QueryParams(list(request.params))).encode("utf-8")
            headers["Content-Type"] = "application/x-www-form-urlencoded"
            params = None

        timeout = request.timeout if request.timeout is not None else self.config.timeout

        if self.config.log_requests:
            logger.debug(f"{request.method} {url}")

        try:
            response = self._client.request(
                method=request.method,
                url=url,
                params=params,
                content=content,
                headers=headers,
                timeout=timeout,
            )
        except httpx.TimeoutException as e:
            logger.error(f"Request timed out: {request.method} {url}")
            raise TransportError(f"Request to {url} timed out: {e}") from e
        except httpx.RequestError as e:
            logger.error(f"Request failed: {e}")
            raise TransportError(f"Failed to connect to {url}: {e}") from e

        if self.config.log_responses:
            logger.debug(f"{request.method} {url} -> {response.status_code}")
        return response

    def _handle_response(self, response: httpx.Response) -> str:
        """Return the body of a successful response or raise the mapped error."""
        if response.status_code < 400:
            return response.text
        raise error_for_status(response.status_code, response.text or None)
