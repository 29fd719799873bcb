"""
Shared fixtures for the Conjur API client tests
"""

import json
import uuid
from datetime import datetime, timezone
from typing import Callable, List

import httpx
import pytest

from conjur_api import AuthToken, ClientConfig, DirectoryClient, SecretsClient, TokenAuth
from conjur_api.auth import TOKEN_TIMESTAMP_FORMAT

DIRECTORY_URL = "https://conjur.example.com/api"
SECRETS_URL = "https://conjur.example.com"


def make_token_json(login: str = "admin") -> str:
    """A token document issued now, so it isn't already expired."""
    return json.dumps({
        "data": login,
        "timestamp": datetime.now(timezone.utc).strftime(TOKEN_TIMESTAMP_FORMAT),
        "signature": uuid.uuid4().hex,
        "key": "a2V5",
    })


class FakeServer:
    """Records requests and answers them with ``handler``."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.handler: Callable[[httpx.Request], httpx.Response] = lambda request: httpx.Response(200)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    def respond(self, status_code: int, text: str = "") -> None:
        self.handler = lambda request: httpx.Response(status_code, text=text)

    def fail(self, error_class=httpx.ConnectError) -> None:
        def handler(request):
            raise error_class("connection failed", request=request)
        self.handler = handler

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def server():
    return FakeServer()


@pytest.fixture
def client_config():
    return ClientConfig(
        timeout=5,
        max_retries=3,
        retry_backoff_factor=0,
        log_requests=True,
        log_responses=True,
    )


@pytest.fixture
def token():
    return AuthToken.from_json(make_token_json())


@pytest.fixture
def auth(token):
    return TokenAuth(token)


@pytest.fixture
def directory(server, auth, client_config):
    with DirectoryClient(DIRECTORY_URL, auth, config=client_config, transport=server.transport) as client:
        yield client


@pytest.fixture
def secrets(server, auth, client_config):
    with SecretsClient(SECRETS_URL, auth, config=client_config, transport=server.transport) as client:
        yield client


@pytest.fixture
def token_document():
    return make_token_json


@pytest.fixture
def new_token():
    return lambda login="admin": AuthToken.from_json(make_token_json(login))
