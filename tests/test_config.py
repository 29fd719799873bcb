"""
Tests for configuration, endpoint resolution and request building
"""

import httpx
import pytest
from pydantic import ValidationError

from conjur_api import ClientConfig, ConfigurationError, Endpoints, RequestBuilder, ServiceKind
from conjur_api.config import resolve_endpoint
from conjur_api.request import encode_path_segment


class TestEndpoints:
    """Endpoint resolution"""

    def test_from_appliance_url(self):
        endpoints = Endpoints.from_appliance_url("https://conjur.example.com/")

        assert endpoints.directory == "https://conjur.example.com/api"
        assert endpoints.authn == "https://conjur.example.com/authn"
        assert endpoints.secrets == "https://conjur.example.com"

    @pytest.mark.parametrize(
        "service,expected",
        [
            (ServiceKind.DIRECTORY, "https://conjur.example.com/api"),
            (ServiceKind.AUTHN, "https://conjur.example.com/authn"),
            (ServiceKind.SECRETS, "https://conjur.example.com"),
        ],
    )
    def test_registry_picks_service(self, service, expected):
        endpoints = Endpoints.from_appliance_url("https://conjur.example.com")
        assert resolve_endpoint(endpoints, service) == expected

    def test_string_and_url(self):
        assert resolve_endpoint("https://conjur.example.com/api/", ServiceKind.DIRECTORY) == (
            "https://conjur.example.com/api"
        )
        assert resolve_endpoint(httpx.URL("https://conjur.example.com/api"), ServiceKind.SECRETS) == (
            "https://conjur.example.com/api"
        )

    @pytest.mark.parametrize("url", ["", "/api", "conjur"])
    def test_relative_or_empty_url(self, url):
        with pytest.raises(ConfigurationError):
            resolve_endpoint(url, ServiceKind.DIRECTORY)

    def test_unsupported_source(self):
        with pytest.raises(ConfigurationError):
            resolve_endpoint(42, ServiceKind.DIRECTORY)

    @pytest.mark.parametrize("directory", ["/api", ""])
    def test_registry_validates_urls(self, directory):
        with pytest.raises(ConfigurationError):
            Endpoints(directory=directory, authn="https://x/authn", secrets="https://x")


class TestClientConfig:
    def test_defaults(self):
        config = ClientConfig()
        assert config.timeout == 30.0
        assert config.max_retries == 3
        assert config.verify is True

    def test_ca_bundle(self):
        assert ClientConfig(ca_bundle="/etc/ssl/ca.pem").verify == "/etc/ssl/ca.pem"
        assert ClientConfig(verify_ssl=False, ca_bundle="/etc/ssl/ca.pem").verify is False

    def test_unknown_option(self):
        with pytest.raises(ValidationError):
            ClientConfig(cache_ttl=300)


class TestRequestBuilder:
    """Request construction"""

    def test_parameters_keep_order_and_skip_none(self):
        request = (
            RequestBuilder("post", "/variables")
            .add_parameter("mime_type", "text/plain")
            .add_parameter("kind", "Secret Question")
            .add_parameter("id", None)
            .build()
        )

        assert request.method == "POST"
        assert request.params == (("mime_type", "text/plain"), ("kind", "Secret Question"))
        assert request.params_in_query is False

    def test_values_are_stringified(self):
        request = RequestBuilder("GET", "/variables/v/value").add_parameter("version", 2).build()
        assert request.params == (("version", "2"),)
        assert request.params_in_query is True

    def test_body_moves_parameters_to_query(self):
        request = RequestBuilder("POST", "/secrets/v").add_parameter("a", "b").set_body("x").build()
        assert request.params_in_query is True

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("db-password", "db-password"),
            ("prod/db/password", "prod%2Fdb%2Fpassword"),
            ("my var", "my%20var"),
            ("a?b#c&d", "a%3Fb%23c%26d"),
            ("it's (a)*!~", "it's%20(a)*!~"),
        ],
    )
    def test_encode_path_segment(self, value, expected):
        assert encode_path_segment(value) == expected
