"""
Tests for client configuration and the process-wide default client.
"""

import pytest

from recurly_client import (
    ClientConfig,
    RecurlyClient,
    configure,
    get_default_client,
)
from recurly_client.runtime.errors import ConfigurationError


class TestClientConfig:

    def test_base_url_from_subdomain(self):
        assert ClientConfig(api_key="k", subdomain="acme").base_url == "https://acme.recurly.com/v2"

    def test_endpoint_overrides_subdomain(self):
        config = ClientConfig(api_key="k", subdomain="acme", endpoint="http://localhost:8080/v2/")
        assert config.base_url == "http://localhost:8080/v2"

    def test_missing_endpoint(self, session):
        with pytest.raises(ConfigurationError):
            RecurlyClient(ClientConfig(api_key="k"), session=session)

    def test_missing_api_key(self, session):
        with pytest.raises(ConfigurationError):
            RecurlyClient(ClientConfig(api_key="", subdomain="acme"), session=session)

    def test_from_env(self):
        config = ClientConfig.from_env(environ={
            "RECURLY_API_KEY": "secret",
            "RECURLY_SUBDOMAIN": "acme",
            "RECURLY_TIMEOUT": "12.5",
            "RECURLY_DEBUG": "true",
            "RECURLY_API_VERSION": "2.29",
        })
        assert config.api_key == "secret"
        assert config.base_url == "https://acme.recurly.com/v2"
        assert config.timeout == 12.5
        assert config.debug is True
        assert config.api_version == "2.29"

    def test_from_env_custom_prefix(self):
        config = ClientConfig.from_env(prefix="BILLING_", environ={
            "BILLING_API_KEY": "secret",
            "BILLING_ENDPOINT": "https://billing.internal/v2",
        })
        assert config.base_url == "https://billing.internal/v2"
        assert config.debug is False

    def test_from_env_missing_key(self):
        with pytest.raises(ConfigurationError):
            ClientConfig.from_env(environ={"RECURLY_SUBDOMAIN": "acme"})

    def test_from_env_bad_timeout(self):
        with pytest.raises(ConfigurationError):
            ClientConfig.from_env(environ={
                "RECURLY_API_KEY": "k",
                "RECURLY_SUBDOMAIN": "acme",
                "RECURLY_TIMEOUT": "soon",
            })


class TestDefaultClient:

    def test_unconfigured(self):
        with pytest.raises(ConfigurationError):
            get_default_client()

    def test_configure_with_client(self, client):
        assert configure(client) is client
        assert get_default_client() is client

    def test_configure_with_config(self, config):
        created = configure(config)
        assert isinstance(created, RecurlyClient)
        assert get_default_client() is created
