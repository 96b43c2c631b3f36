"""
Shared fixtures: a client wired to a mocked requests session.
"""
from unittest.mock import Mock

import pytest
import requests

from recurly_client import ClientConfig, RecurlyClient, reset_default_client


@pytest.fixture
def config():
    """Configuration pointing at a fake subdomain."""
    return ClientConfig(api_key="test-api-key", subdomain="acme")


@pytest.fixture
def session():
    """Mocked requests session; set ``request.return_value`` or ``side_effect``."""
    return Mock(spec=requests.Session)


@pytest.fixture
def client(config, session):
    return RecurlyClient(config, session=session)


@pytest.fixture(autouse=True)
def _reset_default_client():
    yield
    reset_default_client()
