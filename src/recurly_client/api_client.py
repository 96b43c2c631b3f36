"""
Recurly API Client

This module provides the HTTP dispatcher every entity operation goes through:
it builds the request (endpoint + path, credentials, XML content type), sends
it over a requests session and maps the outcome to a Response or to one of the
typed errors in ``runtime.errors``.

The client performs blocking calls, holds no per-request state and never
retries.
"""

from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Union

import requests
from requests.auth import HTTPBasicAuth

from .codec.reader import XmlReader
from .codec.writer import XmlWriter
from .http import Response
from .runtime.errors import (
    ConfigurationError,
    ConnectionError,
    NotFoundError,
    TimeoutError,
    TransportError,
    error_from_response,
)

__version__ = "1.0.0"

XML_CONTENT_TYPE = "application/xml; charset=utf-8"


class HttpMethod(str, Enum):
    """HTTP verbs used by the API."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


@dataclass
class ClientConfig:
    """Configuration for the Recurly API client."""

    api_key: str
    subdomain: Optional[str] = None
    endpoint: Optional[str] = None
    timeout: float = 30.0
    verify_ssl: bool = True
    debug: bool = False
    user_agent: str = f"recurly-python-client/{__version__}"
    api_version: Optional[str] = None
    accept_language: Optional[str] = None

    @property
    def base_url(self) -> str:
        """Endpoint the request paths are appended to."""
        if self.endpoint:
            return self.endpoint.rstrip("/")
        if self.subdomain:
            return f"https://{self.subdomain}.recurly.com/v2"
        raise ConfigurationError("Either endpoint or subdomain must be configured")

    def validate(self) -> None:
        if not self.api_key:
            raise ConfigurationError("An API key is required")
        # Raises when neither endpoint nor subdomain is set
        self.base_url

    @classmethod
    def from_env(cls, prefix: str = "RECURLY_", environ: Optional[Mapping[str, str]] = None) -> "ClientConfig":
        """
        Load configuration from environment variables.

        Reads ``<prefix>API_KEY``, ``<prefix>SUBDOMAIN``, ``<prefix>ENDPOINT``,
        ``<prefix>TIMEOUT``, ``<prefix>DEBUG`` and ``<prefix>API_VERSION``.

        Raises:
            ConfigurationError: If the API key is missing or a value is invalid
        """
        env = os.environ if environ is None else environ
        api_key = env.get(prefix + "API_KEY")
        if not api_key:
            raise ConfigurationError(f"{prefix}API_KEY is not set")

        config = cls(
            api_key=api_key,
            subdomain=env.get(prefix + "SUBDOMAIN") or None,
            endpoint=env.get(prefix + "ENDPOINT") or None,
            api_version=env.get(prefix + "API_VERSION") or None,
        )

        timeout = env.get(prefix + "TIMEOUT")
        if timeout:
            try:
                config.timeout = float(timeout)
            except ValueError:
                raise ConfigurationError(f"{prefix}TIMEOUT must be a number, got {timeout!r}")

        debug = env.get(prefix + "DEBUG", "")
        config.debug = debug.lower() in ("1", "true", "yes", "on")

        config.validate()
        return config


class RecurlyClient:
    """
    HTTP dispatcher for the Recurly XML API.

    Example:
        ```python
        client = RecurlyClient(ClientConfig(api_key="...", subdomain="mycompany"))

        account = Account()
        response = client.perform_request(HttpMethod.GET, "/accounts/abc", read_xml=account.read_xml)
        if response.is_not_found:
            account = None
        ```
    """

    def __init__(self, config: ClientConfig, session: Optional[requests.Session] = None):
        """
        Initialize the client.

        Args:
            config: Client configuration
            session: Optional requests.Session for connection pooling
        """
        config.validate()
        self.config = config

        self.logger = logging.getLogger(__name__)
        if self.config.debug:
            self.logger.setLevel(logging.DEBUG)

        self._endpoint = config.base_url
        self._session = session or requests.Session()
        self._owns_session = session is None
        self._auth = HTTPBasicAuth(config.api_key, "")

    @property
    def endpoint(self) -> str:
        """Get the API endpoint."""
        return self._endpoint

    def close(self) -> None:
        """Close the HTTP session if owned by this client."""
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> RecurlyClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def url_for(self, path: str) -> str:
        """Absolute URL for a path; absolute URLs (e.g. next-page links) pass through."""
        if path.startswith("http://") or path.startswith("https://"):
            return path
        if not path.startswith("/"):
            path = "/" + path
        return self._endpoint + path

    def _headers(self, accept: str) -> Dict[str, str]:
        headers = {
            "Accept": accept,
            "Content-Type": XML_CONTENT_TYPE,
            "User-Agent": self.config.user_agent,
        }
        if self.config.api_version:
            headers["X-Api-Version"] = self.config.api_version
        if self.config.accept_language:
            headers["Accept-Language"] = self.config.accept_language
        return headers

    def _send(self, method: HttpMethod, url: str, body: Optional[bytes],
              headers: Dict[str, str], params: Optional[Mapping[str, Any]]) -> Response:
        self.logger.debug(f"Request: {method.value} {url}")
        if body is not None and self.config.debug:
            self.logger.debug(f"Request body: {body.decode('utf-8', errors='replace')}")

        try:
            resp = self._session.request(
                method.value,
                url,
                data=body,
                params=params,
                headers=headers,
                auth=self._auth,
                timeout=self.config.timeout,
                verify=self.config.verify_ssl,
            )
        except requests.exceptions.Timeout as e:
            self.logger.warning(f"{method.value} {url} timed out: {e}")
            raise TimeoutError(f"Request timed out: {method.value} {url}", cause=e)
        except requests.exceptions.ConnectionError as e:
            self.logger.warning(f"{method.value} {url} could not connect: {e}")
            raise ConnectionError(f"Connection failed: {method.value} {url}", cause=e)
        except requests.exceptions.RequestException as e:
            self.logger.warning(f"{method.value} {url} failed: {e}")
            raise TransportError(f"HTTP request failed: {e}", cause=e)

        response = Response.build(resp)
        self.logger.debug(
            f"Response: {response.status_code} for {method.value} {url} "
            f"(request id {response.request_id})"
        )
        return response

    def perform_request(
        self,
        method: Union[HttpMethod, str],
        path: str,
        write_xml: Optional[Callable[[XmlWriter], None]] = None,
        read_xml: Optional[Callable[[XmlReader], None]] = None,
        *,
        params: Optional[Mapping[str, Any]] = None,
        allow_not_found: bool = True,
    ) -> Response:
        """
        Perform one API call.

        Args:
            method: HTTP verb
            path: Escaped path relative to the endpoint, or an absolute URL
            write_xml: Callback that writes the request document
            read_xml: Callback that reads the response document
            params: Extra query parameters
            allow_not_found: Return 404 responses instead of raising NotFoundError

        Returns:
            The wrapped response; check ``status_code``/``is_not_found``

        Raises:
            TransportError: If the service could not be reached
            NotFoundError: On 404 when ``allow_not_found`` is False
            ValidationError: On other 4xx responses
            ServerError: On 5xx responses
            MalformedResponseError: If the body is not a parseable document
        """
        method = HttpMethod(method)

        body = None
        if write_xml is not None:
            writer = XmlWriter()
            write_xml(writer)
            body = writer.to_bytes()

        response = self._send(method, self.url_for(path), body, self._headers("application/xml"), params)

        if response.is_not_found:
            if allow_not_found:
                return response
            raise error_from_response(response)

        error = error_from_response(response)
        if error is not None:
            self.logger.debug(f"API error {response.status_code}: {error.message}")
            raise error

        if read_xml is not None and response.status_code != 204 and response.has_body:
            read_xml(XmlReader.parse(response.raw_response))

        return response

    def get_pdf(self, path: str, accept_language: str = "en-US") -> Optional[bytes]:
        """
        Download a PDF rendition of a resource.

        Returns:
            The PDF bytes, or None if the resource does not exist
        """
        headers = self._headers("application/pdf")
        headers["Accept-Language"] = accept_language
        response = self._send(HttpMethod.GET, self.url_for(path), None, headers, None)
        if response.is_not_found:
            return None
        error = error_from_response(response)
        if error is not None:
            raise error
        return response.raw_response


# =============================================================================
# Process-wide default client
# =============================================================================

_default_client: Optional[RecurlyClient] = None


def configure(config: Union[ClientConfig, RecurlyClient]) -> RecurlyClient:
    """Set the client used by entity operations that are not given one."""
    global _default_client
    if isinstance(config, RecurlyClient):
        _default_client = config
    else:
        _default_client = RecurlyClient(config)
    return _default_client


def get_default_client() -> RecurlyClient:
    """
    Return the configured default client.

    Raises:
        ConfigurationError: If ``configure`` has not been called
    """
    if _default_client is None:
        raise ConfigurationError("No default client configured; call recurly_client.configure() first")
    return _default_client


def reset_default_client() -> None:
    """Forget the default client (closing it if it owns its session)."""
    global _default_client
    if _default_client is not None:
        _default_client.close()
    _default_client = None


def resolve_client(client: Optional[RecurlyClient]) -> RecurlyClient:
    return client if client is not None else get_default_client()
