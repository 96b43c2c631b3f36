"""
Recurly Error Model

This module provides the error handling framework for the Recurly Python client.
Errors are split by where they originate: below HTTP (transport), in the API
(validation, not found, server) or in the document layer (malformed bodies).
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Dict, Any, List, TYPE_CHECKING
from enum import IntEnum
import xml.etree.ElementTree as ET

if TYPE_CHECKING:
    from ..http import Response


class ErrorCode(IntEnum):
    """Client error codes."""

    # General errors (1-99)
    UNKNOWN = 1
    INTERNAL = 2
    CONFIGURATION = 3

    # Encoding errors (100-199)
    ENCODING_ERROR = 100
    MALFORMED_RESPONSE = 101

    # Network errors (200-299)
    NETWORK_ERROR = 200
    CONNECTION_FAILED = 201
    TIMEOUT = 202

    # API errors (300-399)
    NOT_FOUND = 300
    VALIDATION_FAILED = 301
    UNAUTHENTICATED = 302
    FORBIDDEN = 303
    SERVER_ERROR = 304


@dataclass(frozen=True)
class FieldError:
    """One error entry reported by the API for a request document."""

    field: Optional[str]
    symbol: Optional[str]
    message: str

    def __str__(self) -> str:
        if self.field:
            return f"{self.field} {self.message}"
        return self.message


class RecurlyError(Exception):
    """
    Base class for all Recurly client errors.

    Carries a code, a message and optional structured details.
    """

    def __init__(self, message: str, code: ErrorCode = ErrorCode.UNKNOWN,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        """
        Initialize a Recurly error.

        Args:
            message: Error message
            code: Error code
            details: Additional error details
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        """String representation of the error."""
        parts = [f"[{self.code.name}] {self.message}"]
        if self.details:
            parts.append(f"Details: {self.details}")
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        result = {
            "code": self.code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.cause:
            result["cause"] = str(self.cause)
        return result


class ConfigurationError(RecurlyError):
    """Missing or invalid client configuration."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.CONFIGURATION, details)


class TransportError(RecurlyError):
    """The service could not be reached (DNS, connection refused, TLS, timeout)."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.NETWORK_ERROR, details, cause)


class ConnectionError(TransportError):
    """Connection failures."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, details, cause)
        self.code = ErrorCode.CONNECTION_FAILED


class TimeoutError(TransportError):
    """Request timeouts."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, details, cause)
        self.code = ErrorCode.TIMEOUT


class ApiError(RecurlyError):
    """An error reported by the API through an HTTP status code."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.UNKNOWN,
                 status_code: Optional[int] = None, body: Optional[bytes] = None,
                 request_id: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code, details)
        self.status_code = status_code
        self.body = body
        self.request_id = request_id


class NotFoundError(ApiError):
    """The requested resource does not exist (404)."""

    def __init__(self, message: str = "Resource not found", **kwargs: Any):
        super().__init__(message, ErrorCode.NOT_FOUND, **kwargs)


class ValidationError(ApiError):
    """The API rejected the request (4xx, typically 422) with field-level errors."""

    def __init__(self, message: str, errors: Optional[List[FieldError]] = None,
                 code: ErrorCode = ErrorCode.VALIDATION_FAILED, **kwargs: Any):
        super().__init__(message, code, **kwargs)
        self.errors = list(errors or [])

    def errors_for(self, field: str) -> List[FieldError]:
        """Return the errors reported for one field (e.g. ``account.email``)."""
        return [e for e in self.errors if e.field == field]


class AuthenticationError(ValidationError):
    """Credential missing, invalid or lacking permission (401/403)."""

    def __init__(self, message: str, errors: Optional[List[FieldError]] = None,
                 code: ErrorCode = ErrorCode.UNAUTHENTICATED, **kwargs: Any):
        super().__init__(message, errors, code, **kwargs)


class ServerError(ApiError):
    """The API failed while handling the request (5xx)."""

    def __init__(self, message: str, **kwargs: Any):
        super().__init__(message, ErrorCode.SERVER_ERROR, **kwargs)


class EncodingError(RecurlyError):
    """Document encoding/decoding errors."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.ENCODING_ERROR,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, code, details, cause)


class MalformedResponseError(EncodingError):
    """A response body is present but is not a parseable document."""

    def __init__(self, message: str = "Malformed response document",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.MALFORMED_RESPONSE, details, cause)


def parse_error_document(body: bytes) -> List[FieldError]:
    """
    Extract field errors from an API error document.

    Handles both shapes the API produces::

        <errors><error field="account.email" symbol="invalid_email">is invalid</error></errors>
        <error><symbol>not_found</symbol><description>Couldn't find Account</description></error>

    Returns an empty list when the body is empty or not a document.
    """
    if not body or not body.strip():
        return []
    try:
        root = ET.fromstring(body)
    except ET.ParseError:
        return []

    if root.tag == "errors":
        errors = []
        for node in root:
            if node.tag == "error":
                errors.append(FieldError(
                    field=node.get("field"),
                    symbol=node.get("symbol"),
                    message=(node.text or "").strip(),
                ))
            elif node.tag == "transaction_error":
                errors.append(FieldError(
                    field=None,
                    symbol=node.findtext("error_code"),
                    message=(node.findtext("customer_message") or node.findtext("merchant_message") or "").strip(),
                ))
        return errors

    if root.tag == "error":
        return [FieldError(
            field=root.findtext("field"),
            symbol=root.findtext("symbol"),
            message=(root.findtext("description") or root.text or "").strip(),
        )]

    return []


def error_from_response(response: "Response") -> Optional[ApiError]:
    """
    Create an appropriate error from an API response.

    Args:
        response: Wrapped HTTP response

    Returns:
        Appropriate error instance or None if the status is not an error
    """
    status = response.status_code
    if status < 400:
        return None

    errors = parse_error_document(response.raw_response)
    if errors:
        message = "; ".join(str(e) for e in errors)
    else:
        message = f"HTTP {status}"

    kwargs: Dict[str, Any] = {
        "status_code": status,
        "body": response.raw_response,
        "request_id": response.request_id,
    }

    if status == 404:
        return NotFoundError(message, **kwargs)
    elif status == 401:
        return AuthenticationError(message, errors, ErrorCode.UNAUTHENTICATED, **kwargs)
    elif status == 403:
        return AuthenticationError(message, errors, ErrorCode.FORBIDDEN, **kwargs)
    elif status >= 500:
        return ServerError(message, **kwargs)
    else:
        return ValidationError(message, errors, **kwargs)


class ErrorHandler:
    """
    Utility class for categorizing errors.
    """

    @staticmethod
    def is_retryable(error: Exception) -> bool:
        """
        Check if an error is one a caller-side retry policy may retry.

        The client itself never retries.

        Args:
            error: Exception to check

        Returns:
            True for transport failures and server errors
        """
        return isinstance(error, (TransportError, ServerError))


# Re-export key error types for convenience
__all__ = [
    "ErrorCode",
    "FieldError",
    "RecurlyError",
    "ConfigurationError",
    "TransportError",
    "ConnectionError",
    "TimeoutError",
    "ApiError",
    "NotFoundError",
    "ValidationError",
    "AuthenticationError",
    "ServerError",
    "EncodingError",
    "MalformedResponseError",
    "parse_error_document",
    "error_from_response",
    "ErrorHandler",
]
