"""
Response wrapper.

Captures one HTTP exchange (status, raw body, ordered headers) and exposes the
API's informational headers. Every accessor returns None when its header is
missing or unparseable; none of them raise.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Iterable, Optional, Tuple, Any

from requests.utils import parse_header_links


REQUEST_ID_HEADER = "X-Request-Id"
RATE_LIMIT_HEADER = "X-RateLimit-Limit"
RATE_LIMIT_REMAINING_HEADER = "X-RateLimit-Remaining"
RATE_LIMIT_RESET_HEADER = "X-RateLimit-Reset"
CONTENT_TYPE_HEADER = "Content-Type"
RECORD_COUNT_HEADER = "Recurly-Total-Records"
LINK_HEADER = "Link"


@dataclass(frozen=True)
class Header:
    """A single response header, name kept as received."""

    name: str
    value: str


@dataclass(frozen=True)
class Response:
    """Immutable capture of one HTTP exchange."""

    status_code: int
    raw_response: bytes = b""
    headers: Tuple[Header, ...] = field(default_factory=tuple)

    @classmethod
    def build(cls, resp: Any) -> "Response":
        """
        Build from a ``requests.Response``.

        Args:
            resp: Response returned by the requests session

        Returns:
            Wrapped response
        """
        headers = tuple(Header(name, str(value)) for name, value in resp.headers.items())
        return cls(
            status_code=int(resp.status_code),
            raw_response=resp.content or b"",
            headers=headers,
        )

    @classmethod
    def from_pairs(cls, status_code: int, body: bytes = b"",
                   headers: Optional[Iterable[Tuple[str, str]]] = None) -> "Response":
        """Build from plain values."""
        return cls(status_code, body, tuple(Header(n, v) for n, v in (headers or ())))

    # =========================================================================
    # Header lookup
    # =========================================================================

    def get_header(self, name: str) -> Optional[str]:
        """Return the first header with exactly this name, or None."""
        for header in self.headers:
            if header.name == name:
                return header.value
        return None

    def get_int_header(self, name: str) -> Optional[int]:
        """Return a header parsed as an int, or None if absent or unparseable."""
        value = self.get_header(name)
        if value is None:
            return None
        try:
            return int(value.strip())
        except ValueError:
            return None

    @property
    def request_id(self) -> Optional[str]:
        return self.get_header(REQUEST_ID_HEADER)

    @property
    def rate_limit(self) -> Optional[int]:
        return self.get_int_header(RATE_LIMIT_HEADER)

    @property
    def rate_limit_remaining(self) -> Optional[int]:
        return self.get_int_header(RATE_LIMIT_REMAINING_HEADER)

    @property
    def rate_limit_reset(self) -> Optional[int]:
        """Epoch seconds at which the rate-limit window resets."""
        return self.get_int_header(RATE_LIMIT_RESET_HEADER)

    @property
    def rate_limit_reset_at(self) -> Optional[datetime]:
        reset = self.rate_limit_reset
        if reset is None:
            return None
        try:
            return datetime.fromtimestamp(reset, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    @property
    def content_type(self) -> Optional[str]:
        return self.get_header(CONTENT_TYPE_HEADER)

    @property
    def record_count(self) -> Optional[int]:
        """Total records across all pages of a list endpoint."""
        return self.get_int_header(RECORD_COUNT_HEADER)

    @property
    def links(self) -> Dict[str, str]:
        """Map of ``rel`` to URL from the Link header."""
        value = self.get_header(LINK_HEADER)
        if not value:
            return {}
        result: Dict[str, str] = {}
        for link in parse_header_links(value):
            rel = link.get("rel")
            url = link.get("url")
            if rel and url and rel not in result:
                result[rel] = url
        return result

    @property
    def next_url(self) -> Optional[str]:
        return self.links.get("next")

    @property
    def prev_url(self) -> Optional[str]:
        return self.links.get("prev")

    @property
    def start_url(self) -> Optional[str]:
        return self.links.get("start")

    # =========================================================================
    # Status helpers
    # =========================================================================

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    @property
    def is_error(self) -> bool:
        return self.status_code >= 400

    @property
    def has_body(self) -> bool:
        return bool(self.raw_response and self.raw_response.strip())
