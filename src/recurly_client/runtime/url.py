"""
Resource path helpers for API URLs.

Paths handed to the dispatcher are already percent-escaped; ResourcePath is
the one place where identifiers get escaped on the way in and where related
resource identifiers are recovered from ``href`` attributes on the way out.
"""

from typing import Any, Mapping, Optional
from urllib.parse import quote, unquote, urlencode, urlparse


def escape_segment(value: Any) -> str:
    """Percent-escape one path segment (slashes included)."""
    return quote(str(value), safe="")


def identifier_from_href(href: Optional[str]) -> Optional[str]:
    """
    Extract the trailing identifier of a resource link.

    ``https://api.recurly.com/v2/accounts/a%2Fb`` -> ``a/b``
    """
    if not href:
        return None
    path = urlparse(href).path.rstrip("/")
    if not path:
        return None
    segment = path[path.rfind("/") + 1:]
    return unquote(segment) or None


class ResourcePath:
    """An escaped API path such as ``/accounts/abc/invoices``."""

    def __init__(self, path: str):
        if not isinstance(path, str):
            raise ValueError("ResourcePath must be a string")
        if not path.startswith("/"):
            path = "/" + path
        self.path = path

    def __str__(self) -> str:
        return self.path

    def __repr__(self) -> str:
        return f"ResourcePath('{self.path}')"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, ResourcePath):
            return self.path == other.path
        elif isinstance(other, str):
            return self.path == other
        return False

    def __hash__(self) -> int:
        return hash(self.path)

    def join(self, *parts: Any) -> "ResourcePath":
        """Append escaped path components."""
        base = self.path.rstrip("/")
        for part in parts:
            if part is None:
                continue
            text = str(part).strip("/")
            if text:
                base += "/" + escape_segment(text)
        return ResourcePath(base or "/")

    def with_query(self, params: Optional[Mapping[str, Any]]) -> str:
        """Render the path with a query string, skipping unset parameters."""
        if not params:
            return self.path
        pairs = [(k, v) for k, v in params.items() if v is not None]
        if not pairs:
            return self.path
        return f"{self.path}?{urlencode(pairs)}"
