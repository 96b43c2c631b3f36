"""Runtime helpers for the Recurly Python client"""

from .url import ResourcePath, escape_segment, identifier_from_href
from .errors import RecurlyError

__all__ = [
    "ResourcePath",
    "escape_segment",
    "identifier_from_href",
    "RecurlyError",
]
