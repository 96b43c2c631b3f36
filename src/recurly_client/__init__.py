"""
Recurly Python Client

Typed client for the Recurly XML API: an HTTP dispatcher, an XML document
codec every entity implements, lazily fetched paginated lists and filter
criteria for server-side list queries.
"""

from .api_client import (
    ClientConfig,
    HttpMethod,
    RecurlyClient,
    configure,
    get_default_client,
    reset_default_client,
    __version__,
)
from .http import Header, Response
from .codec import XmlReader, XmlWriter
from .entity import Link, RecurlyEntity, linked
from .filters import FilterCriteria, FilterKey, SortField, SortOrder, build_path
from .lists import ListState, RecurlyList
from .runtime.errors import *
from .runtime.url import ResourcePath
from .resources import *

__all__ = [
    # Client
    "ClientConfig",
    "HttpMethod",
    "RecurlyClient",
    "configure",
    "get_default_client",
    "reset_default_client",

    # Transport core
    "Header",
    "Response",
    "XmlReader",
    "XmlWriter",
    "Link",
    "RecurlyEntity",
    "linked",
    "FilterCriteria",
    "FilterKey",
    "SortField",
    "SortOrder",
    "build_path",
    "ListState",
    "RecurlyList",
    "ResourcePath",

    # Errors
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
    "FieldError",

    # Entities
    "Account",
    "AccountState",
    "Adjustment",
    "AdjustmentState",
    "AdjustmentType",
    "CollectionMethod",
    "Delivery",
    "DeliveryMethod",
    "GiftCard",
    "Invoice",
    "InvoiceState",
]
