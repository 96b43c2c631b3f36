from .http import make_http_response, queue_responses, request_urls
from .documents import (
    ACCOUNT_XML,
    ACCOUNT_LIST_XML,
    EMPTY_ACCOUNT_LIST_XML,
    GIFT_CARD_XML,
    INVOICE_XML,
    VALIDATION_ERRORS_XML,
)

__all__ = [
    "make_http_response",
    "queue_responses",
    "request_urls",
    "ACCOUNT_XML",
    "ACCOUNT_LIST_XML",
    "EMPTY_ACCOUNT_LIST_XML",
    "GIFT_CARD_XML",
    "INVOICE_XML",
    "VALIDATION_ERRORS_XML",
]
