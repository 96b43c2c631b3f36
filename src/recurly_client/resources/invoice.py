"""
Invoices.

https://dev.recurly.com/v2/docs/invoice-object
"""

from __future__ import annotations
from enum import Enum
from typing import Optional, Union

from ..api_client import HttpMethod, RecurlyClient
from ..codec.fields import DateTimeField, EnumField, IntField, LinkField, TextField
from ..entity import RecurlyEntity, linked
from ..filters import FilterCriteria, build_path
from ..lists import RecurlyList
from ..runtime.url import ResourcePath


class InvoiceState(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    PAST_DUE = "past_due"
    PAID = "paid"
    FAILED = "failed"
    OPEN = "open"
    COLLECTED = "collected"
    VOIDED = "voided"


class CollectionMethod(str, Enum):
    AUTOMATIC = "automatic"
    MANUAL = "manual"


def _fetch_account(account_code: str, client: Optional[RecurlyClient]):
    from .account import Account

    return Account.get(account_code, client=client)


class Invoice(RecurlyEntity):
    """An invoice, identified by its invoice number."""

    element_name = "invoice"
    key_attr = "invoice_number"
    path_prefix = ResourcePath("/invoices")

    fields = (
        LinkField("account", target="account", writable=False),
        TextField("uuid", writable=False),
        EnumField("state", InvoiceState, writable=False),
        IntField("invoice_number", writable=False),
        TextField("invoice_number_prefix", writable=False),
        TextField("po_number"),
        TextField("vat_number", writable=False),
        TextField("currency", writable=False),
        IntField("subtotal_in_cents", writable=False),
        IntField("discount_in_cents", writable=False),
        IntField("tax_in_cents", writable=False),
        IntField("total_in_cents", writable=False),
        IntField("balance_in_cents", writable=False),
        IntField("net_terms"),
        EnumField("collection_method", CollectionMethod),
        TextField("customer_notes"),
        TextField("terms_and_conditions"),
        DateTimeField("created_at", writable=False),
        DateTimeField("updated_at", writable=False),
        DateTimeField("closed_at", writable=False),
        DateTimeField("due_on", writable=False),
    )

    account = linked(_fetch_account)

    def _path(self, *parts: str) -> str:
        return str(self.path_prefix.join(self.invoice_number, *parts))

    def invoice_number_with_prefix(self) -> str:
        return f"{self.invoice_number_prefix or ''}{self.invoice_number}"

    @classmethod
    def get(cls, invoice_number: Union[int, str],
            client: Optional[RecurlyClient] = None) -> Optional["Invoice"]:
        """Look up an invoice by number (with or without prefix); None if it does not exist."""
        return cls._fetch(str(cls.path_prefix.join(invoice_number)), client)

    @classmethod
    def list(cls, criteria: Optional[FilterCriteria] = None,
             client: Optional[RecurlyClient] = None) -> RecurlyList["Invoice"]:
        return cls._list(build_path(cls.path_prefix, criteria), client)

    def update(self) -> None:
        self._perform(HttpMethod.PUT, self._path(), write=True)

    def mark_successful(self) -> None:
        """Mark a manually collected invoice as paid."""
        self._perform(HttpMethod.PUT, self._path("mark_successful"))

    def mark_failed(self) -> None:
        self._perform(HttpMethod.PUT, self._path("mark_failed"))

    def void(self) -> None:
        self._perform(HttpMethod.PUT, self._path("void"))

    def get_pdf(self, accept_language: str = "en-US") -> Optional[bytes]:
        return self.client.get_pdf(self._path(), accept_language)
