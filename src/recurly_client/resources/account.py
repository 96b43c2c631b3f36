"""
Accounts.

https://dev.recurly.com/v2/docs/account-object
"""

from __future__ import annotations
from enum import Flag
from typing import Any, Optional, Union

from ..api_client import HttpMethod, RecurlyClient
from ..codec.fields import DateTimeField, FlagsField, TextField
from ..entity import Link, RecurlyEntity
from ..filters import FilterCriteria, build_path
from ..lists import RecurlyList
from ..runtime.url import ResourcePath
from .adjustment import Adjustment, AdjustmentState, AdjustmentType
from .invoice import Invoice


class AccountState(Flag):
    """An account can be in several states at once, e.g. active and past due."""

    CLOSED = 1
    ACTIVE = 2
    PAST_DUE = 4


class Account(RecurlyEntity):
    """An account, identified by its account code."""

    element_name = "account"
    key_attr = "account_code"
    path_prefix = ResourcePath("/accounts")

    fields = (
        TextField("account_code", required=True),
        FlagsField("state", AccountState, writable=False),
        TextField("username"),
        TextField("email"),
        TextField("first_name"),
        TextField("last_name"),
        TextField("company_name"),
        TextField("vat_number"),
        TextField("accept_language"),
        TextField("hosted_login_token", writable=False),
        DateTimeField("created_at", writable=False),
        DateTimeField("updated_at", writable=False),
        DateTimeField("closed_at", writable=False),
    )

    def __init__(self, account_code: Optional[str] = None, client: Optional[RecurlyClient] = None,
                 **values: Any):
        super().__init__(client=client, account_code=account_code, **values)

    def _path(self, *parts: str) -> str:
        return str(self.path_prefix.join(self.account_code, *parts))

    @property
    def is_active(self) -> bool:
        return bool(self.state and AccountState.ACTIVE in self.state)

    @property
    def is_past_due(self) -> bool:
        return bool(self.state and AccountState.PAST_DUE in self.state)

    # =========================================================================
    # Lookup
    # =========================================================================

    @classmethod
    def get(cls, account_code: str, client: Optional[RecurlyClient] = None) -> Optional["Account"]:
        """Look up an account; None if it does not exist."""
        return cls._fetch(str(cls.path_prefix.join(account_code)), client)

    @classmethod
    def list(cls, criteria: Optional[FilterCriteria] = None,
             client: Optional[RecurlyClient] = None) -> RecurlyList["Account"]:
        """List accounts, e.g. ``Account.list(FilterCriteria(state="active"))``."""
        return cls._list(build_path(cls.path_prefix, criteria), client)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def create(self) -> None:
        """Create this account."""
        self._perform(HttpMethod.POST, str(self.path_prefix), write=True)

    def update(self) -> None:
        """Send the writable fields of this account."""
        self._perform(HttpMethod.PUT, self._path(), write=True)

    def close(self) -> None:
        """Close the account and cancel its active subscriptions. No refund is created."""
        self.close_account(self.account_code, self._client)
        self.state = AccountState.CLOSED

    @classmethod
    def close_account(cls, account_code: str, client: Optional[RecurlyClient] = None) -> None:
        cls(account_code, client=client)._perform(
            HttpMethod.DELETE, str(cls.path_prefix.join(account_code)), read=False
        )

    def reopen(self) -> None:
        """Reopen a closed account."""
        self.reopen_account(self.account_code, self._client)
        self.state = AccountState.ACTIVE

    @classmethod
    def reopen_account(cls, account_code: str, client: Optional[RecurlyClient] = None) -> None:
        cls(account_code, client=client)._perform(
            HttpMethod.PUT, str(cls.path_prefix.join(account_code, "reopen")), read=False
        )

    # =========================================================================
    # Related resources
    # =========================================================================

    def invoice_pending_charges(self) -> Invoice:
        """Invoice all pending charges on the account and return the new invoice."""
        invoice = Invoice(client=self._client)
        self.client.perform_request(
            HttpMethod.POST, self._path("invoices"), read_xml=invoice.read_xml, allow_not_found=False
        )
        return invoice

    def get_invoices(self, criteria: Optional[FilterCriteria] = None) -> RecurlyList[Invoice]:
        return Invoice._list(build_path(self._path("invoices"), criteria), self._client)

    def get_adjustments(
        self,
        type: Optional[Union[AdjustmentType, str]] = None,
        state: Optional[Union[AdjustmentState, str]] = None,
    ) -> RecurlyList[Adjustment]:
        """Adjustments on this account, optionally filtered by type and state."""
        criteria = FilterCriteria(state=state, type=type)
        return Adjustment._list(build_path(self._path("adjustments"), criteria), self._client)

    def create_adjustment(self, description: str, unit_amount_in_cents: int, currency: str,
                          quantity: int = 1) -> Adjustment:
        """A new, unsaved charge (positive amount) or credit (negative amount) for this account."""
        adjustment = Adjustment(
            client=self._client,
            description=description,
            unit_amount_in_cents=unit_amount_in_cents,
            currency=currency,
            quantity=quantity,
        )
        adjustment.account = Link(entity=self)
        return adjustment
