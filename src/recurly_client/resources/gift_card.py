"""
Gift cards.

https://dev.recurly.com/v2/docs/gift-card-object
"""

from __future__ import annotations
from enum import Enum
from typing import Any, Optional, Union

from ..api_client import HttpMethod, RecurlyClient
from ..codec.fields import DateTimeField, EmbeddedField, EnumField, IntField, LinkField, TextField
from ..codec.writer import XmlWriter
from ..entity import RecurlyEntity, linked
from ..filters import FilterCriteria, build_path
from ..lists import RecurlyList
from ..runtime.errors import ValidationError
from ..runtime.url import ResourcePath
from .account import Account
from .invoice import Invoice


class DeliveryMethod(str, Enum):
    EMAIL = "email"
    POST = "post"


class Delivery(RecurlyEntity):
    """Delivery details of a gift card; embedded, never fetched on its own."""

    element_name = "delivery"

    fields = (
        EnumField("method", DeliveryMethod),
        TextField("email_address"),
        DateTimeField("deliver_at"),
        TextField("first_name"),
        TextField("last_name"),
        TextField("gifter_name"),
        TextField("personal_message"),
    )


def _fetch_account(account_code: str, client: Optional[RecurlyClient]) -> Optional[Account]:
    return Account.get(account_code, client=client)


def _fetch_invoice(invoice_number: str, client: Optional[RecurlyClient]) -> Optional[Invoice]:
    return Invoice.get(invoice_number, client=client)


class GiftCard(RecurlyEntity):
    """
    A gift card.

    ``gifter_account``, ``recipient_account``, ``purchase_invoice`` and
    ``redemption_invoice`` arrive either embedded or as links; a link is
    fetched on first access and cached on this instance.
    """

    element_name = "gift_card"
    key_attr = "id"
    path_prefix = ResourcePath("/gift_cards")

    fields = (
        IntField("id", writable=False),
        TextField("product_code", required=True),
        TextField("currency", required=True),
        IntField("unit_amount_in_cents", required=True),
        TextField("redemption_code", writable=False),
        IntField("balance_in_cents", writable=False),
        LinkField("gifter_account", target=Account),
        LinkField("recipient_account", target=Account, writable=False),
        LinkField("purchase_invoice", target=Invoice, writable=False),
        LinkField("redemption_invoice", target=Invoice, writable=False),
        EmbeddedField("delivery", target=Delivery),
        DateTimeField("created_at", writable=False),
        DateTimeField("updated_at", writable=False),
        DateTimeField("redeemed_at", writable=False),
        DateTimeField("canceled_at", writable=False),
        DateTimeField("delivered_at", writable=False),
    )

    gifter_account = linked(_fetch_account)
    recipient_account = linked(_fetch_account)
    purchase_invoice = linked(_fetch_invoice)
    redemption_invoice = linked(_fetch_invoice)

    def __init__(self, gifter_account: Optional[Union[Account, str]] = None,
                 delivery: Optional[Delivery] = None, product_code: Optional[str] = None,
                 unit_amount_in_cents: Optional[int] = None, currency: Optional[str] = None,
                 client: Optional[RecurlyClient] = None, **values: Any):
        super().__init__(client=client, delivery=delivery, product_code=product_code,
                         unit_amount_in_cents=unit_amount_in_cents, currency=currency, **values)
        if isinstance(gifter_account, str):
            gifter_account = Account(gifter_account, client=client)
        self.gifter_account = gifter_account

    @classmethod
    def get(cls, gift_card_id: Union[int, str],
            client: Optional[RecurlyClient] = None) -> Optional["GiftCard"]:
        """Look up a gift card by id; None if it does not exist."""
        return cls._fetch(str(cls.path_prefix.join(gift_card_id)), client)

    @classmethod
    def list(cls, gifter_account_code: Optional[str] = None,
             recipient_account_code: Optional[str] = None,
             criteria: Optional[FilterCriteria] = None,
             client: Optional[RecurlyClient] = None) -> RecurlyList["GiftCard"]:
        """List gift cards, optionally for one gifter and/or recipient account."""
        path = build_path(
            cls.path_prefix,
            criteria,
            gifter_account_code=gifter_account_code,
            recipient_account_code=recipient_account_code,
        )
        return cls._list(path, client)

    def create(self) -> None:
        """Purchase this gift card."""
        self._perform(HttpMethod.POST, str(self.path_prefix), write=True)

    def preview(self) -> None:
        """Validate the gift card and delivery details without purchasing."""
        self._perform(HttpMethod.POST, str(self.path_prefix.join("preview")), write=True)

    def redeem(self, account_code: str) -> None:
        """Redeem this gift card onto the account with the given code."""
        if not self.redemption_code:
            raise ValidationError("A gift card needs a redemption code before it can be redeemed")
        if not account_code:
            raise ValidationError("An account code is required to redeem a gift card")
        recipient = Account(account_code)

        def write_recipient(writer: XmlWriter) -> None:
            recipient.write_xml(writer, element_name="recipient_account")

        self.client.perform_request(
            HttpMethod.POST,
            str(self.path_prefix.join(self.redemption_code, "redeem")),
            write_xml=write_recipient,
            read_xml=self.read_xml,
            allow_not_found=False,
        )
