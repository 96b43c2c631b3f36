"""
Adjustments (charges and credits) on an account.
"""

from __future__ import annotations
from enum import Enum
from typing import Optional

from ..api_client import HttpMethod, RecurlyClient
from ..codec.fields import DateTimeField, EnumField, IntField, LinkField, TextField, parse_enum
from ..codec.reader import XmlReader
from ..entity import RecurlyEntity, linked
from ..runtime.errors import ValidationError
from ..runtime.url import ResourcePath


class AdjustmentType(str, Enum):
    CHARGE = "charge"
    CREDIT = "credit"


class AdjustmentState(str, Enum):
    PENDING = "pending"
    INVOICED = "invoiced"


def _fetch_account(account_code: str, client: Optional[RecurlyClient]):
    from .account import Account

    return Account.get(account_code, client=client)


class Adjustment(RecurlyEntity):
    element_name = "adjustment"
    key_attr = "uuid"
    path_prefix = ResourcePath("/adjustments")

    fields = (
        TextField("uuid", writable=False),
        LinkField("account", target="account", writable=False),
        EnumField("state", AdjustmentState, writable=False),
        TextField("description"),
        TextField("accounting_code"),
        IntField("unit_amount_in_cents", required=True),
        IntField("quantity"),
        TextField("currency", required=True),
        IntField("tax_in_cents", writable=False),
        IntField("total_in_cents", writable=False),
        DateTimeField("created_at", writable=False),
    )

    account = linked(_fetch_account)

    type: Optional[AdjustmentType] = None

    def read_xml(self, reader: XmlReader) -> None:
        # The adjustment type travels as an attribute of the element itself
        adjustment_type = parse_enum(AdjustmentType, reader.attribute("type"))
        if adjustment_type is not None:
            self.type = adjustment_type
        super().read_xml(reader)

    @classmethod
    def get(cls, uuid: str, client: Optional[RecurlyClient] = None) -> Optional["Adjustment"]:
        return cls._fetch(str(cls.path_prefix.join(uuid)), client)

    def create(self) -> None:
        """Post this adjustment to its account."""
        link = self.get_link("account")
        account_code = None
        if link is not None:
            account_code = link.entity.account_code if link.entity is not None else link.identifier
        if not account_code:
            raise ValidationError("An adjustment must belong to an account before it is created")
        path = ResourcePath("/accounts").join(account_code, "adjustments")
        self._perform(HttpMethod.POST, str(path), write=True)

    def delete(self) -> None:
        """Remove a pending adjustment."""
        self._perform(HttpMethod.DELETE, str(self.path_prefix.join(self.uuid)), read=False)
