"""Entity classes built on the transport core."""

from .adjustment import Adjustment, AdjustmentState, AdjustmentType
from .invoice import CollectionMethod, Invoice, InvoiceState
from .account import Account, AccountState
from .gift_card import Delivery, DeliveryMethod, GiftCard

__all__ = [
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
