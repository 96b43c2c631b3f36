"""
Tests for entity field tables: lenient reads, omit-if-empty writes, links
and key-based identity.
"""

from datetime import datetime, timezone
import xml.etree.ElementTree as ET

import pytest

from helpers import ACCOUNT_XML, GIFT_CARD_XML, INVOICE_XML

from recurly_client import Link, RecurlyEntity
from recurly_client.codec import EnumField, FlagsField, IntField, TextField, parse_enum, parse_flags
from recurly_client.entity import ENTITY_REGISTRY
from recurly_client.resources import (
    Account,
    AccountState,
    Adjustment,
    AdjustmentType,
    CollectionMethod,
    Delivery,
    DeliveryMethod,
    GiftCard,
    Invoice,
    InvoiceState,
)


def child_tags(body: bytes):
    return [c.tag for c in ET.fromstring(body)]


class TestRead:

    def test_account_document(self):
        account = Account.from_xml(ACCOUNT_XML.encode("utf-8"))

        assert account.account_code == "abc"
        assert account.state == AccountState.ACTIVE
        assert account.is_active
        assert account.email == "a@b.com"
        assert account.first_name == "Verena"
        assert account.created_at == datetime(2011, 10, 25, 12, 0, tzinfo=timezone.utc)

    def test_nil_and_missing_fields_stay_unset(self):
        account = Account.from_xml(ACCOUNT_XML.encode("utf-8"))
        assert account.username is None
        assert account.company_name is None
        assert account.vat_number is None
        assert account.closed_at is None

    def test_unknown_tags_are_ignored(self):
        account = Account.from_xml(
            b"<account><account_code>abc</account_code><brand_new_field>x</brand_new_field>"
            b"<nested><deep>1</deep></nested></account>"
        )
        assert account.account_code == "abc"
        assert not hasattr(account, "brand_new_field")

    def test_unparseable_values_keep_default(self):
        invoice = Invoice.from_xml(INVOICE_XML.encode("utf-8"))
        assert invoice.closed_at is None
        assert invoice.created_at == datetime(2016, 7, 11, 19, 25, 57, tzinfo=timezone.utc)

    def test_enum_fields(self):
        invoice = Invoice.from_xml(INVOICE_XML.encode("utf-8"))
        assert invoice.state is InvoiceState.PAID
        assert invoice.collection_method is CollectionMethod.AUTOMATIC
        assert invoice.invoice_number == 1005
        assert invoice.invoice_number_with_prefix() == "GB1005"

    def test_adjustment_type_attribute(self):
        adjustment = Adjustment.from_xml(
            b'<adjustment type="credit"><uuid>u1</uuid><state>Pending</state>'
            b"<unit_amount_in_cents>-500</unit_amount_in_cents></adjustment>"
        )
        assert adjustment.type is AdjustmentType.CREDIT
        assert adjustment.uuid == "u1"
        assert adjustment.unit_amount_in_cents == -500


class TestEnumAndFlags:

    @pytest.mark.parametrize("text", ["active", "ACTIVE", " Active "])
    def test_case_insensitive(self, text):
        assert parse_flags(AccountState, text) == AccountState.ACTIVE

    @pytest.mark.parametrize("text", ["active past_due", "active,past_due", "active | past-due"])
    def test_multiple_tokens_combine(self, text):
        state = parse_flags(AccountState, text)
        assert AccountState.ACTIVE in state
        assert AccountState.PAST_DUE in state
        assert AccountState.CLOSED not in state

    def test_unknown_tokens_ignored(self):
        assert parse_flags(AccountState, "active frozen") == AccountState.ACTIVE
        assert parse_flags(AccountState, "frozen") is None
        assert parse_flags(AccountState, "") is None

    def test_parse_enum(self):
        assert parse_enum(InvoiceState, "Past-Due") is InvoiceState.PAST_DUE
        assert parse_enum(InvoiceState, "refunded") is None

    def test_flags_serialize_lowercase(self):
        field = FlagsField("state", AccountState)
        assert field.serialize(AccountState.ACTIVE | AccountState.PAST_DUE) == "active past_due"


class TestWrite:

    def test_only_set_fields_are_written(self):
        body = Account(account_code="abc", email="a@b.com").to_xml()

        root = ET.fromstring(body)
        assert root.tag == "account"
        assert child_tags(body) == ["account_code", "email"]
        assert root.findtext("account_code") == "abc"
        assert root.findtext("email") == "a@b.com"

    def test_read_only_fields_are_not_written(self):
        account = Account.from_xml(ACCOUNT_XML.encode("utf-8"))
        tags = child_tags(account.to_xml())
        assert "state" not in tags
        assert "created_at" not in tags
        assert "hosted_login_token" not in tags
        assert tags == ["account_code", "email", "first_name", "last_name"]

    def test_required_field_written_empty(self):
        body = Account(email="a@b.com").to_xml()
        root = ET.fromstring(body)
        assert child_tags(body) == ["account_code", "email"]
        assert root.find("account_code").text is None

    def test_empty_string_is_omitted(self):
        body = Account(account_code="abc", email="").to_xml()
        assert child_tags(body) == ["account_code"]

    def test_write_then_read_keeps_writable_fields(self):
        original = Account(account_code="abc", email="a@b.com", first_name="Verena",
                           company_name="Acme & Co", accept_language="de")
        decoded = Account.from_xml(original.to_xml())

        for name in ("account_code", "email", "first_name", "company_name", "accept_language"):
            assert getattr(decoded, name) == getattr(original, name)
        assert decoded == original

    def test_embedded_entity(self):
        card = GiftCard(
            gifter_account=Account("gifter@example.com", first_name="Jane"),
            delivery=Delivery(method=DeliveryMethod.EMAIL, email_address="john@example.com"),
            product_code="gift_card",
            unit_amount_in_cents=2000,
            currency="USD",
        )
        root = ET.fromstring(card.to_xml())

        assert [c.tag for c in root] == [
            "product_code", "currency", "unit_amount_in_cents", "gifter_account", "delivery",
        ]
        gifter = root.find("gifter_account")
        assert [c.tag for c in gifter] == ["account_code", "first_name"]
        assert gifter.findtext("account_code") == "gifter@example.com"
        assert root.findtext("delivery/method") == "email"
        assert root.findtext("unit_amount_in_cents") == "2000"


class TestLinks:

    def test_href_is_stored_unresolved(self):
        card = GiftCard.from_xml(GIFT_CARD_XML.encode("utf-8"))

        gifter = card.get_link("gifter_account")
        assert gifter.identifier == "gifter@example.com"
        assert not gifter.resolved
        assert card.get_link("purchase_invoice").identifier == "1005"
        assert card.get_link("recipient_account") is None
        assert card.get_link("redemption_invoice") is None

    def test_escaped_slash_in_href(self):
        card = GiftCard.from_xml(
            b'<gift_card><gifter_account href="https://acme.recurly.com/v2/accounts/a%2Fb"/></gift_card>'
        )
        assert card.get_link("gifter_account").identifier == "a/b"

    def test_embedded_document_is_resolved(self):
        card = GiftCard.from_xml(
            b"<gift_card><gifter_account><account_code>g1</account_code>"
            b"<email>g@example.com</email></gifter_account></gift_card>"
        )
        link = card.get_link("gifter_account")
        assert link.resolved
        assert card.gifter_account.account_code == "g1"
        assert card.gifter_account.email == "g@example.com"

    def test_identifier_only_link_written_as_key(self):
        card = GiftCard(product_code="gift_card", unit_amount_in_cents=500, currency="USD")
        card.gifter_account = Link(identifier="g1")

        root = ET.fromstring(card.to_xml())
        gifter = root.find("gifter_account")
        assert [c.tag for c in gifter] == ["account_code"]
        assert gifter.findtext("account_code") == "g1"

    def test_embedded_delivery(self):
        card = GiftCard.from_xml(GIFT_CARD_XML.encode("utf-8"))
        assert isinstance(card.delivery, Delivery)
        assert card.delivery.method is DeliveryMethod.EMAIL
        assert card.delivery.email_address == "john@example.com"
        assert card.delivery.deliver_at is None


class TestIdentity:

    def test_equality_by_key(self):
        a = Account("abc", email="one@example.com")
        b = Account("abc", email="two@example.com")
        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b}) == 1

    def test_different_keys(self):
        assert Account("abc") != Account("xyz")

    def test_unkeyed_entities_compare_by_identity(self):
        a = Account()
        assert a == a
        assert a != Account()

    def test_different_types_never_equal(self):
        assert Account("1005") != Invoice(invoice_number="1005")

    def test_unknown_field_rejected(self):
        with pytest.raises(TypeError):
            Account("abc", favourite_colour="blue")

    def test_str(self):
        assert str(Account("abc")) == "Recurly Account: abc"

    def test_registry(self):
        assert ENTITY_REGISTRY["account"] is Account
        assert ENTITY_REGISTRY["gift_card"] is GiftCard
        assert ENTITY_REGISTRY["delivery"] is Delivery


class TestCustomEntity:

    def test_field_table_drives_codec(self):
        class Coupon(RecurlyEntity):
            element_name = "coupon"
            key_attr = "code"
            fields = (
                TextField("coupon_code", attr="code", required=True),
                EnumField("state", InvoiceState, writable=False),
                IntField("max_redemptions"),
            )

        coupon = Coupon.from_xml(
            b"<coupon><coupon_code>SAVE10</coupon_code><state>open</state>"
            b"<max_redemptions>x</max_redemptions></coupon>"
        )
        assert coupon.code == "SAVE10"
        assert coupon.key == "SAVE10"
        assert Coupon.key_tag == "coupon_code"
        assert coupon.state is InvoiceState.OPEN
        assert coupon.max_redemptions is None
        assert child_tags(coupon.to_xml()) == ["coupon_code"]
