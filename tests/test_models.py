"""Tests for value types."""

import pytest

from storefront_client.models import (
    Address,
    LineItem,
    PaymentMethod,
    PaymentReceipt,
    to_minor_units,
)


class TestToMinorUnits:
    @pytest.mark.parametrize(
        "amount,expected",
        [(500, 50000), (0, 0), (19.99, 1999), (0.1 + 0.2, 30), (1234.5, 123450)],
    )
    def test_conversion(self, amount, expected) -> None:
        assert to_minor_units(amount) == expected


class TestLineItem:
    def test_subtotal(self) -> None:
        assert LineItem("p1", "Tea", 12.5, 4).subtotal == 50

    def test_payload(self) -> None:
        assert LineItem("p1", "Tea", 12.5, 4).to_payload() == {
            "productId": "p1",
            "name": "Tea",
            "price": 12.5,
            "quantity": 4,
        }


class TestAddress:
    def test_field_names(self) -> None:
        assert Address.field_names() == (
            "full_name",
            "phone",
            "address_line",
            "city",
            "postal_code",
        )

    def test_with_fields_returns_copy(self) -> None:
        original = Address(city="Pune")
        changed = original.with_fields(city="Mumbai")
        assert original.city == "Pune"
        assert changed.city == "Mumbai"


class TestPaymentMethod:
    def test_wire_values(self) -> None:
        assert PaymentMethod("COD") is PaymentMethod.CASH_ON_DELIVERY
        assert PaymentMethod("ONLINE") is PaymentMethod.ONLINE_GATEWAY


class TestPaymentReceipt:
    def test_gateway_round_trip_is_verbatim(self) -> None:
        response = {
            "razorpay_order_id": "o_1",
            "razorpay_payment_id": "pay_1",
            "razorpay_signature": "  sig with spaces  ",
        }
        receipt = PaymentReceipt.from_gateway(response)
        assert receipt.to_payload() == response
