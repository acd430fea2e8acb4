"""Value types shared by the cart and checkout flows."""

from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class LineItem:
    """One validated product-and-quantity entry of the cart."""

    product_id: str
    name: str
    unit_price: float
    quantity: int

    @property
    def subtotal(self) -> float:
        return self.unit_price * self.quantity

    def as_entry(self) -> dict[str, Any]:
        """Render back into the raw cart entry shape the server sends."""
        return {
            "product": {
                "_id": self.product_id,
                "name": self.name,
                "price": self.unit_price,
            },
            "quantity": self.quantity,
        }

    def to_payload(self) -> dict[str, Any]:
        """Wire shape used by order placement and payment verification."""
        return {
            "productId": self.product_id,
            "name": self.name,
            "price": self.unit_price,
            "quantity": self.quantity,
        }


@dataclass(frozen=True)
class Address:
    """Shipping address entered during checkout."""

    full_name: str = ""
    phone: str = ""
    address_line: str = ""
    city: str = ""
    postal_code: str = ""

    def with_fields(self, **changes: str) -> "Address":
        return replace(self, **changes)

    def to_payload(self) -> dict[str, str]:
        return {
            "name": self.full_name,
            "phone": self.phone,
            "line": self.address_line,
            "city": self.city,
            "pincode": self.postal_code,
        }

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))


class PaymentMethod(Enum):
    """Settlement path selected by the shopper."""

    CASH_ON_DELIVERY = "COD"
    ONLINE_GATEWAY = "ONLINE"


@dataclass(frozen=True)
class SettlementOrder:
    """Gateway order created by the backend before collecting funds."""

    gateway_order_id: str
    amount_minor_units: int
    currency: str = "INR"


@dataclass(frozen=True)
class PaymentReceipt:
    """Proof of payment issued by the gateway.

    Never inspected locally; forwarded verbatim to the backend verifier.
    """

    gateway_order_id: str
    gateway_payment_id: str
    gateway_signature: str

    @classmethod
    def from_gateway(cls, response: dict[str, Any]) -> "PaymentReceipt":
        """Build from the gateway's completion payload (razorpay_* keys)."""
        return cls(
            gateway_order_id=response["razorpay_order_id"],
            gateway_payment_id=response["razorpay_payment_id"],
            gateway_signature=response["razorpay_signature"],
        )

    def to_payload(self) -> dict[str, str]:
        return {
            "razorpay_order_id": self.gateway_order_id,
            "razorpay_payment_id": self.gateway_payment_id,
            "razorpay_signature": self.gateway_signature,
        }


def to_minor_units(amount: float) -> int:
    """Convert a major-unit amount (rupees) to minor units (paise)."""
    return int(round(amount * 100))
