"""Storefront client library: server-held cart and checkout settlement."""

from .client import StorefrontClient
from .config import StorefrontConfig
from .errors import (
    ClientError,
    TransportError,
    HTTPError,
    InvalidArgumentError,
    InvalidResponseError,
    CheckoutRejectedError,
    PaymentDismissedError,
    errmsg,
)
from .models import (
    LineItem,
    Address,
    PaymentMethod,
    SettlementOrder,
    PaymentReceipt,
    to_minor_units,
)
from .normalize import normalize_entry, normalize_items, cart_total
from .cart import CartSession, MutationResult, open_cart
from .validation import (
    is_complete,
    missing_fields,
    require_complete_address,
    require_not_empty,
)
from .payment import PaymentCollector, CollectorOptions, CallbackCollector
from .checkout import CheckoutSession, SettlementResult, SettlementState
from .log import configure_logging

__version__ = "0.1.0"

__all__ = [
    "StorefrontClient",
    "StorefrontConfig",
    "ClientError",
    "TransportError",
    "HTTPError",
    "InvalidArgumentError",
    "InvalidResponseError",
    "CheckoutRejectedError",
    "PaymentDismissedError",
    "errmsg",
    "LineItem",
    "Address",
    "PaymentMethod",
    "SettlementOrder",
    "PaymentReceipt",
    "to_minor_units",
    "normalize_entry",
    "normalize_items",
    "cart_total",
    "CartSession",
    "MutationResult",
    "open_cart",
    "is_complete",
    "missing_fields",
    "require_complete_address",
    "require_not_empty",
    "PaymentCollector",
    "CollectorOptions",
    "CallbackCollector",
    "CheckoutSession",
    "SettlementResult",
    "SettlementState",
    "configure_logging",
]
