"""Precondition checks run before any order-placing call.

Eliminates repeated gate boilerplate across the settlement paths.
"""

from collections.abc import Sequence
from typing import Any, Optional

from .errors import CheckoutRejectedError, errmsg
from .models import Address


def missing_fields(address: Optional[Address]) -> list[str]:
    """Names of the address fields that are empty or whitespace only."""
    if address is None:
        return list(Address.field_names())
    return [
        name for name in Address.field_names() if not _text(getattr(address, name))
    ]


def _text(value: Any) -> str:
    # non-str values such as an int pincode are checked by their text form
    if value is None:
        return ""
    return str(value).strip()


def is_complete(address: Optional[Address]) -> bool:
    """True iff all five address fields are non-empty."""
    return not missing_fields(address)


def require_complete_address(address: Optional[Address]) -> None:
    """Require a complete shipping address."""
    if not is_complete(address):
        raise CheckoutRejectedError(errmsg.ADDRESS_INCOMPLETE)


def require_not_empty(items: Sequence[Any], error_msg: str = errmsg.CART_EMPTY) -> None:
    """Require that a sequence has at least one element."""
    if not items:
        raise CheckoutRejectedError(error_msg)


def require_no_pending_update(in_flight: Optional[str]) -> None:
    """Require that no cart mutation is awaiting the server."""
    if in_flight is not None:
        raise CheckoutRejectedError(errmsg.CART_BUSY)
