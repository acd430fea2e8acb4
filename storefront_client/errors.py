"""Error types for the storefront client library."""

from typing import Optional


class errmsg:
    """User-facing message constants."""

    ADDRESS_INCOMPLETE = "Please fill complete address"
    CART_EMPTY = "Cart is empty"
    CART_BUSY = "Another cart update is in progress"
    CART_LOCKED = "Cart is locked while an order is being placed"
    SESSION_CLOSED = "Cart session is closed"
    REMOVE_FAILED = "Failed to remove item"
    UPDATE_FAILED = "Failed to update quantity"
    ORDER_FAILED = "Failed to place order"
    ORDER_IN_PROGRESS = "Order is already being placed"
    PAYMENT_FAILED = "Payment failed"
    PAYMENT_SUCCEEDED = "Payment successful"
    ORDER_PLACED = "Order placed"


class ClientError(Exception):
    """Base class for client errors."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message


class TransportError(ClientError):
    """Transport-level error (connection refused, timeout, ...)."""

    def __init__(self, cause: Exception):
        super().__init__("transport error", cause)


class HTTPError(ClientError):
    """Non-2xx response from the storefront API."""

    def __init__(
        self,
        method: str,
        path: str,
        status_code: int,
        server_message: Optional[str] = None,
    ):
        super().__init__(f"{method} {path} returned {status_code}")
        self.method = method
        self.path = path
        self.status_code = status_code
        self.server_message = server_message

    def __str__(self) -> str:
        if self.server_message:
            return f"{self.message}: {self.server_message}"
        return self.message

    def is_not_found(self) -> bool:
        """Return True if the server answered 404."""
        return self.status_code == 404

    def is_unauthorized(self) -> bool:
        """Return True if the server rejected the credentials."""
        return self.status_code in (401, 403)

    def is_client_error(self) -> bool:
        """Return True for 4xx responses."""
        return 400 <= self.status_code < 500


class InvalidArgumentError(ClientError):
    """Invalid argument provided by caller."""

    def __init__(self, message: str):
        super().__init__(f"invalid argument: {message}")


class InvalidResponseError(ClientError):
    """Server answered 2xx with a body that cannot be used."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(f"invalid response: {message}", cause)


class CheckoutRejectedError(Exception):
    """Checkout was refused before any server call (incomplete address, empty cart)."""


class PaymentDismissedError(ClientError):
    """The payment collector was closed without completing the payment."""

    def __init__(self, message: str = "payment collector dismissed"):
        super().__init__(message)
