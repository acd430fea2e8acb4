"""Environment-driven configuration for the storefront client.

Environment variables:
    STOREFRONT_API_URL: Base URL of the storefront API (default: http://localhost:5000)
    STOREFRONT_API_TOKEN: Bearer token for the authenticated channel
    STOREFRONT_REQUEST_TIMEOUT: Per-request timeout in seconds (default: 10)
    RAZORPAY_KEY_ID: Payment gateway public key, passed to the collector untouched
    GOOGLE_CLIENT_ID: Identity provider client id, passed through untouched
    STOREFRONT_COLLECTOR_TIMEOUT: Seconds to wait for the payment collector (default: unset)
    STOREFRONT_REFETCH_AFTER_WRITE: "true" to refetch the cart after each mutation
    STOREFRONT_LOG_LEVEL: Minimum log level (default: INFO)
"""

import os
from dataclasses import dataclass
from typing import Optional

from .errors import InvalidArgumentError

DEFAULT_API_URL = "http://localhost:5000"
DEFAULT_REQUEST_TIMEOUT = 10.0

CURRENCY = "INR"
ORDERS_DESTINATION = "/orders"

DEFAULT_MERCHANT_NAME = "CloudCart"
DEFAULT_PAYMENT_DESCRIPTION = "Secure Payment"
DEFAULT_PAYMENT_IMAGE = "https://razorpay.com/assets/razorpay-glyph.svg"
DEFAULT_THEME_COLOR = "#2563eb"


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str, default: Optional[float]) -> Optional[float]:
    value = os.environ.get(name)
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError as e:
        raise InvalidArgumentError(f"{name} must be a number, got {value!r}") from e


@dataclass(frozen=True)
class StorefrontConfig:
    """Settings shared by the HTTP channel, cart session and checkout session."""

    api_url: str = DEFAULT_API_URL
    api_token: Optional[str] = None
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    gateway_key: str = ""
    identity_client_id: str = ""
    collector_timeout: Optional[float] = None
    refetch_after_write: bool = False
    log_level: str = "INFO"

    merchant_name: str = DEFAULT_MERCHANT_NAME
    payment_description: str = DEFAULT_PAYMENT_DESCRIPTION
    payment_image: str = DEFAULT_PAYMENT_IMAGE
    theme_color: str = DEFAULT_THEME_COLOR

    @classmethod
    def from_env(cls) -> "StorefrontConfig":
        """Build configuration from environment variables with fallbacks."""
        return cls(
            api_url=os.environ.get("STOREFRONT_API_URL", DEFAULT_API_URL),
            api_token=os.environ.get("STOREFRONT_API_TOKEN") or None,
            request_timeout=_env_float(
                "STOREFRONT_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT
            ),
            gateway_key=os.environ.get("RAZORPAY_KEY_ID", ""),
            identity_client_id=os.environ.get("GOOGLE_CLIENT_ID", ""),
            collector_timeout=_env_float("STOREFRONT_COLLECTOR_TIMEOUT", None),
            refetch_after_write=_env_bool("STOREFRONT_REFETCH_AFTER_WRITE"),
            log_level=os.environ.get("STOREFRONT_LOG_LEVEL", "INFO").upper(),
        )
