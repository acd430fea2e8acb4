"""Authenticated HTTP channel to the storefront API."""

from typing import Any, Optional

import httpx
import structlog

from .config import DEFAULT_REQUEST_TIMEOUT, StorefrontConfig
from .errors import HTTPError, InvalidResponseError, TransportError
from .models import Address, LineItem, PaymentMethod, PaymentReceipt

logger = structlog.get_logger()

CART_PATH = "/api/cart"
CART_REMOVE_PATH = "/api/cart/remove"
CART_UPDATE_PATH = "/api/cart/update"
CHECKOUT_CREATE_PATH = "/api/checkout/create"
CHECKOUT_VERIFY_PATH = "/api/checkout/verify"
ORDERS_PATH = "/api/orders"


def _server_message(response: httpx.Response) -> Optional[str]:
    """Extract the server-provided `message` field, if the body carries one."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and isinstance(body.get("message"), str):
        return body["message"]
    return None


class StorefrontClient:
    """Async client for the cart, checkout and order endpoints.

    Every call raises TransportError when the server could not be reached and
    HTTPError when it answered with a non-2xx status.
    """

    def __init__(self, http: httpx.AsyncClient):
        self._http = http

    @classmethod
    def connect(
        cls,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "StorefrontClient":
        """Open a channel to the API at base_url."""
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        http = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )
        return cls(http)

    @classmethod
    def from_config(
        cls,
        config: StorefrontConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "StorefrontClient":
        return cls.connect(
            config.api_url,
            token=config.api_token,
            timeout=config.request_timeout,
            transport=transport,
        )

    @classmethod
    def from_env(cls) -> "StorefrontClient":
        """Connect using STOREFRONT_* environment variables."""
        return cls.from_config(StorefrontConfig.from_env())

    async def _request(
        self, method: str, path: str, json: Optional[dict[str, Any]] = None
    ) -> httpx.Response:
        try:
            response = await self._http.request(method, path, json=json)
        except httpx.TransportError as e:
            raise TransportError(e) from e
        if response.is_error:
            raise HTTPError(
                method, path, response.status_code, _server_message(response)
            )
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise InvalidResponseError("body is not JSON", e) from e

    # ── Cart ──────────────────────────────────────────────────────

    async def get_cart(self) -> list[Any]:
        """Read the server cart and return its raw entry list (possibly empty)."""
        body = self._json(await self._request("GET", CART_PATH))
        cart = body.get("cart") if isinstance(body, dict) else None
        items = cart.get("items") if isinstance(cart, dict) else None
        if not isinstance(items, list):
            return []
        return items

    async def remove_item(self, product_id: str) -> None:
        await self._request("DELETE", CART_REMOVE_PATH, {"productId": product_id})

    async def update_quantity(self, product_id: str, quantity: int) -> None:
        await self._request(
            "PUT", CART_UPDATE_PATH, {"productId": product_id, "quantity": quantity}
        )

    # ── Checkout ──────────────────────────────────────────────────

    async def create_settlement_order(self) -> tuple[float, str]:
        """Ask the backend to create a gateway order for the current cart.

        Returns (amount in major units, gateway order id).
        """
        body = self._json(await self._request("POST", CHECKOUT_CREATE_PATH))
        try:
            return float(body["amount"]), str(body["orderId"])
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidResponseError("settlement order lacks amount/orderId", e) from e

    async def verify_payment(
        self,
        receipt: PaymentReceipt,
        address: Optional[Address] = None,
        items: Optional[list[LineItem]] = None,
        total_amount: Optional[float] = None,
    ) -> None:
        payload: dict[str, Any] = receipt.to_payload()
        if address is not None:
            payload["address"] = address.to_payload()
        if items is not None:
            payload["items"] = [item.to_payload() for item in items]
        if total_amount is not None:
            payload["totalAmount"] = total_amount
        await self._request("POST", CHECKOUT_VERIFY_PATH, payload)

    async def place_order(
        self,
        items: list[LineItem],
        address: Address,
        payment_method: PaymentMethod,
        total_amount: float,
    ) -> Any:
        response = await self._request(
            "POST",
            ORDERS_PATH,
            {
                "items": [item.to_payload() for item in items],
                "address": address.to_payload(),
                "paymentMethod": payment_method.value,
                "totalAmount": total_amount,
            },
        )
        logger.info("order_submitted", payment_method=payment_method.value)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return None

    # ── Lifecycle ─────────────────────────────────────────────────

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._http.aclose()

    async def __aenter__(self) -> "StorefrontClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
