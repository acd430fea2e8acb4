"""Shared fakes: an in-memory storefront API and a scriptable payment collector.

The fake API speaks the same routes as the real backend through
httpx.MockTransport, so StorefrontClient is exercised end to end without a
network.
"""

import asyncio
import json
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx

from storefront_client.client import StorefrontClient
from storefront_client.models import PaymentReceipt
from storefront_client.payment import CollectorOptions, PaymentCollector


def entry(product_id, name="Item", price=10, quantity=1) -> dict:
    """Raw cart entry in the backend's shape."""
    return {
        "product": {"_id": product_id, "name": name, "price": price},
        "quantity": quantity,
    }


@dataclass
class Failure:
    """Scripted failure for one route: an HTTP status or a transport error."""

    status: int = 500
    body: Optional[dict] = None
    transport: bool = False


@dataclass
class FakeStorefront:
    """In-memory storefront backend."""

    items: list = field(default_factory=list)
    settlement_amount: float = 0
    settlement_order_id: str = "order_test"
    failures: dict = field(default_factory=dict)
    requests: list = field(default_factory=list)
    cart_body: Any = None

    def fail(self, method: str, path: str, **kwargs) -> None:
        self.failures[(method, path)] = Failure(**kwargs)

    def calls(self, method: Optional[str] = None, path: Optional[str] = None) -> list:
        return [
            (m, p, body)
            for (m, p, body) in self.requests
            if (method is None or m == method) and (path is None or p == path)
        ]

    def handle(self, request: httpx.Request) -> httpx.Response:
        method = request.method
        path = request.url.path
        body = json.loads(request.content) if request.content else None
        self.requests.append((method, path, body))

        failure = self.failures.get((method, path))
        if failure is not None:
            if failure.transport:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(failure.status, json=failure.body or {})

        if (method, path) == ("GET", "/api/cart"):
            if self.cart_body is not None:
                return httpx.Response(200, json=self.cart_body)
            return httpx.Response(200, json={"cart": {"items": self.items}})
        if (method, path) == ("DELETE", "/api/cart/remove"):
            self.items = [
                e for e in self.items if e["product"]["_id"] != body["productId"]
            ]
            return httpx.Response(200, json={"message": "removed"})
        if (method, path) == ("PUT", "/api/cart/update"):
            for e in self.items:
                if e["product"]["_id"] == body["productId"]:
                    e["quantity"] = body["quantity"]
            return httpx.Response(200, json={"message": "updated"})
        if (method, path) == ("POST", "/api/checkout/create"):
            return httpx.Response(
                200,
                json={
                    "amount": self.settlement_amount,
                    "orderId": self.settlement_order_id,
                },
            )
        if (method, path) == ("POST", "/api/checkout/verify"):
            self.items = []
            return httpx.Response(200, json={"success": True})
        if (method, path) == ("POST", "/api/orders"):
            self.items = []
            return httpx.Response(201, json={"message": "Order placed"})
        return httpx.Response(404, json={"message": "not found"})

    def client(self) -> StorefrontClient:
        return StorefrontClient.connect(
            "http://storefront.test", transport=httpx.MockTransport(self.handle)
        )


RECEIPT = PaymentReceipt(
    gateway_order_id="o_1",
    gateway_payment_id="pay_1",
    gateway_signature="sig_abc",
)


class FakeCollector(PaymentCollector):
    """Collector that returns a receipt, raises, or never completes."""

    def __init__(
        self,
        receipt: Optional[PaymentReceipt] = RECEIPT,
        error: Optional[Exception] = None,
        hang: bool = False,
    ):
        self.receipt = receipt
        self.error = error
        self.hang = hang
        self.opened: list[CollectorOptions] = []

    async def open(self, options: CollectorOptions) -> PaymentReceipt:
        self.opened.append(options)
        if self.hang:
            await asyncio.Event().wait()
        if self.error is not None:
            raise self.error
        return self.receipt
