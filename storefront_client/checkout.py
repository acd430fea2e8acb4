"""Order settlement: cash-on-delivery and online gateway payment.

Each place_order() call is one attempt through the state machine

    IDLE -> PLACING -> SUCCEEDED | FAILED

and a failed attempt drops back to IDLE so the shopper can retry. The online
path is a three-step handshake:

    1. POST /api/checkout/create   -> gateway order (amount fixed here)
    2. collector.open(options)     -> receipt, on the collector's schedule
    3. POST /api/checkout/verify   -> receipt forwarded verbatim

An attempt is refused while a cart update is awaiting the server. The cart is
locked for mutations while an attempt is PLACING, and the line
items and total are captured before anything is sent, so the amount verified
is the amount that was authorized. Clearing the cart after a verified payment
is the server's job; on success this session only navigates and reloads the
cart.
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import structlog

from .cart import CartSession
from .client import StorefrontClient
from .config import CURRENCY, ORDERS_DESTINATION, StorefrontConfig
from .errors import (
    CheckoutRejectedError,
    ClientError,
    HTTPError,
    PaymentDismissedError,
    errmsg,
)
from .models import (
    Address,
    LineItem,
    PaymentMethod,
    PaymentReceipt,
    SettlementOrder,
    to_minor_units,
)
from .payment import CollectorOptions, PaymentCollector
from .validation import (
    require_complete_address,
    require_no_pending_update,
    require_not_empty,
)

logger = structlog.get_logger()

Navigator = Callable[[str], Any]


class SettlementState(Enum):
    IDLE = "idle"
    PLACING = "placing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class SettlementResult:
    """Outcome of one place_order() attempt."""

    state: SettlementState
    message: Optional[str] = None
    payment_method: Optional[PaymentMethod] = None
    gateway_order_id: Optional[str] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.state == SettlementState.SUCCEEDED


@dataclass(frozen=True)
class _Snapshot:
    items: list[LineItem]
    total: float
    address: Address


class CheckoutSession:
    """Holds the address and payment method for one checkout flow and settles it."""

    def __init__(
        self,
        client: StorefrontClient,
        cart: CartSession,
        navigate: Navigator,
        collector: Optional[PaymentCollector] = None,
        config: Optional[StorefrontConfig] = None,
    ):
        self._client = client
        self._cart = cart
        self._navigate = navigate
        self._collector = collector
        self._config = config or StorefrontConfig()
        self.address = Address()
        self.payment_method = PaymentMethod.CASH_ON_DELIVERY
        self._state = SettlementState.IDLE

    @property
    def state(self) -> SettlementState:
        return self._state

    @property
    def placing(self) -> bool:
        return self._state == SettlementState.PLACING

    @property
    def cart(self) -> CartSession:
        return self._cart

    def set_address(self, address: Address) -> None:
        self.address = address

    def update_address(self, **changes: str) -> None:
        self.address = self.address.with_fields(**changes)

    def select_payment_method(self, method: PaymentMethod) -> None:
        self.payment_method = method

    # ── Entry point ───────────────────────────────────────────────

    async def place_order(self) -> SettlementResult:
        """Run one settlement attempt with the selected payment method."""
        method = self.payment_method
        if self.placing:
            return SettlementResult(
                SettlementState.PLACING, errmsg.ORDER_IN_PROGRESS, method
            )

        try:
            require_complete_address(self.address)
            require_not_empty(self._cart.line_items)
            require_no_pending_update(self._cart.in_flight)
        except CheckoutRejectedError as e:
            logger.info("checkout_rejected", reason=str(e), payment_method=method.value)
            return SettlementResult(SettlementState.IDLE, str(e), method, error=e)

        snapshot = _Snapshot(
            items=self._cart.line_items,
            total=self._cart.total,
            address=self.address,
        )

        self._state = SettlementState.PLACING
        self._cart.lock()
        try:
            if method == PaymentMethod.ONLINE_GATEWAY:
                result = await self._settle_online(snapshot)
            else:
                result = await self._settle_cod(snapshot)
        finally:
            self._cart.unlock()
            if self._state != SettlementState.SUCCEEDED:
                self._state = SettlementState.IDLE

        if result.ok:
            await self._finish()
        return result

    async def _finish(self) -> None:
        try:
            self._navigate(ORDERS_DESTINATION)
            await self._cart.reload()
        finally:
            self._state = SettlementState.IDLE

    def _fail(
        self,
        message: str,
        method: PaymentMethod,
        error: Exception,
        gateway_order_id: Optional[str] = None,
    ) -> SettlementResult:
        logger.error(
            "settlement_failed",
            payment_method=method.value,
            gateway_order_id=gateway_order_id,
            error=str(error),
        )
        self._state = SettlementState.FAILED
        return SettlementResult(
            SettlementState.FAILED, message, method, gateway_order_id, error
        )

    def _succeed(
        self, message: str, method: PaymentMethod, gateway_order_id: Optional[str] = None
    ) -> SettlementResult:
        self._state = SettlementState.SUCCEEDED
        return SettlementResult(
            SettlementState.SUCCEEDED, message, method, gateway_order_id
        )

    # ── Path A: cash on delivery ──────────────────────────────────

    async def _settle_cod(self, snapshot: _Snapshot) -> SettlementResult:
        method = PaymentMethod.CASH_ON_DELIVERY
        try:
            await self._client.place_order(
                snapshot.items, snapshot.address, method, snapshot.total
            )
        except ClientError as e:
            message = errmsg.ORDER_FAILED
            if isinstance(e, HTTPError) and e.server_message:
                message = e.server_message
            return self._fail(message, method, e)
        logger.info("cod_order_placed", total=snapshot.total, lines=len(snapshot.items))
        return self._succeed(errmsg.ORDER_PLACED, method)

    # ── Path B: online gateway ────────────────────────────────────

    async def _settle_online(self, snapshot: _Snapshot) -> SettlementResult:
        method = PaymentMethod.ONLINE_GATEWAY
        if self._collector is None:
            return self._fail(
                errmsg.PAYMENT_FAILED,
                method,
                ClientError("no payment collector configured"),
            )

        try:
            amount, gateway_order_id = await self._client.create_settlement_order()
        except ClientError as e:
            return self._fail(errmsg.PAYMENT_FAILED, method, e)

        order = SettlementOrder(
            gateway_order_id=gateway_order_id,
            amount_minor_units=to_minor_units(amount),
            currency=CURRENCY,
        )
        logger.info(
            "settlement_order_created",
            gateway_order_id=order.gateway_order_id,
            amount_minor_units=order.amount_minor_units,
        )
        if order.amount_minor_units != to_minor_units(snapshot.total):
            logger.warning(
                "settlement_amount_mismatch",
                gateway_order_id=order.gateway_order_id,
                amount_minor_units=order.amount_minor_units,
                cart_total=snapshot.total,
            )

        try:
            receipt = await self._collect(order)
        except Exception as e:  # any collector failure ends the attempt
            if isinstance(e, PaymentDismissedError):
                logger.info("payment_dismissed", gateway_order_id=gateway_order_id)
            return self._fail(errmsg.PAYMENT_FAILED, method, e, gateway_order_id)

        try:
            await self._client.verify_payment(
                receipt,
                address=snapshot.address,
                items=snapshot.items,
                total_amount=snapshot.total,
            )
        except ClientError as e:
            return self._fail(errmsg.PAYMENT_FAILED, method, e, gateway_order_id)

        logger.info("payment_verified", gateway_order_id=gateway_order_id)
        return self._succeed(errmsg.PAYMENT_SUCCEEDED, method, gateway_order_id)

    async def _collect(self, order: SettlementOrder) -> PaymentReceipt:
        options = CollectorOptions(
            key=self._config.gateway_key,
            amount=order.amount_minor_units,
            currency=order.currency,
            order_id=order.gateway_order_id,
            name=self._config.merchant_name,
            description=self._config.payment_description,
            image=self._config.payment_image,
            theme_color=self._config.theme_color,
        )
        opening = self._collector.open(options)
        timeout = self._config.collector_timeout
        if timeout is None:
            return await opening
        return await asyncio.wait_for(opening, timeout)
