"""Server-held cart session: initial load and per-item mutations.

The raw entry list is the only mutable shared state. It is written by the
bootstrap and by the mutation methods of CartSession, nothing else.

At most one mutation is in flight at a time across the whole session. A
second mutation attempted while one is outstanding is refused without a
server call; UIs should disable the controls of the item reported by
is_updating().
"""

from dataclasses import dataclass
from typing import Any, Optional

import structlog

from .client import StorefrontClient
from .errors import ClientError, errmsg
from .models import LineItem
from .normalize import cart_total, entry_product_id, normalize_items

logger = structlog.get_logger()


@dataclass(frozen=True)
class MutationResult:
    """Outcome of a cart mutation, for the presentation layer to render."""

    ok: bool
    product_id: str
    message: Optional[str] = None
    error: Optional[Exception] = None
    skipped: bool = False


class CartSession:
    """Owns the raw cart entries fetched from the server.

    Line items and the total are derived from the raw entries on every read,
    so they can never drift from them.
    """

    def __init__(self, client: StorefrontClient, refetch_after_write: bool = False):
        self._client = client
        self._refetch_after_write = refetch_after_write
        self._raw_items: list[Any] = []
        self._loading = True
        self._in_flight: Optional[str] = None
        self._locked = False
        self._closed = False
        self._generation = 0

    # ── Derived state ─────────────────────────────────────────────

    @property
    def raw_items(self) -> list[Any]:
        return list(self._raw_items)

    @property
    def line_items(self) -> list[LineItem]:
        return normalize_items(self._raw_items)

    @property
    def total(self) -> float:
        return cart_total(self.line_items)

    @property
    def is_empty(self) -> bool:
        return not self.line_items

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def in_flight(self) -> Optional[str]:
        return self._in_flight

    @property
    def locked(self) -> bool:
        return self._locked

    @property
    def closed(self) -> bool:
        return self._closed

    def is_updating(self, product_id: str) -> bool:
        """True while a mutation for product_id is outstanding."""
        return self._in_flight == product_id

    # ── Bootstrap ─────────────────────────────────────────────────

    async def load(self, keep_on_failure: bool = False) -> None:
        """Fetch the cart and replace the raw entries.

        A failed read is only logged. It leaves an empty cart, or with
        keep_on_failure the current entries. If the session is closed, or a
        newer load started, before the response arrives, the response is
        discarded.
        """
        self._generation += 1
        generation = self._generation
        self._loading = True
        try:
            items = await self._client.get_cart()
        except ClientError as e:
            if keep_on_failure:
                logger.warning(
                    "cart_refetch_failed", error=str(e), entries=len(self._raw_items)
                )
                items = self._raw_items
            else:
                logger.error("cart_fetch_failed", error=str(e))
                items = []
        finally:
            if self._is_current(generation):
                self._loading = False
        if not self._is_current(generation):
            logger.debug("cart_fetch_discarded", generation=generation)
            return
        self._raw_items = list(items)
        logger.info("cart_loaded", entries=len(self._raw_items))

    async def reload(self) -> None:
        await self.load()

    def _is_current(self, generation: int) -> bool:
        return not self._closed and generation == self._generation

    def close(self) -> None:
        """Tear the session down; pending loads will not apply their result."""
        self._closed = True

    # ── Locking (used while an order is being placed) ─────────────

    def lock(self) -> None:
        self._locked = True

    def unlock(self) -> None:
        self._locked = False

    # ── Mutations ─────────────────────────────────────────────────

    def _refusal(self, product_id: str) -> Optional[MutationResult]:
        if self._closed:
            return MutationResult(False, product_id, errmsg.SESSION_CLOSED, skipped=True)
        if self._locked:
            return MutationResult(False, product_id, errmsg.CART_LOCKED, skipped=True)
        if self._in_flight is not None:
            return MutationResult(False, product_id, errmsg.CART_BUSY, skipped=True)
        return None

    async def remove_item(self, product_id: str) -> MutationResult:
        """Remove product_id from the server cart, then from local state."""
        refusal = self._refusal(product_id)
        if refusal is not None:
            return refusal

        self._in_flight = product_id
        try:
            await self._client.remove_item(product_id)
        except ClientError as e:
            logger.error("cart_remove_failed", product_id=product_id, error=str(e))
            return MutationResult(False, product_id, errmsg.REMOVE_FAILED, error=e)
        else:
            await self._reconcile(
                [
                    entry
                    for entry in self._raw_items
                    if entry_product_id(entry) != product_id
                ]
            )
            logger.info("cart_item_removed", product_id=product_id)
            return MutationResult(True, product_id)
        finally:
            self._in_flight = None

    async def update_quantity(self, product_id: str, quantity: int) -> MutationResult:
        """Set the quantity of product_id. Quantities below 1 are a no-op."""
        if quantity < 1:
            return MutationResult(True, product_id, skipped=True)
        refusal = self._refusal(product_id)
        if refusal is not None:
            return refusal

        self._in_flight = product_id
        try:
            await self._client.update_quantity(product_id, quantity)
        except ClientError as e:
            logger.error(
                "cart_update_failed",
                product_id=product_id,
                quantity=quantity,
                error=str(e),
            )
            return MutationResult(False, product_id, errmsg.UPDATE_FAILED, error=e)
        else:
            await self._reconcile(
                [
                    {**entry, "quantity": quantity}
                    if entry_product_id(entry) == product_id
                    else entry
                    for entry in self._raw_items
                ]
            )
            logger.info("cart_quantity_updated", product_id=product_id, quantity=quantity)
            return MutationResult(True, product_id)
        finally:
            self._in_flight = None

    async def increment(self, product_id: str) -> MutationResult:
        return await self.update_quantity(product_id, self._quantity_of(product_id) + 1)

    async def decrement(self, product_id: str) -> MutationResult:
        return await self.update_quantity(product_id, self._quantity_of(product_id) - 1)

    def _quantity_of(self, product_id: str) -> int:
        for item in self.line_items:
            if item.product_id == product_id:
                return item.quantity
        return 0

    async def _reconcile(self, patched: list[Any]) -> None:
        # the write is confirmed; a failed refetch keeps the patched entries
        self._raw_items = patched
        if self._refetch_after_write:
            await self.load(keep_on_failure=True)


async def open_cart(
    client: StorefrontClient, refetch_after_write: bool = False
) -> CartSession:
    """Create a cart session and run its initial load."""
    session = CartSession(client, refetch_after_write=refetch_after_write)
    await session.load()
    return session

