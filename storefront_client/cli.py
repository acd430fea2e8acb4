"""Command-line access to the server cart.

Usage:
    storefront cart
    storefront update PRODUCT_ID QUANTITY
    storefront remove PRODUCT_ID
    storefront checkout-cod --name NAME --phone PHONE --line LINE --city CITY --pincode PIN

Connection settings come from STOREFRONT_* environment variables. Online
payment needs the gateway widget and is not available here.
"""

import argparse
import asyncio
import sys
from typing import Optional

from .cart import CartSession
from .checkout import CheckoutSession
from .client import StorefrontClient
from .config import StorefrontConfig
from .log import configure_logging
from .models import Address, PaymentMethod


def format_cart(cart: CartSession) -> str:
    """Render the cart as plain text lines plus the total."""
    items = cart.line_items
    if not items:
        return "Your cart is empty"
    lines = [
        f"{item.product_id}  {item.name} x {item.quantity}  = {item.subtotal:g}"
        for item in items
    ]
    lines.append(f"Total: {cart.total:g}")
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="storefront", description="Review and settle the server-held cart."
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("cart", help="Show cart lines and total")

    update = sub.add_parser("update", help="Set the quantity of a cart line")
    update.add_argument("product_id")
    update.add_argument("quantity", type=int)

    remove = sub.add_parser("remove", help="Remove a cart line")
    remove.add_argument("product_id")

    cod = sub.add_parser("checkout-cod", help="Place a cash-on-delivery order")
    cod.add_argument("--name", default="", help="Full name")
    cod.add_argument("--phone", default="")
    cod.add_argument("--line", default="", help="Address line")
    cod.add_argument("--city", default="")
    cod.add_argument("--pincode", default="", help="Postal code")

    return parser


async def run(args: argparse.Namespace, config: StorefrontConfig, client: StorefrontClient) -> int:
    cart = CartSession(client, refetch_after_write=config.refetch_after_write)
    await cart.load()

    if args.command == "cart":
        print(format_cart(cart))
        return 0

    if args.command in ("update", "remove"):
        if args.command == "update":
            result = await cart.update_quantity(args.product_id, args.quantity)
        else:
            result = await cart.remove_item(args.product_id)
        if not result.ok:
            print(result.message, file=sys.stderr)
            return 1
        print(format_cart(cart))
        return 0

    destinations = []
    checkout = CheckoutSession(client, cart, destinations.append, config=config)
    checkout.set_address(
        Address(
            full_name=args.name,
            phone=args.phone,
            address_line=args.line,
            city=args.city,
            postal_code=args.pincode,
        )
    )
    checkout.select_payment_method(PaymentMethod.CASH_ON_DELIVERY)
    result = await checkout.place_order()
    if not result.ok:
        print(result.message, file=sys.stderr)
        return 1
    print(f"{result.message}, see {destinations[-1]}")
    return 0


async def _main(args: argparse.Namespace) -> int:
    config = StorefrontConfig.from_env()
    configure_logging(config.log_level)
    async with StorefrontClient.from_config(config) as client:
        return await run(args, config, client)


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    return asyncio.run(_main(args))


if __name__ == "__main__":
    sys.exit(main())
