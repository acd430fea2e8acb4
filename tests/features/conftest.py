"""Pytest-bdd configuration and shared steps for storefront feature tests."""

import asyncio

import pytest
from pytest_bdd import given

from storefront_client.cart import open_cart

from ..fixtures import FakeStorefront, entry


@pytest.fixture
def context():
    """Shared test context for scenario state."""
    return {}


@pytest.fixture
def server(context):
    """In-memory storefront backend."""
    backend = FakeStorefront()
    context["server"] = backend
    return backend


@given("the server cart contains:")
def given_server_cart(server, datatable):
    header, *rows = datatable
    for row in rows:
        record = dict(zip(header, row))
        server.items.append(
            entry(
                record["product"],
                record["name"],
                float(record["price"]),
                int(record["quantity"]),
            )
        )


@given("the cart is loaded")
def given_cart_loaded(context, server):
    context["client"] = server.client()
    context["cart"] = asyncio.run(open_cart(context["client"]))
