"""Cart step definitions.

The test_ prefix lets pytest collect this module; scenarios() below binds it
to features/cart.feature.
"""

import asyncio

from pytest_bdd import scenarios, given, when, then, parsers


# Link to feature file
scenarios("../../../features/cart.feature")


@given("the server rejects removals")
def given_server_rejects_removals(server):
    server.fail("DELETE", "/api/cart/remove", status=500)


@when(parsers.parse('the shopper removes "{product_id}"'))
def when_remove(context, product_id):
    context["result"] = asyncio.run(context["cart"].remove_item(product_id))


@when(parsers.parse('the shopper sets the quantity of "{product_id}" to {quantity:d}'))
def when_set_quantity(context, product_id, quantity):
    context["result"] = asyncio.run(
        context["cart"].update_quantity(product_id, quantity)
    )


@then(parsers.parse("the cart shows {count:d} line items"))
def then_line_count(context, count):
    assert len(context["cart"].line_items) == count


@then(parsers.parse("the cart total is {total:g}"))
def then_total(context, total):
    assert context["cart"].total == total


@then("the mutation succeeds")
def then_mutation_succeeds(context):
    assert context["result"].ok


@then(parsers.parse('the mutation fails with "{message}"'))
def then_mutation_fails(context, message):
    assert not context["result"].ok
    assert context["result"].message == message


@then(parsers.parse('the cart has no line for "{product_id}"'))
def then_no_line(context, product_id):
    assert all(i.product_id != product_id for i in context["cart"].line_items)


@then("no update request was sent")
def then_no_update(server):
    assert server.calls("PUT") == []
