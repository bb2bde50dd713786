"""BDD tests for cart lines and pricing."""

from protean import current_domain
from pytest_bdd import parsers, scenarios, then, when
from storefront.catalogue.management import UpdateProductPricing

scenarios("features/cart.feature")


@when(parsers.cfparse("the shopper adds {quantity:d} more units"))
def add_more(cart, product, quantity):
    cart.add_item(product["product_id"], product["variant_id"], quantity)


@when(parsers.cfparse("the shopper sets the quantity to {quantity:d}"))
def set_quantity(cart, quantity):
    cart.update_quantity(cart.lines[0].item_id, quantity)


@when(parsers.cfparse("the product goes on sale at {percent:d} percent off"))
def put_on_sale(product, percent):
    current_domain.process(
        UpdateProductPricing(product_id=product["product_id"], discount_percentage=float(percent)),
        asynchronous=False,
    )


@then(parsers.cfparse("the cart holds {lines:d} line with {units:d} units"))
def cart_holds(cart, lines, units):
    assert len(cart.lines) == lines
    assert cart.count == units


@then(parsers.cfparse("the cart total is {total:d}"))
def cart_total(cart, total):
    assert cart.refresh().total == float(total)
