"""Shared BDD fixtures and step definitions for the storefront."""

import pytest
from pytest_bdd import given, parsers, then
from storefront.cart.service import CartService
from storefront.catalogue.queries import resolve_variant
from storefront.order.queries import orders_for


@pytest.fixture()
def context():
    """Scratch space shared by the steps of one scenario."""
    return {"error": None, "placed": None}


@pytest.fixture()
def shopper_id():
    return "cust-001"


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a signed-in shopper with a default address", target_fixture="shopper")
def signed_in_shopper(shopper_id, session_for, add_address):
    add_address(shopper_id, is_default=True)
    return session_for(shopper_id)


@given(
    parsers.cfparse('a product "{name}" priced {price:d} with {stock:d} units in stock'),
    target_fixture="product",
)
def product_in_stock(make_product, name, price, stock):
    product_id, (variant_id,) = make_product(name=name, base_price=float(price), variants=(("M", "Blue", stock, 0.0),))
    return {"product_id": product_id, "variant_id": variant_id}


@given(parsers.cfparse("the shopper has {quantity:d} units in the cart"), target_fixture="cart")
def cart_with_units(shopper, product, quantity):
    cart = CartService(shopper)
    cart.add_item(product["product_id"], product["variant_id"], quantity)
    return cart


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("{stock:d} units remain in stock"))
def units_remain(product, stock):
    _, variant = resolve_variant(product["product_id"], product["variant_id"])
    assert variant.stock_quantity == stock


@then("the cart is empty")
def cart_is_empty(shopper):
    assert CartService(shopper).refresh().is_empty


@then("the shopper has no orders")
def no_orders(shopper_id):
    assert orders_for(shopper_id) == []
