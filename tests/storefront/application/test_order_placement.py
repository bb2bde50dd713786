"""Tests for order placement: validation, stock, snapshots and rollback."""

import threading
from unittest.mock import MagicMock, patch

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from storefront.cart.items import find_cart
from storefront.cart.service import CartService
from storefront.catalogue.management import UpdateProductPricing
from storefront.catalogue.queries import resolve_variant
from storefront.catalogue.stock import withdraw_stock as real_withdraw_stock
from storefront.checkout.placement import OrderLine, OrderPlacement, PlaceOrderRequest, Stage
from storefront.checkout.service import CheckoutService
from storefront.domain import storefront
from storefront.errors import (
    EmptyOrder,
    InsufficientStock,
    NoDefaultAddress,
    NotAuthenticated,
    PersistenceFailure,
    ProductNotFound,
    VariantNotFound,
)
from storefront.order.queries import orders_for
from storefront.session.provider import SessionProvider


def _stock(product_id, variant_id):
    _, variant = resolve_variant(product_id, variant_id)
    return variant.stock_quantity


@pytest.fixture
def shopper(session_for, add_address):
    add_address("cust-001", is_default=True)
    return session_for("cust-001")


class TestQuickPurchase:
    def test_places_order_and_takes_stock(self, shopper, make_product):
        product_id, (variant_id,) = make_product(base_price=500.0, variants=(("M", "Blue", 10, 0.0),))

        placed = CheckoutService(shopper).quick_purchase(product_id, variant_id, 2)

        assert placed.subtotal == 1000.0
        assert placed.shipping_amount == 0.0
        assert placed.total_amount == 1000.0
        assert placed.order_number.startswith("ORD")
        assert _stock(product_id, variant_id) == 8

        (order,) = orders_for("cust-001")
        assert order.order_number == placed.order_number
        assert order.status == "pending"
        assert order.payment_status == "pending"
        assert order.payment_method == "cod"
        assert len(order.items) == 1
        assert order.items[0].unit_price == 500.0
        assert order.items[0].total_price == 1000.0
        assert order.shipping_address.city == "Bengaluru"

    def test_flat_fee_under_threshold(self, shopper, make_product):
        product_id, (variant_id,) = make_product(base_price=400.0)

        placed = CheckoutService(shopper).quick_purchase(product_id, variant_id, 1)

        assert placed.subtotal == 400.0
        assert placed.shipping_amount == 99.0
        assert placed.total_amount == 499.0

    def test_insufficient_stock_writes_nothing(self, shopper, make_product):
        product_id, (variant_id,) = make_product(variants=(("M", "Blue", 1, 0.0),))

        with pytest.raises(InsufficientStock) as exc_info:
            CheckoutService(shopper).quick_purchase(product_id, variant_id, 2)

        assert exc_info.value.notice == "Not enough stock available"
        assert _stock(product_id, variant_id) == 1
        assert orders_for("cust-001") == []

    def test_requires_default_address(self, session_for, make_product):
        product_id, (variant_id,) = make_product()

        with pytest.raises(NoDefaultAddress) as exc_info:
            CheckoutService(session_for("cust-001")).quick_purchase(product_id, variant_id)

        assert exc_info.value.notice == "Please add a default address first"
        assert _stock(product_id, variant_id) == 10

    def test_requires_login(self, make_product):
        product_id, (variant_id,) = make_product()

        with pytest.raises(NotAuthenticated) as exc_info:
            CheckoutService(SessionProvider.for_identity(None)).quick_purchase(product_id, variant_id)
        assert exc_info.value.notice == "Please log in to make a purchase"

    def test_unknown_product(self, shopper):
        with pytest.raises(ProductNotFound):
            CheckoutService(shopper).quick_purchase("missing", "missing")

    def test_unknown_variant(self, shopper, make_product):
        product_id, _ = make_product()
        with pytest.raises(VariantNotFound):
            CheckoutService(shopper).quick_purchase(product_id, "missing")
        assert orders_for("cust-001") == []

    def test_leaves_the_cart_alone(self, shopper, make_product):
        product_id, (variant_id,) = make_product()
        cart = CartService(shopper)
        cart.add_item(product_id, variant_id, 1)

        CheckoutService(shopper, cart=cart).quick_purchase(product_id, variant_id, 1)

        assert cart.refresh().count == 1

    def test_order_keeps_prices_from_placement_time(self, shopper, make_product):
        product_id, (variant_id,) = make_product(base_price=500.0)
        CheckoutService(shopper).quick_purchase(product_id, variant_id, 1)

        current_domain.process(UpdateProductPricing(product_id=product_id, base_price=750.0), asynchronous=False)

        (order,) = orders_for("cust-001")
        assert order.items[0].unit_price == 500.0
        assert order.total_amount == 599.0


class TestCheckoutCart:
    def test_orders_every_line_and_empties_the_cart(self, shopper, make_product):
        shirt_id, (shirt_m,) = make_product(name="Linen Shirt", base_price=700.0)
        tee_id, (tee_s,) = make_product(name="Cotton Tee", base_price=300.0, variants=(("S", "White", 5, 0.0),))
        cart = CartService(shopper)
        cart.add_item(shirt_id, shirt_m, 1)
        cart.add_item(tee_id, tee_s, 2)

        placed = CheckoutService(shopper, cart=cart).checkout_cart(payment_method="upi", notes="Leave at door")

        assert placed.subtotal == 1300.0
        assert placed.total_amount == 1300.0
        assert cart.count == 0
        assert _stock(shirt_id, shirt_m) == 9
        assert _stock(tee_id, tee_s) == 3

        (order,) = orders_for("cust-001")
        assert order.payment_method == "upi"
        assert order.notes == "Leave at door"
        assert sorted(item.quantity for item in order.items) == [1, 2]

    def test_clears_stored_cart_without_a_cart_service(self, shopper, make_product):
        product_id, (variant_id,) = make_product()
        CartService(shopper).add_item(product_id, variant_id, 1)

        CheckoutService(shopper).checkout_cart()

        assert find_cart("cust-001").items == []

    def test_ships_to_chosen_address(self, shopper, add_address, make_product):
        other = add_address("cust-001", city="Chennai")
        product_id, (variant_id,) = make_product()
        CartService(shopper).add_item(product_id, variant_id, 1)

        CheckoutService(shopper).checkout_cart(address_id=other)

        (order,) = orders_for("cust-001")
        assert order.shipping_address.city == "Chennai"

    def test_empty_cart(self, shopper):
        with pytest.raises(EmptyOrder):
            CheckoutService(shopper).checkout_cart()

    def test_no_address(self, session_for, make_product):
        session = session_for("cust-002")
        product_id, (variant_id,) = make_product()
        CartService(session).add_item(product_id, variant_id, 1)

        with pytest.raises(NoDefaultAddress):
            CheckoutService(session).checkout_cart()
        assert len(find_cart("cust-002").items) == 1


class TestOrderPlacementWorkflow:
    def _request(self, lines, user_id="cust-001", address=None):
        return PlaceOrderRequest(
            user_id=user_id,
            lines=tuple(lines),
            shipping_address=address
            or {
                "name": "Asha Rao",
                "phone": "+919812345678",
                "address_line1": "12 MG Road",
                "address_line2": None,
                "city": "Bengaluru",
                "state": "Karnataka",
                "postal_code": "560001",
                "country": "India",
            },
            payment_method="cod",
        )

    def test_completes(self, make_product):
        product_id, (variant_id,) = make_product()
        placement = OrderPlacement(self._request([OrderLine(product_id, variant_id, 1)]))

        placement.run()

        assert placement.stage is Stage.COMPLETE
        assert len(placement.compensations) == 0

    def test_rejects_zero_quantity(self, make_product):
        product_id, (variant_id,) = make_product()
        placement = OrderPlacement(self._request([OrderLine(product_id, variant_id, 0)]))

        with pytest.raises(ValidationError):
            placement.run()
        assert placement.stage is Stage.FAILED
        assert _stock(product_id, variant_id) == 10

    def test_missing_address(self, make_product):
        product_id, (variant_id,) = make_product()
        request = PlaceOrderRequest(
            user_id="cust-001",
            lines=(OrderLine(product_id, variant_id, 1),),
            shipping_address=None,
            payment_method="cod",
        )

        with pytest.raises(NoDefaultAddress) as exc_info:
            OrderPlacement(request).run()
        assert exc_info.value.notice == "Please add a delivery address first"

    @patch("storefront.checkout.placement.current_domain", new_callable=MagicMock)
    def test_failed_order_write_restores_stock(self, mock_domain, make_product):
        mock_domain.process.side_effect = RuntimeError("database unavailable")
        product_id, (medium, large) = make_product(variants=(("M", "Blue", 5, 0.0), ("L", "Blue", 5, 0.0)))
        placement = OrderPlacement(
            self._request([OrderLine(product_id, medium, 2), OrderLine(product_id, large, 1)])
        )

        with pytest.raises(PersistenceFailure) as exc_info:
            placement.run()

        assert exc_info.value.stage == "persisting_order"
        assert exc_info.value.notice == "Failed to place order"
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert _stock(product_id, medium) == 5
        assert _stock(product_id, large) == 5
        assert orders_for("cust-001") == []

    def test_stock_taken_mid_checkout_rolls_back_earlier_lines(self, make_product):
        product_id, (medium, large) = make_product(variants=(("M", "Blue", 5, 0.0), ("L", "Blue", 5, 0.0)))

        def withdraw(product, variant, quantity):
            if variant == large:
                raise ValidationError({"stock_quantity": ["Insufficient stock"]})
            real_withdraw_stock(product, variant, quantity)

        placement = OrderPlacement(
            self._request([OrderLine(product_id, medium, 2), OrderLine(product_id, large, 1)])
        )
        with patch("storefront.checkout.placement.withdraw_stock", side_effect=withdraw):
            with pytest.raises(InsufficientStock):
                placement.run()

        assert _stock(product_id, medium) == 5
        assert orders_for("cust-001") == []


class TestConcurrentPurchases:
    def test_last_unit_sells_once(self, shopper, make_product):
        product_id, (variant_id,) = make_product(variants=(("M", "Blue", 1, 0.0),))

        outcomes = []
        start = threading.Barrier(2)

        def buy():
            with storefront.domain_context():
                start.wait()
                try:
                    CheckoutService(shopper).quick_purchase(product_id, variant_id, 1)
                    outcomes.append("placed")
                except InsufficientStock:
                    outcomes.append("rejected")

        threads = [threading.Thread(target=buy) for _ in range(2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sorted(outcomes) == ["placed", "rejected"]
        assert _stock(product_id, variant_id) == 0
        assert len(orders_for("cust-001")) == 1
