"""Checkout entry points for the signed-in shopper.

``checkout_cart`` places an order for everything in the cart and then empties
it. ``quick_purchase`` buys a single variant straight away with the default
address and cash on delivery, leaving the cart alone.
"""

import structlog
from protean.utils.globals import current_domain

from storefront.account.queries import default_address_for, find_customer
from storefront.cart.items import ClearCart
from storefront.cart.view import build_cart_view
from storefront.catalogue.queries import resolve_variant
from storefront.checkout.placement import (
    OrderLine,
    OrderPlacement,
    PlacedOrder,
    PlaceOrderRequest,
    address_snapshot,
)
from storefront.errors import EmptyOrder, InsufficientStock, NoDefaultAddress, NotAuthenticated

logger = structlog.get_logger(__name__)

QUICK_PURCHASE_PAYMENT_METHOD = "cod"
LOGIN_TO_ORDER = "Please log in to place an order"
LOGIN_TO_PURCHASE = "Please log in to make a purchase"


class CheckoutService:
    def __init__(self, session, cart=None):
        self.session = session
        self.cart = cart
        self.is_processing = False

    def _user_id(self, notice: str) -> str:
        identity = self.session.identity
        if identity is None:
            raise NotAuthenticated(notice)
        return identity.id

    def process_order(self, lines, address, payment_method: str, notes: str | None = None) -> PlacedOrder:
        """Place an order for ``lines`` shipped to ``address``."""
        user_id = self._user_id(LOGIN_TO_ORDER)
        request = PlaceOrderRequest(
            user_id=user_id,
            lines=tuple(lines),
            shipping_address=address_snapshot(address) if address is not None else None,
            payment_method=payment_method,
            notes=notes,
        )

        self.is_processing = True
        try:
            return OrderPlacement(request).run()
        finally:
            self.is_processing = False

    def checkout_cart(self, address_id=None, payment_method: str = "cod", notes: str | None = None) -> PlacedOrder:
        user_id = self._user_id(LOGIN_TO_ORDER)

        if address_id:
            customer = find_customer(user_id)
            address = customer.address(address_id) if customer else None
        else:
            address = default_address_for(user_id)
        if address is None:
            raise NoDefaultAddress()

        view = build_cart_view(user_id)
        if view.is_empty:
            raise EmptyOrder()

        lines = [OrderLine(line.product_id, line.variant_id, line.quantity) for line in view.lines]
        placed = self.process_order(lines, address, payment_method, notes=notes)
        self._clear_cart(user_id)
        return placed

    def quick_purchase(self, product_id, variant_id, quantity: int = 1) -> PlacedOrder:
        user_id = self._user_id(LOGIN_TO_PURCHASE)

        address = default_address_for(user_id)
        if address is None:
            raise NoDefaultAddress()

        _, variant = resolve_variant(product_id, variant_id)
        if variant.stock_quantity < quantity:
            raise InsufficientStock(
                variant_id=str(variant_id),
                available=variant.stock_quantity,
                requested=quantity,
            )

        return self.process_order(
            [OrderLine(str(product_id), str(variant_id), quantity)],
            address,
            QUICK_PURCHASE_PAYMENT_METHOD,
        )

    def _clear_cart(self, user_id) -> None:
        # The order already stands; a cart left behind is only logged
        try:
            if self.cart is not None:
                self.cart.clear()
            else:
                current_domain.process(ClearCart(user_id=user_id), asynchronous=False)
        except Exception:
            logger.exception("Failed to clear cart after checkout", user_id=user_id)
