"""Cart facade bound to the signed-in identity.

``CartService`` keeps the last priced ``CartView`` for the current identity.
Every mutation goes through a command and then reloads the whole view; the
view is also reloaded whenever the session's identity changes.
"""

import structlog
from protean.utils.globals import current_domain

from storefront.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartQuantity
from storefront.cart.view import CartView, build_cart_view
from storefront.errors import NotAuthenticated

logger = structlog.get_logger(__name__)

LOGIN_TO_ADD = "Please log in to add items to cart"
LOGIN_TO_MANAGE = "Please log in to manage your cart"


class CartService:
    def __init__(self, session):
        self.session = session
        self.view = CartView()
        session.subscribe(self._on_identity_change)

    @property
    def lines(self):
        return self.view.lines

    @property
    def total(self) -> float:
        return self.view.total

    @property
    def count(self) -> int:
        return self.view.count

    def _user_id(self, notice: str) -> str:
        identity = self.session.identity
        if identity is None:
            raise NotAuthenticated(notice)
        return identity.id

    def _on_identity_change(self, identity) -> None:
        self.refresh()

    def refresh(self) -> CartView:
        """Reload the cart; an anonymous session sees an empty cart."""
        identity = self.session.identity
        self.view = build_cart_view(identity.id) if identity else CartView()
        return self.view

    def add_item(self, product_id, variant_id, quantity: int = 1) -> CartView:
        user_id = self._user_id(LOGIN_TO_ADD)
        current_domain.process(
            AddToCart(
                user_id=user_id,
                product_id=product_id,
                variant_id=variant_id,
                quantity=quantity,
            ),
            asynchronous=False,
        )
        logger.info("Added to cart", user_id=user_id, variant_id=str(variant_id), quantity=quantity)
        return self.refresh()

    def update_quantity(self, item_id, quantity: int) -> CartView:
        user_id = self._user_id(LOGIN_TO_MANAGE)
        current_domain.process(
            UpdateCartQuantity(user_id=user_id, item_id=item_id, quantity=quantity),
            asynchronous=False,
        )
        return self.refresh()

    def remove_item(self, item_id) -> CartView:
        user_id = self._user_id(LOGIN_TO_MANAGE)
        current_domain.process(RemoveFromCart(user_id=user_id, item_id=item_id), asynchronous=False)
        logger.info("Removed from cart", user_id=user_id, item_id=str(item_id))
        return self.refresh()

    def clear(self) -> CartView:
        user_id = self._user_id(LOGIN_TO_MANAGE)
        current_domain.process(ClearCart(user_id=user_id), asynchronous=False)
        return self.refresh()
