"""Cart item management: commands and handler.

Carts are addressed by the owning user rather than by cart id; the first
add for a user creates their cart.
"""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.cart.cart import Cart
from storefront.catalogue.queries import resolve_variant
from storefront.domain import storefront


def find_cart(user_id) -> Cart | None:
    repo = current_domain.repository_for(Cart)
    carts = repo._dao.query.filter(user_id=user_id).all().items
    return carts[0] if carts else None


def _cart_or_error(user_id) -> Cart:
    cart = find_cart(user_id)
    if cart is None:
        raise ValidationError({"item_id": ["Item not found in cart"]})
    return cart


@storefront.command(part_of="Cart")
class AddToCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    variant_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@storefront.command(part_of="Cart")
class UpdateCartQuantity:
    """Set a line's quantity; zero or less removes the line."""

    user_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity = Integer(required=True)


@storefront.command(part_of="Cart")
class RemoveFromCart:
    user_id = Identifier(required=True)
    item_id = Identifier(required=True)


@storefront.command(part_of="Cart")
class ClearCart:
    user_id = Identifier(required=True)


@storefront.command_handler(part_of=Cart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        resolve_variant(command.product_id, command.variant_id)

        cart = find_cart(command.user_id) or Cart.create(user_id=command.user_id)
        item_id = cart.add_item(
            product_id=command.product_id,
            variant_id=command.variant_id,
            quantity=command.quantity,
        )
        current_domain.repository_for(Cart).add(cart)
        return item_id

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        cart = _cart_or_error(command.user_id)
        cart.update_item_quantity(item_id=command.item_id, new_quantity=command.quantity)
        current_domain.repository_for(Cart).add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        cart = _cart_or_error(command.user_id)
        cart.remove_item(item_id=command.item_id)
        current_domain.repository_for(Cart).add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        cart = find_cart(command.user_id)
        if cart is None or not cart.items:
            return 0
        removed = len(cart.items)
        cart.clear()
        current_domain.repository_for(Cart).add(cart)
        return removed
