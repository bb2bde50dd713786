"""Priced read model of a user's cart.

Every read joins the stored lines with the current product and variant, so
prices shown in the cart follow catalogue edits. A line whose product or
variant has since disappeared stays visible at a zero price.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime

from storefront.cart.items import find_cart
from storefront.catalogue.queries import find_product
from storefront.checkout.pricing import line_total, unit_price

_EPOCH = datetime.min.replace(tzinfo=UTC)


@dataclass(frozen=True)
class CartLine:
    item_id: str
    product_id: str
    variant_id: str
    quantity: int
    unit_price: float
    product_name: str | None = None
    product_slug: str | None = None
    image: str | None = None
    size: str | None = None
    color: str | None = None
    stock_quantity: int = 0
    available: bool = True

    @property
    def line_total(self) -> float:
        return line_total(self.unit_price, self.quantity)


@dataclass(frozen=True)
class CartView:
    lines: tuple[CartLine, ...] = field(default_factory=tuple)

    @property
    def total(self) -> float:
        return round(sum(line.line_total for line in self.lines), 2)

    @property
    def count(self) -> int:
        return sum(line.quantity for line in self.lines)

    @property
    def is_empty(self) -> bool:
        return not self.lines


def _line_for(item) -> CartLine:
    product = find_product(item.product_id)
    variant = product.variant(item.variant_id) if product else None

    if product is None or variant is None:
        return CartLine(
            item_id=str(item.id),
            product_id=str(item.product_id),
            variant_id=str(item.variant_id),
            quantity=item.quantity,
            unit_price=0.0,
            product_name=product.name if product else None,
            available=False,
        )

    images = product.image_list
    return CartLine(
        item_id=str(item.id),
        product_id=str(item.product_id),
        variant_id=str(item.variant_id),
        quantity=item.quantity,
        unit_price=unit_price(product, variant),
        product_name=product.name,
        product_slug=product.slug,
        image=images[0] if images else None,
        size=variant.size,
        color=variant.color,
        stock_quantity=variant.stock_quantity,
        available=bool(product.is_active and variant.is_active),
    )


def build_cart_view(user_id) -> CartView:
    """Load and price the cart of ``user_id``, newest lines first."""
    cart = find_cart(user_id)
    if cart is None:
        return CartView()

    items = sorted(cart.items, key=lambda i: i.added_at or _EPOCH, reverse=True)
    return CartView(lines=tuple(_line_for(item) for item in items))
