"""Price arithmetic shared by the cart and order placement.

A variant's unit price is the product's discounted base price plus the
variant's own delta. Orders under the free-shipping threshold pay a flat fee.
"""

import os
from dataclasses import dataclass

FREE_SHIPPING_THRESHOLD = float(os.getenv("STOREFRONT_FREE_SHIPPING_THRESHOLD", "999"))
FLAT_SHIPPING_FEE = float(os.getenv("STOREFRONT_FLAT_SHIPPING_FEE", "99"))


@dataclass(frozen=True)
class PriceQuote:
    subtotal: float
    shipping_amount: float
    discount_amount: float = 0.0

    @property
    def total_amount(self) -> float:
        return round(self.subtotal + self.shipping_amount - self.discount_amount, 2)


def unit_price(product, variant) -> float:
    discount = product.discount_percentage or 0.0
    additional = variant.additional_price or 0.0
    return round(product.base_price * (1 - discount / 100) + additional, 2)


def line_total(price: float, quantity: int) -> float:
    return round(price * quantity, 2)


def shipping_for(subtotal: float) -> float:
    return 0.0 if subtotal > FREE_SHIPPING_THRESHOLD else FLAT_SHIPPING_FEE


def quote(line_totals) -> PriceQuote:
    """Price an order from its line totals."""
    subtotal = round(sum(line_totals), 2)
    return PriceQuote(subtotal=subtotal, shipping_amount=shipping_for(subtotal))
