"""Workflow rejections surfaced to shoppers.

Aggregates guard their own rules with ``protean.exceptions.ValidationError``.
The errors here are raised by the application services (cart, checkout,
dashboard) and carry a short ``notice`` meant to be shown as-is.
"""


class StorefrontError(Exception):
    code = "storefront_error"
    notice = "Something went wrong"

    def __init__(self, notice: str | None = None, **context):
        self.notice = notice or self.notice
        self.context = context
        super().__init__(self.notice)


class NotAuthenticated(StorefrontError):
    code = "not_authenticated"
    notice = "Please log in to place an order"


class Forbidden(StorefrontError):
    code = "forbidden"
    notice = "You do not have access to this page"


class NoDefaultAddress(StorefrontError):
    code = "no_default_address"
    notice = "Please add a default address first"


class ProductNotFound(StorefrontError):
    code = "product_not_found"
    notice = "Product not found"


class VariantNotFound(StorefrontError):
    code = "variant_not_found"
    notice = "Product variant not found"


class InsufficientStock(StorefrontError):
    code = "insufficient_stock"
    notice = "Not enough stock available"


class EmptyOrder(StorefrontError):
    code = "empty_order"
    notice = "Your cart is empty"


class PersistenceFailure(StorefrontError):
    """A write failed mid-workflow; ``stage`` names where."""

    code = "persistence_failure"
    notice = "Failed to place order"

    def __init__(self, notice: str | None = None, stage: str | None = None, **context):
        self.stage = stage
        super().__init__(notice, stage=stage, **context)
