"""Domain events for the catalogue aggregates."""

from protean.fields import Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductCreated:
    """A new product was added to the catalogue."""

    __version__ = 1

    product_id = Identifier(required=True)
    name = String(required=True)
    slug = String(required=True)
    base_price = Float(required=True)


@storefront.event(part_of="Product")
class VariantAdded:
    """A size/color variant was added to a product."""

    __version__ = 1

    product_id = Identifier(required=True)
    variant_id = Identifier(required=True)
    size = String(required=True)
    color = String(required=True)
    stock_quantity = Integer(required=True)


@storefront.event(part_of="Product")
class ProductPriceChanged:
    """Base price or discount of a product changed."""

    __version__ = 1

    product_id = Identifier(required=True)
    base_price = Float(required=True)
    discount_percentage = Float(required=True)


@storefront.event(part_of="Product")
class StockWithdrawn:
    """Units of a variant were taken out of stock for an order."""

    __version__ = 1

    product_id = Identifier(required=True)
    variant_id = Identifier(required=True)
    quantity = Integer(required=True)
    remaining = Integer(required=True)


@storefront.event(part_of="Product")
class StockRestocked:
    """Units of a variant were returned to stock."""

    __version__ = 1

    product_id = Identifier(required=True)
    variant_id = Identifier(required=True)
    quantity = Integer(required=True)
    remaining = Integer(required=True)
