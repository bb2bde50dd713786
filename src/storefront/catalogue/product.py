"""Product aggregate with its size/color variants.

Prices live on the product (base price and percentage discount); a variant
only adds a price delta. Stock is tracked per variant and is the one thing
order placement changes on a product.
"""

import json
from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String, Text

from storefront.catalogue.events import (
    ProductCreated,
    ProductPriceChanged,
    StockRestocked,
    StockWithdrawn,
    VariantAdded,
)
from storefront.domain import storefront


@storefront.entity(part_of="Product")
class ProductVariant:
    size = String(required=True, max_length=20)
    color = String(required=True, max_length=50)
    color_hex = String(max_length=7)
    sku = String(max_length=50)
    stock_quantity = Integer(default=0, min_value=0)
    additional_price = Float(default=0.0)
    is_active = Boolean(default=True)

    @property
    def label(self):
        return f"{self.size} - {self.color}"


@storefront.aggregate
class Product:
    name = String(required=True, max_length=255)
    slug = String(required=True, max_length=255, unique=True)
    description = Text()
    category_id = Identifier()
    brand = String(max_length=100)
    material = String(max_length=255)
    base_price = Float(required=True, min_value=0.0)
    discount_percentage = Float(default=0.0, min_value=0.0, max_value=100.0)
    images = Text()  # JSON array of image URLs, in display order
    is_active = Boolean(default=True)
    is_featured = Boolean(default=False)
    variants = HasMany(ProductVariant)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(
        cls,
        name,
        slug,
        base_price,
        discount_percentage=0.0,
        description=None,
        category_id=None,
        brand=None,
        material=None,
        images=None,
        is_featured=False,
    ):
        now = datetime.now(UTC)
        product = cls(
            name=name,
            slug=slug,
            base_price=base_price,
            discount_percentage=discount_percentage or 0.0,
            description=description,
            category_id=category_id,
            brand=brand,
            material=material,
            images=json.dumps(list(images or [])),
            is_featured=is_featured,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductCreated(
                product_id=str(product.id),
                name=name,
                slug=slug,
                base_price=base_price,
            )
        )
        return product

    @property
    def image_list(self):
        return json.loads(self.images) if self.images else []

    @property
    def discounted_price(self):
        return self.base_price * (1 - (self.discount_percentage or 0.0) / 100)

    def variant(self, variant_id):
        return next((v for v in self.variants if str(v.id) == str(variant_id)), None)

    def add_variant(self, size, color, stock_quantity=0, additional_price=0.0, color_hex=None, sku=None):
        duplicate = next((v for v in self.variants if v.size == size and v.color == color), None)
        if duplicate is not None:
            raise ValidationError({"variants": [f"Variant {size} - {color} already exists"]})

        variant = ProductVariant(
            size=size,
            color=color,
            color_hex=color_hex,
            sku=sku,
            stock_quantity=stock_quantity,
            additional_price=additional_price or 0.0,
        )
        self.add_variants(variant)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            VariantAdded(
                product_id=str(self.id),
                variant_id=str(variant.id),
                size=size,
                color=color,
                stock_quantity=stock_quantity,
            )
        )
        return variant

    def update_pricing(self, base_price=None, discount_percentage=None):
        if base_price is not None:
            self.base_price = base_price
        if discount_percentage is not None:
            self.discount_percentage = discount_percentage
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ProductPriceChanged(
                product_id=str(self.id),
                base_price=self.base_price,
                discount_percentage=self.discount_percentage,
            )
        )

    def withdraw_stock(self, variant_id, quantity):
        """Take ``quantity`` units out of a variant's stock.

        Rejects the withdrawal outright when stock is short; stock never
        goes below zero.
        """
        variant = self._variant_or_error(variant_id)
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        if variant.stock_quantity < quantity:
            raise ValidationError(
                {"stock_quantity": [f"Only {variant.stock_quantity} left of {variant.label}, {quantity} requested"]}
            )

        variant.stock_quantity -= quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            StockWithdrawn(
                product_id=str(self.id),
                variant_id=str(variant.id),
                quantity=quantity,
                remaining=variant.stock_quantity,
            )
        )

    def restock(self, variant_id, quantity):
        variant = self._variant_or_error(variant_id)
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        variant.stock_quantity += quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            StockRestocked(
                product_id=str(self.id),
                variant_id=str(variant.id),
                quantity=quantity,
                remaining=variant.stock_quantity,
            )
        )

    def _variant_or_error(self, variant_id):
        variant = self.variant(variant_id)
        if variant is None:
            raise ValidationError({"variant_id": [f"Variant {variant_id} not found"]})
        return variant
