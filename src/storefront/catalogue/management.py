"""Product management: creation, variants and pricing."""

import json

from protean import handle
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront


@storefront.command(part_of="Product")
class CreateProduct:
    name = String(required=True, max_length=255)
    slug = String(required=True, max_length=255)
    base_price = Float(required=True, min_value=0.0)
    discount_percentage = Float(default=0.0)
    description = Text()
    category_id = Identifier()
    brand = String(max_length=100)
    material = String(max_length=255)
    images = Text()  # JSON array of image URLs
    is_featured = Boolean(default=False)


@storefront.command(part_of="Product")
class AddVariant:
    product_id = Identifier(required=True)
    size = String(required=True, max_length=20)
    color = String(required=True, max_length=50)
    color_hex = String(max_length=7)
    sku = String(max_length=50)
    stock_quantity = Integer(default=0, min_value=0)
    additional_price = Float(default=0.0)


@storefront.command(part_of="Product")
class UpdateProductPricing:
    product_id = Identifier(required=True)
    base_price = Float(min_value=0.0)
    discount_percentage = Float()


@storefront.command_handler(part_of=Product)
class ManageProductsHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        product = Product.create(
            name=command.name,
            slug=command.slug,
            base_price=command.base_price,
            discount_percentage=command.discount_percentage,
            description=command.description,
            category_id=command.category_id,
            brand=command.brand,
            material=command.material,
            images=json.loads(command.images) if command.images else [],
            is_featured=bool(command.is_featured),
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(AddVariant)
    def add_variant(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        variant = product.add_variant(
            size=command.size,
            color=command.color,
            color_hex=command.color_hex,
            sku=command.sku,
            stock_quantity=command.stock_quantity or 0,
            additional_price=command.additional_price or 0.0,
        )
        repo.add(product)
        return str(variant.id)

    @handle(UpdateProductPricing)
    def update_pricing(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.update_pricing(
            base_price=command.base_price,
            discount_percentage=command.discount_percentage,
        )
        repo.add(product)
