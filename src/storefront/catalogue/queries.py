"""Read-side lookups over the catalogue."""

from datetime import UTC, datetime

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.catalogue.category import Category
from storefront.catalogue.product import Product
from storefront.errors import ProductNotFound, VariantNotFound

SORT_ORDERS = ("newest", "price-low", "price-high", "name")

_EPOCH = datetime.min.replace(tzinfo=UTC)


def _sort_key(sort):
    if sort in ("price-low", "price-high"):
        return lambda p: p.discounted_price
    if sort == "name":
        return lambda p: p.name.lower()
    return lambda p: p.created_at or _EPOCH


def find_product(product_id) -> Product | None:
    try:
        return current_domain.repository_for(Product).get(product_id)
    except ObjectNotFoundError:
        return None


def resolve_variant(product_id, variant_id, active_only=True):
    """Return ``(product, variant)`` or raise the matching not-found error."""
    product = find_product(product_id)
    if product is None or (active_only and not product.is_active):
        raise ProductNotFound(product_id=str(product_id))

    variant = product.variant(variant_id)
    if variant is None or (active_only and not variant.is_active):
        raise VariantNotFound(product_id=str(product_id), variant_id=str(variant_id))

    return product, variant


def product_by_slug(slug) -> Product:
    repo = current_domain.repository_for(Product)
    products = repo._dao.query.filter(slug=slug, is_active=True).all().items
    if not products:
        raise ProductNotFound(slug=slug)
    return products[0]


def category_by_slug(slug) -> Category | None:
    repo = current_domain.repository_for(Category)
    categories = repo._dao.query.filter(slug=slug).all().items
    return categories[0] if categories else None


def list_categories() -> list[Category]:
    repo = current_domain.repository_for(Category)
    categories = repo._dao.query.filter(is_active=True).limit(None).all().items
    return sorted(categories, key=lambda c: (c.sort_order or 0, c.name))


def list_products(category_slug=None, featured=None, sort="newest") -> list[Product]:
    """Active products, optionally narrowed to a category or featured flag.

    ``sort`` is one of ``SORT_ORDERS``; price sorts use the discounted base
    price, ``newest`` puts the latest products first.
    """
    if sort not in SORT_ORDERS:
        sort = "newest"

    filters = {"is_active": True}
    if featured is not None:
        filters["is_featured"] = featured
    if category_slug:
        category = category_by_slug(category_slug)
        if category is None:
            return []
        filters["category_id"] = category.id

    repo = current_domain.repository_for(Product)
    products = repo._dao.query.filter(**filters).limit(None).all().items
    return sorted(products, key=_sort_key(sort), reverse=sort in ("newest", "price-high"))
