"""Admin dashboard figures: revenue, counts, recent orders and low stock."""

from dataclasses import dataclass
from datetime import datetime

from protean.utils.globals import current_domain

from storefront.account.customer import Customer
from storefront.catalogue.product import Product
from storefront.errors import Forbidden, NotAuthenticated
from storefront.order.order import PaymentStatus
from storefront.order.queries import all_orders

LOW_STOCK_THRESHOLD = 10
LOW_STOCK_LIMIT = 5
RECENT_ORDERS_LIMIT = 5


@dataclass(frozen=True)
class RecentOrder:
    order_id: str
    order_number: str
    total_amount: float
    status: str
    payment_status: str
    created_at: datetime | None


@dataclass(frozen=True)
class LowStockItem:
    product_id: str
    variant_id: str
    name: str
    variant: str
    stock: int
    image: str | None


@dataclass(frozen=True)
class DashboardStats:
    total_revenue: float
    total_orders: int
    total_customers: int
    total_products: int
    recent_orders: tuple[RecentOrder, ...]
    low_stock: tuple[LowStockItem, ...]


def _low_stock(products) -> list[LowStockItem]:
    items = []
    for product in products:
        images = product.image_list
        for variant in product.variants:
            if variant.is_active and variant.stock_quantity < LOW_STOCK_THRESHOLD:
                items.append(
                    LowStockItem(
                        product_id=str(product.id),
                        variant_id=str(variant.id),
                        name=product.name,
                        variant=variant.label,
                        stock=variant.stock_quantity,
                        image=images[0] if images else None,
                    )
                )
    items.sort(key=lambda i: i.stock)
    return items[:LOW_STOCK_LIMIT]


def dashboard_stats(session) -> DashboardStats:
    """Compute the dashboard for an admin session.

    Revenue only counts orders whose payment has been recorded as paid.
    """
    if session.identity is None:
        raise NotAuthenticated("Please log in to view the dashboard")
    if not session.is_admin:
        raise Forbidden()

    orders = all_orders()
    products = current_domain.repository_for(Product)._dao.query.limit(None).all().items
    customers = current_domain.repository_for(Customer)._dao.query.limit(None).all().items

    revenue = sum(o.total_amount or 0.0 for o in orders if o.payment_status == PaymentStatus.PAID.value)

    return DashboardStats(
        total_revenue=round(revenue, 2),
        total_orders=len(orders),
        total_customers=len(customers),
        total_products=len(products),
        recent_orders=tuple(
            RecentOrder(
                order_id=str(o.id),
                order_number=o.order_number,
                total_amount=o.total_amount,
                status=o.status,
                payment_status=o.payment_status,
                created_at=o.created_at,
            )
            for o in orders[:RECENT_ORDERS_LIMIT]
        ),
        low_stock=tuple(_low_stock(products)),
    )
