"""Read-side lookups over orders."""

from datetime import UTC, datetime

from protean.utils.globals import current_domain

from storefront.order.order import Order

_EPOCH = datetime.min.replace(tzinfo=UTC)


def _newest_first(orders):
    return sorted(orders, key=lambda o: o.created_at or _EPOCH, reverse=True)


def order_number_exists(order_number) -> bool:
    repo = current_domain.repository_for(Order)
    return bool(repo._dao.query.filter(order_number=order_number).all().items)


def orders_for(user_id) -> list[Order]:
    repo = current_domain.repository_for(Order)
    return _newest_first(repo._dao.query.filter(user_id=user_id).limit(None).all().items)


def all_orders() -> list[Order]:
    return _newest_first(current_domain.repository_for(Order)._dao.query.limit(None).all().items)
