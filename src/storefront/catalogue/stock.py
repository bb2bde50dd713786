"""Stock withdrawal and restocking for product variants.

``withdraw_stock`` is the entry point order placement uses. It holds a
per-variant lock across the whole command, commit included, so that two
purchases of the last unit in this process cannot both pass the stock check.
"""

import threading

from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront

_locks: dict[str, threading.Lock] = {}
_locks_guard = threading.Lock()


def variant_lock(variant_id) -> threading.Lock:
    with _locks_guard:
        return _locks.setdefault(str(variant_id), threading.Lock())


@storefront.command(part_of="Product")
class WithdrawStock:
    product_id = Identifier(required=True)
    variant_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@storefront.command(part_of="Product")
class RestockVariant:
    product_id = Identifier(required=True)
    variant_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@storefront.command_handler(part_of=Product)
class ManageStockHandler:
    @handle(WithdrawStock)
    def withdraw(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.withdraw_stock(command.variant_id, command.quantity)
        repo.add(product)

    @handle(RestockVariant)
    def restock(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.restock(command.variant_id, command.quantity)
        repo.add(product)


def withdraw_stock(product_id, variant_id, quantity) -> None:
    with variant_lock(variant_id):
        current_domain.process(
            WithdrawStock(product_id=product_id, variant_id=variant_id, quantity=quantity),
            asynchronous=False,
        )


def restock_variant(product_id, variant_id, quantity) -> None:
    with variant_lock(variant_id):
        current_domain.process(
            RestockVariant(product_id=product_id, variant_id=variant_id, quantity=quantity),
            asynchronous=False,
        )
