"""Storefront bounded context: catalogue, customer accounts, carts and orders.

One Protean domain holds every aggregate; the order placement workflow in
``storefront.checkout`` coordinates them.
"""

from protean.domain import Domain

from storefront.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

storefront = Domain(name="storefront")
