"""Read-side lookups over customer profiles and addresses."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.account.customer import Customer


def find_customer(customer_id) -> Customer | None:
    try:
        return current_domain.repository_for(Customer).get(customer_id)
    except ObjectNotFoundError:
        return None


def addresses_for(customer_id) -> list:
    """The address book, default address first."""
    customer = find_customer(customer_id)
    if customer is None:
        return []
    return sorted(customer.addresses, key=lambda a: not a.is_default)


def default_address_for(customer_id):
    customer = find_customer(customer_id)
    return customer.default_address if customer else None


def is_admin(customer_id) -> bool:
    customer = find_customer(customer_id)
    return bool(customer and customer.is_admin)
