"""Profile upsert, keyed on the identity id."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from storefront.account.customer import Customer
from storefront.domain import storefront


@storefront.command(part_of="Customer")
class UpsertProfile:
    customer_id = Identifier(required=True)
    full_name = String(max_length=100)
    phone = String(max_length=20)
    email = String(max_length=255)
    is_admin = Boolean()


def load_or_register(customer_id) -> Customer:
    """Fetch the profile for ``customer_id``, creating a blank one if absent."""
    try:
        return current_domain.repository_for(Customer).get(customer_id)
    except ObjectNotFoundError:
        return Customer.register(customer_id=customer_id)


@storefront.command_handler(part_of=Customer)
class ProfileCommandHandler:
    @handle(UpsertProfile)
    def upsert_profile(self, command):
        customer = load_or_register(command.customer_id)
        customer.update_profile(
            full_name=command.full_name,
            phone=command.phone,
            email=command.email,
            is_admin=command.is_admin,
        )
        current_domain.repository_for(Customer).add(customer)
        return str(customer.id)
