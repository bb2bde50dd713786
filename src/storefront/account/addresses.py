"""Address book management: commands and handler."""

from protean import handle
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from storefront.account.customer import Customer
from storefront.account.profile import load_or_register
from storefront.domain import storefront


@storefront.command(part_of="Customer")
class AddAddress:
    customer_id = Identifier(required=True)
    label = String(max_length=10)
    full_name = String(required=True, max_length=100)
    phone = String(required=True, max_length=20)
    address_line1 = String(required=True, max_length=255)
    address_line2 = String(max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    postal_code = String(required=True, max_length=20)
    country = String(max_length=100)
    is_default = Boolean(default=False)


@storefront.command(part_of="Customer")
class UpdateAddress:
    customer_id = Identifier(required=True)
    address_id = Identifier(required=True)
    label = String(max_length=10)
    full_name = String(max_length=100)
    phone = String(max_length=20)
    address_line1 = String(max_length=255)
    address_line2 = String(max_length=255)
    city = String(max_length=100)
    state = String(max_length=100)
    postal_code = String(max_length=20)
    country = String(max_length=100)
    is_default = Boolean()


@storefront.command(part_of="Customer")
class RemoveAddress:
    customer_id = Identifier(required=True)
    address_id = Identifier(required=True)


@storefront.command(part_of="Customer")
class SetDefaultAddress:
    customer_id = Identifier(required=True)
    address_id = Identifier(required=True)


@storefront.command_handler(part_of=Customer)
class ManageAddressesHandler:
    @handle(AddAddress)
    def add_address(self, command):
        customer = load_or_register(command.customer_id)
        address = customer.add_address(
            label=command.label,
            full_name=command.full_name,
            phone=command.phone,
            address_line1=command.address_line1,
            address_line2=command.address_line2,
            city=command.city,
            state=command.state,
            postal_code=command.postal_code,
            country=command.country,
            is_default=bool(command.is_default),
        )
        current_domain.repository_for(Customer).add(customer)
        return str(address.id)

    @handle(UpdateAddress)
    def update_address(self, command):
        repo = current_domain.repository_for(Customer)
        customer = repo.get(command.customer_id)

        updates = {}
        for field in (
            "label",
            "full_name",
            "phone",
            "address_line1",
            "address_line2",
            "city",
            "state",
            "postal_code",
            "country",
        ):
            value = getattr(command, field, None)
            if value is not None:
                updates[field] = value

        if updates:
            customer.update_address(command.address_id, **updates)
        if command.is_default:
            customer.set_default_address(command.address_id)
        repo.add(customer)

    @handle(RemoveAddress)
    def remove_address(self, command):
        repo = current_domain.repository_for(Customer)
        customer = repo.get(command.customer_id)
        customer.remove_address(command.address_id)
        repo.add(customer)

    @handle(SetDefaultAddress)
    def set_default_address(self, command):
        repo = current_domain.repository_for(Customer)
        customer = repo.get(command.customer_id)
        customer.set_default_address(command.address_id)
        repo.add(customer)
