"""Domain events for the Customer aggregate."""

from protean.fields import Boolean, DateTime, Identifier, String

from storefront.domain import storefront


@storefront.event(part_of="Customer")
class CustomerRegistered:
    """A profile record was created for a newly seen identity."""

    __version__ = 1

    customer_id = Identifier(required=True)
    full_name = String()
    phone = String()
    email = String()
    is_admin = Boolean(default=False)
    registered_at = DateTime(required=True)


@storefront.event(part_of="Customer")
class ProfileUpdated:
    """Name, contact details or the admin flag changed."""

    __version__ = 1

    customer_id = Identifier(required=True)
    full_name = String()
    phone = String()
    email = String()
    is_admin = Boolean(default=False)


@storefront.event(part_of="Customer")
class AddressAdded:
    """A delivery address was added to the address book."""

    __version__ = 1

    customer_id = Identifier(required=True)
    address_id = Identifier(required=True)
    city = String(required=True)
    postal_code = String(required=True)
    is_default = Boolean(default=False)


@storefront.event(part_of="Customer")
class AddressUpdated:
    """Fields of an existing address were edited."""

    __version__ = 1

    customer_id = Identifier(required=True)
    address_id = Identifier(required=True)


@storefront.event(part_of="Customer")
class AddressRemoved:
    """An address was deleted from the address book."""

    __version__ = 1

    customer_id = Identifier(required=True)
    address_id = Identifier(required=True)
    new_default_address_id = Identifier()


@storefront.event(part_of="Customer")
class DefaultAddressChanged:
    """Another address became the one used for express checkout."""

    __version__ = 1

    customer_id = Identifier(required=True)
    address_id = Identifier(required=True)
    previous_default_address_id = Identifier()
