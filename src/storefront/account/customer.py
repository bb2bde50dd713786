"""Customer aggregate: the profile behind an identity, plus its address book.

The aggregate id is the identity id handed out by the auth subsystem, so a
profile can be looked up directly from whoever is signed in. The admin flag
lives here, not on the identity.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, HasMany, String

from storefront.account.events import (
    AddressAdded,
    AddressRemoved,
    AddressUpdated,
    CustomerRegistered,
    DefaultAddressChanged,
    ProfileUpdated,
)
from storefront.domain import storefront

_EDITABLE_ADDRESS_FIELDS = (
    "label",
    "full_name",
    "phone",
    "address_line1",
    "address_line2",
    "city",
    "state",
    "postal_code",
    "country",
)


class AddressLabel(Enum):
    HOME = "home"
    WORK = "work"
    OTHER = "other"


@storefront.entity(part_of="Customer")
class Address:
    label = String(choices=AddressLabel, default=AddressLabel.HOME.value)
    full_name = String(required=True, max_length=100)
    phone = String(required=True, max_length=20)
    address_line1 = String(required=True, max_length=255)
    address_line2 = String(max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    postal_code = String(required=True, max_length=20)
    country = String(max_length=100, default="India")
    is_default = Boolean(default=False)


@storefront.aggregate
class Customer:
    full_name = String(max_length=100)
    phone = String(max_length=20)
    email = String(max_length=255)
    is_admin = Boolean(default=False)
    addresses = HasMany(Address)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def exactly_one_default_address_when_addresses_exist(self):
        if not self.addresses:
            return
        defaults = [a for a in self.addresses if a.is_default]
        if len(defaults) != 1:
            raise ValidationError({"addresses": ["Exactly one address must be marked as default"]})

    @classmethod
    def register(cls, customer_id, full_name=None, phone=None, email=None, is_admin=False):
        now = datetime.now(UTC)
        customer = cls(
            id=customer_id,
            full_name=full_name,
            phone=phone,
            email=email,
            is_admin=is_admin,
            created_at=now,
            updated_at=now,
        )
        customer.raise_(
            CustomerRegistered(
                customer_id=str(customer.id),
                full_name=full_name,
                phone=phone,
                email=email,
                is_admin=is_admin,
                registered_at=now,
            )
        )
        return customer

    @property
    def default_address(self):
        return next((a for a in self.addresses if a.is_default), None)

    def address(self, address_id):
        return next((a for a in self.addresses if str(a.id) == str(address_id)), None)

    def update_profile(self, full_name=None, phone=None, email=None, is_admin=None):
        """Overwrite the given profile fields; ``None`` leaves a field alone."""
        if full_name is not None:
            self.full_name = full_name
        if phone is not None:
            self.phone = phone
        if email is not None:
            self.email = email
        if is_admin is not None:
            self.is_admin = is_admin
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ProfileUpdated(
                customer_id=str(self.id),
                full_name=self.full_name,
                phone=self.phone,
                email=self.email,
                is_admin=self.is_admin,
            )
        )

    def add_address(
        self,
        full_name,
        phone,
        address_line1,
        city,
        state,
        postal_code,
        address_line2=None,
        country=None,
        label=AddressLabel.HOME.value,
        is_default=False,
    ):
        # First address is always default
        if not self.addresses:
            is_default = True

        with atomic_change(self):
            if is_default:
                for addr in self.addresses:
                    if addr.is_default:
                        addr.is_default = False

            address = Address(
                label=label or AddressLabel.HOME.value,
                full_name=full_name,
                phone=phone,
                address_line1=address_line1,
                address_line2=address_line2,
                city=city,
                state=state,
                postal_code=postal_code,
                country=country or "India",
                is_default=is_default,
            )
            self.add_addresses(address)

        self.updated_at = datetime.now(UTC)
        self.raise_(
            AddressAdded(
                customer_id=str(self.id),
                address_id=str(address.id),
                city=city,
                postal_code=postal_code,
                is_default=is_default,
            )
        )
        return address

    def update_address(self, address_id, **changes):
        address = self._address_or_error(address_id)

        unknown = set(changes) - set(_EDITABLE_ADDRESS_FIELDS)
        if unknown:
            raise ValidationError({"address": [f"Cannot edit {', '.join(sorted(unknown))}"]})

        for field, value in changes.items():
            setattr(address, field, value)

        self.updated_at = datetime.now(UTC)
        self.raise_(AddressUpdated(customer_id=str(self.id), address_id=str(address.id)))

    def remove_address(self, address_id):
        address = self._address_or_error(address_id)
        was_default = address.is_default

        with atomic_change(self):
            self.remove_addresses(address)

            # The next address in line takes over as default
            if was_default and self.addresses:
                self.addresses[0].is_default = True

        new_default = self.default_address
        self.updated_at = datetime.now(UTC)
        self.raise_(
            AddressRemoved(
                customer_id=str(self.id),
                address_id=str(address_id),
                new_default_address_id=str(new_default.id) if new_default else None,
            )
        )

    def set_default_address(self, address_id):
        address = self._address_or_error(address_id)
        previous = self.default_address

        with atomic_change(self):
            for addr in self.addresses:
                if addr.is_default:
                    addr.is_default = False
            address.is_default = True

        self.updated_at = datetime.now(UTC)
        self.raise_(
            DefaultAddressChanged(
                customer_id=str(self.id),
                address_id=str(address.id),
                previous_default_address_id=str(previous.id) if previous else None,
            )
        )

    def _address_or_error(self, address_id):
        address = self.address(address_id)
        if address is None:
            raise ValidationError({"addresses": [f"Address {address_id} not found"]})
        return address
