import pytest
from protean import current_domain
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def storefront_bed():
    from storefront.domain import storefront

    bed = DomainFixture(storefront)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(scope="session", autouse=True)
def setup_db(storefront_bed):
    from storefront.domain import storefront
    from storefront.utils.db import drop_db, setup_db

    setup_db(storefront)

    yield

    drop_db(storefront)


@pytest.fixture(autouse=True)
def _ctx(storefront_bed):
    with storefront_bed.domain_context():
        yield

        # Clear all databases
        for _, provider in current_domain.providers.items():
            provider._data_reset()


@pytest.fixture(autouse=True)
def fake_gateway():
    from storefront.session.gateway import reset_gateway, set_gateway
    from storefront.session.gateway.fake_adapter import FakeAuthGateway

    gateway = FakeAuthGateway()
    set_gateway(gateway)
    yield gateway
    reset_gateway()


@pytest.fixture()
def make_product():
    """Create an active product with variants; returns ``(product_id, [variant_ids])``.

    ``variants`` is a list of ``(size, color, stock, additional_price)``.
    """
    from storefront.catalogue.management import AddVariant, CreateProduct

    def _make(
        name="Linen Shirt",
        slug=None,
        base_price=500.0,
        discount_percentage=0.0,
        variants=(("M", "Blue", 10, 0.0),),
        images='["https://cdn.example.com/linen-shirt.jpg"]',
        category_id=None,
        is_featured=False,
    ):
        product_id = current_domain.process(
            CreateProduct(
                name=name,
                slug=slug or name.lower().replace(" ", "-"),
                base_price=base_price,
                discount_percentage=discount_percentage,
                images=images,
                category_id=category_id,
                is_featured=is_featured,
            ),
            asynchronous=False,
        )
        variant_ids = [
            current_domain.process(
                AddVariant(
                    product_id=product_id,
                    size=size,
                    color=color,
                    stock_quantity=stock,
                    additional_price=additional,
                ),
                asynchronous=False,
            )
            for size, color, stock, additional in variants
        ]
        return product_id, variant_ids

    return _make


@pytest.fixture()
def add_address():
    """Add an address for ``customer_id``; returns the address id."""
    from storefront.account.addresses import AddAddress

    def _add(customer_id, is_default=False, city="Bengaluru", **overrides):
        fields = {
            "full_name": "Asha Rao",
            "phone": "+919812345678",
            "address_line1": "12 MG Road",
            "city": city,
            "state": "Karnataka",
            "postal_code": "560001",
        }
        fields.update(overrides)
        return current_domain.process(
            AddAddress(customer_id=customer_id, is_default=is_default, **fields),
            asynchronous=False,
        )

    return _add


@pytest.fixture()
def session_for():
    """A session provider already signed in as the given user id."""
    from storefront.session.identity import Identity
    from storefront.session.provider import SessionProvider

    def _session(user_id="cust-001"):
        return SessionProvider.for_identity(Identity(id=user_id))

    return _session
