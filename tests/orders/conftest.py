import pytest
from protean.integrations.pytest import DomainFixture

from storefront.config import Settings
from storefront.container import build_order_service
from storefront.notification.fake_email import FakeEmailAdapter
from storefront.shipping.fake_adapter import FakeCarrier


@pytest.fixture(scope="session")
def storefront_bed():
    from storefront.domain import storefront

    bed = DomainFixture(storefront)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(storefront_bed):
    with storefront_bed.domain_context():
        yield

        from protean import current_domain

        # Clear all databases
        for _, provider in current_domain.providers.items():
            provider._data_reset()

        # Drain event stores
        current_domain.event_store.store._data_reset()


@pytest.fixture()
def settings():
    return Settings()


@pytest.fixture()
def mailbox():
    adapter = FakeEmailAdapter()
    yield adapter
    adapter.reset()


@pytest.fixture()
def carrier():
    adapter = FakeCarrier()
    yield adapter
    adapter.reset()


@pytest.fixture()
def order_service(settings, mailbox, carrier):
    return build_order_service(settings=settings, email=mailbox, carrier=carrier)


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------
@pytest.fixture()
def address():
    return {
        "name": "Asha Rao",
        "phone": "9876543210",
        "address": "12 MG Road",
        "city": "Bengaluru",
        "state": "Karnataka",
        "pincode": "560001",
    }


@pytest.fixture()
def make_product():
    from protean import current_domain

    from storefront.product.stock import RegisterProduct

    def _make(sku="SKU-001", name="Cotton Tee", price=300.0, stock=10, **kwargs):
        return current_domain.process(
            RegisterProduct(sku=sku, name=name, price=price, initial_stock=stock, **kwargs),
            asynchronous=False,
        )

    return _make


@pytest.fixture()
def make_customer():
    from protean import current_domain

    from storefront.customer.loyalty import RegisterCustomer

    def _make(email="asha@example.com", name="Asha Rao", **kwargs):
        return current_domain.process(RegisterCustomer(email=email, name=name, **kwargs), asynchronous=False)

    return _make


@pytest.fixture()
def customer_id(make_customer):
    return make_customer()
