import logging

import pytest
import structlog
from protean.integrations.pytest import DomainFixture
from storefront.cart.persistence import CartPersistence
from storefront.cart.service import CartService
from storefront.checkout.service import CheckoutService
from storefront.orders.fake_adapter import FakeOrderApi
from storefront.storage.fake_adapter import MemoryLocalStorage
from storefront.utils.logging import clear_context


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


@pytest.fixture()
def storage():
    return MemoryLocalStorage()


@pytest.fixture()
def persistence(storage):
    return CartPersistence(storage)


@pytest.fixture()
def cart_service(persistence):
    return CartService(persistence)


@pytest.fixture()
def order_api():
    return FakeOrderApi()


@pytest.fixture()
def checkout(cart_service, order_api):
    return CheckoutService(cart_service, order_api, delivery_fee=5.0)


@pytest.fixture()
def address():
    return {
        "street": "12 Market Road",
        "city": "Accra",
        "state": "Greater Accra",
        "country": "GH",
        "zip_code": "00233",
    }


@pytest.fixture()
def restore_logging():
    """Undo ``configure_logging`` after a test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    structlog_config = structlog.get_config()
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers = handlers
    root.setLevel(level)
    structlog.configure(**structlog_config)
    clear_context()
