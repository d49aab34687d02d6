import os
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Select the config overlay before the domain is imported and initialized."""
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def marketplace_bed():
    from marketplace.domain import marketplace

    bed = DomainFixture(marketplace)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(scope="session", autouse=True)
def setup_db(marketplace_bed):
    from marketplace.domain import marketplace
    from marketplace.utils.db import drop_db, setup_db

    setup_db(marketplace)

    yield

    drop_db(marketplace)


@pytest.fixture(autouse=True)
def _ctx(marketplace_bed):
    with marketplace_bed.domain_context():
        yield


@pytest.fixture(autouse=True)
def run_around_tests(_ctx):
    """Clean up infrastructure and the payment gateway after every test."""
    from marketplace.gateway import reset_gateway

    reset_gateway()
    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()
    reset_gateway()


@pytest.fixture()
def gateway():
    """A fresh FakeGateway installed as the active gateway."""
    from marketplace.gateway import set_gateway
    from marketplace.gateway.fake_adapter import FakeGateway

    fake = FakeGateway()
    set_gateway(fake)
    return fake


# ---------------------------------------------------------------------------
# Seed data
# ---------------------------------------------------------------------------
@pytest.fixture()
def customer_id():
    return "cust-001"


@pytest.fixture()
def address(customer_id):
    from support import seed_address

    return seed_address(customer_id)


@pytest.fixture()
def vendor_a():
    from support import seed_vendor

    return seed_vendor(user_id="vendor-user-a", store_name="Vendor A", commission_rate=10.0)


@pytest.fixture()
def vendor_b():
    from support import seed_vendor

    return seed_vendor(user_id="vendor-user-b", store_name="Vendor B", commission_rate=15.0)


@pytest.fixture()
def product_a(vendor_a):
    from support import seed_product

    return seed_product(vendor_a, name="Alpha Lamp", price_cents=2999, stock=10)


@pytest.fixture()
def product_b(vendor_b):
    from support import seed_product

    return seed_product(vendor_b, name="Beta Mug", price_cents=1250, stock=5)


@pytest.fixture()
def two_vendor_order(customer_id, address, product_a, product_b):
    """PENDING order: 2 x Alpha Lamp (vendor A) and 1 x Beta Mug (vendor B)."""
    from support import place_order

    return place_order(customer_id, address, [(product_a, 2), (product_b, 1)])
