import pytest
from fastapi.testclient import TestClient
from marketplace.api.application import create_app
from support import as_admin, as_customer


@pytest.fixture()
def client():
    return TestClient(create_app())


@pytest.fixture()
def customer_headers():
    return as_customer()


@pytest.fixture()
def admin_headers():
    return as_admin()
