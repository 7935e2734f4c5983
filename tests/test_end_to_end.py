"""Order placement across all three services, wired in-process."""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from order_service.dependencies import get_product_client
from order_service.discovery import RegistryResolver
from order_service.main import app as order_app
from order_service.product_client import ProductClient
from product_service.main import app as product_app
from product_service.registration import RegistrationAgent
from registry_service.api import get_registry
from registry_service.main import app as registry_app
from registry_service.registry import ServiceRegistry


@pytest.fixture
def registry_http():
    registry = ServiceRegistry(default_ttl=30)
    registry_app.dependency_overrides[get_registry] = lambda: registry
    yield TestClient(registry_app)
    registry_app.dependency_overrides.clear()


@pytest.fixture
def catalog_http(product_db):
    catalog = TestClient(product_app)
    catalog.post("/products", json={"id": 1, "name": "Laptop", "price": 50000})
    return catalog


@pytest.fixture
def orders_http(db, registry_http, catalog_http):
    product_client = ProductClient(
        RegistryResolver("http://registry:8761", client=registry_http),
        service_name="product-service",
        client=catalog_http,
    )
    order_app.dependency_overrides[get_product_client] = lambda: product_client
    yield TestClient(order_app)
    order_app.dependency_overrides.clear()


def test_order_is_priced_through_registered_product_service(orders_http, registry_http):
    agent = RegistrationAgent("http://registry:8761", "product-service", host="product-a", port=9001, client=registry_http)
    agent.register()

    response = orders_http.post("/orders", json={"productId": 1, "quantity": 2})

    assert response.status_code == 201
    assert Decimal(response.json()["totalPrice"]) == Decimal("100000")


def test_order_fails_once_product_service_deregisters(orders_http, registry_http):
    agent = RegistrationAgent("http://registry:8761", "product-service", host="product-a", port=9001, client=registry_http)
    agent.register()
    agent.deregister()

    response = orders_http.post("/orders", json={"productId": 1, "quantity": 2})

    assert response.status_code == 503
    assert orders_http.get("/orders").json() == []


def test_missing_product_on_live_service(orders_http, registry_http):
    RegistrationAgent("http://registry:8761", "product-service", host="product-a", port=9001, client=registry_http).register()

    response = orders_http.post("/orders", json={"productId": 99, "quantity": 1})

    assert response.status_code == 404
    assert response.json()["detail"]["code"] == "PRODUCT_NOT_FOUND"
