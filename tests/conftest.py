from collections.abc import Iterator

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from order_service import database as order_database
from order_service import models as order_models
from order_service.circuit_breaker import make_breaker
from order_service.dependencies import get_product_client
from order_service.discovery import ServiceAddress, StaticResolver
from order_service.errors import ProductNotFoundError
from order_service.main import app as order_app
from order_service.product_client import ProductClient
from product_service import database as product_database
from product_service import models as product_models

PRODUCT_A = ServiceAddress(host="product-a", port=9001)


class FakeCatalog:
    """Stands in for product-service instances behind an httpx.MockTransport."""

    def __init__(self) -> None:
        self.products: dict[int, dict] = {}
        self.requests: list[httpx.Request] = []
        self.down_hosts: set[str] = set()

    def add(self, product_id: int, name: str, price) -> None:
        self.products[product_id] = {"id": product_id, "name": name, "price": price}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host in self.down_hosts:
            raise httpx.ConnectError("connection refused", request=request)
        product_id = int(request.url.path.rsplit("/", 1)[-1])
        product = self.products.get(product_id)
        if product is None:
            return httpx.Response(404, json={"detail": "Product not found"})
        return httpx.Response(200, json=product)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def catalog() -> FakeCatalog:
    catalog = FakeCatalog()
    catalog.add(1, "Laptop", 50000)
    catalog.add(2, "Pen", 19.99)
    return catalog


def build_product_client(catalog: FakeCatalog, addresses: list[ServiceAddress], fail_max: int = 5) -> ProductClient:
    return ProductClient(
        StaticResolver({"product-service": addresses}),
        service_name="product-service",
        timeout=1.0,
        breaker=make_breaker("product-service", fail_max=fail_max, reset_timeout=60, exclude=[ProductNotFoundError]),
        client=httpx.Client(transport=catalog.transport()),
    )


@pytest.fixture
def make_product_client(catalog: FakeCatalog):
    def _make(addresses: list[ServiceAddress], fail_max: int = 5) -> ProductClient:
        return build_product_client(catalog, addresses, fail_max=fail_max)

    return _make


@pytest.fixture
def product_client(catalog: FakeCatalog) -> ProductClient:
    return build_product_client(catalog, [PRODUCT_A])


@pytest.fixture
def db() -> Iterator[Session]:
    order_models.Base.metadata.create_all(bind=order_database.engine)
    session = order_database.SessionLocal()
    try:
        yield session
    finally:
        session.close()
        order_models.Base.metadata.drop_all(bind=order_database.engine)


@pytest.fixture
def product_db() -> Iterator[None]:
    product_models.Base.metadata.create_all(bind=product_database.engine)
    yield
    product_models.Base.metadata.drop_all(bind=product_database.engine)


@pytest.fixture
def client(db: Session, product_client: ProductClient) -> Iterator[TestClient]:
    order_app.dependency_overrides[get_product_client] = lambda: product_client
    yield TestClient(order_app)
    order_app.dependency_overrides.clear()
