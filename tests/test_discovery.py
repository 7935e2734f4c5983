import httpx
import pytest

from order_service.discovery import (
    RegistryResolver,
    RoundRobinBalancer,
    ServiceAddress,
    StaticResolver,
)


def test_service_address_from_url():
    assert ServiceAddress.from_url("http://localhost:9001") == ServiceAddress("localhost", 9001)
    assert ServiceAddress.from_url("https://catalog.internal").base_url == "https://catalog.internal:443"


def test_service_address_rejects_bare_words():
    with pytest.raises(ValueError, match="Not a service URL"):
        ServiceAddress.from_url("product-service")


def test_static_resolver_returns_configured_addresses():
    resolver = StaticResolver.from_urls("product-service", ["http://a:9001", "http://b:9002"])

    assert resolver.resolve("product-service") == [ServiceAddress("a", 9001), ServiceAddress("b", 9002)]
    assert resolver.resolve("user-service") == []


def test_registry_resolver_maps_live_instances():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/services/product-service"
        return httpx.Response(
            200,
            json=[
                {"instance_id": "i-1", "service_name": "product-service", "host": "a", "port": 9001, "scheme": "http", "ttl": 30},
                {"instance_id": "i-2", "service_name": "product-service", "host": "b", "port": 9002, "scheme": "http", "ttl": 30},
            ],
        )

    resolver = RegistryResolver("http://registry:8761/", client=httpx.Client(transport=httpx.MockTransport(handler)))

    assert resolver.resolve("product-service") == [ServiceAddress("a", 9001), ServiceAddress("b", 9002)]


def test_registry_resolver_unknown_name_is_empty():
    resolver = RegistryResolver(
        "http://registry:8761",
        client=httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(404))),
    )

    assert resolver.resolve("product-service") == []


def test_registry_resolver_outage_is_empty():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    resolver = RegistryResolver("http://registry:8761", client=httpx.Client(transport=httpx.MockTransport(handler)))

    assert resolver.resolve("product-service") == []


@pytest.mark.parametrize(
    "body",
    [
        b'[{"hostname": "a"}]',
        b'{"instances": []}',
        b'[{"host": "a", "port": "not-a-port"}]',
        b"not json",
    ],
)
def test_registry_resolver_unreadable_answer_is_empty(body):
    resolver = RegistryResolver(
        "http://registry:8761",
        client=httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200, content=body))),
    )

    assert resolver.resolve("product-service") == []


def test_registry_resolver_close_closes_client():
    http_client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(404)))
    resolver = RegistryResolver("http://registry:8761", client=http_client)

    resolver.close()

    assert http_client.is_closed


def test_round_robin_cycles_per_service():
    balancer = RoundRobinBalancer()
    addresses = [ServiceAddress("a", 1), ServiceAddress("b", 2), ServiceAddress("c", 3)]

    picks = [balancer.choose("product-service", addresses).host for _ in range(4)]

    assert picks == ["a", "b", "c", "a"]
    assert balancer.choose("user-service", addresses).host == "a"


def test_round_robin_needs_an_address():
    with pytest.raises(ValueError, match="No addresses"):
        RoundRobinBalancer().choose("product-service", [])
