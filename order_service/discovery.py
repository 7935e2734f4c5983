"""Name resolution for sibling services.

A resolver turns a logical service name (``"product-service"``) into the
addresses currently serving it. Results may be stale; callers must treat a
connection failure to a resolved address separately from an empty result.
"""

import itertools
import logging
import threading
from dataclasses import dataclass
from typing import Protocol
from urllib.parse import urlsplit

import httpx
from pydantic import BaseModel, Field, TypeAdapter, ValidationError

logger = logging.getLogger(__name__)

HTTP_NOT_FOUND = 404


@dataclass(frozen=True)
class ServiceAddress:
    host: str
    port: int
    scheme: str = "http"

    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.host}:{self.port}"

    @classmethod
    def from_url(cls, url: str) -> "ServiceAddress":
        parts = urlsplit(url)
        if not parts.hostname:
            msg = f"Not a service URL: {url!r}"
            raise ValueError(msg)
        scheme = parts.scheme or "http"
        port = parts.port or (443 if scheme == "https" else 80)
        return cls(host=parts.hostname, port=port, scheme=scheme)


class _RegisteredInstance(BaseModel):
    host: str = Field(min_length=1)
    port: int = Field(gt=0, lt=65536)
    scheme: str = "http"


_INSTANCES = TypeAdapter(list[_RegisteredInstance])


class NameResolver(Protocol):
    def resolve(self, service_name: str) -> list[ServiceAddress]: ...


class StaticResolver:
    """Resolves names from a fixed, configured mapping."""

    def __init__(self, addresses: dict[str, list[ServiceAddress]]) -> None:
        self._addresses = {name: list(addrs) for name, addrs in addresses.items()}

    @classmethod
    def from_urls(cls, service_name: str, urls: list[str]) -> "StaticResolver":
        return cls({service_name: [ServiceAddress.from_url(url) for url in urls]})

    def resolve(self, service_name: str) -> list[ServiceAddress]:
        return list(self._addresses.get(service_name, []))


class RegistryResolver:
    """Looks names up in the registry service on every call."""

    def __init__(
        self,
        registry_url: str,
        timeout: float = 2.0,
        client: httpx.Client | None = None,
    ) -> None:
        self.registry_url = registry_url.rstrip("/")
        self._client = client or httpx.Client(timeout=timeout)

    def resolve(self, service_name: str) -> list[ServiceAddress]:
        try:
            response = self._client.get(f"{self.registry_url}/services/{service_name}")
            if response.status_code == HTTP_NOT_FOUND:
                return []
            response.raise_for_status()
            instances = _INSTANCES.validate_json(response.content)
        except (httpx.RequestError, httpx.HTTPStatusError, ValidationError) as e:
            logger.warning("Registry lookup for '%s' failed: %s", service_name, e)
            return []

        return [ServiceAddress(host=item.host, port=item.port, scheme=item.scheme) for item in instances]

    def close(self) -> None:
        self._client.close()


class RoundRobinBalancer:
    """Picks addresses in turn, keeping one counter per service name."""

    def __init__(self) -> None:
        self._counters: dict[str, itertools.count] = {}
        self._lock = threading.Lock()

    def choose(self, service_name: str, addresses: list[ServiceAddress]) -> ServiceAddress:
        if not addresses:
            msg = f"No addresses to choose from for '{service_name}'"
            raise ValueError(msg)
        with self._lock:
            counter = self._counters.setdefault(service_name, itertools.count())
            index = next(counter)
        return addresses[index % len(addresses)]
