import logging
from decimal import Decimal

import httpx
import pybreaker
from pydantic import ValidationError
from tenacity import Retrying, before_sleep_log, retry_if_exception, stop_after_attempt

from .circuit_breaker import make_breaker
from .discovery import NameResolver, RoundRobinBalancer, ServiceAddress
from .errors import (
    ProductNotFoundError,
    ProductServiceUnavailableError,
    ProductServiceUnreachableError,
)
from .schema import ProductSnapshot

logger = logging.getLogger(__name__)

HTTP_NOT_FOUND = 404
HTTP_SERVER_ERROR = 500
# One extra attempt, always against a different address.
MAX_ATTEMPTS = 2


def _is_retryable(exc: BaseException) -> bool:
    if isinstance(exc, httpx.TransportError):
        return True
    return isinstance(exc, httpx.HTTPStatusError) and exc.response.status_code >= HTTP_SERVER_ERROR


class ProductClient:
    """Fetches product snapshots from whichever product-service instance is live.

    Every call resolves the service name afresh, then asks one address for the
    product. When the address cannot be reached and the resolver returned
    more than one, the call is repeated once against the next address.
    """

    def __init__(
        self,
        resolver: NameResolver,
        service_name: str = "product-service",
        balancer: RoundRobinBalancer | None = None,
        timeout: float = 5.0,
        breaker: pybreaker.CircuitBreaker | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.resolver = resolver
        self.service_name = service_name
        self.timeout = timeout
        self._balancer = balancer or RoundRobinBalancer()
        self._breaker = breaker or make_breaker(
            service_name,
            fail_max=5,
            reset_timeout=60,
            exclude=[ProductNotFoundError],
        )
        self._client = client or httpx.Client(timeout=timeout)

    def close(self) -> None:
        self._client.close()
        close_resolver = getattr(self.resolver, "close", None)
        if close_resolver is not None:
            close_resolver()

    def get_product(self, product_id: int) -> ProductSnapshot:
        addresses = self.resolver.resolve(self.service_name)
        if not addresses:
            logger.warning("No live address for '%s'; product %s not requested.", self.service_name, product_id)
            msg = f"No instance of '{self.service_name}' is registered"
            raise ProductServiceUnavailableError(msg)

        try:
            return self._breaker.call(self._fetch, product_id, addresses)
        except pybreaker.CircuitBreakerError as e:
            logger.exception("Circuit for '%s' is open; product %s not fetched.", self.service_name, product_id)
            msg = f"'{self.service_name}' is currently unavailable: {e}"
            raise ProductServiceUnreachableError(msg) from e
        except (httpx.RequestError, httpx.HTTPStatusError) as e:
            logger.exception("Product service request for product %s failed: %s", product_id, e)
            msg = f"'{self.service_name}' request failed: {e}"
            raise ProductServiceUnreachableError(msg) from e

    def _fetch(self, product_id: int, addresses: list[ServiceAddress]) -> ProductSnapshot:
        start = addresses.index(self._balancer.choose(self.service_name, addresses))
        candidates = iter(addresses[start:] + addresses[:start])
        retrying = Retrying(
            stop=stop_after_attempt(min(MAX_ATTEMPTS, len(addresses))),
            retry=retry_if_exception(_is_retryable),
            before_sleep=before_sleep_log(logger, logging.INFO),
            reraise=True,
        )
        return retrying(lambda: self._request(next(candidates), product_id))

    def _request(self, address: ServiceAddress, product_id: int) -> ProductSnapshot:
        url = f"{address.base_url}/products/{product_id}"
        logger.info("Contacting '%s' at %s for product %s", self.service_name, address.base_url, product_id)
        response = self._client.get(url, timeout=self.timeout)
        if response.status_code == HTTP_NOT_FOUND:
            msg = f"Product {product_id} does not exist"
            raise ProductNotFoundError(msg)
        response.raise_for_status()

        try:
            payload = response.json(parse_float=Decimal) if response.content else None
            if payload is None:
                # An empty success body also means the product is absent.
                msg = f"Product {product_id} does not exist"
                raise ProductNotFoundError(msg)
            return ProductSnapshot.model_validate(payload)
        except (ValueError, ValidationError) as e:
            msg = f"'{self.service_name}' sent an unreadable product: {e}"
            raise ProductServiceUnreachableError(msg) from e
