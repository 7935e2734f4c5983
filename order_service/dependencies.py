from functools import lru_cache

from .circuit_breaker import make_breaker
from .config import get_settings
from .discovery import NameResolver, RegistryResolver, StaticResolver
from .errors import ProductNotFoundError
from .product_client import ProductClient


def build_resolver() -> NameResolver:
    settings = get_settings()
    if settings.product_service_urls:
        return StaticResolver.from_urls(settings.PRODUCT_SERVICE_NAME, settings.product_service_urls)
    if settings.REGISTRY_URL:
        return RegistryResolver(settings.REGISTRY_URL, timeout=settings.REGISTRY_TIMEOUT)
    # Nothing configured: every lookup resolves to no address.
    return StaticResolver({})


@lru_cache
def get_product_client() -> ProductClient:
    settings = get_settings()
    breaker = make_breaker(
        settings.PRODUCT_SERVICE_NAME,
        fail_max=settings.CB_PRODUCT_FAIL_MAX,
        reset_timeout=settings.CB_PRODUCT_RESET_TIMEOUT,
        exclude=[ProductNotFoundError],
    )
    return ProductClient(
        build_resolver(),
        service_name=settings.PRODUCT_SERVICE_NAME,
        timeout=settings.PRODUCT_SERVICE_TIMEOUT,
        breaker=breaker,
    )
