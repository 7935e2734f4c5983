import logging
from functools import lru_cache
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from . import schema
from .config import get_settings
from .registry import ServiceRegistry

logger = logging.getLogger(__name__)


@lru_cache
def get_registry() -> ServiceRegistry:
    return ServiceRegistry(default_ttl=get_settings().DEFAULT_LEASE_TTL)


registry_router = APIRouter(prefix="/services", tags=["Service Registry"])


@registry_router.get("", response_model=dict[str, list[schema.Instance]])
def list_services(
    registry: Annotated[ServiceRegistry, Depends(get_registry)],
) -> dict[str, list[schema.Instance]]:
    return registry.services()


@registry_router.get("/{service_name}", response_model=list[schema.Instance])
def resolve_service(
    service_name: str,
    registry: Annotated[ServiceRegistry, Depends(get_registry)],
) -> list[schema.Instance]:
    instances = registry.resolve(service_name)
    if not instances:
        raise HTTPException(status_code=404, detail=f"No live instance of '{service_name}'")
    return instances


@registry_router.post(
    "/{service_name}/instances",
    response_model=schema.Instance,
    status_code=status.HTTP_201_CREATED,
)
def register_instance(
    service_name: str,
    instance_create: schema.InstanceCreate,
    registry: Annotated[ServiceRegistry, Depends(get_registry)],
) -> schema.Instance:
    ttl = instance_create.ttl
    if ttl is not None:
        ttl = min(ttl, get_settings().MAX_LEASE_TTL)
    return registry.register(
        service_name,
        host=instance_create.host,
        port=instance_create.port,
        scheme=instance_create.scheme,
        ttl=ttl,
    )


@registry_router.put("/{service_name}/instances/{instance_id}/heartbeat", response_model=schema.Instance)
def renew_lease(
    service_name: str,
    instance_id: str,
    registry: Annotated[ServiceRegistry, Depends(get_registry)],
) -> schema.Instance:
    instance = registry.heartbeat(service_name, instance_id)
    if instance is None:
        raise HTTPException(status_code=404, detail="Instance not registered")
    return instance


@registry_router.delete("/{service_name}/instances/{instance_id}")
def deregister_instance(
    service_name: str,
    instance_id: str,
    registry: Annotated[ServiceRegistry, Depends(get_registry)],
) -> dict:
    registry.deregister(service_name, instance_id)
    return {"detail": "Instance deregistered"}


monitoring_router = APIRouter(tags=["Monitoring"])


@monitoring_router.get("/health/ping", status_code=status.HTTP_200_OK)
def health_check() -> dict:
    return {"status": "ok"}
