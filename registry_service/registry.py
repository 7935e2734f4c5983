import logging
import threading
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass, replace

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Instance:
    instance_id: str
    service_name: str
    host: str
    port: int
    scheme: str
    ttl: int
    expires_at: float

    def is_live(self, now: float) -> bool:
        return now < self.expires_at


class ServiceRegistry:
    """In-memory name registry where every instance holds a renewable lease.

    An instance whose lease ran out is invisible to ``resolve`` and is purged
    the next time its service is touched.
    """

    def __init__(self, default_ttl: int = 30, clock: Callable[[], float] = time.monotonic) -> None:
        self.default_ttl = default_ttl
        self._clock = clock
        self._instances: dict[str, dict[str, Instance]] = {}
        self._lock = threading.Lock()

    def register(
        self,
        service_name: str,
        host: str,
        port: int,
        scheme: str = "http",
        ttl: int | None = None,
    ) -> Instance:
        ttl = ttl or self.default_ttl
        instance = Instance(
            instance_id=uuid.uuid4().hex,
            service_name=service_name,
            host=host,
            port=port,
            scheme=scheme,
            ttl=ttl,
            expires_at=self._clock() + ttl,
        )
        with self._lock:
            self._instances.setdefault(service_name, {})[instance.instance_id] = instance
        logger.info("Registered %s at %s:%s as %s", service_name, host, port, instance.instance_id)
        return instance

    def heartbeat(self, service_name: str, instance_id: str) -> Instance | None:
        now = self._clock()
        with self._lock:
            self._purge(service_name, now)
            instance = self._instances.get(service_name, {}).get(instance_id)
            if instance is None:
                return None
            renewed = replace(instance, expires_at=now + instance.ttl)
            self._instances[service_name][instance_id] = renewed
        return renewed

    def deregister(self, service_name: str, instance_id: str) -> bool:
        with self._lock:
            removed = self._instances.get(service_name, {}).pop(instance_id, None)
            if service_name in self._instances and not self._instances[service_name]:
                del self._instances[service_name]
        if removed is not None:
            logger.info("Deregistered %s instance %s", service_name, instance_id)
        return removed is not None

    def resolve(self, service_name: str) -> list[Instance]:
        with self._lock:
            self._purge(service_name, self._clock())
            return list(self._instances.get(service_name, {}).values())

    def services(self) -> dict[str, list[Instance]]:
        now = self._clock()
        with self._lock:
            for name in list(self._instances):
                self._purge(name, now)
            return {name: list(instances.values()) for name, instances in self._instances.items()}

    def _purge(self, service_name: str, now: float) -> None:
        instances = self._instances.get(service_name)
        if not instances:
            return
        for instance_id, instance in list(instances.items()):
            if not instance.is_live(now):
                logger.info("Lease of %s instance %s expired", service_name, instance_id)
                del instances[instance_id]
        if not instances:
            del self._instances[service_name]
