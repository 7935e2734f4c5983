import logging
import threading

import httpx

logger = logging.getLogger(__name__)

HTTP_NOT_FOUND = 404


class RegistrationAgent:
    """Keeps this instance registered under its service name.

    Registers on ``start``, renews the lease from a daemon thread, registers
    again when the registry no longer knows the instance, and deregisters on
    ``stop``. Registry outages are logged and retried on the next beat.
    """

    def __init__(
        self,
        registry_url: str,
        service_name: str,
        host: str,
        port: int,
        ttl: int = 30,
        interval: float = 10.0,
        client: httpx.Client | None = None,
        timeout: float = 2.0,
    ) -> None:
        self.registry_url = registry_url.rstrip("/")
        self.service_name = service_name
        self.host = host
        self.port = port
        self.ttl = ttl
        self.interval = interval
        self.instance_id: str | None = None
        self._client = client or httpx.Client(timeout=timeout)
        self._stopped = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def _instances_url(self) -> str:
        return f"{self.registry_url}/services/{self.service_name}/instances"

    def register(self) -> str | None:
        try:
            response = self._client.post(
                self._instances_url,
                json={"host": self.host, "port": self.port, "ttl": self.ttl},
            )
            response.raise_for_status()
            instance_id = response.json()["instance_id"]
        except (httpx.RequestError, httpx.HTTPStatusError) as e:
            logger.warning("Could not register '%s' with %s: %s", self.service_name, self.registry_url, e)
            self.instance_id = None
            return None
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Registry at %s sent an unreadable registration: %r", self.registry_url, e)
            self.instance_id = None
            return None
        self.instance_id = str(instance_id)
        logger.info("Registered '%s' as instance %s", self.service_name, self.instance_id)
        return self.instance_id

    def heartbeat(self) -> bool:
        if self.instance_id is None:
            return self.register() is not None
        try:
            response = self._client.put(f"{self._instances_url}/{self.instance_id}/heartbeat")
            if response.status_code == HTTP_NOT_FOUND:
                logger.info("Registry forgot instance %s; registering again.", self.instance_id)
                return self.register() is not None
            response.raise_for_status()
        except (httpx.RequestError, httpx.HTTPStatusError) as e:
            logger.warning("Heartbeat for instance %s failed: %s", self.instance_id, e)
            return False
        return True

    def deregister(self) -> None:
        if self.instance_id is None:
            return
        try:
            self._client.delete(f"{self._instances_url}/{self.instance_id}").raise_for_status()
            logger.info("Deregistered instance %s", self.instance_id)
        except (httpx.RequestError, httpx.HTTPStatusError) as e:
            logger.warning("Could not deregister instance %s: %s", self.instance_id, e)
        finally:
            self.instance_id = None

    def _run(self) -> None:
        while not self._stopped.wait(self.interval):
            self.heartbeat()

    def start(self) -> None:
        self.register()
        self._stopped.clear()
        self._thread = threading.Thread(target=self._run, name="registry-heartbeat", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stopped.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None
        self.deregister()
