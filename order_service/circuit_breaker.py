import logging

from pybreaker import CircuitBreaker, CircuitBreakerListener, CircuitBreakerState

logger = logging.getLogger(__name__)


class MonitoringListener(CircuitBreakerListener):
    def state_change(
        self,
        cb: CircuitBreaker,
        old_state: CircuitBreakerState,
        new_state: CircuitBreakerState,
    ) -> None:
        logger.warning(
            "CircuitBreaker '%s' state changed: '%s' -> '%s'",
            cb.name,
            old_state.name if old_state else None,
            new_state.name,
        )

    def failure(self, cb: CircuitBreaker, exc: BaseException) -> None:
        logger.error(
            "CircuitBreaker '%s' recorded failure (%s). Count: %d",
            cb.name,
            type(exc).__name__,
            cb.fail_counter,
        )


def make_breaker(
    service_name: str,
    fail_max: int,
    reset_timeout: int,
    exclude: list[type[BaseException]] | None = None,
) -> CircuitBreaker:
    breaker = CircuitBreaker(
        fail_max=fail_max,
        reset_timeout=reset_timeout,
        exclude=exclude or [],
        listeners=[MonitoringListener()],
        name=service_name,
    )
    logger.info(
        "Initialized breaker for '%s': fail_max=%s, reset_timeout=%s",
        service_name,
        fail_max,
        reset_timeout,
    )
    return breaker
