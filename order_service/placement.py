"""
    To place an order
    validate the request shape -> reject before any remote call
    fetch the product -> Call product service (resolved by name)
    compute total = quantity * price
    persist the order -> nothing is written unless every step before succeeded

    The same request submitted twice creates two orders; there is no
    idempotency key.
"""

import logging

from prometheus_client import Counter
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import crud, models, schema
from .errors import InvalidOrderRequestError, OrderStoreError, ProductClientError
from .product_client import ProductClient

ORDERS_PLACED_TOTAL = Counter(
    "order_service_orders_placed_total",
    "Total number of orders successfully placed",
)
ORDER_PLACEMENT_FAILURES_TOTAL = Counter(
    "order_service_order_placement_failures_total",
    "Total number of order placements that were rejected or failed",
    ["reason"],
)

logger = logging.getLogger(__name__)


def _validate(request: schema.OrderCreate) -> None:
    for field in ("product_id", "quantity"):
        value = getattr(request, field)
        if not 0 < value <= models.MAX_INTEGER:
            msg = f"{field} must be between 1 and {models.MAX_INTEGER}, got {value}"
            raise InvalidOrderRequestError(msg)


def place_order(db: Session, product_client: ProductClient, request: schema.OrderCreate) -> models.Order:
    try:
        _validate(request)
        product = product_client.get_product(request.product_id)
        total_price = product.price * request.quantity
        if total_price > models.MAX_MONEY:
            msg = f"Order total {total_price} exceeds {models.MAX_MONEY}"
            raise InvalidOrderRequestError(msg)
    except (InvalidOrderRequestError, ProductClientError) as e:
        ORDER_PLACEMENT_FAILURES_TOTAL.labels(reason=e.code).inc()
        logger.warning("Order for product %s rejected: %s (%s)", request.product_id, e, e.code)
        raise

    try:
        db_order = crud.create_order(
            db,
            product_id=request.product_id,
            quantity=request.quantity,
            total_price=total_price,
        )
    except (SQLAlchemyError, OverflowError) as e:
        db.rollback()
        ORDER_PLACEMENT_FAILURES_TOTAL.labels(reason=OrderStoreError.code).inc()
        logger.exception("Failed to store order for product %s: %s", request.product_id, e)
        msg = "Order could not be stored"
        raise OrderStoreError(msg) from e

    ORDERS_PLACED_TOTAL.inc()
    logger.info(
        "Placed order %s: %s x '%s' at %s = %s",
        db_order.id,
        request.quantity,
        product.name,
        product.price,
        db_order.total_price,
    )
    return db_order
