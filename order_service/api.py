import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import text
from sqlalchemy.orm import Session

from . import crud, placement, schema
from .database import get_db
from .dependencies import get_product_client
from .errors import OrderPlacementError
from .product_client import ProductClient

logger = logging.getLogger(__name__)

order_router = APIRouter(prefix="/orders", tags=["Order Management"])


@order_router.post("", response_model=schema.Order, status_code=status.HTTP_201_CREATED)
def place_order(
    order_create: schema.OrderCreate,
    db: Annotated[Session, Depends(get_db)],
    product_client: Annotated[ProductClient, Depends(get_product_client)],
) -> schema.Order:
    try:
        return placement.place_order(db, product_client, order_create)
    except OrderPlacementError as e:
        raise HTTPException(
            status_code=e.status_code,
            detail=schema.ErrorDetail(code=e.code, message=str(e)).model_dump(),
        ) from e


@order_router.get("", response_model=list[schema.Order])
def retrieve_orders(db: Annotated[Session, Depends(get_db)]) -> list[schema.Order]:
    return crud.list_orders(db)


@order_router.get("/{order_id}", response_model=schema.Order)
def retrieve_order(order_id: int, db: Annotated[Session, Depends(get_db)]) -> schema.Order:
    db_order = crud.get_order(db, order_id=order_id)
    if db_order is None:
        raise HTTPException(status_code=404, detail="Order not found")
    return db_order


@order_router.delete("/{order_id}")
def delete_order(order_id: int, db: Annotated[Session, Depends(get_db)]) -> dict:
    crud.delete_order(db, order_id=order_id)
    return {"detail": "Order deleted"}


monitoring_router = APIRouter(tags=["Monitoring"])


@monitoring_router.get("/health/ping", status_code=status.HTTP_200_OK)
def health_check(db: Annotated[Session, Depends(get_db)]) -> dict:
    try:
        db.execute(text("SELECT 1"))
    except Exception as e:
        logger.exception("Health check failed: Database connection error")
        raise HTTPException(
            status_code=503,
            detail={"status": "error", "database": "disconnected"},
        ) from e
    else:
        return {"status": "ok", "database": "connected"}
