import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from . import crud, schema
from .database import get_db

logger = logging.getLogger(__name__)

product_router = APIRouter(prefix="/products", tags=["Product Catalog"])


@product_router.post("", response_model=schema.Product, status_code=status.HTTP_201_CREATED)
def create_product(
    product_create: schema.ProductCreate,
    db: Annotated[Session, Depends(get_db)],
) -> schema.Product:
    try:
        return crud.create_product(db, product_create)
    except IntegrityError as e:
        db.rollback()
        logger.warning("Rejected product %s: %s", product_create.id, e.orig)
        raise HTTPException(status_code=409, detail="Product id already exists") from e


@product_router.get("", response_model=list[schema.Product])
def retrieve_products(db: Annotated[Session, Depends(get_db)]) -> list[schema.Product]:
    return crud.list_products(db)


@product_router.get("/{product_id}", response_model=schema.Product)
def retrieve_product(product_id: int, db: Annotated[Session, Depends(get_db)]) -> schema.Product:
    db_product = crud.get_product(db, product_id)
    if db_product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return db_product


@product_router.put("/{product_id}", response_model=schema.Product)
def update_product(
    product_id: int,
    product_update: schema.ProductUpdate,
    db: Annotated[Session, Depends(get_db)],
) -> schema.Product:
    db_product = crud.update_product(db, product_id, product_update)
    if db_product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return db_product


@product_router.delete("/{product_id}")
def delete_product(product_id: int, db: Annotated[Session, Depends(get_db)]) -> dict:
    crud.delete_product(db, product_id)
    return {"detail": "Product deleted"}


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
