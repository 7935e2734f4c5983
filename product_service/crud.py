import logging

from sqlalchemy.orm import Session

from . import models, schema

logger = logging.getLogger(__name__)


# --- COMMANDS (Write Operations) ---
def create_product(db: Session, product: schema.ProductCreate) -> models.Product:
    db_product = models.Product(**product.model_dump(exclude_none=True))
    db.add(db_product)
    db.commit()
    db.refresh(db_product)
    logger.info("Created product %s (%s).", db_product.id, db_product.name)
    return db_product


def update_product(db: Session, product_id: int, product: schema.ProductUpdate) -> models.Product | None:
    db_product = get_product(db, product_id)
    if db_product is None:
        return None
    db_product.name = product.name
    db_product.price = product.price
    db.commit()
    db.refresh(db_product)
    logger.info("Updated product %s.", product_id)
    return db_product


def delete_product(db: Session, product_id: int) -> bool:
    db_product = get_product(db, product_id)
    if db_product is None:
        return False
    db.delete(db_product)
    db.commit()
    logger.info("Deleted product %s.", product_id)
    return True


# --- QUERIES (Read Operations) ---
def get_product(db: Session, product_id: int) -> models.Product | None:
    return db.query(models.Product).filter(models.Product.id == product_id).first()


def list_products(db: Session) -> list[models.Product]:
    return db.query(models.Product).order_by(models.Product.id).all()
