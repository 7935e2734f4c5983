import logging
from decimal import Decimal

from sqlalchemy.orm import Session

from . import models

logger = logging.getLogger(__name__)


# --- COMMANDS (Write Operations) ---
def create_order(db: Session, product_id: int, quantity: int, total_price: Decimal) -> models.Order:
    db_order = models.Order(product_id=product_id, quantity=quantity, total_price=total_price)
    db.add(db_order)
    db.commit()
    db.refresh(db_order)
    logger.info("Stored order %s for product %s.", db_order.id, product_id)
    return db_order


def delete_order(db: Session, order_id: int) -> bool:
    db_order = get_order(db, order_id)
    if db_order is None:
        return False
    db.delete(db_order)
    db.commit()
    logger.info("Deleted order %s.", order_id)
    return True


# --- QUERIES (Read Operations) ---
def get_order(db: Session, order_id: int) -> models.Order | None:
    return db.query(models.Order).filter(models.Order.id == order_id).first()


def list_orders(db: Session) -> list[models.Order]:
    return db.query(models.Order).order_by(models.Order.id).all()


def count_orders(db: Session) -> int:
    return db.query(models.Order).count()
