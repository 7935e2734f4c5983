from decimal import Decimal

from sqlalchemy import BigInteger, CheckConstraint, Column, DateTime, Integer
from sqlalchemy.sql import func
from sqlalchemy.types import TypeDecorator

from .database import Base

# Largest amount a BIGINT column holds in cents.
MAX_MONEY = Decimal(2**63 - 1).scaleb(-2)
# Upper bound of a portable INTEGER column.
MAX_INTEGER = 2**31 - 1


class Money(TypeDecorator):
    """Decimal amounts stored as whole cents, exact on every backend."""

    impl = BigInteger
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        cents = Decimal(value).scaleb(2)
        if cents != cents.to_integral_value():
            msg = f"{value} has fractions of a cent"
            raise ValueError(msg)
        return int(cents)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(value).scaleb(-2)


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    # References a product owned by product_service; not a foreign key.
    product_id = Column(Integer, nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    total_price = Column(Money, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        CheckConstraint("quantity > 0", name="check_quantity_positive"),
        CheckConstraint("total_price >= 0", name="check_total_price_nonnegative"),
    )

    def __repr__(self):
        return (
            f"<Order(id={self.id}, product_id={self.product_id}, "
            f"quantity={self.quantity}, total_price={self.total_price})>"
        )
