from sqlalchemy import CheckConstraint, Column, Integer, Numeric, String

from .database import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True)
    price = Column(Numeric(12, 2), nullable=False)

    __table_args__ = (CheckConstraint("price >= 0", name="check_price_nonnegative"),)

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', price={self.price})>"
