from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, StrictInt
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Order Schemas ---
class OrderCreate(CamelModel):
    # Strict: JSON booleans, floats and numeric strings are rejected.
    # Range checks live in placement so they surface as INVALID_REQUEST.
    product_id: StrictInt
    quantity: StrictInt


class Order(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: int
    quantity: int
    total_price: Decimal


# --- Remote Product Schemas ---
class ProductSnapshot(BaseModel):
    id: int
    name: str
    # Whole cents only, matching how order totals are stored.
    price: Decimal = Field(ge=0, decimal_places=2)


# --- Error Schemas ---
class ErrorDetail(BaseModel):
    code: str
    message: str
