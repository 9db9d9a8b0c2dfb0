"""
Database Schemas for the Stylique storefront

Each Pydantic model represents a MongoDB document (collection noted above the
class). Request bodies allow extra fields: the client owns the shape of
reviews, orders and customer profiles, so anything beyond the validated keys
is stored verbatim.
"""
from typing import Annotated, List, Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, WrapValidator


def _keep_submitted(value, handler):
    # Validate the address but store it as sent; lookups match the raw string.
    handler(value)
    return value


SubmittedEmail = Annotated[EmailStr, WrapValidator(_keep_submitted)]


# Aggregates over the products collection
class Bounds(BaseModel):
    min: Optional[float] = None
    max: Optional[float] = None


class FilterStats(BaseModel):
    price: Bounds
    rating: Bounds


# Collection: reviews
class Review(BaseModel):
    model_config = ConfigDict(extra="allow")

    productId: str = Field(..., min_length=1)


# Collection: orders
class CartItem(BaseModel):
    model_config = ConfigDict(extra="allow")

    productId: str = Field(..., min_length=1)
    count: int = Field(..., ge=1)
    name: str


class OrderInfo(BaseModel):
    model_config = ConfigDict(extra="allow")

    email: SubmittedEmail
    cartItems: List[CartItem] = Field(..., min_length=1)
    idempotencyKey: str = Field(..., min_length=1)


# Collection: customers
class Customer(BaseModel):
    model_config = ConfigDict(extra="allow")

    email: SubmittedEmail
