from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class OrderItem(BaseModel):
    product_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=200)
    quantity: int = Field(..., ge=1)
    unit_price: float = Field(..., ge=0)


class CreateOrderRequest(BaseModel):
    """POST /orders"""
    order_number: str = Field(..., min_length=1, max_length=40)
    customer_name: str = Field(..., min_length=1, max_length=200)
    customer_email: Optional[EmailStr] = None
    items: List[OrderItem] = Field(..., min_length=1)
    status: OrderStatus = OrderStatus.PENDING

    @field_validator("order_number", "customer_name", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v


class UpdateOrderRequest(BaseModel):
    """PUT /orders/{id} — status and contact changes; items are fixed once placed."""
    customer_name: Optional[str] = Field(None, min_length=1, max_length=200)
    customer_email: Optional[EmailStr] = None
    status: Optional[OrderStatus] = None
