"""
Product schemas.

A product belongs to exactly one category and one brand, referenced by id.
`stock_status` is derived from `stock` on every write and never accepted
from clients.
"""

import re
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class StockStatus(str, Enum):
    IN_STOCK = "in_stock"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"


class _ProductFields(BaseModel):
    @field_validator("name", "description", "category_id", "brand_id", mode="before", check_fields=False)
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("sku", check_fields=False)
    @classmethod
    def validate_sku(cls, v):
        if v is None:
            return v
        v = v.strip()
        if not re.match(r"^[A-Za-z0-9\-_]+$", v):
            raise ValueError("SKU can only contain letters, numbers, hyphens, and underscores")
        return v.upper()


class CreateProductRequest(_ProductFields):
    """POST /products"""

    name: str = Field(..., min_length=1, max_length=200)
    sku: str = Field(..., min_length=1, max_length=50)
    description: Optional[str] = Field(None, max_length=1000)
    price: float = Field(..., ge=0)
    stock: int = Field(0, ge=0)
    category_id: str = Field(..., min_length=1)
    brand_id: str = Field(..., min_length=1)
    image_url: Optional[str] = None
    image_key: Optional[str] = None


class UpdateProductRequest(_ProductFields):
    """PUT /products/{id} — partial update."""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    sku: Optional[str] = Field(None, min_length=1, max_length=50)
    description: Optional[str] = Field(None, max_length=1000)
    price: Optional[float] = Field(None, ge=0)
    stock: Optional[int] = Field(None, ge=0)
    category_id: Optional[str] = Field(None, min_length=1)
    brand_id: Optional[str] = Field(None, min_length=1)
    image_url: Optional[str] = None
    image_key: Optional[str] = None
