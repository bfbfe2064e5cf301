"""
Product Domain Model

Represents a sellable product in the MiniMart catalog.

Author: MiniMart Dev Team
Date: 2026-09-14
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field

from minimart.domain.base import DomainModel, WriteSchema


class Product(DomainModel):
    """
    Product domain model - represents a product in our catalog

    Fields:
        id: Product ID (uuid)
        name: Product name
        description: Product description (optional)
        price: Unit price
        image_url: Public image reference (optional)
        category: Product category (Chips, Sweets, Dried Fruits, ...)
        stock: Units in stock
        is_featured: Shown in featured sections
        created_at: When product was created

    Bounds (price > 0, stock >= 0) are enforced on ProductCreate and
    ProductUpdate only. Rows written by other callers are still readable.
    """

    id: str = Field(..., description="Product ID")
    name: str = Field(..., description="Product name")
    description: Optional[str] = Field(None, description="Product description")
    price: Decimal = Field(..., description="Unit price")
    image_url: Optional[str] = Field(None, description="Image URL")
    category: Optional[str] = Field(None, description="Product category")
    stock: int = Field(0, description="Units in stock")
    is_featured: bool = Field(False, description="Whether product is featured")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")

    @property
    def is_out_of_stock(self) -> bool:
        """Check if product is out of stock"""
        return self.stock <= 0

    def to_dict(self) -> dict:
        data = super().to_dict()
        data['is_out_of_stock'] = self.is_out_of_stock
        return data


class ProductCreate(WriteSchema):
    """Schema for creating a new product"""
    name: str = Field(..., min_length=1)
    description: str = ""
    price: Decimal = Field(..., gt=0, decimal_places=2)
    image_url: str = ""
    category: str = Field(..., min_length=1)
    stock: int = Field(..., ge=0)
    is_featured: bool = False


class ProductUpdate(WriteSchema):
    """Schema for updating an existing product"""
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, gt=0, decimal_places=2)
    image_url: Optional[str] = None
    category: Optional[str] = Field(None, min_length=1)
    stock: Optional[int] = Field(None, ge=0)
    is_featured: Optional[bool] = None
