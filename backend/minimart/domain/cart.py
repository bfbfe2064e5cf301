"""
Cart Domain Models

A cart entry pairs one identity with one product and a quantity.

Author: MiniMart Dev Team
Date: 2026-09-14
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from minimart.domain.base import DomainModel


class CartProduct(DomainModel):
    """Product columns joined onto a cart entry"""
    id: str
    name: str
    price: Decimal
    image_url: Optional[str] = None
    category: Optional[str] = None


class CartEntry(DomainModel):
    """
    Cart entry domain model

    product is None when the foreign-key join returned nothing (product
    deleted after it was added to the cart). Such entries count for nothing
    in totals but can still be removed.
    """

    id: str = Field(..., description="Cart entry ID")
    user_id: str = Field(..., description="Owning identity")
    product_id: str = Field(..., description="Product in cart")
    quantity: int = Field(..., description="Units in cart")
    created_at: Optional[datetime] = Field(None, description="When first added")
    product: Optional[CartProduct] = Field(None, description="Joined product (may be missing)")

    @property
    def is_resolved(self) -> bool:
        return self.product is not None

    @property
    def line_total(self) -> Decimal:
        if self.product is None:
            return Decimal("0")
        return self.product.price * self.quantity

    def to_dict(self) -> dict:
        data = super().to_dict()
        data['line_total'] = float(self.line_total)
        return data


class CartSummary(DomainModel):
    """Cart contents with folded totals"""
    entries: List[CartEntry] = Field(default_factory=list)
    total_items: int = 0
    total_price: Decimal = Decimal("0")
    delivery_fee: Decimal = Decimal("0")
    grand_total: Decimal = Decimal("0")

    def to_dict(self) -> dict:
        data = super().to_dict()
        data['entries'] = [entry.to_dict() for entry in self.entries]
        return data
