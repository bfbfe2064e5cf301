"""
Buyer Domain Model

Buyer profiles managed from the back-office. The aggregate counters
(total_orders, total_spent) are never stored: they are derived from the
transactions table each time buyers are listed.
"""
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import EmailStr, Field

from minimart.domain.base import DomainModel, WriteSchema


class BuyerStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    BLOCKED = "blocked"


class Buyer(DomainModel):
    id: str = Field(..., description="Buyer ID")
    full_name: str = Field(..., description="Buyer full name")
    email: Optional[str] = Field(None, description="Buyer email")
    phone: Optional[str] = Field(None, description="Buyer phone")
    address: Optional[str] = Field(None, description="Delivery address")
    status: str = Field(BuyerStatus.ACTIVE.value, description="active / inactive / blocked")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")

    # Derived from transactions on read
    total_orders: int = Field(0, description="Non-cancelled transactions")
    total_spent: Decimal = Field(Decimal("0"), description="Sum of non-cancelled transaction totals")

    @property
    def is_blocked(self) -> bool:
        return self.status == BuyerStatus.BLOCKED.value


class BuyerCreate(WriteSchema):
    """Schema for creating a buyer"""
    full_name: str = Field(..., min_length=1)
    email: EmailStr
    phone: str = ""
    address: str = ""
    status: BuyerStatus = BuyerStatus.ACTIVE


class BuyerUpdate(WriteSchema):
    """Schema for updating a buyer"""
    full_name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    status: Optional[BuyerStatus] = None
