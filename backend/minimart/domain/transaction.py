"""
Transaction Domain Models

A transaction records one sale: a buyer, a product, a quantity and a unit
price. total_amount is always quantity * unit_price and is computed by
the service, never taken from the caller.

Status changes follow ALLOWED_TRANSITIONS:

    pending    -> processing | completed | cancelled
    processing -> completed | cancelled
    completed  -> cancelled
    cancelled  (terminal)

Author: MiniMart Dev Team
Date: 2026-09-15
"""
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Dict, FrozenSet, Optional

from pydantic import Field

from minimart.domain.base import DomainModel, WriteSchema


class TransactionStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentMethod(str, Enum):
    CASH = "cash"
    GCASH = "gcash"
    CARD = "card"
    BANK_TRANSFER = "bank_transfer"


ALLOWED_TRANSITIONS: Dict[TransactionStatus, FrozenSet[TransactionStatus]] = {
    TransactionStatus.PENDING: frozenset({
        TransactionStatus.PROCESSING,
        TransactionStatus.COMPLETED,
        TransactionStatus.CANCELLED,
    }),
    TransactionStatus.PROCESSING: frozenset({
        TransactionStatus.COMPLETED,
        TransactionStatus.CANCELLED,
    }),
    TransactionStatus.COMPLETED: frozenset({TransactionStatus.CANCELLED}),
    TransactionStatus.CANCELLED: frozenset(),
}


def can_transition(current: str, requested: str) -> bool:
    """
    Check a status change against the transition table

    Re-setting the current status is always allowed (no-op). Unknown
    current values (legacy rows) may only move to cancelled.
    """
    requested_status = TransactionStatus(requested)
    if current == requested_status.value:
        return True
    try:
        current_status = TransactionStatus(current)
    except ValueError:
        return requested_status == TransactionStatus.CANCELLED
    return requested_status in ALLOWED_TRANSITIONS[current_status]


def compute_total(quantity: int, unit_price: Decimal) -> Decimal:
    """quantity * unit_price rounded to centavos"""
    return (Decimal(quantity) * Decimal(unit_price)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


class BuyerSummary(DomainModel):
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class ProductSummary(DomainModel):
    name: Optional[str] = None
    category: Optional[str] = None


class Transaction(DomainModel):
    """
    Transaction domain model

    Fields:
        id: Transaction ID
        buyer_id: Buyer reference
        product_id: Product reference
        quantity: Units sold
        unit_price: Price per unit at time of sale
        total_amount: quantity * unit_price
        status: pending / processing / completed / cancelled
        payment_method: cash / gcash / card / bank_transfer
        notes: Free-text notes
        transaction_date: When the sale happened
        created_at / updated_at: Row timestamps

        # Related data (optional, from joins)
        buyer: Buyer name/email/phone
        product: Product name/category
    """

    id: str = Field(..., description="Transaction ID")
    buyer_id: Optional[str] = Field(None, description="Buyer ID")
    product_id: Optional[str] = Field(None, description="Product ID")
    quantity: int = Field(..., description="Units sold")
    unit_price: Decimal = Field(..., description="Price per unit")
    total_amount: Decimal = Field(..., description="quantity * unit_price")
    status: str = Field(TransactionStatus.PENDING.value, description="Transaction status")
    payment_method: Optional[str] = Field(None, description="Payment method")
    notes: Optional[str] = Field(None, description="Notes")
    transaction_date: Optional[datetime] = Field(None, description="Sale date")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    buyer: Optional[BuyerSummary] = Field(None, description="Buyer (from join)")
    product: Optional[ProductSummary] = Field(None, description="Product (from join)")

    @property
    def is_cancelled(self) -> bool:
        return self.status == TransactionStatus.CANCELLED.value


class TransactionCreate(WriteSchema):
    """Schema for recording a transaction; unit_price defaults to the product price"""
    buyer_id: str = Field(..., min_length=1)
    product_id: str = Field(..., min_length=1)
    quantity: int = Field(1, ge=1)
    unit_price: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    status: TransactionStatus = TransactionStatus.PENDING
    payment_method: PaymentMethod = PaymentMethod.CASH
    notes: str = ""
    transaction_date: Optional[datetime] = None


class TransactionUpdate(WriteSchema):
    """Schema for editing a transaction"""
    buyer_id: Optional[str] = Field(None, min_length=1)
    product_id: Optional[str] = Field(None, min_length=1)
    quantity: Optional[int] = Field(None, ge=1)
    unit_price: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    status: Optional[TransactionStatus] = None
    payment_method: Optional[PaymentMethod] = None
    notes: Optional[str] = None
    transaction_date: Optional[datetime] = None
