"""
Transaction Service - back-office sales records

On top of the generic CRUD flow:
- total_amount is recomputed from quantity and unit_price on every write
- unit_price defaults to the product's current price on create
- status changes are checked against the transition table

Author: MiniMart Dev Team
Date: 2026-09-17
"""
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict

from pydantic import BaseModel

from minimart.core.errors import InvalidStatusTransition, NotFoundError
from minimart.domain.transaction import (
    Transaction,
    TransactionCreate,
    TransactionUpdate,
    can_transition,
    compute_total,
)
from minimart.repositories.product_repository import ProductRepository
from minimart.repositories.transaction_repository import TransactionRepository
from minimart.services.crud_service import CrudService

logger = logging.getLogger(__name__)


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class TransactionService(CrudService[Transaction]):

    entity_name = "transaction"

    def __init__(self, repository: TransactionRepository, products: ProductRepository):
        super().__init__(repository, TransactionCreate, TransactionUpdate)
        self.products = products

    def _product_price(self, product_id: str) -> Decimal:
        product = self.products.find_by_id(product_id)
        if product is None:
            raise NotFoundError(f"Product {product_id} not found")
        return product.price

    def prepare_create(self, payload: TransactionCreate) -> Dict[str, Any]:
        unit_price = payload.unit_price
        if unit_price is None:
            unit_price = self._product_price(payload.product_id)

        row = payload.model_dump(mode="json")
        row["unit_price"] = str(unit_price)
        row["total_amount"] = str(compute_total(payload.quantity, unit_price))
        row["transaction_date"] = row.get("transaction_date") or now_iso()
        return row

    def prepare_update(self, record_id: str, payload: BaseModel) -> Dict[str, Any]:
        patch = super().prepare_update(record_id, payload)
        if not patch:
            return patch

        current = self.get(record_id)

        requested_status = patch.get("status")
        if requested_status is not None and not can_transition(current.status, requested_status):
            logger.info(f"Rejected status change {current.status} -> {requested_status} on {record_id}")
            raise InvalidStatusTransition(current.status, requested_status)

        quantity = payload.quantity if payload.quantity is not None else current.quantity
        if payload.unit_price is not None:
            unit_price = payload.unit_price
        elif payload.product_id is not None and payload.product_id != current.product_id:
            # A new product brings its own current price
            unit_price = self._product_price(payload.product_id)
            patch["unit_price"] = str(unit_price)
        else:
            unit_price = current.unit_price
        patch["total_amount"] = str(compute_total(quantity, unit_price))
        patch["updated_at"] = now_iso()
        return patch
