"""
Buyer Service - back-office buyer management

Buyer aggregates are derived from the transactions table every time the
list is read: total_orders counts non-cancelled transactions and
total_spent sums their total_amount. Nothing writes counter columns.

Author: MiniMart Dev Team
Date: 2026-09-17
"""
import logging
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Tuple

from minimart.domain.buyer import Buyer, BuyerCreate, BuyerUpdate
from minimart.domain.transaction import TransactionStatus
from minimart.repositories.buyer_repository import BuyerRepository
from minimart.repositories.transaction_repository import TransactionRepository
from minimart.services.crud_service import CrudService

logger = logging.getLogger(__name__)


def compute_buyer_stats(rows: Iterable[Dict[str, Any]]) -> Dict[str, Tuple[int, Decimal]]:
    """
    Fold transaction rows into per-buyer (total_orders, total_spent)

    Cancelled transactions and rows without a buyer are ignored.
    """
    stats: Dict[str, Tuple[int, Decimal]] = {}
    for row in rows:
        buyer_id = row.get("buyer_id")
        if not buyer_id or row.get("status") == TransactionStatus.CANCELLED.value:
            continue
        orders, spent = stats.get(buyer_id, (0, Decimal("0")))
        amount = Decimal(str(row.get("total_amount") or 0))
        stats[buyer_id] = (orders + 1, spent + amount)
    return stats


class BuyerService(CrudService[Buyer]):

    entity_name = "buyer"

    def __init__(self, repository: BuyerRepository, transactions: TransactionRepository):
        super().__init__(repository, BuyerCreate, BuyerUpdate)
        self.transactions = transactions

    def _with_stats(self, buyers: List[Buyer]) -> List[Buyer]:
        stats = compute_buyer_stats(self.transactions.find_for_stats())
        enriched = []
        for buyer in buyers:
            orders, spent = stats.get(buyer.id, (0, Decimal("0")))
            enriched.append(buyer.model_copy(update={"total_orders": orders, "total_spent": spent}))
        return enriched

    def list(self) -> List[Buyer]:
        self.items = self._with_stats(self.repository.find_all())
        self.stale = False
        return self.items

    def get(self, record_id: str) -> Buyer:
        return self._with_stats([super().get(record_id)])[0]
