"""
Transaction Repository - Data Access Layer for Transactions

Listing joins buyer and product summaries so the back-office table and
the export need a single query.

Author: MiniMart Dev Team
Date: 2026-09-15
"""
from typing import Any, Dict, List

from minimart.domain.transaction import Transaction
from minimart.repositories.base import TableRepository


class TransactionRepository(TableRepository[Transaction]):

    table = "transactions"
    model = Transaction
    columns = (
        "*, "
        "buyers:buyer_id (full_name, email, phone), "
        "products:product_id (name, category)"
    )

    def _map_row(self, row: Dict[str, Any]) -> Transaction:
        data = dict(row)
        # Embedded resources come back under their alias
        data['buyer'] = data.pop('buyers', None)
        data['product'] = data.pop('products', None)
        return Transaction.model_validate(data)

    def find_for_stats(self) -> List[Dict[str, Any]]:
        """
        Columns needed to derive buyer aggregates

        Returns:
            Raw rows with buyer_id, total_amount, status
        """
        return self.client.select(self.table, columns="buyer_id, total_amount, status")
