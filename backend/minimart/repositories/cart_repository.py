"""
Cart Repository - Data Access Layer for cart_items

Every query is scoped to the owning identity: entries are matched on
both id and user_id, never on id alone.

Author: MiniMart Dev Team
Date: 2026-09-15
"""
import logging
from typing import Any, Dict, List, Optional

from minimart.core.database import DataClient
from minimart.domain.cart import CartEntry

logger = logging.getLogger(__name__)


class CartRepository:
    """
    Repository for cart entries

    Returns CartEntry domain models with the product joined in.
    """

    table = "cart_items"
    columns = "id, user_id, product_id, quantity, created_at, products (id, name, price, image_url, category)"

    def __init__(self, client: DataClient):
        self.client = client

    @staticmethod
    def _map_row_to_entry(row: Dict[str, Any]) -> CartEntry:
        """
        Map a cart_items row to CartEntry

        The joined product arrives under 'products' and is None when the
        foreign-key join found nothing.
        """
        data = dict(row)
        product = data.pop('products', None)
        if product is None:
            logger.warning(f"Cart item {data.get('id')} has no resolvable product {data.get('product_id')}")
        data['product'] = product
        return CartEntry.model_validate(data)

    def list_for_user(self, user_id: str) -> List[CartEntry]:
        rows = self.client.select(
            self.table,
            columns=self.columns,
            filters={"user_id": user_id},
            order="created_at",
            desc=True
        )
        return [self._map_row_to_entry(row) for row in rows]

    def find_entry(self, user_id: str, product_id: str) -> Optional[CartEntry]:
        """Entry for (identity, product) or None"""
        rows = self.client.select(
            self.table,
            columns=self.columns,
            filters={"user_id": user_id, "product_id": product_id},
            limit=1
        )
        return self._map_row_to_entry(rows[0]) if rows else None

    def find_by_id(self, entry_id: str, user_id: str) -> Optional[CartEntry]:
        rows = self.client.select(
            self.table,
            columns=self.columns,
            filters={"id": entry_id, "user_id": user_id},
            limit=1
        )
        return self._map_row_to_entry(rows[0]) if rows else None

    def insert_entry(self, user_id: str, product_id: str, quantity: int = 1) -> Optional[CartEntry]:
        """
        Insert a new entry and read it back with the product joined

        Returns:
            The new CartEntry (None only if the read-back found nothing)
        """
        rows = self.client.insert(self.table, {
            "user_id": user_id,
            "product_id": product_id,
            "quantity": quantity
        })
        return self.find_by_id(rows[0]["id"], user_id)

    def set_quantity(self, entry_id: str, user_id: str, quantity: int) -> Optional[Dict[str, Any]]:
        """
        Returns:
            The updated raw row, or None if the entry does not exist for this identity
        """
        rows = self.client.update(
            self.table,
            {"quantity": quantity},
            {"id": entry_id, "user_id": user_id}
        )
        return rows[0] if rows else None

    def delete_entry(self, entry_id: str, user_id: str) -> bool:
        rows = self.client.delete(self.table, {"id": entry_id, "user_id": user_id})
        return len(rows) > 0
