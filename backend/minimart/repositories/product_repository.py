"""
Product Repository - Data Access Layer for Products

Author: MiniMart Dev Team
Date: 2026-09-15
"""
from typing import List

from minimart.domain.product import Product
from minimart.repositories.base import TableRepository


class ProductRepository(TableRepository[Product]):
    """Catalog rows, newest first"""

    table = "products"
    model = Product
    columns = "id, name, description, price, image_url, category, stock, is_featured, created_at"

    def has_any(self) -> bool:
        """Cheap existence check used by the sample-data setup"""
        return len(self.client.select(self.table, columns="id", limit=1)) > 0

    def insert_many(self, rows: List[dict]) -> List[Product]:
        return [self._map_row(row) for row in self.client.insert(self.table, rows)]
