"""
Table Repository - generic data access over one table

Products, buyers and transactions share the same list/get/create/update/
delete shape, so they share this class and differ only in table name,
selected columns, ordering and row mapping.

Author: MiniMart Dev Team
Date: 2026-09-15
"""
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from minimart.core.database import DataClient
from minimart.domain.base import DomainModel

ModelT = TypeVar("ModelT", bound=DomainModel)


class TableRepository(Generic[ModelT]):
    """
    Repository for one table

    Subclasses set table, model and optionally columns / order_by / order_desc.
    Returns domain models, not raw dictionaries.
    """

    table: str
    model: Type[ModelT]
    columns: str = "*"
    order_by: Optional[str] = "created_at"
    order_desc: bool = True

    def __init__(self, client: DataClient):
        self.client = client

    def _map_row(self, row: Dict[str, Any]) -> ModelT:
        return self.model.model_validate(row)

    def find_all(self) -> List[ModelT]:
        rows = self.client.select(
            self.table,
            columns=self.columns,
            order=self.order_by,
            desc=self.order_desc
        )
        return [self._map_row(row) for row in rows]

    def find_by_id(self, record_id: str) -> Optional[ModelT]:
        """
        Find one record by ID

        Returns:
            Model or None if not found
        """
        rows = self.client.select(self.table, columns=self.columns, filters={"id": record_id}, limit=1)
        if not rows:
            return None
        return self._map_row(rows[0])

    def create(self, fields: Dict[str, Any]) -> ModelT:
        rows = self.client.insert(self.table, fields)
        return self._map_row(rows[0])

    def update(self, record_id: str, patch: Dict[str, Any]) -> Optional[ModelT]:
        """
        Patch one record

        Returns:
            Updated model or None if no row matched
        """
        rows = self.client.update(self.table, patch, {"id": record_id})
        if not rows:
            return None
        return self._map_row(rows[0])

    def delete(self, record_id: str) -> bool:
        """Returns True if a row was deleted"""
        rows = self.client.delete(self.table, {"id": record_id})
        return len(rows) > 0
