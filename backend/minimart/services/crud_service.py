"""
CRUD Service - one create/read/update/delete flow for any back-office entity

Products, buyers and transactions all use this service with their own
repository and create/update schemas. The flow is the same for each:

1. Validate the fields against the schema (no remote call on failure)
2. Issue the mutation
3. Re-fetch the full list

If step 3 fails the mutation has still happened; the service logs the
error and marks its list as stale instead of raising, so callers can
show the stale state rather than reporting a failed save.

Author: MiniMart Dev Team
Date: 2026-09-16
"""
import logging
from typing import Any, Dict, Generic, List, Mapping, Type

from pydantic import BaseModel, ValidationError as PydanticValidationError

from minimart.core.errors import (
    ConfirmationRequired,
    NotFoundError,
    RemoteDataError,
    ValidationError,
)
from minimart.repositories.base import ModelT, TableRepository

logger = logging.getLogger(__name__)


def format_validation_errors(error: PydanticValidationError) -> List[str]:
    """Flatten pydantic errors into 'field: message' strings"""
    messages = []
    for item in error.errors():
        field = ".".join(str(part) for part in item.get("loc", ())) or "body"
        messages.append(f"{field}: {item.get('msg')}")
    return messages


class CrudService(Generic[ModelT]):
    """
    Generic back-office CRUD flow

    Attributes:
        items: List as of the last successful fetch
        stale: True when the refresh after the last mutation failed
    """

    entity_name = "record"

    def __init__(
        self,
        repository: TableRepository[ModelT],
        create_schema: Type[BaseModel],
        update_schema: Type[BaseModel]
    ):
        self.repository = repository
        self.create_schema = create_schema
        self.update_schema = update_schema
        self.items: List[ModelT] = []
        self.stale = False

    # =========================================================================
    # Validation
    # =========================================================================

    def _validate(self, schema: Type[BaseModel], fields: Mapping[str, Any]) -> BaseModel:
        try:
            return schema.model_validate(dict(fields))
        except PydanticValidationError as e:
            errors = format_validation_errors(e)
            logger.info(f"Rejected {self.entity_name}: {errors}")
            raise ValidationError(
                f"Please fill in all required {self.entity_name} fields with valid values",
                errors=errors
            )

    def prepare_create(self, payload: BaseModel) -> Dict[str, Any]:
        """Row to insert; subclasses add computed columns"""
        return payload.model_dump(mode="json")

    def prepare_update(self, record_id: str, payload: BaseModel) -> Dict[str, Any]:
        """Patch to apply; only fields the caller actually set"""
        return payload.model_dump(mode="json", exclude_unset=True, exclude_none=True)

    # =========================================================================
    # Operations
    # =========================================================================

    def list(self) -> List[ModelT]:
        self.items = self.repository.find_all()
        self.stale = False
        return self.items

    def get(self, record_id: str) -> ModelT:
        record = self.repository.find_by_id(record_id)
        if record is None:
            raise NotFoundError(f"{self.entity_name.capitalize()} {record_id} not found")
        return record

    def create(self, fields: Mapping[str, Any]) -> ModelT:
        payload = self._validate(self.create_schema, fields)
        row = self.prepare_create(payload)

        created = self.repository.create(row)
        logger.info(f"Created {self.entity_name} {created.id}")

        self._refresh_after_mutation()
        return created

    def update(self, record_id: str, fields: Mapping[str, Any]) -> ModelT:
        payload = self._validate(self.update_schema, fields)
        patch = self.prepare_update(record_id, payload)
        if not patch:
            raise ValidationError(f"No {self.entity_name} fields to update")

        updated = self.repository.update(record_id, patch)
        if updated is None:
            raise NotFoundError(f"{self.entity_name.capitalize()} {record_id} not found")
        logger.info(f"Updated {self.entity_name} {record_id}: {sorted(patch)}")

        self._refresh_after_mutation()
        return updated

    def remove(self, record_id: str, confirm: bool = False) -> None:
        """
        Delete a record

        Raises:
            ConfirmationRequired unless confirm is True (no delete is issued)
            NotFoundError if nothing was deleted
        """
        if not confirm:
            raise ConfirmationRequired(f"Deleting {self.entity_name} {record_id} requires confirmation")

        if not self.repository.delete(record_id):
            raise NotFoundError(f"{self.entity_name.capitalize()} {record_id} not found")
        logger.info(f"Deleted {self.entity_name} {record_id}")

        self._refresh_after_mutation()

    def _refresh_after_mutation(self) -> None:
        try:
            self.list()
        except RemoteDataError as e:
            self.stale = True
            logger.warning(f"{self.entity_name.capitalize()} list is stale after mutation: {e}")
