"""
Admin API Endpoints
Back-office management of products, buyers and transactions

Every route requires the admin role. Products, buyers and transactions
share one CRUD route set (list / get / create / update / delete); deletes
must be confirmed with ?confirm=true. After each mutation the response
carries the re-fetched list, flagged stale when that refresh failed.

Author: MiniMart Dev Team
Date: 2026-09-19
"""
import logging
from typing import Any, Callable, Dict

from fastapi import APIRouter, Body, Depends, File, Query, UploadFile
from fastapi.responses import Response, StreamingResponse

from minimart.api.deps import (
    get_buyer_service,
    get_product_service,
    get_storage_client,
    get_transaction_service,
    http_error,
)
from minimart.core.auth import Identity, require_admin
from minimart.core.errors import MiniMartError
from minimart.services.crud_service import CrudService
from minimart.services.export_service import (
    export_filename,
    export_transactions_csv,
    export_transactions_xlsx,
)
from minimart.services.image_service import upload_product_image
from minimart.services.product_service import ProductService
from minimart.services.transaction_service import TransactionService

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_admin)])


def mutation_payload(service: CrudService, record=None) -> dict:
    return {
        "status": "success",
        "data": record.to_dict() if record is not None else None,
        "stale": service.stale,
        "count": len(service.items),
        "items": [item.to_dict() for item in service.items]
    }


def build_crud_router(service_dependency: Callable[..., CrudService]) -> APIRouter:
    """Standard list / get / create / update / delete routes for one entity"""
    crud = APIRouter()

    @crud.get("/")
    def list_records(service: CrudService = Depends(service_dependency)):
        try:
            records = service.list()
        except MiniMartError as e:
            raise http_error(e)
        return {
            "status": "success",
            "count": len(records),
            "data": [record.to_dict() for record in records]
        }

    @crud.get("/{record_id}")
    def get_record(record_id: str, service: CrudService = Depends(service_dependency)):
        try:
            record = service.get(record_id)
        except MiniMartError as e:
            raise http_error(e)
        return {"status": "success", "data": record.to_dict()}

    @crud.post("/", status_code=201)
    def create_record(
        fields: Dict[str, Any] = Body(...),
        user: Identity = Depends(require_admin),
        service: CrudService = Depends(service_dependency)
    ):
        try:
            record = service.create(fields)
        except MiniMartError as e:
            raise http_error(e)
        logger.info(f"{user.email} created {service.entity_name} {record.id}")
        return mutation_payload(service, record)

    @crud.patch("/{record_id}")
    def update_record(
        record_id: str,
        fields: Dict[str, Any] = Body(...),
        service: CrudService = Depends(service_dependency)
    ):
        try:
            record = service.update(record_id, fields)
        except MiniMartError as e:
            raise http_error(e)
        return mutation_payload(service, record)

    @crud.delete("/{record_id}")
    def delete_record(
        record_id: str,
        confirm: bool = Query(False, description="Must be true to delete"),
        user: Identity = Depends(require_admin),
        service: CrudService = Depends(service_dependency)
    ):
        try:
            service.remove(record_id, confirm=confirm)
        except MiniMartError as e:
            raise http_error(e)
        logger.info(f"{user.email} deleted {service.entity_name} {record_id}")
        return mutation_payload(service)

    return crud


# Fixed paths are registered before the /{record_id} routes below

@router.get("/transactions/export")
def export_transactions(
    file_format: str = Query("csv", alias="format", pattern="^(csv|xlsx)$", description="csv or xlsx"),
    service: TransactionService = Depends(get_transaction_service)
):
    """
    Download every transaction with buyer and product names

    Returns:
        transactions_YYYY-MM-DD.csv or .xlsx
    """
    try:
        transactions = service.list()
    except MiniMartError as e:
        raise http_error(e)

    filename = export_filename(file_format)
    headers = {"Content-Disposition": f"attachment; filename={filename}"}

    if file_format == "xlsx":
        return StreamingResponse(
            export_transactions_xlsx(transactions),
            media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            headers=headers
        )
    return Response(
        content=export_transactions_csv(transactions),
        media_type="text/csv; charset=utf-8",
        headers=headers
    )


@router.post("/products/images", status_code=201)
def upload_image(file: UploadFile = File(...), storage=Depends(get_storage_client)):
    """
    Upload a product image to Storage

    Returns:
        The public URL to save as the product's image_url
    """
    try:
        image_url = upload_product_image(storage, file.filename, file.file.read(), file.content_type)
    except MiniMartError as e:
        raise http_error(e)
    return {"status": "success", "data": {"image_url": image_url}}


@router.post("/setup/sample-products")
def seed_sample_products(service: ProductService = Depends(get_product_service)):
    """Insert the sample catalog; does nothing if any product already exists"""
    try:
        created = service.seed_sample_products()
    except MiniMartError as e:
        raise http_error(e)

    if not created:
        return {"status": "success", "message": "Products already exist", "count": 0, "data": []}
    return {
        "status": "success",
        "message": f"Added {len(created)} sample products",
        "count": len(created),
        "data": [product.to_dict() for product in created]
    }


router.include_router(build_crud_router(get_product_service), prefix="/products")
router.include_router(build_crud_router(get_buyer_service), prefix="/buyers")
router.include_router(build_crud_router(get_transaction_service), prefix="/transactions")
