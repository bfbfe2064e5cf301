"""
Shared FastAPI dependencies and error translation for the API routers
"""
from typing import Optional

from fastapi import Depends, HTTPException, status
from supabase import Client

from minimart.core.auth import Identity, get_current_user_optional
from minimart.core.database import DataClient, get_data_client, get_supabase
from minimart.core.errors import (
    AuthorizationRequired,
    ConfirmationRequired,
    InvalidStatusTransition,
    MiniMartError,
    NotFoundError,
    RemoteDataError,
    ValidationError,
)
from minimart.repositories import (
    BuyerRepository,
    CartRepository,
    ProductRepository,
    TransactionRepository,
)
from minimart.services.buyer_service import BuyerService
from minimart.services.cart_service import CartSynchronizer
from minimart.services.catalog_service import CatalogService
from minimart.services.product_service import ProductService
from minimart.services.transaction_service import TransactionService


def http_error(error: MiniMartError) -> HTTPException:
    """Translate an application error into the matching HTTPException"""
    if isinstance(error, ValidationError):
        detail = {"message": str(error), "errors": error.errors}
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    if isinstance(error, AuthorizationRequired):
        return HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(error),
            headers={"WWW-Authenticate": "Bearer"}
        )
    if isinstance(error, ConfirmationRequired):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
    if isinstance(error, InvalidStatusTransition):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(error))
    if isinstance(error, RemoteDataError):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(error))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(error))


def get_catalog_service(client: DataClient = Depends(get_data_client)) -> CatalogService:
    return CatalogService(ProductRepository(client))


def get_cart(
    client: DataClient = Depends(get_data_client),
    user: Optional[Identity] = Depends(get_current_user_optional)
) -> CartSynchronizer:
    return CartSynchronizer(CartRepository(client), ProductRepository(client), user)


def get_product_service(client: DataClient = Depends(get_data_client)) -> ProductService:
    return ProductService(ProductRepository(client))


def get_buyer_service(client: DataClient = Depends(get_data_client)) -> BuyerService:
    return BuyerService(BuyerRepository(client), TransactionRepository(client))


def get_transaction_service(client: DataClient = Depends(get_data_client)) -> TransactionService:
    return TransactionService(TransactionRepository(client), ProductRepository(client))


def get_storage_client() -> Client:
    """Service-role Supabase client for Storage uploads"""
    return get_supabase()
