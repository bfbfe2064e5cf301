"""
Products API Endpoints
Public catalog: listing, search and featured products

Author: MiniMart Dev Team
Date: 2026-09-18
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from minimart.api.deps import get_catalog_service, http_error
from minimart.core.errors import MiniMartError
from minimart.services.catalog_service import CatalogService, featured_products, filter_products

router = APIRouter()


@router.get("/")
def get_products(
    search: Optional[str] = Query(None, description="Search name, category or description"),
    catalog: CatalogService = Depends(get_catalog_service)
):
    """
    Get the catalog, newest first, optionally filtered by a search query

    An empty catalog is returned as an empty list, not as an error.
    """
    try:
        products = catalog.fetch_all()
    except MiniMartError as e:
        raise http_error(e)

    matches = filter_products(products, search)
    return {
        "status": "success",
        "total": len(products),
        "count": len(matches),
        "data": [product.to_dict() for product in matches]
    }


@router.get("/featured")
def get_featured_products(
    search: Optional[str] = Query(None, description="Search name, category or description"),
    limit: Optional[int] = Query(None, ge=1, le=100),
    catalog: CatalogService = Depends(get_catalog_service)
):
    """Featured products for the landing and dashboard sections"""
    try:
        products = catalog.fetch_all()
    except MiniMartError as e:
        raise http_error(e)

    featured = featured_products(products, search, limit)
    return {
        "status": "success",
        "count": len(featured),
        "data": [product.to_dict() for product in featured]
    }


@router.get("/{product_id}")
def get_product(product_id: str, catalog: CatalogService = Depends(get_catalog_service)):
    try:
        product = catalog.get(product_id)
    except MiniMartError as e:
        raise http_error(e)
    return {"status": "success", "data": product.to_dict()}
