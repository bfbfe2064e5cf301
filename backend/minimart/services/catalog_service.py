"""
Catalog Service - product listing and free-text search

The storefront fetches the whole catalog once (newest first) and filters
it locally, so search is a pure function over an already-fetched list.

Author: MiniMart Dev Team
Date: 2026-09-16
"""
import logging
from typing import List, Optional

from minimart.core.errors import NotFoundError
from minimart.domain.product import Product
from minimart.repositories.product_repository import ProductRepository

logger = logging.getLogger(__name__)


def _contains(field: Optional[str], needle: str) -> bool:
    return bool(field) and needle in field.lower()


def filter_products(products: List[Product], query: Optional[str]) -> List[Product]:
    """
    Case-insensitive substring search over name, category and description

    An empty or whitespace-only query returns the input list itself.
    Otherwise the matching products are returned in their original order.
    """
    if not query or not query.strip():
        return products

    needle = query.strip().lower()
    return [
        product for product in products
        if _contains(product.name, needle)
        or _contains(product.category, needle)
        or _contains(product.description, needle)
    ]


def featured_products(
    products: List[Product],
    query: Optional[str] = None,
    limit: Optional[int] = None
) -> List[Product]:
    """Featured subset of the (optionally filtered) catalog"""
    featured = [product for product in filter_products(products, query) if product.is_featured]
    if limit is not None:
        featured = featured[:limit]
    return featured


class CatalogService:
    """Read-only access to the catalog"""

    def __init__(self, repository: ProductRepository):
        self.repository = repository

    def fetch_all(self) -> List[Product]:
        """
        All products, newest first

        An empty list is a normal result; a failed fetch raises RemoteDataError.
        """
        products = self.repository.find_all()
        if not products:
            logger.info("Catalog is empty")
        return products

    def search(self, query: Optional[str] = None) -> List[Product]:
        return filter_products(self.fetch_all(), query)

    def featured(self, query: Optional[str] = None, limit: Optional[int] = None) -> List[Product]:
        return featured_products(self.fetch_all(), query, limit)

    def get(self, product_id: str) -> Product:
        product = self.repository.find_by_id(product_id)
        if product is None:
            raise NotFoundError(f"Product {product_id} not found")
        return product
