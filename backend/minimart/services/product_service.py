"""
Product Service - back-office product management and first-run sample data
"""
import logging
from typing import List

from minimart.domain.product import Product, ProductCreate, ProductUpdate
from minimart.repositories.product_repository import ProductRepository
from minimart.services.crud_service import CrudService

logger = logging.getLogger(__name__)


SAMPLE_PRODUCTS = [
    {
        "name": "Chicharon",
        "description": "Crispy pork skin snack, a Filipino favorite",
        "price": "25.00",
        "category": "Chips",
        "stock": 50,
        "is_featured": True,
        "image_url": "https://images.unsplash.com/photo-1566478989037-eec170784d0b?w=400"
    },
    {
        "name": "Banana Chips",
        "description": "Sweet and crispy banana chips",
        "price": "15.00",
        "category": "Chips",
        "stock": 75,
        "is_featured": True,
        "image_url": "https://images.unsplash.com/photo-1587132161949-b47d2ad79de8?w=400"
    },
    {
        "name": "Polvoron",
        "description": "Traditional Filipino shortbread confection",
        "price": "35.00",
        "category": "Sweets",
        "stock": 30,
        "is_featured": False,
        "image_url": "https://images.unsplash.com/photo-1578985545062-69928b1d9587?w=400"
    },
    {
        "name": "Dried Mangoes",
        "description": "Sweet dried Philippine mangoes",
        "price": "45.00",
        "category": "Dried Fruits",
        "stock": 40,
        "is_featured": True,
        "image_url": "https://images.unsplash.com/photo-1605027990121-cbae9fc09d5a?w=400"
    },
]


class ProductService(CrudService[Product]):

    entity_name = "product"

    def __init__(self, repository: ProductRepository):
        super().__init__(repository, ProductCreate, ProductUpdate)

    def seed_sample_products(self) -> List[Product]:
        """
        Insert the sample catalog when the store has no products yet

        Returns:
            The inserted products (empty list if the catalog already had products)
        """
        if self.repository.has_any():
            logger.info("Catalog already has products, skipping sample data")
            return []

        rows = [self.prepare_create(self._validate(self.create_schema, sample)) for sample in SAMPLE_PRODUCTS]
        created = self.repository.insert_many(rows)
        logger.info(f"Inserted {len(created)} sample products")

        self._refresh_after_mutation()
        return created
