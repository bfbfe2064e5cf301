"""
Repository Layer - Data Access

This layer handles all table queries and returns domain models.
Repositories keep the Supabase query details out of business logic.

Author: MiniMart Dev Team
Date: 2026-09-15
"""
from minimart.repositories.base import TableRepository
from minimart.repositories.product_repository import ProductRepository
from minimart.repositories.buyer_repository import BuyerRepository
from minimart.repositories.transaction_repository import TransactionRepository
from minimart.repositories.cart_repository import CartRepository
from minimart.repositories.profile_repository import ProfileRepository

__all__ = [
    'TableRepository',
    'ProductRepository',
    'BuyerRepository',
    'TransactionRepository',
    'CartRepository',
    'ProfileRepository'
]
