"""
Domain Layer - Business Entities

This layer contains Pydantic models representing business entities.
Read models map table rows; *Create / *Update schemas carry the field
bounds that are checked before anything is written.

Author: MiniMart Dev Team
Date: 2026-09-14
"""
from minimart.domain.product import Product, ProductCreate, ProductUpdate
from minimart.domain.cart import CartEntry, CartProduct, CartSummary
from minimart.domain.buyer import Buyer, BuyerCreate, BuyerUpdate, BuyerStatus
from minimart.domain.transaction import (
    Transaction,
    TransactionCreate,
    TransactionUpdate,
    TransactionStatus,
    PaymentMethod,
)

__all__ = [
    'Product', 'ProductCreate', 'ProductUpdate',
    'CartEntry', 'CartProduct', 'CartSummary',
    'Buyer', 'BuyerCreate', 'BuyerUpdate', 'BuyerStatus',
    'Transaction', 'TransactionCreate', 'TransactionUpdate', 'TransactionStatus', 'PaymentMethod',
]
