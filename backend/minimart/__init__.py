"""
MiniMart Online - Backend API

Storefront catalog and cart synchronization plus the admin back-office
(products, buyers, transactions) on top of a hosted Supabase project.
"""

__version__ = "1.0.0"
