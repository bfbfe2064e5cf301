"""
Error taxonomy for MiniMart Online

Services raise these; API routers translate them into HTTP responses.
Empty results are never errors.

Author: MiniMart Dev Team
Date: 2026-09-14
"""
from typing import List, Optional


class MiniMartError(Exception):
    """Base class for all application errors"""


class RemoteDataError(MiniMartError):
    """A call to the hosted table store failed (network or backend error)"""


class ValidationError(MiniMartError):
    """Missing or out-of-range field, detected before any remote call"""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = errors or []


class NotFoundError(MiniMartError):
    """A specific record was requested and does not exist"""


class AuthorizationRequired(MiniMartError):
    """The operation needs a signed-in identity"""


class ConfirmationRequired(MiniMartError):
    """A destructive operation was issued without explicit confirmation"""


class InvalidStatusTransition(MiniMartError):
    """A transaction status change not allowed by the transition table"""

    def __init__(self, current: str, requested: str):
        super().__init__(f"Cannot change transaction status from '{current}' to '{requested}'")
        self.current = current
        self.requested = requested


class OutOfStockError(ValidationError):
    """A product with no stock was added to a cart"""
