"""
Cart Service - keeps local cart state in step with the remote cart_items rows

CartSynchronizer is bound to one identity (or to none, for anonymous
visitors). It holds the entries last read from the store plus the set of
product ids in the cart, and applies every mutation both remotely and
locally.

add_to_cart is a read-then-write sequence (look up the entry, then either
increment or insert). Mutations for one identity are serialized with a
per-identity lock, so two concurrent adds of the same product produce a
single entry with quantity 2 instead of two entries. The lock is
process-local; across processes the unique (user_id, product_id)
constraint on cart_items is what rejects a duplicate insert.

Author: MiniMart Dev Team
Date: 2026-09-16
"""
import logging
import threading
import weakref
from decimal import Decimal
from typing import List, Optional, Set

from minimart.core.auth import Identity
from minimart.core.config import settings
from minimart.core.errors import AuthorizationRequired, NotFoundError, OutOfStockError
from minimart.domain.cart import CartEntry, CartSummary
from minimart.repositories.cart_repository import CartRepository
from minimart.repositories.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class IdentityLock:
    """Mutex for one identity; weak-referenceable so the registry can drop it"""

    __slots__ = ("_lock", "__weakref__")

    def __init__(self):
        self._lock = threading.Lock()

    def __enter__(self):
        self._lock.acquire()
        return self

    def __exit__(self, exc_type, exc, tb):
        self._lock.release()
        return False


class IdentityLocks:
    """
    Registry of one lock per identity

    Entries are weak: a lock lives only while some caller holds it, so the
    registry stays bounded by the number of identities with a mutation in
    flight.
    """

    def __init__(self):
        self._locks = weakref.WeakValueDictionary()
        self._guard = threading.Lock()

    def __len__(self) -> int:
        return len(self._locks)

    def for_identity(self, user_id: str) -> IdentityLock:
        with self._guard:
            lock = self._locks.get(user_id)
            if lock is None:
                lock = IdentityLock()
                self._locks[user_id] = lock
            return lock


# Shared by every synchronizer in this process
cart_locks = IdentityLocks()


def total_price(entries: List[CartEntry]) -> Decimal:
    """Sum of price * quantity; entries without a resolved product count 0"""
    return sum((entry.line_total for entry in entries if entry.is_resolved), Decimal("0"))


def total_items(entries: List[CartEntry]) -> int:
    """Sum of quantities; entries without a resolved product count 0"""
    return sum(entry.quantity for entry in entries if entry.is_resolved)


class CartSynchronizer:
    """
    Cart state for one identity

    Usage:
        cart = CartSynchronizer(CartRepository(client), ProductRepository(client), identity)
        cart.refresh()
        cart.add_to_cart(product_id)
        cart.summary()
    """

    def __init__(
        self,
        repository: CartRepository,
        products: ProductRepository,
        identity: Optional[Identity],
        locks: IdentityLocks = cart_locks,
        delivery_fee: Decimal = settings.DELIVERY_FEE
    ):
        self.repository = repository
        self.products = products
        self.identity = identity
        self.locks = locks
        self.delivery_fee = delivery_fee
        self.entries: List[CartEntry] = []

    # =========================================================================
    # Local state
    # =========================================================================

    @property
    def product_ids(self) -> Set[str]:
        """Product ids currently in the cart (for 'in cart' badges)"""
        return {entry.product_id for entry in self.entries}

    def _require_identity(self) -> Identity:
        if self.identity is None:
            raise AuthorizationRequired("Please sign in to use the cart")
        return self.identity

    def _replace_local(self, entry: CartEntry) -> None:
        for index, existing in enumerate(self.entries):
            if existing.id == entry.id:
                self.entries[index] = entry
                return
        self.entries.insert(0, entry)

    def _drop_local(self, entry_id: str) -> None:
        self.entries = [entry for entry in self.entries if entry.id != entry_id]

    def _local_entry(self, entry_id: str) -> Optional[CartEntry]:
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        return None

    # =========================================================================
    # Remote sync
    # =========================================================================

    def refresh(self) -> List[CartEntry]:
        """Replace local state with the identity's cart rows; anonymous carts are empty"""
        if self.identity is None:
            self.entries = []
            return self.entries
        self.entries = self.repository.list_for_user(self.identity.id)
        logger.debug(f"Loaded {len(self.entries)} cart entries for {self.identity.email}")
        return self.entries

    def add_to_cart(self, product_id: str) -> CartEntry:
        """
        Add one unit of a product

        Increments the existing entry for (identity, product) or inserts a
        new entry at quantity 1.

        Raises:
            AuthorizationRequired if there is no signed-in identity
            NotFoundError if the product does not exist
            OutOfStockError if the product has no stock
        """
        identity = self._require_identity()

        product = self.products.find_by_id(product_id)
        if product is None:
            raise NotFoundError(f"Product {product_id} not found")
        if product.is_out_of_stock:
            raise OutOfStockError(f"{product.name} is out of stock")

        with self.locks.for_identity(identity.id):
            existing = self.repository.find_entry(identity.id, product_id)
            if existing is not None:
                new_quantity = existing.quantity + 1
                self.repository.set_quantity(existing.id, identity.id, new_quantity)
                entry = existing.model_copy(update={"quantity": new_quantity})
                logger.info(f"Cart {identity.email}: {product_id} quantity -> {new_quantity}")
            else:
                entry = self.repository.insert_entry(identity.id, product_id, quantity=1)
                if entry is None:
                    raise NotFoundError(f"Cart entry for product {product_id} was not readable after insert")
                logger.info(f"Cart {identity.email}: added {product_id}")

        self._replace_local(entry)
        return entry

    def update_quantity(self, entry_id: str, new_quantity: int) -> Optional[CartEntry]:
        """
        Set an entry's quantity; a quantity of 0 or less removes the entry

        Returns:
            The updated entry, or None if it was removed
        """
        if new_quantity <= 0:
            self.remove_item(entry_id)
            return None

        identity = self._require_identity()
        with self.locks.for_identity(identity.id):
            row = self.repository.set_quantity(entry_id, identity.id, new_quantity)
            if row is None:
                raise NotFoundError(f"Cart entry {entry_id} not found")

            local = self._local_entry(entry_id)
            if local is not None:
                entry = local.model_copy(update={"quantity": new_quantity})
            else:
                entry = self.repository.find_by_id(entry_id, identity.id)
                if entry is None:
                    raise NotFoundError(f"Cart entry {entry_id} not found")

        self._replace_local(entry)
        return entry

    def remove_item(self, entry_id: str) -> None:
        identity = self._require_identity()
        with self.locks.for_identity(identity.id):
            deleted = self.repository.delete_entry(entry_id, identity.id)
        if not deleted:
            raise NotFoundError(f"Cart entry {entry_id} not found")
        self._drop_local(entry_id)
        logger.info(f"Cart {identity.email}: removed entry {entry_id}")

    # =========================================================================
    # Totals
    # =========================================================================

    def get_total_price(self) -> Decimal:
        return total_price(self.entries)

    def get_total_items(self) -> int:
        return total_items(self.entries)

    def summary(self) -> CartSummary:
        price = self.get_total_price()
        fee = self.delivery_fee if self.get_total_items() > 0 else Decimal("0")
        return CartSummary(
            entries=list(self.entries),
            total_items=self.get_total_items(),
            total_price=price,
            delivery_fee=fee,
            grand_total=price + fee
        )
