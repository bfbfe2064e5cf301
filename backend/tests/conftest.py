"""
Pytest fixtures and configuration for MiniMart Online backend tests

FakeDataClient stands in for the hosted table store so repositories,
services and routes run without a Supabase project. It keeps rows in
memory, understands the embedded-resource column syntax used by the
repositories, and records every call so tests can assert that nothing
was written.

Author: MiniMart Dev Team
Date: 2026-09-20
"""
import itertools
import re
import threading
import time
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from dotenv import load_dotenv
from jose import jwt

from minimart.core.auth import Identity
from minimart.core.database import DataClient
from minimart.core.errors import RemoteDataError

# Load environment variables for tests
load_dotenv()

TEST_JWT_SECRET = "test-secret"

# products (id, name) | buyers:buyer_id (full_name, email)
EMBED_PATTERN = re.compile(r"(\w+)(?::(\w+))?\s*\(([^)]*)\)")

# Later than every fixture row, so inserted rows sort as newest
BASE_TIME = datetime(2030, 1, 1, tzinfo=timezone.utc)


class FakeDataClient(DataClient):
    """
    In-memory DataClient

    Args:
        tables: Initial rows per table
        fail_on: Actions ("select") or (action, table) pairs that raise RemoteDataError
        select_delay: Seconds to sleep inside select (widens race windows)
        unique: Column tuples that must be unique per table
    """

    def __init__(self, tables=None, fail_on=None, select_delay=0.0, unique=None):
        super().__init__(client=None)
        self.tables = {name: [dict(row) for row in rows] for name, rows in (tables or {}).items()}
        self.fail_on = set(fail_on or ())
        self.select_delay = select_delay
        self.unique = unique if unique is not None else {"cart_items": ("user_id", "product_id")}
        self.calls = []
        self._lock = threading.Lock()
        self._clock = itertools.count(1)

    # -- helpers ------------------------------------------------------------

    def _record(self, action, table):
        self.calls.append((action, table))
        if action in self.fail_on or (action, table) in self.fail_on:
            raise RemoteDataError(f"Failed to {action} {table}: simulated outage")

    def calls_for(self, action):
        return [table for recorded, table in self.calls if recorded == action]

    @property
    def writes(self):
        return [call for call in self.calls if call[0] in ("insert", "update", "delete")]

    @staticmethod
    def _matches(row, match):
        return all(row.get(column) == value for column, value in (match or {}).items())

    def _project(self, row, columns):
        plain = [c.strip() for c in EMBED_PATTERN.sub("", columns).split(",") if c.strip()]
        result = dict(row) if "*" in plain else {c: row.get(c) for c in plain}

        for name, fk, embedded in EMBED_PATTERN.findall(columns):
            fk = fk or name[:-1] + "_id"
            wanted = [c.strip() for c in embedded.split(",") if c.strip()]
            target = next(
                (other for other in self.tables.get(name, []) if other.get("id") == row.get(fk)),
                None
            )
            result[name] = {c: target.get(c) for c in wanted} if target else None
        return result

    # -- DataClient ---------------------------------------------------------

    def select(self, table, columns="*", filters=None, order=None, desc=False, limit=None):
        self._record("select", table)
        if self.select_delay:
            time.sleep(self.select_delay)
        with self._lock:
            rows = [dict(row) for row in self.tables.get(table, []) if self._matches(row, filters)]
            if order:
                rows.sort(key=lambda row: str(row.get(order) or ""), reverse=desc)
            if limit is not None:
                rows = rows[:limit]
            return [self._project(row, columns) for row in rows]

    def insert(self, table, rows):
        self._record("insert", table)
        payload = [rows] if isinstance(rows, dict) else list(rows)
        inserted = []
        with self._lock:
            existing = self.tables.setdefault(table, [])
            for row in payload:
                row = dict(row)
                row.setdefault("id", str(uuid.uuid4()))
                row.setdefault("created_at", (BASE_TIME + timedelta(seconds=next(self._clock))).isoformat())
                unique = self.unique.get(table)
                if unique and any(all(other.get(c) == row.get(c) for c in unique) for other in existing):
                    raise RemoteDataError(f"Failed to insert {table}: duplicate key value violates unique constraint")
                existing.append(row)
                inserted.append(dict(row))
        return inserted

    def update(self, table, patch, match):
        if not match:
            raise ValueError("update requires a match expression")
        self._record("update", table)
        with self._lock:
            updated = []
            for row in self.tables.get(table, []):
                if self._matches(row, match):
                    row.update(patch)
                    updated.append(dict(row))
            return updated

    def delete(self, table, match):
        if not match:
            raise ValueError("delete requires a match expression")
        self._record("delete", table)
        with self._lock:
            rows = self.tables.get(table, [])
            removed = [dict(row) for row in rows if self._matches(row, match)]
            self.tables[table] = [row for row in rows if not self._matches(row, match)]
            return removed


def make_token(user_id="user-1", email="juan@example.com", role="user", secret=TEST_JWT_SECRET, expires_in=3600):
    """Access token shaped like the ones Supabase Auth issues"""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "email": email,
        "aud": "authenticated",
        "role": "authenticated",
        "app_metadata": {"provider": "email", "role": role},
        "user_metadata": {"full_name": "Juan dela Cruz"},
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(seconds=expires_in)).timestamp()),
    }
    return jwt.encode(payload, secret, algorithm="HS256")


@pytest.fixture
def product_rows():
    """
    Three catalog rows, oldest first: Chicharon, Banana Chips, Polvoron
    """
    return [
        {
            "id": "p-chicharon",
            "name": "Chicharon",
            "description": "Crispy pork skin snack",
            "price": "25.00",
            "image_url": "",
            "category": "Chips",
            "stock": 50,
            "is_featured": True,
            "created_at": "2026-09-01T08:00:00+00:00"
        },
        {
            "id": "p-banana",
            "name": "Banana Chips",
            "description": "Sweet and crispy",
            "price": "15.00",
            "image_url": "",
            "category": "Chips",
            "stock": 0,
            "is_featured": True,
            "created_at": "2026-09-02T08:00:00+00:00"
        },
        {
            "id": "p-polvoron",
            "name": "Polvoron",
            "description": "Traditional shortbread",
            "price": "35.00",
            "image_url": "",
            "category": "Sweets",
            "stock": 30,
            "is_featured": False,
            "created_at": "2026-09-03T08:00:00+00:00"
        },
    ]


@pytest.fixture
def buyer_rows():
    return [
        {
            "id": "b-maria",
            "full_name": "Maria Santos",
            "email": "maria@example.com",
            "phone": "09171234567",
            "address": "Quezon City",
            "status": "active",
            "created_at": "2026-09-01T09:00:00+00:00"
        },
        {
            "id": "b-jose",
            "full_name": "Jose Rizal",
            "email": "jose@example.com",
            "phone": "",
            "address": "Calamba",
            "status": "active",
            "created_at": "2026-09-02T09:00:00+00:00"
        },
    ]


@pytest.fixture
def transaction_rows():
    return [
        {
            "id": "t-1",
            "buyer_id": "b-maria",
            "product_id": "p-chicharon",
            "quantity": 2,
            "unit_price": "25.00",
            "total_amount": "50.00",
            "status": "completed",
            "payment_method": "cash",
            "notes": "",
            "transaction_date": "2026-09-05T10:00:00+00:00",
            "created_at": "2026-09-05T10:00:00+00:00"
        },
        {
            "id": "t-2",
            "buyer_id": "b-maria",
            "product_id": "p-polvoron",
            "quantity": 1,
            "unit_price": "35.00",
            "total_amount": "35.00",
            "status": "pending",
            "payment_method": "gcash",
            "notes": "",
            "transaction_date": "2026-09-06T10:00:00+00:00",
            "created_at": "2026-09-06T10:00:00+00:00"
        },
        {
            "id": "t-3",
            "buyer_id": "b-maria",
            "product_id": "p-banana",
            "quantity": 4,
            "unit_price": "15.00",
            "total_amount": "60.00",
            "status": "cancelled",
            "payment_method": "cash",
            "notes": "",
            "transaction_date": "2026-09-07T10:00:00+00:00",
            "created_at": "2026-09-07T10:00:00+00:00"
        },
    ]


@pytest.fixture
def data_client(product_rows, buyer_rows, transaction_rows):
    """Store seeded with products, buyers and transactions; empty cart"""
    return FakeDataClient(tables={
        "products": product_rows,
        "buyers": buyer_rows,
        "transactions": transaction_rows,
        "cart_items": [],
        "profiles": [],
    })


@pytest.fixture
def identity():
    return Identity(id="user-1", email="juan@example.com", name="Juan dela Cruz", role="user")


@pytest.fixture
def other_identity():
    return Identity(id="user-2", email="ana@example.com", name="Ana Reyes", role="user")


@pytest.fixture
def fake_client_factory():
    """FakeDataClient class, for tests that need a custom store"""
    return FakeDataClient


@pytest.fixture
def token_factory():
    return make_token


@pytest.fixture
def jwt_secret():
    return TEST_JWT_SECRET
