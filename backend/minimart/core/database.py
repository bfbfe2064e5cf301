"""
Connection to the hosted backend (Supabase)

Every table read and write in MiniMart goes through DataClient, a thin
wrapper over the Supabase client exposing four capabilities:

- select(table, ...) -> rows
- insert(table, row | rows) -> rows
- update(table, patch, match) -> rows
- delete(table, match) -> rows

Any PostgREST or network failure is raised as RemoteDataError so callers
handle one exception type regardless of the transport.

Author: MiniMart Dev Team
Updated: 2026-09-14
"""
import time
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import httpx
from supabase import Client, PostgrestAPIError, create_client

from .config import settings
from .errors import RemoteDataError

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


# ============================================================================
# Supabase Client
# ============================================================================

_supabase: Optional[Client] = None


def get_supabase() -> Client:
    """
    Shared service-role Supabase client, created on first use

    Raises:
        RemoteDataError if SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY are not configured
    """
    global _supabase
    if _supabase is None:
        if not settings.supabase_configured:
            raise RemoteDataError("SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY not configured")
        _supabase = create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)
    return _supabase


def create_auth_client() -> Client:
    """
    New anon-key client for sign-in calls

    Sign-in stores the session on the client, so it must never be the
    shared service-role client.
    """
    if not settings.SUPABASE_URL or not settings.SUPABASE_ANON_KEY:
        raise RemoteDataError("SUPABASE_URL / SUPABASE_ANON_KEY not configured")
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)


# ============================================================================
# Data Client
# ============================================================================

class DataClient:
    """
    Query/mutation interface to the hosted table store

    Filters and matches are equality mappings ({"user_id": uid}).
    Every method returns a list of row dicts (possibly empty).
    """

    def __init__(self, client: Client):
        self._client = client

    def select(
        self,
        table: str,
        columns: str = "*",
        filters: Optional[Mapping[str, Any]] = None,
        order: Optional[str] = None,
        desc: bool = False,
        limit: Optional[int] = None
    ) -> List[Row]:
        query = self._client.table(table).select(columns)
        for column, value in (filters or {}).items():
            query = query.eq(column, value)
        if order:
            query = query.order(order, desc=desc)
        if limit is not None:
            query = query.limit(limit)
        return self._execute(query, "select", table)

    def insert(self, table: str, rows: Union[Row, Sequence[Row]]) -> List[Row]:
        payload = rows if isinstance(rows, dict) else list(rows)
        return self._execute(self._client.table(table).insert(payload), "insert", table)

    def update(self, table: str, patch: Row, match: Mapping[str, Any]) -> List[Row]:
        if not match:
            raise ValueError("update requires a match expression")
        query = self._client.table(table).update(patch)
        for column, value in match.items():
            query = query.eq(column, value)
        return self._execute(query, "update", table)

    def delete(self, table: str, match: Mapping[str, Any]) -> List[Row]:
        if not match:
            raise ValueError("delete requires a match expression")
        query = self._client.table(table).delete()
        for column, value in match.items():
            query = query.eq(column, value)
        return self._execute(query, "delete", table)

    def _execute(self, query, action: str, table: str) -> List[Row]:
        try:
            response = query.execute()
        except PostgrestAPIError as e:
            logger.error(f"{action} on '{table}' rejected by backend: {e.message}")
            raise RemoteDataError(f"Failed to {action} {table}: {e.message}") from e
        except httpx.HTTPError as e:
            logger.error(f"{action} on '{table}' failed: {e}")
            raise RemoteDataError(f"Failed to {action} {table}: {e}") from e
        return response.data or []


def get_data_client() -> DataClient:
    """
    FastAPI dependency that provides the DataClient

    Usage:
        @router.get("/items")
        def read_items(client: DataClient = Depends(get_data_client)):
            ...
    """
    return DataClient(get_supabase())


# ============================================================================
# Connection Check
# ============================================================================

@dataclass
class DatabaseStatus:
    connected: bool
    latency_ms: float
    error: Optional[str] = None


def check_database_connection(client: DataClient, table: str = "products") -> DatabaseStatus:
    """
    Minimal round trip against the table store, used by /health

    Returns:
        DatabaseStatus with latency in milliseconds and the error message if it failed
    """
    start_time = time.time()
    try:
        logger.debug("Testing database connection...")
        client.select(table, columns="id", limit=1)
    except RemoteDataError as e:
        latency_ms = round((time.time() - start_time) * 1000, 2)
        logger.warning(f"Database connection failed ({latency_ms}ms): {e}")
        return DatabaseStatus(connected=False, latency_ms=latency_ms, error=str(e))

    latency_ms = round((time.time() - start_time) * 1000, 2)
    logger.debug(f"Database connection successful ({latency_ms}ms)")
    return DatabaseStatus(connected=True, latency_ms=latency_ms)


def get_optional_data_client() -> Optional[DataClient]:
    """DataClient, or None when Supabase is not configured (for /health)"""
    try:
        return get_data_client()
    except RemoteDataError as e:
        logger.warning(f"Data client unavailable: {e}")
        return None
