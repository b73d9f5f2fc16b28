"""PostgreSQL implementation of BuyerStore.

Uses asyncpg for async database access. The concurrency check is part
of the UPDATE statement itself (`WHERE id = $1 AND updated_at = $2`),
so no other writer can slip in between the compare and the write.
"""

import json
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from contextvars import ContextVar
from datetime import datetime
from typing import Any
from uuid import UUID

import asyncpg

from leadbook.buyers.enums import BHK, BuyerStatus, City, PropertyType, Purpose, Source, Timeline
from leadbook.buyers.fields import EDITABLE_FIELD_NAMES, plain
from leadbook.buyers.models import Buyer, BuyerFilters, FieldChange, HistoryEntry
from leadbook.buyers.store import BuyerStore
from leadbook.db.errors import ConflictError, ConnectionError, NotFoundError
from leadbook.db.pool import PostgresPool
from leadbook.observability.logging import get_logger

logger = get_logger(__name__)

BUYER_COLUMNS = """
    id, full_name, email, phone, city, property_type, bhk, purpose,
    budget_min, budget_max, timeline, source, status, notes, tags,
    owner_id, created_at, updated_at
"""

SORT_COLUMNS = {
    "created_at": "created_at",
    "updated_at": "updated_at",
    "full_name": "lower(full_name)",
    "status": "status",
}


def escape_like(term: str) -> str:
    """Make a search term match literally inside a LIKE pattern."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class PostgresBuyerStore(BuyerStore):
    """PostgreSQL implementation of BuyerStore.

    Calls made inside `transaction()` share one pooled connection; calls
    outside it acquire their own.
    """

    def __init__(self, pool: PostgresPool) -> None:
        """Initialize with connection pool.

        Args:
            pool: PostgreSQL connection pool
        """
        self._pool = pool
        self._conn: ContextVar[asyncpg.Connection | None] = ContextVar(
            f"postgres_buyer_conn_{id(self)}", default=None
        )

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        current = self._conn.get()
        if current is not None:
            # Nested block becomes a savepoint
            async with current.transaction():
                yield
            return

        async with self._pool.acquire() as conn:
            token = self._conn.set(conn)
            try:
                async with conn.transaction():
                    yield
            finally:
                self._conn.reset(token)

    @asynccontextmanager
    async def _connection(self) -> AsyncIterator[asyncpg.Connection]:
        current = self._conn.get()
        if current is not None:
            yield current
            return
        async with self._pool.acquire() as conn:
            yield conn

    # Buyer operations
    async def get_buyer(self, buyer_id: UUID) -> Buyer | None:
        try:
            async with self._connection() as conn:
                row = await conn.fetchrow(
                    f"SELECT {BUYER_COLUMNS} FROM buyers WHERE id = $1",
                    buyer_id,
                )
        except Exception as e:
            logger.error("postgres_get_buyer_error", buyer_id=str(buyer_id), error=str(e))
            raise ConnectionError(f"Failed to get buyer: {e}", cause=e) from e
        return self._row_to_buyer(row) if row else None

    async def create_buyer(self, buyer: Buyer) -> Buyer:
        try:
            async with self._connection() as conn:
                row = await conn.fetchrow(
                    f"""
                    INSERT INTO buyers (
                        id, full_name, email, phone, city, property_type, bhk,
                        purpose, budget_min, budget_max, timeline, source, status,
                        notes, tags, owner_id, created_at, updated_at
                    ) VALUES (
                        $1, $2, $3, $4, $5, $6, $7, $8, $9, $10,
                        $11, $12, $13, $14, $15, $16, $17, $18
                    )
                    RETURNING {BUYER_COLUMNS}
                    """,
                    buyer.id,
                    buyer.full_name,
                    buyer.email,
                    buyer.phone,
                    buyer.city.value,
                    buyer.property_type.value,
                    plain(buyer.bhk),
                    buyer.purpose.value,
                    buyer.budget_min,
                    buyer.budget_max,
                    buyer.timeline.value,
                    buyer.source.value,
                    buyer.status.value,
                    buyer.notes,
                    buyer.tags,
                    buyer.owner_id,
                    buyer.created_at,
                    buyer.updated_at,
                )
        except asyncpg.UniqueViolationError as e:
            raise ConflictError(f"Buyer {buyer.id} already exists", cause=e) from e
        except Exception as e:
            logger.error("postgres_create_buyer_error", buyer_id=str(buyer.id), error=str(e))
            raise ConnectionError(f"Failed to create buyer: {e}", cause=e) from e
        logger.debug("buyer_row_inserted", buyer_id=str(buyer.id))
        return self._row_to_buyer(row)

    async def update_buyer(
        self,
        buyer_id: UUID,
        changes: dict[str, Any],
        *,
        expected_updated_at: datetime,
        updated_at: datetime,
    ) -> Buyer:
        unknown = set(changes) - EDITABLE_FIELD_NAMES
        if unknown:
            raise ValueError(f"Not editable: {sorted(unknown)}")

        # Column names come from the fixed editable field table only
        columns = sorted(changes)
        params: list[Any] = [buyer_id, expected_updated_at, updated_at]
        assignments = ["updated_at = $3"]
        for column in columns:
            params.append(plain(changes[column]))
            assignments.append(f"{column} = ${len(params)}")

        exists = True
        try:
            async with self._connection() as conn:
                row = await conn.fetchrow(
                    f"""
                    UPDATE buyers
                    SET {", ".join(assignments)}
                    WHERE id = $1 AND updated_at = $2
                    RETURNING {BUYER_COLUMNS}
                    """,
                    *params,
                )
                if row is None:
                    exists = await conn.fetchval(
                        "SELECT EXISTS (SELECT 1 FROM buyers WHERE id = $1)",
                        buyer_id,
                    )
        except Exception as e:
            logger.error("postgres_update_buyer_error", buyer_id=str(buyer_id), error=str(e))
            raise ConnectionError(f"Failed to update buyer: {e}", cause=e) from e

        if row is None:
            if not exists:
                raise NotFoundError(f"Buyer {buyer_id} not found")
            raise ConflictError(f"Buyer {buyer_id} changed since last read")
        return self._row_to_buyer(row)

    async def delete_buyer(self, buyer_id: UUID) -> bool:
        try:
            async with self._connection() as conn:
                # buyer_history rows go with it (ON DELETE CASCADE)
                result = await conn.execute("DELETE FROM buyers WHERE id = $1", buyer_id)
        except Exception as e:
            logger.error("postgres_delete_buyer_error", buyer_id=str(buyer_id), error=str(e))
            raise ConnectionError(f"Failed to delete buyer: {e}", cause=e) from e
        return result == "DELETE 1"

    async def list_buyers(self, filters: BuyerFilters) -> tuple[list[Buyer], int]:
        conditions: list[str] = []
        params: list[Any] = []

        for column, value in (
            ("city", filters.city),
            ("property_type", filters.property_type),
            ("status", filters.status),
            ("timeline", filters.timeline),
        ):
            if value is not None:
                params.append(value.value)
                conditions.append(f"{column} = ${len(params)}")

        if filters.search:
            params.append(f"%{escape_like(filters.search)}%")
            n = len(params)
            conditions.append(
                f"(full_name ILIKE ${n} ESCAPE '\\'"
                f" OR email ILIKE ${n} ESCAPE '\\'"
                f" OR phone ILIKE ${n} ESCAPE '\\')"
            )

        where = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        order = f"{SORT_COLUMNS[filters.sort_by]} {filters.sort_order.upper()}, id"

        try:
            async with self._connection() as conn:
                total = await conn.fetchval(f"SELECT count(*) FROM buyers {where}", *params)
                rows = await conn.fetch(
                    f"""
                    SELECT {BUYER_COLUMNS} FROM buyers {where}
                    ORDER BY {order}
                    LIMIT ${len(params) + 1} OFFSET ${len(params) + 2}
                    """,
                    *params,
                    filters.limit,
                    filters.offset,
                )
        except Exception as e:
            logger.error("postgres_list_buyers_error", error=str(e))
            raise ConnectionError(f"Failed to list buyers: {e}", cause=e) from e
        return [self._row_to_buyer(row) for row in rows], total

    # History operations
    async def append_history(self, entry: HistoryEntry) -> HistoryEntry:
        try:
            async with self._connection() as conn:
                await conn.execute(
                    """
                    INSERT INTO buyer_history (id, buyer_id, changed_by, changed_at, diff)
                    VALUES ($1, $2, $3, $4, $5)
                    """,
                    entry.id,
                    entry.buyer_id,
                    entry.changed_by,
                    entry.changed_at,
                    json.dumps({name: change.model_dump() for name, change in entry.diff.items()}),
                )
        except asyncpg.ForeignKeyViolationError as e:
            raise NotFoundError(f"Buyer {entry.buyer_id} not found", cause=e) from e
        except Exception as e:
            logger.error(
                "postgres_append_history_error",
                buyer_id=str(entry.buyer_id),
                error=str(e),
            )
            raise ConnectionError(f"Failed to append history: {e}", cause=e) from e
        return entry

    async def list_history(
        self,
        buyer_id: UUID,
        *,
        limit: int = 100,
    ) -> list[HistoryEntry]:
        try:
            async with self._connection() as conn:
                rows = await conn.fetch(
                    """
                    SELECT id, buyer_id, changed_by, changed_at, diff
                    FROM buyer_history
                    WHERE buyer_id = $1
                    ORDER BY changed_at DESC, id
                    LIMIT $2
                    """,
                    buyer_id,
                    limit,
                )
        except Exception as e:
            logger.error("postgres_list_history_error", buyer_id=str(buyer_id), error=str(e))
            raise ConnectionError(f"Failed to list history: {e}", cause=e) from e
        return [self._row_to_entry(row) for row in rows]

    def _row_to_buyer(self, row: asyncpg.Record) -> Buyer:
        return Buyer(
            id=row["id"],
            full_name=row["full_name"],
            email=row["email"],
            phone=row["phone"],
            city=City(row["city"]),
            property_type=PropertyType(row["property_type"]),
            bhk=BHK(row["bhk"]) if row["bhk"] else None,
            purpose=Purpose(row["purpose"]),
            budget_min=row["budget_min"],
            budget_max=row["budget_max"],
            timeline=Timeline(row["timeline"]),
            source=Source(row["source"]),
            status=BuyerStatus(row["status"]),
            notes=row["notes"],
            tags=list(row["tags"] or []),
            owner_id=row["owner_id"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def _row_to_entry(self, row: asyncpg.Record) -> HistoryEntry:
        diff = row["diff"]
        if isinstance(diff, str):
            diff = json.loads(diff)
        return HistoryEntry(
            id=row["id"],
            buyer_id=row["buyer_id"],
            changed_by=row["changed_by"],
            changed_at=row["changed_at"],
            diff={name: FieldChange(**change) for name, change in diff.items()},
        )
