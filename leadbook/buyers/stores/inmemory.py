"""In-memory implementation of BuyerStore."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from contextvars import ContextVar
from datetime import datetime
from typing import Any
from uuid import UUID

from leadbook.buyers.models import Buyer, BuyerFilters, HistoryEntry
from leadbook.buyers.store import BuyerStore
from leadbook.db.errors import ConflictError, NotFoundError
from leadbook.utils.time import as_utc


class InMemoryBuyerStore(BuyerStore):
    """In-memory implementation of BuyerStore for testing and development.

    Uses simple dict storage with linear scan for queries. Transactions
    hold a lock and restore the previous state if the block raises.
    Not suitable for production use.
    """

    def __init__(self) -> None:
        self._buyers: dict[UUID, Buyer] = {}
        self._history: dict[UUID, list[HistoryEntry]] = {}
        self._lock = asyncio.Lock()
        self._in_transaction: ContextVar[bool] = ContextVar(
            f"inmemory_buyer_tx_{id(self)}", default=False
        )

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        if self._in_transaction.get():
            yield
            return

        async with self._lock:
            buyers = dict(self._buyers)
            history = {key: list(entries) for key, entries in self._history.items()}
            token = self._in_transaction.set(True)
            try:
                yield
            except BaseException:
                self._buyers = buyers
                self._history = history
                raise
            finally:
                self._in_transaction.reset(token)

    # Buyer operations
    async def get_buyer(self, buyer_id: UUID) -> Buyer | None:
        return self._buyers.get(buyer_id)

    async def create_buyer(self, buyer: Buyer) -> Buyer:
        if buyer.id in self._buyers:
            raise ConflictError(f"Buyer {buyer.id} already exists")
        self._buyers[buyer.id] = buyer
        return buyer

    async def update_buyer(
        self,
        buyer_id: UUID,
        changes: dict[str, Any],
        *,
        expected_updated_at: datetime,
        updated_at: datetime,
    ) -> Buyer:
        current = self._buyers.get(buyer_id)
        if current is None:
            raise NotFoundError(f"Buyer {buyer_id} not found")
        if as_utc(current.updated_at) != as_utc(expected_updated_at):
            raise ConflictError(f"Buyer {buyer_id} changed since last read")

        updated = current.model_copy(update={**changes, "updated_at": updated_at})
        self._buyers[buyer_id] = updated
        return updated

    async def delete_buyer(self, buyer_id: UUID) -> bool:
        if buyer_id not in self._buyers:
            return False
        del self._buyers[buyer_id]
        self._history.pop(buyer_id, None)
        return True

    async def list_buyers(self, filters: BuyerFilters) -> tuple[list[Buyer], int]:
        results = [buyer for buyer in self._buyers.values() if _matches(buyer, filters)]

        reverse = filters.sort_order == "desc"
        if filters.sort_by == "full_name":
            results.sort(key=lambda b: b.full_name.lower(), reverse=reverse)
        elif filters.sort_by == "status":
            results.sort(key=lambda b: b.status.value, reverse=reverse)
        elif filters.sort_by == "updated_at":
            results.sort(key=lambda b: b.updated_at, reverse=reverse)
        else:
            results.sort(key=lambda b: b.created_at, reverse=reverse)

        total = len(results)
        return results[filters.offset:filters.offset + filters.limit], total

    # History operations
    async def append_history(self, entry: HistoryEntry) -> HistoryEntry:
        if entry.buyer_id not in self._buyers:
            raise NotFoundError(f"Buyer {entry.buyer_id} not found")
        self._history.setdefault(entry.buyer_id, []).append(entry)
        return entry

    async def list_history(
        self,
        buyer_id: UUID,
        *,
        limit: int = 100,
    ) -> list[HistoryEntry]:
        # Appends are chronological; reverse for newest first
        entries = list(reversed(self._history.get(buyer_id, [])))
        return entries[:limit]


def _matches(buyer: Buyer, filters: BuyerFilters) -> bool:
    if filters.city is not None and buyer.city != filters.city:
        return False
    if filters.property_type is not None and buyer.property_type != filters.property_type:
        return False
    if filters.status is not None and buyer.status != filters.status:
        return False
    if filters.timeline is not None and buyer.timeline != filters.timeline:
        return False
    if filters.search:
        needle = filters.search.lower()
        haystack = (buyer.full_name, buyer.email or "", buyer.phone)
        if not any(needle in value.lower() for value in haystack):
            return False
    return True
