"""BuyerStore abstract interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from datetime import datetime
from typing import Any
from uuid import UUID

from leadbook.buyers.models import Buyer, BuyerFilters, HistoryEntry


class BuyerStore(ABC):
    """Abstract interface for buyer lead storage.

    Manages buyer records and their append-only history. Writes to a
    buyer are conditional on its concurrency token so that the check
    and the write are a single atomic step in the backend.
    """

    @abstractmethod
    def transaction(self) -> AbstractAsyncContextManager[None]:
        """Group the calls made inside the block into one atomic unit.

        Nested use joins the outer transaction.
        """
        pass

    # Buyer operations
    @abstractmethod
    async def get_buyer(self, buyer_id: UUID) -> Buyer | None:
        """Get a buyer by ID."""
        pass

    @abstractmethod
    async def create_buyer(self, buyer: Buyer) -> Buyer:
        """Insert a new buyer."""
        pass

    @abstractmethod
    async def update_buyer(
        self,
        buyer_id: UUID,
        changes: dict[str, Any],
        *,
        expected_updated_at: datetime,
        updated_at: datetime,
    ) -> Buyer:
        """Apply changes if the stored token still equals expected_updated_at.

        Raises:
            NotFoundError: If the buyer does not exist
            ConflictError: If the stored token differs
        """
        pass

    @abstractmethod
    async def delete_buyer(self, buyer_id: UUID) -> bool:
        """Delete a buyer and, by cascade, its history."""
        pass

    @abstractmethod
    async def list_buyers(self, filters: BuyerFilters) -> tuple[list[Buyer], int]:
        """List buyers matching filters.

        Returns:
            One page of buyers and the total number of matches
        """
        pass

    # History operations
    @abstractmethod
    async def append_history(self, entry: HistoryEntry) -> HistoryEntry:
        """Append a history entry."""
        pass

    @abstractmethod
    async def list_history(
        self,
        buyer_id: UUID,
        *,
        limit: int = 100,
    ) -> list[HistoryEntry]:
        """List history entries for a buyer, newest first."""
        pass
