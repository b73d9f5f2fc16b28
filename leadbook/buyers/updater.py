"""Conflict-checked buyer writes.

Every edit carries the `updated_at` value the caller last read. A
write whose token no longer matches the stored one is rejected with
ConflictError instead of silently overwriting a concurrent edit. The
store applies the final write as a compare-and-swap, so a writer that
slips in between the read and the write still loses cleanly.
"""

from collections.abc import Awaitable
from datetime import datetime
from typing import Any
from uuid import UUID

from leadbook.buyers.access import AccessPolicy, ForbiddenError
from leadbook.buyers.history import DiffRecorder
from leadbook.buyers.models import (
    Buyer,
    BuyerCreate,
    BuyerPatch,
    constraint_violation,
)
from leadbook.buyers.store import BuyerStore
from leadbook.config.models.buyers import HistoryMode
from leadbook.db.errors import ConflictError, NotFoundError, StoreError, ValidationError
from leadbook.observability.logging import get_logger
from leadbook.utils.time import as_utc, next_updated_at

logger = get_logger(__name__)

CONFLICT_MESSAGE = "Record changed since last read, please refresh"


class BuyerUpdater:
    """Creates, edits and deletes buyers with history and access checks.

    Args:
        store: Buyer storage backend
        access: Owner-or-admin permission check
        recorder: History writer, defaults to one on the same store
        history_mode: "atomic" writes history in the same transaction as
            the buyer; "best_effort" writes it afterwards and only logs
            a failed append
    """

    def __init__(
        self,
        store: BuyerStore,
        access: AccessPolicy,
        *,
        recorder: DiffRecorder | None = None,
        history_mode: HistoryMode = "atomic",
    ) -> None:
        self._store = store
        self._access = access
        self._recorder = recorder or DiffRecorder(store)
        self._history_mode = history_mode

    async def create(self, data: BuyerCreate, *, actor_id: UUID) -> Buyer:
        """Create a buyer owned by the actor and record the creation."""
        buyer = Buyer.create(data, owner_id=actor_id)

        if self._history_mode == "atomic":
            async with self._store.transaction():
                created = await self._store.create_buyer(buyer)
                await self._recorder.record_creation(created, actor_id)
        else:
            created = await self._store.create_buyer(buyer)
            await self._best_effort(
                self._recorder.record_creation(created, actor_id), created.id
            )

        logger.info("buyer_created", buyer_id=str(created.id), owner_id=str(actor_id))
        return created

    async def update(
        self,
        buyer_id: UUID,
        patch: BuyerPatch,
        *,
        expected_updated_at: datetime,
        actor_id: UUID,
    ) -> Buyer:
        """Apply a partial update if the buyer is unchanged since it was read.

        Raises:
            NotFoundError: Buyer does not exist
            ForbiddenError: Actor is neither owner nor admin
            ConflictError: Stored token differs from expected_updated_at
            ValidationError: Merged values break a cross-field rule
        """
        if self._history_mode == "atomic":
            async with self._store.transaction():
                before, after = await self._apply(buyer_id, patch, expected_updated_at, actor_id)
                entry = await self._recorder.record_update(before, after, actor_id)
        else:
            before, after = await self._apply(buyer_id, patch, expected_updated_at, actor_id)
            entry = await self._best_effort(
                self._recorder.record_update(before, after, actor_id), buyer_id
            )

        logger.info(
            "buyer_updated",
            buyer_id=str(buyer_id),
            actor_id=str(actor_id),
            history_recorded=entry is not None,
        )
        return after

    async def delete(self, buyer_id: UUID, *, actor_id: UUID) -> None:
        """Delete a buyer the actor may edit; history goes with it."""
        async with self._store.transaction():
            await self._load_editable(buyer_id, actor_id)
            await self._store.delete_buyer(buyer_id)
        logger.info("buyer_deleted", buyer_id=str(buyer_id), actor_id=str(actor_id))

    async def _apply(
        self,
        buyer_id: UUID,
        patch: BuyerPatch,
        expected_updated_at: datetime,
        actor_id: UUID,
    ) -> tuple[Buyer, Buyer]:
        before = await self._load_editable(buyer_id, actor_id)

        if as_utc(before.updated_at) != as_utc(expected_updated_at):
            logger.info(
                "buyer_update_conflict",
                buyer_id=str(buyer_id),
                expected=as_utc(expected_updated_at).isoformat(),
                stored=as_utc(before.updated_at).isoformat(),
            )
            raise ConflictError(CONFLICT_MESSAGE)

        changes = patch.changes()
        self._validate_merged(before, changes)

        after = await self._store.update_buyer(
            buyer_id,
            changes,
            expected_updated_at=before.updated_at,
            updated_at=next_updated_at(before.updated_at),
        )
        return before, after

    async def _load_editable(self, buyer_id: UUID, actor_id: UUID) -> Buyer:
        buyer = await self._store.get_buyer(buyer_id)
        if buyer is None:
            raise NotFoundError(f"Buyer {buyer_id} not found")

        if not await self._access.can_edit(actor_id, buyer.owner_id):
            logger.warning(
                "buyer_edit_forbidden",
                buyer_id=str(buyer_id),
                actor_id=str(actor_id),
            )
            raise ForbiddenError("You do not have permission to modify this buyer")
        return buyer

    def _validate_merged(self, before: Buyer, changes: dict[str, Any]) -> None:
        merged = {**before.model_dump(), **changes}
        violation = constraint_violation(merged)
        if violation is not None:
            field, message = violation
            raise ValidationError(message, field=field)

    async def _best_effort(self, append: Awaitable[Any], buyer_id: UUID) -> Any:
        try:
            return await append
        except StoreError as e:
            logger.error(
                "history_append_failed",
                buyer_id=str(buyer_id),
                error=str(e),
            )
            return None
