"""Field-level change history for buyer leads.

Computes which comparable fields differ between two snapshots of a
buyer and appends one immutable history entry per write that changed
something.
"""

from collections.abc import Iterable
from uuid import UUID

from leadbook.buyers.fields import COMPARABLE_FIELDS, ComparableField, plain
from leadbook.buyers.models import (
    CREATED_DESCRIPTION,
    CREATED_KEY,
    Buyer,
    BuyerFields,
    FieldChange,
    HistoryEntry,
)
from leadbook.buyers.store import BuyerStore
from leadbook.observability.logging import get_logger

logger = get_logger(__name__)


def compute_diff(
    before: BuyerFields,
    after: BuyerFields,
    fields: Iterable[ComparableField] = COMPARABLE_FIELDS,
) -> dict[str, FieldChange]:
    """Map each changed field to its old and new wire value.

    Fields that did not change are absent from the result.
    """
    diff: dict[str, FieldChange] = {}
    for field in fields:
        if field.changed(before, after):
            diff[field.name] = FieldChange(
                old=plain(field.get(before)),
                new=plain(field.get(after)),
            )
    return diff


class DiffRecorder:
    """Writes history entries for buyer creations and updates."""

    def __init__(self, store: BuyerStore) -> None:
        self._store = store

    async def record_creation(self, buyer: Buyer, actor_id: UUID) -> HistoryEntry:
        """Record the single synthetic entry marking a new buyer."""
        entry = HistoryEntry(
            buyer_id=buyer.id,
            changed_by=actor_id,
            changed_at=buyer.created_at,
            diff={CREATED_KEY: FieldChange(old=None, new=CREATED_DESCRIPTION)},
        )
        await self._store.append_history(entry)
        logger.debug(
            "history_creation_recorded",
            buyer_id=str(buyer.id),
            entry_id=str(entry.id),
        )
        return entry

    async def record_update(
        self,
        before: Buyer,
        after: Buyer,
        actor_id: UUID,
    ) -> HistoryEntry | None:
        """Record what changed between two snapshots of the same buyer.

        Returns:
            The appended entry, or None when no comparable field changed
        """
        diff = compute_diff(before, after)
        if not diff:
            logger.debug("history_no_changes", buyer_id=str(after.id))
            return None

        entry = HistoryEntry(
            buyer_id=after.id,
            changed_by=actor_id,
            changed_at=after.updated_at,
            diff=diff,
        )
        await self._store.append_history(entry)
        logger.debug(
            "history_update_recorded",
            buyer_id=str(after.id),
            entry_id=str(entry.id),
            fields=sorted(diff),
        )
        return entry
