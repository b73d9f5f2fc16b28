"""Request and response models for buyer endpoints."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from leadbook.buyers.enums import BHK, BuyerStatus, City, PropertyType, Purpose, Source, Timeline
from leadbook.buyers.models import Buyer, BuyerPatch, HistoryEntry


class BuyerUpdateRequest(BuyerPatch):
    """Partial buyer fields plus the updated_at value the client last read."""

    updated_at: datetime = Field(..., description="Concurrency token from the last read")

    def patch(self) -> BuyerPatch:
        """The field changes without the token."""
        changes = {k: v for k, v in self.changes().items() if k != "updated_at"}
        return BuyerPatch.model_validate(changes)


class BuyerResponse(BaseModel):
    """Response model for buyer operations."""

    id: UUID
    full_name: str
    email: str | None
    phone: str
    city: City
    property_type: PropertyType
    bhk: BHK | None
    purpose: Purpose
    budget_min: int | None
    budget_max: int | None
    timeline: Timeline
    source: Source
    status: BuyerStatus
    notes: str | None
    tags: list[str]
    owner_id: UUID
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_buyer(cls, buyer: Buyer) -> "BuyerResponse":
        return cls.model_validate(buyer.model_dump())


class HistoryEntryResponse(BaseModel):
    """One audit entry; diff maps field name to {old, new}."""

    id: UUID
    buyer_id: UUID
    changed_by: UUID
    changed_at: datetime
    diff: dict[str, dict[str, Any]]

    @classmethod
    def from_entry(cls, entry: HistoryEntry) -> "HistoryEntryResponse":
        return cls(
            id=entry.id,
            buyer_id=entry.buyer_id,
            changed_by=entry.changed_by,
            changed_at=entry.changed_at,
            diff={name: change.model_dump(mode="json") for name, change in entry.diff.items()},
        )


class HistoryResponse(BaseModel):
    """History entries for one buyer, newest first."""

    buyer_id: UUID
    items: list[HistoryEntryResponse]
