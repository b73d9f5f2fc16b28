"""Test factories for buyer domain models."""

from typing import Any
from uuid import UUID, uuid4

from leadbook.buyers.models import Buyer, BuyerCreate


class BuyerFactory:
    """Factory for creating buyer payloads and records for testing."""

    @staticmethod
    def payload(**overrides: Any) -> dict[str, Any]:
        """Wire-format create payload with sensible defaults."""
        data: dict[str, Any] = {
            "full_name": "Asha Verma",
            "email": "asha@example.com",
            "phone": "9876543210",
            "city": "Chandigarh",
            "property_type": "Apartment",
            "bhk": "2",
            "purpose": "Buy",
            "budget_min": 5_000_000,
            "budget_max": 7_500_000,
            "timeline": "0-3m",
            "source": "Website",
            "status": "New",
            "notes": "Prefers a high floor",
            "tags": ["vip", "east-facing"],
        }
        data.update(overrides)
        return data

    @staticmethod
    def create_request(**overrides: Any) -> BuyerCreate:
        return BuyerCreate.model_validate(BuyerFactory.payload(**overrides))

    @staticmethod
    def create(*, owner_id: UUID | None = None, **overrides: Any) -> Buyer:
        """Create a Buyer record owned by owner_id."""
        return Buyer.create(
            BuyerFactory.create_request(**overrides),
            owner_id=owner_id or uuid4(),
        )
