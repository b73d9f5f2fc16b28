"""Tests for DiffRecorder."""

from uuid import UUID, uuid4

import pytest
import pytest_asyncio

from leadbook.buyers.enums import BuyerStatus
from leadbook.buyers.history import DiffRecorder
from leadbook.buyers.models import CREATED_KEY, Buyer, FieldChange
from leadbook.buyers.stores.inmemory import InMemoryBuyerStore
from leadbook.utils.time import next_updated_at
from tests.factories import BuyerFactory


@pytest.fixture
def store() -> InMemoryBuyerStore:
    return InMemoryBuyerStore()


@pytest.fixture
def recorder(store: InMemoryBuyerStore) -> DiffRecorder:
    return DiffRecorder(store)


@pytest.fixture
def actor_id() -> UUID:
    return uuid4()


@pytest_asyncio.fixture
async def buyer(store: InMemoryBuyerStore, actor_id: UUID) -> Buyer:
    return await store.create_buyer(BuyerFactory.create(owner_id=actor_id))


class TestRecordCreation:
    """Tests for creation entries."""

    @pytest.mark.asyncio
    async def test_single_created_entry(
        self, store: InMemoryBuyerStore, recorder: DiffRecorder, buyer: Buyer, actor_id: UUID
    ) -> None:
        entry = await recorder.record_creation(buyer, actor_id)

        assert entry.diff == {CREATED_KEY: FieldChange(old=None, new="Buyer created")}
        assert entry.changed_by == actor_id
        assert entry.changed_at == buyer.created_at
        assert await store.list_history(buyer.id) == [entry]


class TestRecordUpdate:
    """Tests for update entries."""

    @pytest.mark.asyncio
    async def test_no_entry_when_nothing_changed(
        self, store: InMemoryBuyerStore, recorder: DiffRecorder, buyer: Buyer, actor_id: UUID
    ) -> None:
        after = buyer.model_copy(update={"updated_at": next_updated_at(buyer.updated_at)})

        assert await recorder.record_update(buyer, after, actor_id) is None
        assert await store.list_history(buyer.id) == []

    @pytest.mark.asyncio
    async def test_entry_holds_exact_diff(
        self, store: InMemoryBuyerStore, recorder: DiffRecorder, buyer: Buyer, actor_id: UUID
    ) -> None:
        after = buyer.model_copy(
            update={
                "status": BuyerStatus.QUALIFIED,
                "updated_at": next_updated_at(buyer.updated_at),
            }
        )

        entry = await recorder.record_update(buyer, after, actor_id)

        assert entry is not None
        assert entry.diff == {"status": FieldChange(old="New", new="Qualified")}
        assert entry.changed_at == after.updated_at
        assert await store.list_history(buyer.id) == [entry]
