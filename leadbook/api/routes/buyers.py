"""Buyer lead endpoints."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID

from fastapi import APIRouter, Query, Response

from leadbook.api.dependencies import BuyerStoreDep, BuyerUpdaterDep, SettingsDep
from leadbook.api.exceptions import (
    BuyerNotFoundError,
    EditConflictError,
    EditForbiddenError,
    InvalidRequestError,
)
from leadbook.api.middleware.auth import UserContextDep
from leadbook.api.models.buyers import (
    BuyerResponse,
    BuyerUpdateRequest,
    HistoryEntryResponse,
    HistoryResponse,
)
from leadbook.api.models.pagination import PaginatedResponse
from leadbook.buyers.access import ForbiddenError
from leadbook.buyers.enums import BuyerStatus, City, PropertyType, Timeline
from leadbook.buyers.models import BuyerCreate, BuyerFilters, SortField, SortOrder
from leadbook.buyers.updater import CONFLICT_MESSAGE
from leadbook.db.errors import ConflictError, NotFoundError, ValidationError
from leadbook.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/buyers")


@asynccontextmanager
async def _domain_errors(buyer_id: UUID | None = None) -> AsyncIterator[None]:
    """Translate domain and store errors into API errors."""
    try:
        yield
    except NotFoundError:
        raise BuyerNotFoundError(f"Buyer {buyer_id} not found") from None
    except ForbiddenError as e:
        raise EditForbiddenError(e.message) from None
    except ConflictError:
        raise EditConflictError(CONFLICT_MESSAGE) from None
    except ValidationError as e:
        raise InvalidRequestError(e.message, field=e.field) from None


@router.get("", response_model=PaginatedResponse[BuyerResponse])
async def list_buyers(
    user: UserContextDep,
    store: BuyerStoreDep,
    settings: SettingsDep,
    search: str | None = Query(default=None, description="Name, email or phone substring"),
    city: City | None = Query(default=None),
    property_type: PropertyType | None = Query(default=None),
    status: BuyerStatus | None = Query(default=None),
    timeline: Timeline | None = Query(default=None),
    sort_by: SortField = Query(default="created_at"),
    sort_order: SortOrder = Query(default="desc"),
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1, le=100),
) -> PaginatedResponse[BuyerResponse]:
    """List buyers with filtering, search, sorting and paging."""
    page_size = min(limit or settings.buyers.default_page_size, settings.buyers.max_page_size)
    filters = BuyerFilters(
        search=search.strip() if search and search.strip() else None,
        city=city,
        property_type=property_type,
        status=status,
        timeline=timeline,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=page_size,
    )
    logger.debug(
        "list_buyers_request",
        user_id=str(user.user_id),
        page=page,
        limit=page_size,
        sort_by=sort_by,
        sort_order=sort_order,
    )

    buyers, total = await store.list_buyers(filters)

    return PaginatedResponse[BuyerResponse](
        items=[BuyerResponse.from_buyer(b) for b in buyers],
        total=total,
        page=page,
        limit=page_size,
        has_more=filters.offset + len(buyers) < total,
    )


@router.post("", response_model=BuyerResponse, status_code=201)
async def create_buyer(
    request: BuyerCreate,
    user: UserContextDep,
    updater: BuyerUpdaterDep,
) -> BuyerResponse:
    """Create a buyer owned by the caller."""
    logger.info("create_buyer_request", user_id=str(user.user_id))

    async with _domain_errors():
        buyer = await updater.create(request, actor_id=user.user_id)
    return BuyerResponse.from_buyer(buyer)


@router.get("/{buyer_id}", response_model=BuyerResponse)
async def get_buyer(
    buyer_id: UUID,
    user: UserContextDep,
    store: BuyerStoreDep,
) -> BuyerResponse:
    """Get a buyer by ID."""
    logger.debug("get_buyer_request", buyer_id=str(buyer_id), user_id=str(user.user_id))

    buyer = await store.get_buyer(buyer_id)
    if buyer is None:
        raise BuyerNotFoundError(f"Buyer {buyer_id} not found")
    return BuyerResponse.from_buyer(buyer)


@router.put("/{buyer_id}", response_model=BuyerResponse)
async def update_buyer(
    buyer_id: UUID,
    request: BuyerUpdateRequest,
    user: UserContextDep,
    updater: BuyerUpdaterDep,
) -> BuyerResponse:
    """Update a buyer.

    The body carries only the fields to change plus the `updated_at`
    value the client last read. A stale value is rejected with 409.
    """
    logger.info("update_buyer_request", buyer_id=str(buyer_id), user_id=str(user.user_id))

    async with _domain_errors(buyer_id):
        buyer = await updater.update(
            buyer_id,
            request.patch(),
            expected_updated_at=request.updated_at,
            actor_id=user.user_id,
        )
    return BuyerResponse.from_buyer(buyer)


@router.delete("/{buyer_id}", status_code=204)
async def delete_buyer(
    buyer_id: UUID,
    user: UserContextDep,
    updater: BuyerUpdaterDep,
) -> Response:
    """Delete a buyer and its history."""
    logger.info("delete_buyer_request", buyer_id=str(buyer_id), user_id=str(user.user_id))

    async with _domain_errors(buyer_id):
        await updater.delete(buyer_id, actor_id=user.user_id)
    return Response(status_code=204)


@router.get("/{buyer_id}/history", response_model=HistoryResponse)
async def get_buyer_history(
    buyer_id: UUID,
    user: UserContextDep,
    store: BuyerStoreDep,
    settings: SettingsDep,
    limit: int | None = Query(default=None, ge=1, le=100),
) -> HistoryResponse:
    """Get the most recent changes to a buyer, newest first."""
    logger.debug("get_buyer_history_request", buyer_id=str(buyer_id), user_id=str(user.user_id))

    if await store.get_buyer(buyer_id) is None:
        raise BuyerNotFoundError(f"Buyer {buyer_id} not found")

    entries = await store.list_history(
        buyer_id, limit=limit or settings.buyers.history_page_size
    )
    return HistoryResponse(
        buyer_id=buyer_id,
        items=[HistoryEntryResponse.from_entry(e) for e in entries],
    )
