"""Generic paginated response envelope."""

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class PaginatedResponse(BaseModel, Generic[T]):
    """A page of items plus paging metadata."""

    items: list[T]
    total: int
    page: int
    limit: int
    has_more: bool
