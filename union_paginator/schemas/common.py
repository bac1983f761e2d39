"""Common API response schemas."""

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Consistent JSON envelope for API responses."""

    data: T


class PageMeta(BaseModel):
    """Length-aware pagination metadata shared by paged payloads."""

    total: int
    per_page: int
    current_page: int
    last_page: int
    from_item: int | None
    to_item: int | None
    has_more_pages: bool
