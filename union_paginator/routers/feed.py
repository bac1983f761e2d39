"""Activity feed routes."""

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from union_paginator.config import get_settings
from union_paginator.db.dependencies import get_db
from union_paginator.errors import UnionPaginatorError
from union_paginator.schemas.common import ApiResponse
from union_paginator.schemas.feed import FeedKind, FeedPage, RawFeedPage
from union_paginator.services.feed import get_feed, get_raw_feed

PageParam = Query(default=1, ge=1)
PerPageParam = Query(default=None, ge=1, le=get_settings().max_per_page)
SortOrderParam = Literal["asc", "desc"]

router = APIRouter(prefix="/feed")


@router.get("", response_model=ApiResponse[FeedPage])
def get_feed_page(
    page: int = PageParam,
    per_page: int | None = PerPageParam,
    types: list[FeedKind] | None = Query(default=None),
    author_id: int | None = Query(default=None, ge=1),
    q: str | None = Query(default=None),
    order: SortOrderParam = Query(default="desc"),
    db: Session = Depends(get_db),
) -> ApiResponse[FeedPage]:
    """Page users, posts and comments as one feed ordered by creation time."""

    try:
        payload = get_feed(
            db,
            page=page,
            per_page=per_page,
            kinds=types,
            author_id=author_id,
            query=q,
            order=order,
        )
    except UnionPaginatorError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return ApiResponse(data=payload)


@router.get("/raw", response_model=ApiResponse[RawFeedPage])
def get_raw_feed_page(
    page: int = PageParam,
    per_page: int | None = PerPageParam,
    types: list[FeedKind] | None = Query(default=None),
    author_id: int | None = Query(default=None, ge=1),
    q: str | None = Query(default=None),
    order: SortOrderParam = Query(default="desc"),
    db: Session = Depends(get_db),
) -> ApiResponse[RawFeedPage]:
    """Same feed window as ``/feed`` without loading the underlying records."""

    try:
        payload = get_raw_feed(
            db,
            page=page,
            per_page=per_page,
            kinds=types,
            author_id=author_id,
            query=q,
            order=order,
        )
    except UnionPaginatorError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return ApiResponse(data=payload)
