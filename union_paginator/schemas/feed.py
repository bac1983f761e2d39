"""Activity feed response schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel

from union_paginator.schemas.common import PageMeta

FeedKind = Literal["user", "post", "comment"]


class UserFeedItem(BaseModel):
    """User sign-up entry."""

    kind: Literal["user"] = "user"
    id: int
    name: str
    email: str
    created_at: datetime


class PostFeedItem(BaseModel):
    """Published post entry."""

    kind: Literal["post"] = "post"
    id: int
    title: str
    content: str
    author_id: int
    author_name: str | None
    created_at: datetime


class CommentFeedItem(BaseModel):
    """Comment entry."""

    kind: Literal["comment"] = "comment"
    id: int
    post_id: int
    content: str
    author_id: int
    author_name: str | None
    created_at: datetime


FeedItem = UserFeedItem | PostFeedItem | CommentFeedItem


class RawFeedItem(BaseModel):
    """Union row returned without loading the underlying record."""

    kind: FeedKind
    id: int
    created_at: datetime
    updated_at: datetime


class FeedPage(BaseModel):
    """One page of the combined feed; ``None`` marks a record deleted while paging."""

    items: list[FeedItem | None]
    meta: PageMeta


class RawFeedPage(BaseModel):
    """One page of raw feed rows."""

    items: list[RawFeedItem]
    meta: PageMeta
