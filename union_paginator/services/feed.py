"""Activity feed built from users, posts and comments as one paginated collection."""

from __future__ import annotations

from functools import lru_cache
from typing import Iterable, Literal

from sqlalchemy import Select, or_, select
from sqlalchemy.orm import Session, selectinload

from union_paginator.errors import UnregisteredEntityType
from union_paginator.models.comment import Comment
from union_paginator.models.post import Post
from union_paginator.models.user import User
from union_paginator.pagination.entity_types import EntityType
from union_paginator.pagination.executor import RawRow
from union_paginator.pagination.paginator import PaginatedResult, UnionPaginator
from union_paginator.schemas.common import PageMeta
from union_paginator.schemas.feed import (
    CommentFeedItem,
    FeedKind,
    FeedPage,
    PostFeedItem,
    RawFeedItem,
    RawFeedPage,
    UserFeedItem,
)

FEED_KINDS: tuple[FeedKind, ...] = ("user", "post", "comment")
SortOrder = Literal["asc", "desc"]


@lru_cache
def feed_entity_types() -> dict[str, EntityType]:
    """Entity type descriptors keyed by feed kind."""

    return {
        "user": EntityType.for_model(User, tag="user"),
        "post": EntityType.for_model(Post, tag="post"),
        "comment": EntityType.for_model(Comment, tag="comment"),
    }


def build_feed_paginator(
    db: Session,
    *,
    kinds: Iterable[str] | None = None,
    author_id: int | None = None,
    query: str | None = None,
    order: SortOrder = "desc",
    resolve: bool = True,
) -> UnionPaginator:
    """Configure a paginator over the requested feed kinds.

    ``author_id`` and ``query`` become per-kind scopes. With ``resolve=False`` the
    paginator skips entity loading and items are built from the union rows alone.
    """

    entity_types = feed_entity_types()
    selected = _dedupe(kinds or FEED_KINDS)
    unknown = [kind for kind in selected if kind not in entity_types]
    if unknown:
        raise UnregisteredEntityType(f"Unknown feed kinds: {', '.join(unknown)}")

    paginator = UnionPaginator(db, [entity_types[kind] for kind in selected])

    if author_id is not None:
        author_scopes = {
            "user": lambda stmt: stmt.where(User.id == author_id),
            "post": lambda stmt: stmt.where(Post.user_id == author_id),
            "comment": lambda stmt: stmt.where(Comment.user_id == author_id),
        }
        for kind in selected:
            paginator.apply_scope(kind, author_scopes[kind])

    filter_term = (query or "").strip()
    if filter_term:
        pattern = f"%{filter_term}%"
        search_scopes = {
            "user": lambda stmt: stmt.where(or_(User.name.ilike(pattern), User.email.ilike(pattern))),
            "post": lambda stmt: stmt.where(or_(Post.title.ilike(pattern), Post.content.ilike(pattern))),
            "comment": lambda stmt: stmt.where(Comment.content.ilike(pattern)),
        }
        for kind in selected:
            paginator.apply_scope(kind, search_scopes[kind])

    if order == "asc":
        paginator.oldest()
    else:
        paginator.latest()

    if not resolve:
        paginator.prevent_model_retrieval()
        for kind in selected:
            paginator.transform_results_for(kind, _raw_item)
        return paginator

    loaders = {
        "post": lambda ids: _load_with_author(db, Post, ids),
        "comment": lambda ids: _load_with_author(db, Comment, ids),
    }
    transformers = {"user": _user_item, "post": _post_item, "comment": _comment_item}
    for kind in selected:
        if kind in loaders:
            paginator.fetch_models_using(kind, loaders[kind])
        paginator.transform_results_for(kind, transformers[kind])
    return paginator


def get_feed(
    db: Session,
    *,
    page: int,
    per_page: int | None = None,
    kinds: Iterable[str] | None = None,
    author_id: int | None = None,
    query: str | None = None,
    order: SortOrder = "desc",
) -> FeedPage:
    """Return one page of resolved feed items."""

    paginator = build_feed_paginator(db, kinds=kinds, author_id=author_id, query=query, order=order)
    result = paginator.paginate(per_page=per_page, page=page)
    return FeedPage(items=result.items, meta=page_meta(result))


def get_raw_feed(
    db: Session,
    *,
    page: int,
    per_page: int | None = None,
    kinds: Iterable[str] | None = None,
    author_id: int | None = None,
    query: str | None = None,
    order: SortOrder = "desc",
) -> RawFeedPage:
    """Return one page of union rows without loading the records behind them."""

    paginator = build_feed_paginator(
        db,
        kinds=kinds,
        author_id=author_id,
        query=query,
        order=order,
        resolve=False,
    )
    result = paginator.paginate(per_page=per_page, page=page)
    return RawFeedPage(items=result.items, meta=page_meta(result))


def page_meta(result: PaginatedResult) -> PageMeta:
    return PageMeta(
        total=result.total,
        per_page=result.per_page,
        current_page=result.current_page,
        last_page=result.last_page,
        from_item=result.first_item,
        to_item=result.last_item,
        has_more_pages=result.has_more_pages,
    )


def _load_with_author(db: Session, model: type[Post] | type[Comment], ids: list[int]) -> list[Post] | list[Comment]:
    stmt: Select = select(model).options(selectinload(model.user)).where(model.id.in_(ids))
    return list(db.scalars(stmt).all())


def _user_item(user: User | None) -> UserFeedItem | None:
    if user is None:
        return None
    return UserFeedItem(id=user.id, name=user.name, email=user.email, created_at=user.created_at)


def _post_item(post: Post | None) -> PostFeedItem | None:
    if post is None:
        return None
    return PostFeedItem(
        id=post.id,
        title=post.title,
        content=post.content,
        author_id=post.user_id,
        author_name=post.user.name if post.user is not None else None,
        created_at=post.created_at,
    )


def _comment_item(comment: Comment | None) -> CommentFeedItem | None:
    if comment is None:
        return None
    return CommentFeedItem(
        id=comment.id,
        post_id=comment.post_id,
        content=comment.content,
        author_id=comment.user_id,
        author_name=comment.user.name if comment.user is not None else None,
        created_at=comment.created_at,
    )


def _raw_item(row: RawRow) -> RawFeedItem:
    return RawFeedItem(
        kind=row.type,
        id=row.id,
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _dedupe(kinds: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(kinds))
