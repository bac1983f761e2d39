"""Paginate several record types as one ordered collection."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from math import ceil
from time import perf_counter
from typing import Any, Callable, ClassVar, Iterable, Iterator, Sequence

from sqlalchemy import CompoundSelect, Select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from union_paginator.config import get_settings
from union_paginator.errors import InvalidOrdering, InvalidPageSize, UnregisteredEntityType
from union_paginator.pagination.builder import UnionQueryBuilder
from union_paginator.pagination.columns import ColumnProjector
from union_paginator.pagination.entity_types import EntityType, EntityTypeRegistry
from union_paginator.pagination.executor import (
    DEFAULT_ORDER_COLUMN,
    OrderTerm,
    PageWindow,
    PaginationExecutor,
    RawRow,
)
from union_paginator.pagination.loader import BulkEntityLoader, EntityFetcher
from union_paginator.pagination.scopes import Scope, ScopeRegistry
from union_paginator.pagination.transformers import Transformer, TransformerRegistry

logger = logging.getLogger(__name__)

EntityTypeKey = EntityType | type | str
CurrentPageResolver = Callable[[str], Any]


def _first_page(page_name: str) -> int:
    return 1


@dataclass(slots=True)
class PaginatedResult:
    """One page of the combined collection plus length-aware metadata."""

    items: list[Any]
    total: int
    per_page: int
    current_page: int
    page_name: str = "page"

    @property
    def last_page(self) -> int:
        return max(ceil(self.total / self.per_page), 1)

    @property
    def count(self) -> int:
        return len(self.items)

    @property
    def has_more_pages(self) -> bool:
        return self.current_page < self.last_page

    @property
    def on_first_page(self) -> bool:
        return self.current_page <= 1

    @property
    def first_item(self) -> int | None:
        """1-based position of the page's first item within the whole collection."""

        if not self.items:
            return None
        return (self.current_page - 1) * self.per_page + 1

    @property
    def last_item(self) -> int | None:
        first = self.first_item
        if first is None:
            return None
        return first + len(self.items) - 1

    def __iter__(self) -> Iterator[Any]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


class UnionPaginator:
    """Union pagination engine.

    Entity types, column overrides, scopes, transformers and custom loaders are
    registered first; ``paginate`` then builds (or reuses) the UNION query, fetches
    one window of ``(id, type, ...)`` rows, bulk-loads the matching entities with one
    query per type and runs each item through its type's transformer. Structural
    changes (types, scopes, column overrides) drop the cached union so the next call
    rebuilds it.
    """

    _current_page_resolver: ClassVar[CurrentPageResolver] = staticmethod(_first_page)

    def __init__(
        self,
        db: Session,
        entity_types: Iterable[EntityType | type] | EntityType | type = (),
    ) -> None:
        self._db = db
        self._registry = EntityTypeRegistry()
        self._projector = ColumnProjector()
        self._scopes = ScopeRegistry()
        self._transformers = TransformerRegistry()
        self._fetchers: dict[str, EntityFetcher] = {}
        self._builder = UnionQueryBuilder(self._registry, self._projector, self._scopes)
        self._executor = PaginationExecutor(db)
        self._ordering: list[OrderTerm] = []
        self._limit: int | None = None
        self._prevent_model_retrieval = False

        if isinstance(entity_types, (EntityType, type, str)):
            entity_types = [entity_types]
        for entity_type in entity_types:
            self.add_entity_type(entity_type)

    @classmethod
    def for_models(cls, db: Session, entity_types: Iterable[EntityType | type]) -> UnionPaginator:
        return cls(db, entity_types)

    @classmethod
    def resolve_current_page_using(cls, resolver: CurrentPageResolver | None) -> None:
        """Install the callable used when ``paginate`` is called without a page.

        The resolver receives the page parameter name. ``None`` restores the default,
        which always answers page 1.
        """

        cls._current_page_resolver = staticmethod(resolver or _first_page)

    # Registration

    @property
    def entity_types(self) -> tuple[EntityType, ...]:
        return self._registry.list()

    def add_entity_type(self, entity_type: EntityType | type) -> UnionPaginator:
        self._registry.register(entity_type)
        self._builder.invalidate()
        return self

    def set_entity_types(self, entity_types: Iterable[EntityType | type]) -> UnionPaginator:
        self._registry.replace(entity_types)
        self._builder.invalidate()
        return self

    def set_selected_columns(self, entity_type: EntityTypeKey, columns: Sequence[Any]) -> UnionPaginator:
        """Override the projection of one type; every type must end up with the same arity."""

        self._projector.set_override(self._registry.tag_for(entity_type), columns)
        self._builder.invalidate()
        return self

    def apply_scope(self, entity_type: EntityTypeKey, scope: Scope) -> UnionPaginator:
        """Narrow one type's branch; ``scope`` receives and returns a ``Select``."""

        self._scopes.add(self._registry.tag_for(entity_type), scope)
        self._builder.invalidate()
        return self

    def has_scope(self, entity_type: EntityTypeKey) -> bool:
        return self._scopes.has(self._registry.tag_for(entity_type))

    def transform_results_for(self, entity_type: EntityTypeKey, transformer: Transformer) -> UnionPaginator:
        """Replace the transformer for a registered type; unregistered types are ignored."""

        tag = self._registry.tag_for(entity_type)
        if not self._transformers.set(tag, transformer, registered_tags=self._registry.tags()):
            logger.debug("union_paginator.transformer_ignored type=%s reason=unregistered_type", tag)
        return self

    def has_transformer(self, entity_type: EntityTypeKey) -> bool:
        return self._transformers.has(self._registry.tag_for(entity_type))

    def fetch_models_using(self, entity_type: EntityTypeKey, fetcher: EntityFetcher) -> UnionPaginator:
        """Load one type through ``fetcher(ids)`` instead of the default ``IN`` query."""

        tag = self._registry.tag_for(entity_type)
        if tag not in self._registry.tags():
            raise UnregisteredEntityType(f"Entity type {tag} is not registered in this paginator.")
        self._fetchers[tag] = fetcher
        return self

    def prevent_model_retrieval(self, prevent: bool = True) -> UnionPaginator:
        """Hand raw union rows to transformers instead of loaded entities."""

        self._prevent_model_retrieval = prevent
        return self

    # Ordering and limits

    def order_by(self, column: str, direction: str = "asc") -> UnionPaginator:
        normalized = direction.lower()
        if normalized not in ("asc", "desc"):
            raise InvalidOrdering(f"Unknown sort direction '{direction}' for '{column}'")
        self._ordering.append((column, normalized))  # type: ignore[arg-type]
        return self

    def latest(self, column: str = DEFAULT_ORDER_COLUMN) -> UnionPaginator:
        return self.order_by(column, "desc")

    def oldest(self, column: str = DEFAULT_ORDER_COLUMN) -> UnionPaginator:
        return self.order_by(column, "asc")

    def reorder(self) -> UnionPaginator:
        self._ordering = []
        return self

    def limit(self, value: int | None) -> UnionPaginator:
        """Cap how many union rows take part in pagination; ``None`` removes the cap."""

        if value is not None and value < 0:
            raise ValueError(f"limit must be zero or greater, got {value}")
        self._limit = value
        return self

    # Query access

    @property
    def union_query(self) -> Select | CompoundSelect:
        return self._builder.build()

    @property
    def is_prepared(self) -> bool:
        return self._builder.is_built

    def prepare_union_query(self) -> UnionPaginator:
        self._builder.invalidate()
        self._builder.build()
        return self

    # Pagination

    def paginate(
        self,
        per_page: int | None = None,
        page_name: str | None = None,
        page: int | None = None,
    ) -> PaginatedResult:
        settings = get_settings()
        per_page = settings.default_per_page if per_page is None else per_page
        page_name = page_name or settings.page_name
        if per_page <= 0:
            raise InvalidPageSize(f"per_page must be a positive integer, got {per_page}")

        window = PageWindow(per_page=per_page, page=self._resolve_page(page, page_name), page_name=page_name)
        union_stmt = self._builder.build()

        total_started = perf_counter()
        try:
            rows, total = self._executor.execute(
                union_stmt,
                window,
                ordering=self._ordering,
                limit=self._limit,
            )
            started = perf_counter()
            items = self._transform_rows(rows)
            resolve_ms = (perf_counter() - started) * 1000.0
        except SQLAlchemyError:
            logger.exception(
                "union_paginator.paginate_failed types=%s page=%d per_page=%d elapsed_ms=%.2f",
                ",".join(self._registry.tags()),
                window.page,
                window.per_page,
                (perf_counter() - total_started) * 1000.0,
            )
            raise

        logger.info(
            (
                "union_paginator.paginate_timing types=%s page=%d per_page=%d total=%d rows=%d "
                "resolution=%s resolve_ms=%.2f total_ms=%.2f"
            ),
            ",".join(self._registry.tags()),
            window.page,
            window.per_page,
            total,
            len(rows),
            "skipped" if self._prevent_model_retrieval else "bulk",
            resolve_ms,
            (perf_counter() - total_started) * 1000.0,
        )
        return PaginatedResult(
            items=items,
            total=total,
            per_page=window.per_page,
            current_page=window.page,
            page_name=window.page_name,
        )

    def _transform_rows(self, rows: list[RawRow]) -> list[Any]:
        if not rows:
            return []
        if self._prevent_model_retrieval:
            return [self._transformers.apply(row.type, row) for row in rows]

        lookup = BulkEntityLoader(self._db, self._registry, self._fetchers).resolve(rows)
        return [self._transformers.apply(row.type, lookup(row)) for row in rows]

    def _resolve_page(self, page: Any, page_name: str) -> int:
        if page is None:
            page = type(self)._current_page_resolver(page_name)
        try:
            number = int(page)
        except (TypeError, ValueError):
            return 1
        return number if number >= 1 else 1
