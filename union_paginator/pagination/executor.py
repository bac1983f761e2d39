"""Counted, offset-windowed fetch over the combined query."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from time import perf_counter
from typing import Any, Literal, Mapping, Sequence

from sqlalchemy import CompoundSelect, Select, func, select
from sqlalchemy.orm import Session

from union_paginator.errors import InvalidOrdering, InvalidPageSize
from union_paginator.pagination.columns import ID_COLUMN, TYPE_COLUMN

logger = logging.getLogger(__name__)

SortDirection = Literal["asc", "desc"]
OrderTerm = tuple[str, SortDirection]

DEFAULT_ORDER_COLUMN = "created_at"
DEFAULT_ORDERING: tuple[OrderTerm, ...] = ((DEFAULT_ORDER_COLUMN, "desc"),)


@dataclass(frozen=True, slots=True)
class PageWindow:
    """1-indexed page request."""

    per_page: int
    page: int = 1
    page_name: str = "page"

    def __post_init__(self) -> None:
        if self.per_page <= 0:
            raise InvalidPageSize(f"per_page must be a positive integer, got {self.per_page}")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page


@dataclass(frozen=True, slots=True)
class RawRow:
    """One row of the combined result: discriminator, primary key and projected values."""

    type: str | None
    id: Any
    values: Mapping[str, Any]

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> RawRow:
        values = dict(mapping)
        return cls(type=values.get(TYPE_COLUMN), id=values.get(ID_COLUMN), values=values)

    def __getitem__(self, key: str) -> Any:
        return self.values[key]

    def get(self, key: str, default: Any = None) -> Any:
        return self.values.get(key, default)

    def keys(self) -> list[str]:
        return list(self.values)


class PaginationExecutor:
    """Runs one count and one windowed select against the combined query."""

    def __init__(self, db: Session) -> None:
        self._db = db

    def execute(
        self,
        union_stmt: Select | CompoundSelect,
        window: PageWindow,
        *,
        ordering: Sequence[OrderTerm] = (),
        limit: int | None = None,
    ) -> tuple[list[RawRow], int]:
        """Return the rows in ``[offset, offset + per_page)`` and the total row count.

        The union is wrapped as a subquery, so its bind parameters are rendered in
        the same position they occupy inside each branch.
        """

        source = union_stmt.subquery("union_rows")
        if limit is not None:
            source = (
                select(source)
                .order_by(*order_clauses(source, ordering))
                .limit(limit)
                .subquery("limited_rows")
            )

        started = perf_counter()
        total = int(self._db.scalar(select(func.count()).select_from(source)) or 0)
        count_ms = (perf_counter() - started) * 1000.0

        rows: list[RawRow] = []
        started = perf_counter()
        if window.offset < total:
            stmt = (
                select(source)
                .order_by(*order_clauses(source, ordering))
                .limit(window.per_page)
                .offset(window.offset)
            )
            rows = [RawRow.from_mapping(mapping) for mapping in self._db.execute(stmt).mappings()]
        fetch_ms = (perf_counter() - started) * 1000.0

        logger.debug(
            "union_paginator.window_fetch page=%d per_page=%d offset=%d total=%d rows=%d count_ms=%.2f fetch_ms=%.2f",
            window.page,
            window.per_page,
            window.offset,
            total,
            len(rows),
            count_ms,
            fetch_ms,
        )
        return rows, total


def order_clauses(source, ordering: Sequence[OrderTerm]) -> list[Any]:
    """ORDER BY clauses over the union's output columns.

    Without explicit ordering the newest rows come first when the union exposes
    ``created_at``. The discriminator and id are appended as tie-breakers so that
    windows never overlap.
    """

    terms = list(ordering)
    if not terms and DEFAULT_ORDER_COLUMN in source.c:
        terms = list(DEFAULT_ORDERING)

    clauses = []
    used: set[str] = set()
    for column_name, direction in terms:
        if column_name not in source.c:
            raise InvalidOrdering(f"Cannot order by '{column_name}': the union does not select it")
        if direction not in ("asc", "desc"):
            raise InvalidOrdering(f"Unknown sort direction '{direction}' for '{column_name}'")
        column = source.c[column_name]
        clauses.append(column.desc() if direction == "desc" else column.asc())
        used.add(column_name)

    for column_name in (TYPE_COLUMN, ID_COLUMN):
        if column_name in source.c and column_name not in used:
            clauses.append(source.c[column_name].asc())
    return clauses
