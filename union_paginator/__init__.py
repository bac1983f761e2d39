"""Paginate multiple SQLAlchemy models as one ordered collection."""

from union_paginator.errors import (
    InvalidEntityType,
    InvalidOrdering,
    InvalidPageSize,
    InvalidScope,
    MisalignedProjection,
    NoEntityTypesRegistered,
    UnionPaginatorError,
    UnregisteredEntityType,
)
from union_paginator.pagination import EntityType, PaginatedResult, RawRow, UnionPaginator

__version__ = "0.1.0"

__all__ = [
    "EntityType",
    "InvalidEntityType",
    "InvalidOrdering",
    "InvalidPageSize",
    "InvalidScope",
    "MisalignedProjection",
    "NoEntityTypesRegistered",
    "PaginatedResult",
    "RawRow",
    "UnionPaginator",
    "UnionPaginatorError",
    "UnregisteredEntityType",
]
