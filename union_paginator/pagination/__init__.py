"""Union pagination engine."""

from union_paginator.pagination.builder import UnionQueryBuilder
from union_paginator.pagination.columns import ColumnProjector
from union_paginator.pagination.entity_types import EntityType, EntityTypeRegistry
from union_paginator.pagination.executor import PageWindow, PaginationExecutor, RawRow
from union_paginator.pagination.loader import BulkEntityLoader
from union_paginator.pagination.paginator import PaginatedResult, UnionPaginator
from union_paginator.pagination.scopes import ScopeRegistry
from union_paginator.pagination.transformers import TransformerRegistry

__all__ = [
    "BulkEntityLoader",
    "ColumnProjector",
    "EntityType",
    "EntityTypeRegistry",
    "PageWindow",
    "PaginatedResult",
    "PaginationExecutor",
    "RawRow",
    "ScopeRegistry",
    "TransformerRegistry",
    "UnionPaginator",
    "UnionQueryBuilder",
]
