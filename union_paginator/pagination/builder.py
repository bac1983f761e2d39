"""Builds the UNION of projected, scoped per-type sub-queries."""

from __future__ import annotations

import logging

from sqlalchemy import CompoundSelect, Select, union

from union_paginator.errors import InvalidScope, MisalignedProjection, NoEntityTypesRegistered
from union_paginator.pagination.columns import ColumnProjector
from union_paginator.pagination.entity_types import EntityType, EntityTypeRegistry
from union_paginator.pagination.scopes import ScopeRegistry

logger = logging.getLogger(__name__)


class UnionQueryBuilder:
    """Memoizing builder for the combined query.

    Branches are combined in registration order with UNION (duplicates removed by the
    database). Soft-delete exclusion and scopes apply inside each branch.
    """

    def __init__(
        self,
        registry: EntityTypeRegistry,
        projector: ColumnProjector,
        scopes: ScopeRegistry,
    ) -> None:
        self._registry = registry
        self._projector = projector
        self._scopes = scopes
        self._union: Select | CompoundSelect | None = None

    @property
    def is_built(self) -> bool:
        return self._union is not None

    def invalidate(self) -> None:
        self._union = None

    def build(self) -> Select | CompoundSelect:
        if self._union is not None:
            return self._union

        entity_types = self._registry.list()
        if not entity_types:
            raise NoEntityTypesRegistered()

        branches = [self.build_branch(entity_type) for entity_type in entity_types]
        _check_alignment(entity_types, branches)

        # A flat UNION keeps SQLite happy; it rejects parenthesised compound operands.
        self._union = branches[0] if len(branches) == 1 else union(*branches)
        logger.debug(
            "union_paginator.union_built types=%s branches=%d columns=%d",
            ",".join(entity_type.tag for entity_type in entity_types),
            len(branches),
            len(branches[0].selected_columns),
        )
        return self._union

    def build_branch(self, entity_type: EntityType) -> Select:
        """One projected sub-query with soft-delete exclusion and every scope applied."""

        stmt = entity_type.base_query(self._projector.resolve(entity_type))
        arity = len(stmt.selected_columns)
        for scope in self._scopes.scopes_for(entity_type.tag):
            scoped = scope(stmt)
            if not isinstance(scoped, Select):
                raise InvalidScope(
                    f"Scope {scope!r} for '{entity_type.tag}' must return the narrowed select, "
                    f"got {type(scoped).__name__}"
                )
            if len(scoped.selected_columns) != arity:
                raise InvalidScope(f"Scope {scope!r} for '{entity_type.tag}' changed the selected columns")
            stmt = scoped
        return stmt


def _check_alignment(entity_types: tuple[EntityType, ...], branches: list[Select]) -> None:
    expected = len(branches[0].selected_columns)
    for entity_type, branch in zip(entity_types, branches):
        arity = len(branch.selected_columns)
        if arity != expected:
            raise MisalignedProjection(
                f"'{entity_type.tag}' selects {arity} columns but '{entity_types[0].tag}' selects {expected}; "
                "every union branch must project the same columns"
            )
