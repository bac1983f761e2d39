"""Per-type column projection for union branches."""

from __future__ import annotations

from typing import Any, Sequence

from sqlalchemy import literal

from union_paginator.pagination.entity_types import EntityType

ID_COLUMN = "id"
TYPE_COLUMN = "type"
DEFAULT_TIMESTAMP_COLUMNS: tuple[str, ...] = ("created_at", "updated_at")


class ColumnProjector:
    """Resolves which columns each union branch selects."""

    def __init__(self) -> None:
        self._overrides: dict[str, tuple[Any, ...]] = {}

    def set_override(self, tag: str, columns: Sequence[Any]) -> None:
        """Record an explicit projection for ``tag``.

        String entries are resolved against the model when the union is built. The
        override should carry an ``id`` and a ``type`` column; rows without them
        cannot be resolved back to entities.
        """

        self._overrides[tag] = tuple(columns)

    def has_override(self, tag: str) -> bool:
        return tag in self._overrides

    def resolve(self, entity_type: EntityType) -> tuple[Any, ...]:
        override = self._overrides.get(entity_type.tag)
        if override is not None:
            return tuple(
                entity_type.column(column) if isinstance(column, str) else column for column in override
            )
        return default_columns(entity_type)


def default_columns(entity_type: EntityType) -> tuple[Any, ...]:
    """Primary key, timestamps and the literal discriminator."""

    return (
        entity_type.primary_key_column().label(ID_COLUMN),
        *(entity_type.column(name) for name in DEFAULT_TIMESTAMP_COLUMNS),
        discriminator(entity_type),
    )


def discriminator(entity_type: EntityType):
    """Literal column tagging every row of a branch with its entity type."""

    return literal(entity_type.tag).label(TYPE_COLUMN)
