"""Entity type descriptors and the ordered registry of union participants."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from sqlalchemy import Select, inspect, select
from sqlalchemy.orm import Mapper

from union_paginator.errors import InvalidEntityType

SOFT_DELETE_COLUMN = "deleted_at"


@dataclass(frozen=True, slots=True)
class EntityType:
    """One participating record type: mapped model, discriminator tag and key metadata."""

    model: type
    tag: str
    primary_key: str
    soft_delete_column: str | None = None

    @classmethod
    def for_model(
        cls,
        model: Any,
        *,
        tag: str | None = None,
        soft_deletes: bool | None = None,
    ) -> EntityType:
        """Describe a mapped class.

        ``soft_deletes=None`` detects a ``deleted_at`` column on the model.
        """

        mapper = _mapper_for(model)
        primary_key = mapper.primary_key
        if not primary_key:
            raise InvalidEntityType(f"{mapper.class_.__name__} does not expose a primary key")
        if len(primary_key) > 1:
            raise InvalidEntityType(
                f"{mapper.class_.__name__} has a composite primary key; id-list lookups need a single column"
            )
        key_name = mapper.get_property_by_column(primary_key[0]).key

        if soft_deletes is None:
            soft_deletes = SOFT_DELETE_COLUMN in mapper.all_orm_descriptors
        return cls(
            model=mapper.class_,
            tag=tag or mapper.class_.__name__,
            primary_key=key_name,
            soft_delete_column=SOFT_DELETE_COLUMN if soft_deletes else None,
        )

    def column(self, name: str):
        """Return the mapped attribute ``name``, or fail with a registration error."""

        attribute = getattr(self.model, name, None)
        if attribute is None or not hasattr(attribute, "expression"):
            raise InvalidEntityType(
                f"{self.model.__name__} has no column '{name}'; register a column override for '{self.tag}'"
            )
        return attribute

    def primary_key_column(self):
        return self.column(self.primary_key)

    def soft_delete_predicate(self):
        """Predicate excluding soft-deleted rows, or ``None`` when the type has none."""

        if self.soft_delete_column is None:
            return None
        return self.column(self.soft_delete_column).is_(None)

    def base_query(self, columns: Iterable[Any]) -> Select:
        """Projected select over the model's table with soft-deleted rows excluded."""

        stmt = select(*columns).select_from(self.model)
        predicate = self.soft_delete_predicate()
        if predicate is not None:
            stmt = stmt.where(predicate)
        return stmt


class EntityTypeRegistry:
    """Ordered list of entity types taking part in a union."""

    def __init__(self) -> None:
        self._types: list[EntityType] = []

    def register(self, entity_type: EntityType | type) -> EntityType:
        """Append a type; duplicates are kept and produce duplicate union branches."""

        descriptor = coerce_entity_type(entity_type)
        self._types.append(descriptor)
        return descriptor

    def replace(self, entity_types: Iterable[EntityType | type]) -> None:
        descriptors = [coerce_entity_type(entity_type) for entity_type in entity_types]
        self._types = descriptors

    def list(self) -> tuple[EntityType, ...]:
        return tuple(self._types)

    def tags(self) -> list[str]:
        return [entity_type.tag for entity_type in self._types]

    def get(self, tag: str) -> EntityType | None:
        return next((entity_type for entity_type in self._types if entity_type.tag == tag), None)

    def tag_for(self, key: EntityType | type | str) -> str:
        """Resolve a descriptor, model class or tag string to the tag used for lookups."""

        if isinstance(key, EntityType):
            return key.tag
        if isinstance(key, str):
            return key
        if isinstance(key, type):
            registered = next((entity_type for entity_type in self._types if entity_type.model is key), None)
            return registered.tag if registered is not None else key.__name__
        raise InvalidEntityType(f"{key!r} does not identify an entity type")

    def __contains__(self, key: object) -> bool:
        try:
            tag = self.tag_for(key)  # type: ignore[arg-type]
        except InvalidEntityType:
            return False
        return self.get(tag) is not None

    def __len__(self) -> int:
        return len(self._types)


def coerce_entity_type(value: EntityType | type) -> EntityType:
    if isinstance(value, EntityType):
        _mapper_for(value.model)
        return value
    return EntityType.for_model(value)


def _mapper_for(model: Any) -> Mapper:
    if not isinstance(model, type):
        raise InvalidEntityType(f"{model!r} is not a mapped record class")
    mapper = inspect(model, raiseerr=False)
    if not isinstance(mapper, Mapper):
        raise InvalidEntityType(f"{model.__name__} is not a mapped record class")
    return mapper
