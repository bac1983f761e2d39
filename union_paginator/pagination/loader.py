"""Bulk resolution of paged rows back into entities, one query per type."""

from __future__ import annotations

import logging
from collections import defaultdict
from time import perf_counter
from typing import Any, Callable, Iterable, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from union_paginator.pagination.entity_types import EntityType, EntityTypeRegistry
from union_paginator.pagination.executor import RawRow

logger = logging.getLogger(__name__)

EntityFetcher = Callable[[list[Any]], Iterable[Any]]
RowLookup = Callable[[RawRow], Any | None]


class BulkEntityLoader:
    """Groups a page by discriminator and loads each group with a single call."""

    def __init__(
        self,
        db: Session,
        registry: EntityTypeRegistry,
        fetchers: dict[str, EntityFetcher] | None = None,
    ) -> None:
        self._db = db
        self._registry = registry
        self._fetchers = fetchers if fetchers is not None else {}

    def resolve(self, rows: Sequence[RawRow]) -> RowLookup:
        """Load every entity referenced by ``rows`` and return a per-row lookup.

        The lookup yields ``None`` for rows whose entity could not be loaded, e.g. a
        record deleted between the page query and this call, or a row whose
        discriminator does not name a registered type.
        """

        ids_by_type: dict[str, list[Any]] = defaultdict(list)
        for row in rows:
            if row.type is None or row.id is None:
                continue
            bucket = ids_by_type[row.type]
            if row.id not in bucket:
                bucket.append(row.id)

        entities_by_type: dict[str, dict[Any, Any]] = {}
        for tag, ids in ids_by_type.items():
            entity_type = self._registry.get(tag)
            if entity_type is None:
                logger.warning("union_paginator.unknown_discriminator type=%s rows=%d", tag, len(ids))
                continue
            started = perf_counter()
            entities = list(self._fetch(entity_type, ids))
            entities_by_type[tag] = {getattr(entity, entity_type.primary_key): entity for entity in entities}
            logger.debug(
                "union_paginator.bulk_load type=%s requested=%d loaded=%d load_ms=%.2f",
                tag,
                len(ids),
                len(entities),
                (perf_counter() - started) * 1000.0,
            )

        def lookup(row: RawRow) -> Any | None:
            return entities_by_type.get(row.type, {}).get(row.id)

        return lookup

    def _fetch(self, entity_type: EntityType, ids: list[Any]) -> Iterable[Any]:
        fetcher = self._fetchers.get(entity_type.tag)
        if fetcher is not None:
            return fetcher(ids)
        stmt = select(entity_type.model).where(entity_type.primary_key_column().in_(ids))
        return self._db.scalars(stmt).all()
