"""Per-type result transformers."""

from __future__ import annotations

from typing import Any, Callable, Collection

Transformer = Callable[[Any], Any]


class TransformerRegistry:
    """At most one transformer per registered entity type; the latest registration wins."""

    def __init__(self) -> None:
        self._transformers: dict[str, Transformer] = {}

    def set(self, tag: str, transformer: Transformer, *, registered_tags: Collection[str]) -> bool:
        """Store ``transformer`` for ``tag``.

        Returns ``False`` without storing anything when ``tag`` is not a registered
        entity type.
        """

        if tag not in registered_tags:
            return False
        self._transformers[tag] = transformer
        return True

    def has(self, tag: str) -> bool:
        return tag in self._transformers

    def apply(self, tag: str | None, value: Any) -> Any:
        transformer = self._transformers.get(tag) if tag is not None else None
        if transformer is None:
            return value
        return transformer(value)

    def __len__(self) -> int:
        return len(self._transformers)
