"""Per-type filters applied to union branches before they are combined."""

from __future__ import annotations

from typing import Callable

from sqlalchemy import Select

Scope = Callable[[Select], Select]


class ScopeRegistry:
    """Stores scopes in registration order, keyed by entity type tag."""

    def __init__(self) -> None:
        self._scopes: list[tuple[str, Scope]] = []

    def add(self, tag: str, scope: Scope) -> None:
        self._scopes.append((tag, scope))

    def has(self, tag: str) -> bool:
        return any(scope_tag == tag for scope_tag, _ in self._scopes)

    def scopes_for(self, tag: str) -> list[Scope]:
        return [scope for scope_tag, scope in self._scopes if scope_tag == tag]
