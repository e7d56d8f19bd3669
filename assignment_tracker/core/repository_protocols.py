"""Boundary Protocols — contract between the assignment engine and the document store.

Invariants:
    - Core NEVER imports from infrastructure; dependency arrows point inward only
    - Documents cross the boundary as plain dicts keyed by storage field names
    - Each call is independent: no method spans or opens a transaction

Design Decisions:
    - Protocol over ABC: structural subtyping, any adapter with these methods fits
    - Async in Protocol: adapters do IO; the pure core modules that interpret the
      returned documents are never async themselves
    - Filters are a flat mapping: list/tuple/set value = membership, None = is null,
      anything else = equality; entries are ANDed, {} matches everything
"""

from typing import Any, Mapping, Protocol


Filters = Mapping[str, Any]


class DocumentCollection(Protocol):
    """Generic CRUD over one collection, implemented by infrastructure."""
    async def find_by_id(self, doc_id: str) -> dict | None: ...
    async def find(self, filters: Filters) -> list[dict]: ...
    async def insert(self, document: Mapping[str, Any]) -> dict: ...
    async def update_by_id(
        self, doc_id: str, fields: Mapping[str, Any],
    ) -> dict | None: ...
    async def update_many(
        self, filters: Filters, fields: Mapping[str, Any],
    ) -> int: ...
    async def delete_by_id(self, doc_id: str) -> dict | None: ...
