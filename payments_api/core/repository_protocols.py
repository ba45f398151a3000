"""Boundary Protocols — contracts between the resource handler and storage.

Invariants:
    - Handler code depends on VersionedItemStore only, never on a concrete engine
    - Every mutating call is a single conditional statement: the version check
      and the mutation are never split into two round trips
    - Deleted items are invisible to list/fetch/info but still reserve their id

Design Decisions:
    - Protocol over ABC: structural subtyping, fakes in tests need no inheritance
    - Async in Protocol: implementations do IO; the translator and pagination
      helpers that surround these calls stay pure and synchronous
"""

from typing import Protocol

from payments_api.core.domain_types import StoredItem, StoreInfo


class VersionedItemStore(Protocol):
    """CRUD with optimistic concurrency and soft delete — implemented by infrastructure."""

    def description(self) -> str: ...

    async def info(self) -> StoreInfo: ...

    async def check(self) -> None:
        """Raise StoreError if the backend is unreachable."""
        ...

    async def close(self) -> None: ...

    async def list_items(self, offset: int, limit: int) -> list[StoredItem]: ...

    async def fetch(self, item_id: str) -> StoredItem:
        """Return the non-deleted item or raise ItemNotFoundError."""
        ...

    async def create(self, item: StoredItem) -> StoredItem:
        """Insert at version 0 or raise ItemConflictError if the id is taken."""
        ...

    async def update(self, item: StoredItem) -> StoredItem:
        """Conditional update on (id, version); ItemConflictError if no row matches."""
        ...

    async def delete(self, item: StoredItem) -> None:
        """Conditional tombstone on (id, version); ItemConflictError if no row matches."""
        ...

    async def delete_all(self) -> None: ...

    def is_conflict(self, err: BaseException) -> bool: ...

    def is_not_found(self, err: BaseException) -> bool: ...
