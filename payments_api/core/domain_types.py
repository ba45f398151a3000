"""Domain Types — the storage-facing item and its companions.

Invariants:
    - StoredItem.version starts at 0 and only moves forward by exactly 1 per update
    - StoredItem.attributes is an opaque serialized blob; the store never parses it

Design Decisions:
    - Frozen dataclasses: store results are values, callers build new ones to change them
"""

from dataclasses import dataclass, replace

@dataclass(frozen=True)
class StoredItem:
    """The unit persisted by the versioned item store."""
    id: str
    version: int = 0
    organisation: str = ""
    attributes: str = ""

    def with_version(self, version: int) -> "StoredItem":
        return replace(self, version=version)


@dataclass(frozen=True)
class StoreInfo:
    """Live information about the store (non-deleted items only)."""
    count: int
