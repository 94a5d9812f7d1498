"""
ReferenceHub Backend — Abstract Entry Store Interface
=====================================================

What:  Abstract base class defining the storage contract for entries.
How:   Concrete stores inherit from EntryStore and implement insert(),
       query() and count(). The repository depends only on this interface.
Who:   Implemented by SQLEntryStore (durable), InMemoryEntryStore (process
       lifetime), and FallbackEntryStore (composes the two).

Composition:
    ┌───────────────────────┐
    │   FallbackEntryStore  │── try ──▶ SQLEntryStore       (primary)
    │                       │── on any exception ──▶ InMemoryEntryStore
    └───────────────────────┘
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from referencehub.schemas.entry import EntryResponse


class EntryStore(ABC):
    """
    Storage capability for entries.

    Contract:
        - insert() persists a fully populated entry (id, hostname and
          created_at already assigned)
        - query() returns entries newest first, filtered by the search
          filter, at most `limit` of them
        - count() returns the total number of stored entries, never filtered
    """

    @abstractmethod
    async def insert(self, entry: EntryResponse) -> None:
        """Persist `entry`."""
        ...

    @abstractmethod
    async def query(self, search: Optional[str], limit: int) -> List[EntryResponse]:
        """
        Entries matching `search`, newest first.

        Args:
            search: Sanitized search text, or None for all entries.
            limit: Maximum number of entries to return.
        """
        ...

    @abstractmethod
    async def count(self) -> int:
        """Total number of stored entries."""
        ...
