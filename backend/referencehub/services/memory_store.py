"""
ReferenceHub Backend — In-Process Entry Store
=============================================

What:  Bounded, newest-first list of entries kept in process memory.
How:   A deque with `maxlen`; new entries go to the left, so the oldest entry
       falls off the right end when capacity is reached.
Who:   Fallback side of FallbackEntryStore, and the only store when no
       DATABASE_URL is configured.

Entries here live only as long as the process. There is no lock: list
mutation never awaits, so a single event loop cannot interleave inside it.
"""

from collections import deque
from typing import Deque, List, Optional

from referencehub.config import settings
from referencehub.schemas.entry import EntryResponse
from referencehub.services.search import entry_matches
from referencehub.services.store_base import EntryStore


class InMemoryEntryStore(EntryStore):
    """Process-lifetime store with a fixed capacity (default 100)."""

    def __init__(self, capacity: Optional[int] = None):
        self.capacity = capacity or settings.fallback_capacity
        self._entries: Deque[EntryResponse] = deque(maxlen=self.capacity)

    async def insert(self, entry: EntryResponse) -> None:
        self._entries.appendleft(entry)

    async def query(self, search: Optional[str], limit: int) -> List[EntryResponse]:
        matches = [entry for entry in self._entries if entry_matches(entry, search)]
        return matches[:limit]

    async def count(self) -> int:
        return len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
