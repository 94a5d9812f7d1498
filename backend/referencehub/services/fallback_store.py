"""
ReferenceHub Backend — Fallback Entry Store
===========================================

What:  Resilience wrapper that composes a durable store with an in-process one.
How:   Every operation tries the primary store; any exception is logged and
       the same operation is served by the fallback store instead. Without a
       primary (no DATABASE_URL) the fallback serves everything.
Who:   Built by the repository factory; the repository only sees EntryStore.

Degraded mode:
    Writes that land in the fallback survive only until the process exits.
    Reads during an outage see only what the fallback holds. Entries written
    to the fallback are never copied back into the primary.
"""

import logging
from typing import List, Optional

from referencehub.exceptions import StorageError
from referencehub.schemas.entry import EntryResponse
from referencehub.services.memory_store import InMemoryEntryStore
from referencehub.services.store_base import EntryStore

logger = logging.getLogger(__name__)


class FallbackEntryStore(EntryStore):
    """
    Try-primary, delegate-to-fallback store.

    Args:
        primary: Durable store, or None when none is configured.
        fallback: Process-lifetime store owned by this wrapper.
    """

    def __init__(
        self,
        primary: Optional[EntryStore],
        fallback: Optional[InMemoryEntryStore] = None,
    ):
        self.primary = primary
        self.fallback = fallback if fallback is not None else InMemoryEntryStore()

    async def insert(self, entry: EntryResponse) -> None:
        if self.primary is not None:
            try:
                await self.primary.insert(entry)
                return
            except Exception as e:
                logger.error(
                    "Durable insert failed for entry %s, keeping it in memory: %s",
                    entry.id,
                    str(e),
                    exc_info=True,
                )
        try:
            await self.fallback.insert(entry)
        except Exception as e:
            raise StorageError(context={"entry_id": entry.id, "error_type": type(e).__name__}) from e

    async def query(self, search: Optional[str], limit: int) -> List[EntryResponse]:
        if self.primary is not None:
            try:
                return await self.primary.query(search, limit)
            except Exception as e:
                logger.error("Durable query failed, scanning memory instead: %s", str(e))
        return await self.fallback.query(search, limit)

    async def count(self) -> int:
        if self.primary is not None:
            try:
                return await self.primary.count()
            except Exception as e:
                logger.error("Durable count failed, counting memory instead: %s", str(e))
        return await self.fallback.count()
