"""Explicit cache session for one composite key.

The state is loaded once, and every `record()` rewrites the whole store so
that progress survives a later failure in the same run.
"""

from __future__ import annotations

from loguru import logger

from spec_sync.core.domain.models import CacheEntry, IngestionState
from spec_sync.core.interfaces.state_store import StateStore


class IngestionSession:
    def __init__(self, store: StateStore, key: str) -> None:
        self._store = store
        self.key = key
        self.state: IngestionState = store.load()

    @property
    def entry(self) -> CacheEntry:
        return self.state.entries.get(self.key) or CacheEntry()

    def record(self, *, spec_id: str | None = None, collection_uid: str | None = None) -> CacheEntry:
        """Merge the given ids into the entry and persist the state."""

        entry = self.entry.model_copy()
        if spec_id:
            entry.spec_id = spec_id
        if collection_uid:
            entry.collection_uid = collection_uid
        self.state.entries[self.key] = entry
        self._store.save(self.state)
        logger.debug(f"State updated for {self.key}: {entry.model_dump(by_alias=True, exclude_none=True)}")
        return entry
