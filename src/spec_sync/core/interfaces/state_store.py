"""Persistence port for the ingestion state.

Why Protocol:
- The Core reads/writes the cache through this contract only, so the JSON
  file adapter can be swapped for an in-memory one in tests.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from spec_sync.core.domain.models import IngestionState


@runtime_checkable
class StateStore(Protocol):
    """Loads and overwrites the whole `IngestionState`."""

    def load(self) -> IngestionState:
        """Return the stored state, or an empty one when nothing usable exists."""

        ...

    def save(self, state: IngestionState) -> None:
        """Persist `state`, replacing whatever was stored before."""

        ...
