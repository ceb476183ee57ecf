"""State persistence adapters.

Why JSON:
- Human-readable and diff-friendly; the file is small and often committed
  next to the pipeline that runs the sync.
"""

from __future__ import annotations

import json
from pathlib import Path

from loguru import logger

from spec_sync.core.domain.models import IngestionState


class JsonStateStore:
    """Reads/rewrites the whole state file. No locking: last writer wins."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> IngestionState:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return IngestionState()
        except (OSError, ValueError) as exc:
            logger.warning(f"Ignoring unreadable state file {self.path}: {exc}")
            return IngestionState()

        if not isinstance(data, dict):
            logger.warning(f"Ignoring state file {self.path}: top level is not an object")
            return IngestionState()
        return IngestionState.from_payload(data)

    def save(self, state: IngestionState) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps(state.to_payload(), ensure_ascii=False, indent=2) + "\n",
            encoding="utf-8",
        )


class InMemoryStateStore:
    """Keeps the state in memory; used by tests."""

    def __init__(self, state: IngestionState | None = None) -> None:
        self._payload = (state or IngestionState()).to_payload()
        self.saves = 0

    def load(self) -> IngestionState:
        return IngestionState.from_payload(self._payload)

    def save(self, state: IngestionState) -> None:
        self._payload = state.to_payload()
        self.saves += 1
