"""Domain models (Pydantic v2).

Why Pydantic in the domain:
- Strict validation at the edges (state file, API payloads) with
  self-documenting fields, without coupling the Core to I/O libraries.
- Aliases keep the camelCase wire/state format while Python code stays snake_case.

Note:
- These models describe *what* the data is, not *how* it is fetched.
"""

from __future__ import annotations

from typing import Any

from loguru import logger
from pydantic import BaseModel, Field, ValidationError
from pydantic.config import ConfigDict

TERMINAL_TASK_STATUSES = frozenset({"success", "failed", "completed"})
SUCCESSFUL_TASK_STATUSES = frozenset({"success", "completed"})


class CacheEntry(BaseModel):
    """Identifiers previously resolved for one composite key.

    Unknown fields are kept and written back on save.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    spec_id: str | None = Field(
        default=None,
        alias="specId",
        description="Id of the Postman Spec.",
    )
    collection_uid: str | None = Field(
        default=None,
        alias="collectionUid",
        description="Uid of the Collection linked to the Spec.",
    )


class IngestionState(BaseModel):
    """Whole content of the state file.

    Entries are never dropped: unknown top-level keys are kept as extras and
    entries that do not validate are carried verbatim in `unreadable_entries`
    until their key is recorded again.
    """

    model_config = ConfigDict(extra="allow")

    entries: dict[str, CacheEntry] = Field(
        default_factory=dict,
        description="Cache entries keyed by `domain:service:stage`.",
    )
    unreadable_entries: dict[str, Any] = Field(
        default_factory=dict,
        exclude=True,
        description="Raw entries that failed validation, written back unchanged.",
    )

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "IngestionState":
        """Build a state from the decoded file, validating each entry on its own."""

        entries: dict[str, CacheEntry] = {}
        unreadable: dict[str, Any] = {}
        raw_entries = data.get("entries")
        if isinstance(raw_entries, dict):
            for key, value in raw_entries.items():
                try:
                    entries[key] = CacheEntry.model_validate(value)
                except ValidationError:
                    logger.warning(f"Keeping unreadable state entry '{key}' as-is")
                    unreadable[key] = value
        elif raw_entries is not None:
            logger.warning("State file 'entries' is not an object; starting with no entries")

        extras = {k: v for k, v in data.items() if k not in ("entries", "unreadable_entries")}
        return cls(entries=entries, unreadable_entries=unreadable, **extras)

    def to_payload(self) -> dict[str, Any]:
        payload = self.model_dump(mode="json", by_alias=True, exclude={"entries"})
        entries: dict[str, Any] = dict(self.unreadable_entries)
        for key, entry in self.entries.items():
            entries[key] = entry.model_dump(mode="json", by_alias=True, exclude_none=True)
        payload["entries"] = entries
        return payload


class RemoteSpec(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., min_length=1)
    name: str | None = None


class RemoteCollection(BaseModel):
    model_config = ConfigDict(extra="ignore")

    uid: str | None = None
    id: str | None = None
    name: str | None = None


class AsyncTask(BaseModel):
    """Snapshot of an asynchronous Postman task.

    Unknown fields are kept so that the raw payload can be reported as-is.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    status: str | None = None
    url: str | None = None
    task_id: str | None = Field(default=None, alias="taskId")
    details: Any = None

    @property
    def is_terminal(self) -> bool:
        return self.status is not None and self.status.lower() in TERMINAL_TASK_STATUSES

    @property
    def succeeded(self) -> bool:
        return self.status is not None and self.status.lower() in SUCCESSFUL_TASK_STATUSES

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
