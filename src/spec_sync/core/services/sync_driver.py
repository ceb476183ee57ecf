"""Spec Hub synchronization flow.

Steps run strictly in order and any failure aborts the run:

    resolve spec -> patch content -> resolve collection (best-effort)
    -> sync collection -> poll task (optional)

The cache is written after each successful step, so an already-resolved spec
id survives a later failure. Printing is left to the caller through
`SyncHooks`, which keeps this module reusable from tests and other
entry-points.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from loguru import logger

from spec_sync.core.domain.models import AsyncTask
from spec_sync.core.errors import ResolutionError
from spec_sync.core.interfaces.postman import PostmanGateway
from spec_sync.core.services.resolver import (
    ResolutionSource,
    find_collection_uid,
    find_spec_id,
    resolve,
)
from spec_sync.core.services.session import IngestionSession
from spec_sync.core.services.task_poller import TaskPoller


@dataclass
class SyncRequest:
    """Parameters of one sync run."""

    workspace_id: str
    spec_name: str
    collection_name: str
    content: str
    file_path: str = "index.json"
    spec_id: str | None = None
    collection_uid: str | None = None
    poll: bool = False


@dataclass
class SyncHooks:
    """Optional callbacks for UI layers."""

    info: Callable[[str], None] | None = None


@dataclass
class SyncResult:
    spec_id: str
    spec_source: ResolutionSource
    collection_uid: str | None = None
    collection_source: ResolutionSource | None = None
    sync_accepted: bool | None = None
    sync_task: AsyncTask | None = None
    poll_result: AsyncTask | None = None
    messages: list[str] = field(default_factory=list)

    @property
    def collection_synced(self) -> bool:
        return self.collection_uid is not None and self.sync_task is not None


async def sync_spec(
    *,
    request: SyncRequest,
    gateway: PostmanGateway,
    session: IngestionSession,
    poller: TaskPoller | None = None,
    hooks: SyncHooks | None = None,
) -> SyncResult:
    hooks = hooks or SyncHooks()
    messages: list[str] = []

    def info(message: str) -> None:
        messages.append(message)
        logger.debug(message)
        if hooks.info:
            hooks.info(message)

    entry = session.entry

    async def _create_spec() -> str | None:
        return await gateway.create_spec(
            request.workspace_id,
            name=request.spec_name,
            file_path=request.file_path,
            content=request.content,
        )

    spec = await resolve(
        cached=entry.spec_id or request.spec_id,
        find=lambda: find_spec_id(gateway, request.workspace_id, request.spec_name),
        create=_create_spec,
    )
    if spec is None:
        raise ResolutionError("Failed to resolve specId from create response")

    if spec.source == "lookup":
        info(f"Resolved Spec by name: {request.spec_name} -> {spec.identifier}")
    elif spec.source == "created":
        info(f"Created Spec: {spec.identifier}")
    else:
        info(f"Using Spec: {spec.identifier}")
    if entry.spec_id != spec.identifier:
        session.record(spec_id=spec.identifier)

    # Content only: one mutable field per call.
    await gateway.patch_spec_file(spec.identifier, request.file_path, request.content)
    info(f"Patched spec file {request.file_path}")

    result = SyncResult(spec_id=spec.identifier, spec_source=spec.source, messages=messages)

    collection = await resolve(
        cached=entry.collection_uid or request.collection_uid,
        find=lambda: find_collection_uid(gateway, request.workspace_id, request.collection_name),
    )
    if collection is None:
        info(
            "No collection UID resolved. Generate a collection from the Spec once "
            "(spec-sync generate-collection), then rerun to sync."
        )
        info(f"Expected collection name: {request.collection_name}")
        return result

    if collection.source == "lookup":
        info(f"Resolved Collection by name: {request.collection_name} -> {collection.identifier}")
    result.collection_uid = collection.identifier
    result.collection_source = collection.source

    accepted, task = await gateway.sync_collection(collection.identifier, spec.identifier)
    result.sync_accepted = accepted
    result.sync_task = task
    info(f"Sync requested (202 expected): {accepted}, task: {task.to_payload()}")

    if request.poll and task.url:
        poller = poller or TaskPoller(gateway.get_task)
        result.poll_result = await poller.poll(task.url)
        snapshot = result.poll_result.to_payload() if result.poll_result else None
        info(f"Sync task finished: {snapshot}")

    session.record(collection_uid=collection.identifier)
    return result
