"""Generate a Collection from an existing Spec.

Automates the "Generate collection" action of the Postman UI. Collections
generated this way are linked to their spec, so later runs of the sync flow
can keep them up to date.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

from loguru import logger

from spec_sync.core.domain.models import AsyncTask
from spec_sync.core.errors import CollectionGenerationError, ResolutionError
from spec_sync.core.interfaces.postman import PostmanGateway
from spec_sync.core.services.resolver import find_collection_uid, find_spec_id, resolve
from spec_sync.core.services.session import IngestionSession
from spec_sync.core.services.task_poller import TaskPoller


@dataclass
class GenerationRequest:
    workspace_id: str
    spec_name: str
    collection_name: str
    spec_id: str | None = None


@dataclass
class GenerationHooks:
    info: Callable[[str], None] | None = None
    warning: Callable[[str], None] | None = None


@dataclass
class GenerationResult:
    spec_id: str
    collection_uid: str
    already_exists: bool = False
    task: AsyncTask | None = None
    messages: list[str] = field(default_factory=list)


def _dig(payload: Any, *keys: str) -> Any:
    current = payload
    for key in keys:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def extract_collection_uid(task: AsyncTask) -> str | None:
    """Find the generated collection uid in a finished generation task.

    Looks at `details.resources[*]` first (entry pointing at `/collections/`),
    then at the other shapes the API has been seen to return.
    """

    payload = task.to_payload()
    resources = _dig(payload, "details", "resources")
    if isinstance(resources, list):
        for resource in resources:
            if not isinstance(resource, dict):
                continue
            url = resource.get("url")
            if isinstance(url, str) and "/collections/" in url:
                uid = resource.get("id") or url.split("/collections/", 1)[1]
                if uid:
                    return str(uid)
                break

    for keys in (("result", "collection", "uid"), ("collection", "uid"), ("result", "uid"), ("uid",)):
        value = _dig(payload, *keys)
        if value:
            return str(value)
    return None


async def generate_collection(
    *,
    request: GenerationRequest,
    gateway: PostmanGateway,
    session: IngestionSession,
    poller: TaskPoller | None = None,
    hooks: GenerationHooks | None = None,
) -> GenerationResult:
    hooks = hooks or GenerationHooks()
    messages: list[str] = []

    def info(message: str) -> None:
        messages.append(message)
        logger.debug(message)
        if hooks.info:
            hooks.info(message)

    def warning(message: str) -> None:
        messages.append(message)
        logger.warning(message)
        if hooks.warning:
            hooks.warning(message)

    entry = session.entry

    # The explicit flag wins over the cache here; no creation.
    spec = await resolve(
        cached=request.spec_id or entry.spec_id,
        find=lambda: find_spec_id(gateway, request.workspace_id, request.spec_name),
    )
    if spec is None:
        raise ResolutionError(
            f"Spec not found: {request.spec_name}. Run `spec-sync sync` first to create the spec."
        )
    if spec.source == "lookup":
        info(f"Resolved Spec by name: {request.spec_name} -> {spec.identifier}")
    else:
        info(f"Using Spec ID: {spec.identifier}")
    if not entry.spec_id:
        session.record(spec_id=spec.identifier)

    existing = await find_collection_uid(gateway, request.workspace_id, request.collection_name)
    if existing:
        info(f"Collection already exists: {request.collection_name} ({existing})")
        info("To sync it, run: spec-sync sync --service <service> --stage <stage> --openapi openapi.json --poll")
        return GenerationResult(
            spec_id=spec.identifier,
            collection_uid=existing,
            already_exists=True,
            messages=messages,
        )

    info(f'Generating collection "{request.collection_name}" from spec {spec.identifier}...')
    accepted, task = await gateway.generate_collection(
        request.workspace_id,
        spec.identifier,
        name=request.collection_name,
    )
    if not accepted or not task.url:
        raise CollectionGenerationError(f"Failed to generate collection. Response: {task.to_payload()}")
    info(f"Generation task started: {task.to_payload()}")

    poller = poller or TaskPoller(gateway.get_task)
    task_result = await poller.poll(task.url)
    if task_result is None or not task_result.succeeded:
        payload = task_result.to_payload() if task_result else {}
        detail = payload.get("details") or _dig(payload, "error", "message") or "Unknown error"
        raise CollectionGenerationError(f"Collection generation failed: {detail}\nFull response: {payload}")
    info(f"Generation task completed: {task_result.to_payload()}")

    collection_uid = extract_collection_uid(task_result)
    if not collection_uid:
        warning("Could not extract collection UID from task result. Looking up by name...")
        collection_uid = await find_collection_uid(gateway, request.workspace_id, request.collection_name)
        if not collection_uid:
            raise CollectionGenerationError(
                "Failed to extract collection UID and collection not found by name. "
                f"Task result: {task_result.to_payload()}"
            )
        info(f"Found collection by name: {collection_uid}")

    info(f"Generated Collection: {request.collection_name} ({collection_uid})")
    session.record(
        spec_id=None if session.entry.spec_id else spec.identifier,
        collection_uid=collection_uid,
    )
    info(f"State file updated with collection UID for {session.key}")

    return GenerationResult(
        spec_id=spec.identifier,
        collection_uid=collection_uid,
        task=task_result,
        messages=messages,
    )
