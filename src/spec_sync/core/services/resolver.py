"""Resolve-by-name-or-create.

`resolve` is parameterized over two capabilities (a finder and an optional
creator) so it stays independent of the Postman client. The helpers below
bind those capabilities to a `PostmanGateway`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable, Literal

from loguru import logger

from spec_sync.core.errors import RemoteCallError, RemoteTransportError
from spec_sync.core.interfaces.postman import PostmanGateway

Finder = Callable[[], Awaitable[str | None]]
Creator = Callable[[], Awaitable[str | None]]

ResolutionSource = Literal["cache", "lookup", "created"]


@dataclass(frozen=True)
class Resolution:
    identifier: str
    source: ResolutionSource


async def resolve(
    *,
    cached: str | None,
    find: Finder,
    create: Creator | None = None,
) -> Resolution | None:
    """Return the cached id, else the first lookup match, else a newly created id.

    Returns `None` only when nothing is found and no creator is given.
    """

    if cached:
        return Resolution(cached, "cache")

    found = await find()
    if found:
        return Resolution(found, "lookup")

    if create is None:
        return None

    created = await create()
    if not created:
        return None
    return Resolution(created, "created")


def _summary(exc: Exception) -> str:
    return str(exc).splitlines()[0] if str(exc) else type(exc).__name__


async def find_spec_id(gateway: PostmanGateway, workspace_id: str, name: str) -> str | None:
    """Id of the first spec named exactly `name`; listing failures count as not found."""

    try:
        specs = await gateway.list_specs(workspace_id)
    except (RemoteCallError, RemoteTransportError) as exc:
        logger.warning(f"Listing specs failed, treating '{name}' as not found: {_summary(exc)}")
        return None
    for spec in specs:
        if spec.name == name:
            return spec.id
    return None


async def find_collection_uid(gateway: PostmanGateway, workspace_id: str, name: str) -> str | None:
    """Uid of the first collection named exactly `name`; listing failures count as not found."""

    try:
        collections = await gateway.list_collections(workspace_id)
    except (RemoteCallError, RemoteTransportError) as exc:
        logger.warning(f"Listing collections failed, treating '{name}' as not found: {_summary(exc)}")
        return None
    for collection in collections:
        if collection.name == name:
            return collection.uid
    return None
