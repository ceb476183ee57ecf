"""Contract of the Postman REST surface used by the services.

Rules:
- Every method is async because it performs HTTP I/O.
- Non-2xx/non-202 answers raise `RemoteCallError`; "not found" is expressed
  with `None`/empty lists, never with an exception.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from spec_sync.core.domain.models import AsyncTask, RemoteCollection, RemoteSpec


@runtime_checkable
class PostmanGateway(Protocol):
    async def list_specs(self, workspace_id: str) -> list[RemoteSpec]: ...

    async def create_spec(
        self,
        workspace_id: str,
        *,
        name: str,
        file_path: str,
        content: str,
    ) -> str | None: ...

    async def patch_spec_file(self, spec_id: str, file_path: str, content: str) -> Any: ...

    async def list_collections(self, workspace_id: str) -> list[RemoteCollection]: ...

    async def generate_collection(
        self,
        workspace_id: str,
        spec_id: str,
        *,
        name: str,
    ) -> tuple[bool, AsyncTask]: ...

    async def sync_collection(self, collection_uid: str, spec_id: str) -> tuple[bool, AsyncTask]: ...

    async def get_task(self, task_url: str) -> AsyncTask: ...
