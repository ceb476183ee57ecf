"""Postman REST API adapter (Spec Hub, collections, async tasks).

Implements `core.interfaces.postman.PostmanGateway` on top of httpx.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx
from loguru import logger

from spec_sync.adapters.http_client import build_async_client
from spec_sync.core.config import AppSettings
from spec_sync.core.domain.models import AsyncTask, RemoteCollection, RemoteSpec
from spec_sync.core.errors import RemoteCallError, RemoteTransportError

SPEC_TYPE = "OPENAPI:3.0"

# Same options as the "Generate collection" dialog in the Postman UI.
COLLECTION_GENERATION_OPTIONS: dict[str, Any] = {
    "requestNameSource": "Fallback",
    "indentCharacter": "Space",
    "parametersResolution": "Schema",
    "folderStrategy": "Paths",
    "includeAuthInfoInExample": True,
    "enableOptionalParameters": True,
    "keepImplicitHeaders": False,
    "includeDeprecated": True,
    "alwaysInheritAuthentication": False,
    "nestedFolderHierarchy": False,
}


def _segment(value: str) -> str:
    return quote(value, safe="")


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


class PostmanClient:
    """Async Postman client; use as an async context manager."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._client = client or build_async_client(self._settings)

    async def __aenter__(self) -> "PostmanClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: Any = None,
    ) -> tuple[httpx.Response, Any]:
        logger.debug(f"Postman API {method} {path} params={params}")
        try:
            response = await self._client.request(method, path, params=params, json=json)
        except httpx.HTTPError as exc:
            raise RemoteTransportError(
                method=method, path=path, detail=f"{type(exc).__name__}: {exc}"
            ) from exc
        if not response.is_success and response.status_code != 202:
            raise RemoteCallError(
                method=method,
                path=path,
                status_code=response.status_code,
                reason=response.reason_phrase,
                body=response.text,
            )

        content_type = response.headers.get("content-type", "")
        if "application/json" in content_type:
            try:
                return response, response.json()
            except ValueError as exc:
                raise RemoteTransportError(
                    method=method, path=path, detail=f"invalid JSON body: {exc}"
                ) from exc
        return response, response.text

    async def get_me(self) -> dict[str, Any]:
        _, data = await self._request("GET", "/me")
        return data if isinstance(data, dict) else {}

    async def list_specs(self, workspace_id: str) -> list[RemoteSpec]:
        _, data = await self._request("GET", "/specs", params={"workspaceId": workspace_id})
        raw = data.get("specs") if isinstance(data, dict) else data
        specs: list[RemoteSpec] = []
        for item in _as_list(raw):
            if isinstance(item, dict) and item.get("id"):
                specs.append(RemoteSpec.model_validate(item))
        return specs

    async def create_spec(
        self,
        workspace_id: str,
        *,
        name: str,
        file_path: str,
        content: str,
    ) -> str | None:
        body = {
            "name": name,
            "type": SPEC_TYPE,
            "files": [{"path": file_path, "content": content}],
        }
        _, data = await self._request(
            "POST",
            "/specs",
            params={"workspaceId": workspace_id},
            json=body,
        )
        if isinstance(data, dict):
            spec_id = data.get("id") or (data.get("spec") or {}).get("id")
            return str(spec_id) if spec_id else None
        if isinstance(data, str) and data.strip():
            return data.strip()
        return None

    async def patch_spec_file(self, spec_id: str, file_path: str, content: str) -> Any:
        # Exactly one property per call.
        _, data = await self._request(
            "PATCH",
            f"/specs/{_segment(spec_id)}/files/{_segment(file_path)}",
            json={"content": content},
        )
        return data

    async def list_collections(self, workspace_id: str) -> list[RemoteCollection]:
        """Workspace-scoped listing, falling back to the global listing."""

        try:
            _, data = await self._request("GET", "/collections", params={"workspaceId": workspace_id})
        except RemoteCallError as exc:
            logger.warning(f"Workspace collection listing failed ({exc.status_code}); using global listing")
            _, data = await self._request("GET", "/collections")

        raw: Any = data
        if isinstance(data, dict):
            raw = data.get("collections") or data.get("collection") or []
        collections: list[RemoteCollection] = []
        for item in _as_list(raw):
            if isinstance(item, dict):
                collections.append(RemoteCollection.model_validate(item))
        return collections

    async def generate_collection(
        self,
        workspace_id: str,
        spec_id: str,
        *,
        name: str,
    ) -> tuple[bool, AsyncTask]:
        response, data = await self._request(
            "POST",
            f"/specs/{_segment(spec_id)}/generations/collection",
            params={"workspaceId": workspace_id},
            json={"name": name, "options": dict(COLLECTION_GENERATION_OPTIONS)},
        )
        return response.status_code == 202, _to_task(data)

    async def sync_collection(self, collection_uid: str, spec_id: str) -> tuple[bool, AsyncTask]:
        response, data = await self._request(
            "PUT",
            f"/collections/{_segment(collection_uid)}/synchronizations",
            params={"specId": spec_id},
        )
        return response.status_code == 202, _to_task(data)

    async def get_task(self, task_url: str) -> AsyncTask:
        _, data = await self._request("GET", task_url)
        return _to_task(data)


def _to_task(data: Any) -> AsyncTask:
    if isinstance(data, dict):
        return AsyncTask.model_validate(data)
    return AsyncTask(details=data)
