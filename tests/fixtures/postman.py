from __future__ import annotations

from typing import Any

from spec_sync.core.domain.models import AsyncTask, RemoteCollection, RemoteSpec
from spec_sync.core.errors import RemoteCallError

__all__ = ["FakeClock", "FakeGateway", "SPEC_NAME", "WORKSPACE_ID", "remote_error"]

WORKSPACE_ID = "ws-1"
SPEC_NAME = "[DEMO] payments #main"


class FakeGateway:
    """In-memory `PostmanGateway` that records every call."""

    def __init__(
        self,
        *,
        specs: list[RemoteSpec] | None = None,
        collections: list[RemoteCollection] | None = None,
        created_id: str | None = "spec-new",
        sync_response: tuple[bool, AsyncTask] | None = None,
        generation_response: tuple[bool, AsyncTask] | None = None,
        tasks: list[AsyncTask] | None = None,
        list_specs_error: Exception | None = None,
        create_error: Exception | None = None,
        sync_error: Exception | None = None,
    ) -> None:
        self.specs = specs or []
        self.collections = collections or []
        self.created_id = created_id
        self.sync_response = sync_response or (
            True,
            AsyncTask(taskId="task-1", url="/collections/col-1/tasks/task-1"),
        )
        self.generation_response = generation_response or (
            True,
            AsyncTask(taskId="gen-1", url="/specs/spec-1/tasks/gen-1"),
        )
        self.tasks = list(tasks or [AsyncTask(status="success")])
        self.list_specs_error = list_specs_error
        self.create_error = create_error
        self.sync_error = sync_error
        self.calls: list[tuple[Any, ...]] = []

    async def __aenter__(self) -> "FakeGateway":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        return None

    def count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)

    async def list_specs(self, workspace_id: str) -> list[RemoteSpec]:
        self.calls.append(("list_specs", workspace_id))
        if self.list_specs_error:
            raise self.list_specs_error
        return list(self.specs)

    async def create_spec(self, workspace_id: str, *, name: str, file_path: str, content: str) -> str | None:
        self.calls.append(("create_spec", workspace_id, name, file_path, content))
        if self.create_error:
            raise self.create_error
        return self.created_id

    async def patch_spec_file(self, spec_id: str, file_path: str, content: str) -> Any:
        self.calls.append(("patch_spec_file", spec_id, file_path, content))
        return {}

    async def list_collections(self, workspace_id: str) -> list[RemoteCollection]:
        self.calls.append(("list_collections", workspace_id))
        return list(self.collections)

    async def generate_collection(self, workspace_id: str, spec_id: str, *, name: str) -> tuple[bool, AsyncTask]:
        self.calls.append(("generate_collection", workspace_id, spec_id, name))
        return self.generation_response

    async def sync_collection(self, collection_uid: str, spec_id: str) -> tuple[bool, AsyncTask]:
        self.calls.append(("sync_collection", collection_uid, spec_id))
        if self.sync_error:
            raise self.sync_error
        return self.sync_response

    async def get_task(self, task_url: str) -> AsyncTask:
        self.calls.append(("get_task", task_url))
        if len(self.tasks) > 1:
            return self.tasks.pop(0)
        return self.tasks[0]


class FakeClock:
    """Monotonic clock whose time only moves when `sleep` is awaited."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def remote_error(status_code: int = 500, body: str = "boom") -> RemoteCallError:
    return RemoteCallError(method="GET", path="/x", status_code=status_code, reason="Error", body=body)


