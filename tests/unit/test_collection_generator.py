import pytest

from fixtures.postman import SPEC_NAME, WORKSPACE_ID, FakeGateway
from spec_sync.adapters.state_store import InMemoryStateStore
from spec_sync.core.domain.models import AsyncTask, CacheEntry, IngestionState, RemoteCollection, RemoteSpec
from spec_sync.core.errors import CollectionGenerationError, ResolutionError
from spec_sync.core.services.collection_generator import (
    GenerationHooks,
    GenerationRequest,
    extract_collection_uid,
    generate_collection,
)
from spec_sync.core.services.session import IngestionSession
from spec_sync.core.services.task_poller import TaskPoller

KEY = "demo:payments:dev"

FINISHED = AsyncTask(
    status="success",
    details={"resources": [{"id": "col-new", "url": "/collections/col-new"}]},
)


def _request(**overrides):
    values = dict(workspace_id=WORKSPACE_ID, spec_name=SPEC_NAME, collection_name=SPEC_NAME)
    values.update(overrides)
    return GenerationRequest(**values)


def _poller(gateway, clock):
    return TaskPoller(gateway.get_task, clock=clock, sleep=clock.sleep)


@pytest.mark.asyncio
async def test_spec_must_exist(clock):
    gateway = FakeGateway()
    session = IngestionSession(InMemoryStateStore(), KEY)

    with pytest.raises(ResolutionError):
        await generate_collection(request=_request(), gateway=gateway, session=session, poller=_poller(gateway, clock))

    assert gateway.count("create_spec") == 0
    assert gateway.count("generate_collection") == 0


@pytest.mark.asyncio
async def test_existing_collection_is_reported_not_regenerated(clock):
    gateway = FakeGateway(
        specs=[RemoteSpec(id="spec-1", name=SPEC_NAME)],
        collections=[RemoteCollection(uid="col-1", name=SPEC_NAME)],
    )
    store = InMemoryStateStore()
    session = IngestionSession(store, KEY)

    result = await generate_collection(
        request=_request(), gateway=gateway, session=session, poller=_poller(gateway, clock)
    )

    assert result.already_exists is True
    assert result.collection_uid == "col-1"
    assert gateway.count("generate_collection") == 0
    assert store.load().entries[KEY].spec_id == "spec-1"


@pytest.mark.asyncio
async def test_generates_polls_and_caches_uid(clock):
    gateway = FakeGateway(
        specs=[RemoteSpec(id="spec-1", name=SPEC_NAME)],
        tasks=[AsyncTask(status="pending"), FINISHED],
    )
    store = InMemoryStateStore()
    session = IngestionSession(store, KEY)

    result = await generate_collection(
        request=_request(), gateway=gateway, session=session, poller=_poller(gateway, clock)
    )

    assert result.collection_uid == "col-new"
    assert result.already_exists is False
    assert ("generate_collection", WORKSPACE_ID, "spec-1", SPEC_NAME) in gateway.calls
    assert gateway.count("get_task") == 2
    assert store.load().entries[KEY] == CacheEntry(spec_id="spec-1", collection_uid="col-new")


@pytest.mark.asyncio
async def test_spec_id_flag_wins_over_cache(clock):
    gateway = FakeGateway(tasks=[FINISHED])
    store = InMemoryStateStore(IngestionState(entries={KEY: CacheEntry(spec_id="cached")}))
    session = IngestionSession(store, KEY)

    result = await generate_collection(
        request=_request(spec_id="flag"), gateway=gateway, session=session, poller=_poller(gateway, clock)
    )

    assert result.spec_id == "flag"
    assert gateway.count("list_specs") == 0
    assert store.load().entries[KEY].spec_id == "cached"


@pytest.mark.asyncio
async def test_rejected_generation_raises(clock):
    gateway = FakeGateway(generation_response=(False, AsyncTask(details="nope")))
    session = IngestionSession(InMemoryStateStore(), KEY)

    with pytest.raises(CollectionGenerationError):
        await generate_collection(
            request=_request(spec_id="spec-1"), gateway=gateway, session=session, poller=_poller(gateway, clock)
        )
    assert gateway.count("get_task") == 0


@pytest.mark.asyncio
async def test_failed_task_raises_with_details(clock):
    gateway = FakeGateway(tasks=[AsyncTask(status="failed", details="invalid schema")])
    store = InMemoryStateStore()
    session = IngestionSession(store, KEY)

    with pytest.raises(CollectionGenerationError, match="invalid schema"):
        await generate_collection(
            request=_request(spec_id="spec-1"), gateway=gateway, session=session, poller=_poller(gateway, clock)
        )
    assert store.load().entries[KEY].collection_uid is None


@pytest.mark.asyncio
async def test_uid_falls_back_to_lookup_by_name(clock):
    class LateCollectionGateway(FakeGateway):
        async def list_collections(self, workspace_id):
            listing = await super().list_collections(workspace_id)
            self.collections = [RemoteCollection(uid="col-late", name=SPEC_NAME)]
            return listing

    gateway = LateCollectionGateway(tasks=[AsyncTask(status="completed")])
    warnings = []
    session = IngestionSession(InMemoryStateStore(), KEY)

    result = await generate_collection(
        request=_request(spec_id="spec-1"),
        gateway=gateway,
        session=session,
        poller=_poller(gateway, clock),
        hooks=GenerationHooks(warning=warnings.append),
    )

    assert result.collection_uid == "col-late"
    assert gateway.count("list_collections") == 2
    assert warnings


@pytest.mark.asyncio
async def test_missing_uid_everywhere_raises(clock):
    gateway = FakeGateway(tasks=[AsyncTask(status="success")])
    session = IngestionSession(InMemoryStateStore(), KEY)

    with pytest.raises(CollectionGenerationError):
        await generate_collection(
            request=_request(spec_id="spec-1"), gateway=gateway, session=session, poller=_poller(gateway, clock)
        )


@pytest.mark.parametrize(
    "task, expected",
    [
        (FINISHED, "col-new"),
        (AsyncTask(status="success", details={"resources": [{"url": "/collections/abc-123"}]}), "abc-123"),
        (AsyncTask(status="success", details={"resources": [{"id": "x", "url": "/specs/x"}]}), None),
        (AsyncTask.model_validate({"status": "success", "result": {"collection": {"uid": "r-1"}}}), "r-1"),
        (AsyncTask.model_validate({"status": "success", "collection": {"uid": "c-2"}}), "c-2"),
        (AsyncTask.model_validate({"status": "success", "uid": "u-3"}), "u-3"),
        (AsyncTask(status="success"), None),
    ],
)
def test_extract_collection_uid(task, expected):
    assert extract_collection_uid(task) == expected
