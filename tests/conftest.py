from __future__ import annotations

import pytest

from fixtures.postman import *  # noqa
from spec_sync.adapters.state_store import InMemoryStateStore
from spec_sync.core.config import AppSettings


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(
        _env_file=None,
        api_key="test-key",
        workspace_id=WORKSPACE_ID,
        api_base_url="https://api.example.test",
    )


@pytest.fixture
def store() -> InMemoryStateStore:
    return InMemoryStateStore()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
