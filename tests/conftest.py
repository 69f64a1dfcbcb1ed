from __future__ import annotations

import os
from collections.abc import Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from tests.fakes import FixedRandom, ManualClock


@pytest.fixture(scope="session", autouse=True)
def _init_catalog_from_test_fixtures() -> None:
    """Initialize the catalog from `tests/catalog` and forbid falling back to the built-in one.

    This keeps tests hermetic and independent of the repo's real catalog.
    """

    os.environ["OPENPORT_STRICT_CATALOG"] = "1"

    from openport.catalog.singleton import init_catalog, reset_catalog_for_tests

    reset_catalog_for_tests()

    # Point the loader at a fake project root: tests/ contains a catalog/ dir.
    test_root = Path(__file__).resolve().parent
    init_catalog(project_root=test_root)


@pytest.fixture()
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture()
def client(clock: ManualClock) -> Generator[TestClient, None, None]:
    """TestClient with a fresh run store, deterministic runs and no background ticker."""

    from openport.api.deps import get_run_store, get_settings
    from openport.catalog.singleton import get_catalog
    from openport.config import Settings
    from openport.controller import RunController
    from openport.main import app
    from openport.run_store import RunStore

    store = RunStore(factory=lambda: RunController(catalog_provider=get_catalog, rng=FixedRandom(0.5), now_ms=clock))
    settings = Settings(auto_tick=False)

    app.dependency_overrides[get_run_store] = lambda: store
    app.dependency_overrides[get_settings] = lambda: settings
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
