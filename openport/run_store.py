from __future__ import annotations

import threading
from collections.abc import Callable
from uuid import UUID

from openport.catalog.client import CatalogClient
from openport.catalog.registry import CatalogProvider
from openport.catalog.singleton import get_catalog
from openport.config import Settings
from openport.controller import RunController

ControllerFactory = Callable[[], RunController]


def catalog_provider_for(settings: Settings) -> CatalogProvider:
    """Remote catalog when a service URL is configured, with the static catalog as fallback."""

    if settings.catalog_url:
        return CatalogClient(base_url=settings.catalog_url, fallback=get_catalog, timeout=settings.catalog_timeout)
    return get_catalog


class RunStore:
    """In-process registry of run controllers keyed by run id.

    Runs live only as long as the process; nothing is persisted.
    """

    def __init__(self, *, factory: ControllerFactory) -> None:
        self._factory = factory
        self._runs: dict[UUID, RunController] = {}
        self._lock = threading.Lock()

    def create(self) -> RunController:
        controller = self._factory()
        with self._lock:
            self._runs[controller.run_id] = controller
        return controller

    def get(self, run_id: UUID) -> RunController | None:
        with self._lock:
            return self._runs.get(run_id)

    def discard(self, run_id: UUID) -> None:
        with self._lock:
            self._runs.pop(run_id, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._runs)


def make_store(settings: Settings) -> RunStore:
    provider = catalog_provider_for(settings)
    return RunStore(factory=lambda: RunController(catalog_provider=provider))
