from __future__ import annotations

from pathlib import Path

from openport.catalog.registry import load_catalog
from openport.core.models import EventDefinition


_CATALOG: list[EventDefinition] | None = None


def init_catalog(*, project_root: Path) -> list[EventDefinition]:
    """Load the static catalog once and cache it.

    Safe to call multiple times; subsequent calls return the already loaded catalog.
    """

    global _CATALOG
    if _CATALOG is None:
        _CATALOG = load_catalog(root=project_root)
    return _CATALOG


def reset_catalog_for_tests() -> None:
    global _CATALOG
    _CATALOG = None


def get_catalog() -> list[EventDefinition]:
    if _CATALOG is None:
        raise RuntimeError("Catalog not initialized. Call init_catalog() at startup.")
    # Callers get their own list; the definitions themselves are frozen.
    return list(_CATALOG)
