from __future__ import annotations

from functools import lru_cache

from openport.config import Settings, settings_from_env
from openport.run_store import RunStore, make_store


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return settings_from_env()


_STORE: RunStore | None = None


def get_run_store() -> RunStore:
    global _STORE
    if _STORE is None:
        _STORE = make_store(get_settings())
    return _STORE
