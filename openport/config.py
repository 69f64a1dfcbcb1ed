from __future__ import annotations

import os
from dataclasses import dataclass, field


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes"}


@dataclass(frozen=True, slots=True)
class Settings:
    # Base URL of the catalog editing service (e.g. http://127.0.0.1:3000). None => static catalog.
    catalog_url: str | None = None
    catalog_timeout: float = 2.0
    strict_catalog: bool = False
    tick_seconds: float = 1.0
    auto_tick: bool = True
    log_level: str = "INFO"


def settings_from_env() -> Settings:
    return Settings(
        catalog_url=os.environ.get("OPENPORT_CATALOG_URL") or None,
        catalog_timeout=float(os.environ.get("OPENPORT_CATALOG_TIMEOUT", "2.0")),
        strict_catalog=_env_flag("OPENPORT_STRICT_CATALOG", False),
        tick_seconds=float(os.environ.get("OPENPORT_TICK_SECONDS", "1.0")),
        auto_tick=_env_flag("OPENPORT_AUTO_TICK", True),
        log_level=os.environ.get("OPENPORT_LOG_LEVEL", "INFO").upper(),
    )


@dataclass(frozen=True, slots=True)
class RunConfig:
    """Per-run tuning.

    `init_ranges` are inclusive integer ranges used to randomize starting stats.
    `score_tiers` are ascending (min_score, label) pairs.
    """

    init_ranges: dict[str, tuple[int, int]] = field(
        default_factory=lambda: {
            "stress": (15, 35),
            "bureaucracy": (10, 30),
            "security": (10, 30),
        }
    )
    log_limit: int = 12
    score_tiers: tuple[tuple[int, str], ...] = (
        (0, "Ticket Filer"),
        (50, "Change Requester"),
        (150, "Process Navigator"),
        (300, "Firewall Whisperer"),
    )
