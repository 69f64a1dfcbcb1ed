from __future__ import annotations

import json
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from openport.core.models import ActionDefinition, Condition, Effect, EventDefinition

CatalogProvider = Callable[[], list[EventDefinition]]

_EVENT_LIST = TypeAdapter(list[EventDefinition])


class CatalogLoadError(RuntimeError):
    pass


def parse_catalog(raw: Any) -> list[EventDefinition]:
    """Validate raw JSON-like data into event definitions.

    This is the data-contract boundary: unknown stat names, unknown operators,
    non-numeric or non-positive weights and duplicate ids are rejected here so
    the engine never sees them.
    """

    if not isinstance(raw, list):
        raise CatalogLoadError("Catalog must be a JSON array of events")

    try:
        events = _EVENT_LIST.validate_python(raw)
    except ValidationError as e:
        raise CatalogLoadError(f"Invalid catalog: {e}") from e

    seen: set[str] = set()
    for ev in events:
        if ev.id in seen:
            raise CatalogLoadError(f"Duplicate event id: {ev.id}")
        seen.add(ev.id)

    return events


def load_catalog_json(path: Path) -> list[EventDefinition]:
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise CatalogLoadError(f"Catalog file not found: {path}") from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise CatalogLoadError(f"Invalid JSON in {path}: {e}") from e

    return parse_catalog(data)


def fallback_catalog() -> list[EventDefinition]:
    """Small built-in catalog used when no catalog file or service is available."""

    return [
        EventDefinition(
            id="standup",
            title="Daily Standup",
            description="Your manager asks for a status update on the firewall change.",
            base_weight=3,
            cooldown=20,
            actions=(
                ActionDefinition(
                    id="standup-update",
                    label="Give a crisp update",
                    effects=(Effect(target="stress", delta=-5),),
                    cooldown=5,
                    score_impact=5,
                ),
                ActionDefinition(
                    id="standup-deflect",
                    label="Blame the network team",
                    effects=(Effect(target="stress", delta=5), Effect(target="influence", delta=1)),
                    cooldown=5,
                    score_impact=-2,
                ),
            ),
        ),
        EventDefinition(
            id="cab-review",
            title="Change Advisory Board",
            description="The CAB wants a risk assessment before it will look at your ticket.",
            base_weight=2,
            cooldown=45,
            conditions=(Condition(param="bureaucracy", op="<", value=80),),
            actions=(
                ActionDefinition(
                    id="cab-fill-form",
                    label="Fill in the 14-page form",
                    effects=(Effect(target="bureaucracy", delta=15), Effect(target="stress", delta=10)),
                    cooldown=10,
                    score_impact=10,
                ),
                ActionDefinition(
                    id="cab-escalate",
                    label="Escalate to your director",
                    effects=(Effect(target="privilege", delta=1), Effect(target="stress", delta=15)),
                    cooldown=30,
                    score_impact=15,
                ),
            ),
        ),
        EventDefinition(
            id="security-scan",
            title="Security Scan Flags Your Request",
            description="An automated scanner marks port 8443 as high risk.",
            base_weight=2,
            cooldown=30,
            conditions=(Condition(param="security", op="<", value=60),),
            actions=(
                ActionDefinition(
                    id="scan-justify",
                    label="Write a justification",
                    effects=(Effect(target="security", delta=20), Effect(target="stress", delta=5)),
                    cooldown=10,
                    score_impact=10,
                ),
                ActionDefinition(
                    id="scan-ignore",
                    label="Ignore it",
                    effects=(Effect(target="security", delta=-10), Effect(target="privilege", delta=-1)),
                    cooldown=10,
                    score_impact=-5,
                ),
            ),
        ),
        EventDefinition(
            id="port-opened",
            title="Rule Deployed",
            description="The firewall team schedules your rule for tonight's window.",
            base_weight=1,
            cooldown=0,
            conditions=(
                Condition(param="security", op=">=", value=60),
                Condition(param="bureaucracy", op=">=", value=40),
            ),
            actions=(ActionDefinition(id="port-celebrate", label="Close the ticket", score_impact=100),),
            terminal=True,
            terminal_outcome="win",
        ),
        EventDefinition(
            id="audit-finding",
            title="Audit Finding",
            description="Internal audit declares the request non-compliant.",
            base_weight=1,
            cooldown=0,
            conditions=(Condition(param="security", op="<", value=15),),
            actions=(ActionDefinition(id="audit-accept", label="Accept the finding", score_impact=-20),),
            terminal=True,
            terminal_outcome="lose",
        ),
    ]


def load_catalog(*, root: Path) -> list[EventDefinition]:
    catalog_path = root / "catalog" / "events.json"

    # Default behavior: fall back to the built-in catalog when the file is missing.
    # You can force strict behavior by setting OPENPORT_STRICT_CATALOG=1.
    strict = os.getenv("OPENPORT_STRICT_CATALOG", "").strip().lower() in {"1", "true", "yes"}

    try:
        return load_catalog_json(catalog_path)
    except CatalogLoadError:
        if strict:
            raise
        return fallback_catalog()
