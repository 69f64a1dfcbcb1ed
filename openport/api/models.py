from __future__ import annotations

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

from openport.core.models import CooldownTable, EventDefinition, RunOutcome, RunPhase, RunState


class SubmitActionRequest(BaseModel):
    event_id: str = Field(..., min_length=1)
    action_id: str = Field(..., min_length=1)


class RunSnapshot(BaseModel):
    run_id: UUID
    created_at: datetime
    last_updated_at: datetime

    phase: RunPhase = RunPhase.idle

    # Replaced wholesale on every transition; never mutated in place.
    state: RunState = Field(default_factory=RunState)
    cooldowns: CooldownTable = Field(default_factory=CooldownTable)

    # None while no event is eligible (all on cooldown / conditions unmet); the tick retries selection.
    current_event: EventDefinition | None = None

    # Set exactly once when the run ends.
    outcome: RunOutcome | None = None
    outcome_headline: str | None = None
    outcome_sub: str | None = None

    # Human-readable entries for display, newest first.
    log: list[str] = Field(default_factory=list)
    score_tier: str = ""


class CooldownRemainingResponse(BaseModel):
    kind: Literal["event", "action"]
    id: str
    remaining_seconds: float
