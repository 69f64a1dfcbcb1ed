from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import AliasChoices, AliasGenerator, BaseModel, BeforeValidator, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

Number = int | float

StatName = Literal["time_left", "stress", "privilege", "bureaucracy", "security", "influence", "score"]
Operator = Literal[">", "<", ">=", "<=", "==", "!="]

STAT_NAMES: tuple[str, ...] = ("time_left", "stress", "privilege", "bureaucracy", "security", "influence", "score")

# The catalog editor speaks camelCase ("timeLeft", "baseWeight"); accept both spellings on input.
_CAMEL_STATS = {to_camel(name): name for name in STAT_NAMES}


def _accept_camel(name: str) -> AliasChoices:
    return AliasChoices(name, to_camel(name))


def _normalize_stat(value: Any) -> Any:
    if isinstance(value, str):
        return _CAMEL_STATS.get(value, value)
    return value


_Stat = Annotated[StatName, BeforeValidator(_normalize_stat)]


class _CatalogModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        alias_generator=AliasGenerator(validation_alias=_accept_camel),
    )


class RunState(BaseModel):
    """Numeric world state for one run.

    Domains:
    - `stress`, `bureaucracy`, `security`: [0, 100]
    - `time_left`, `privilege`: >= 0
    - `influence`, `score`: unbounded
    """

    model_config = ConfigDict(frozen=True)

    time_left: Number = 180
    stress: Number = 20
    privilege: Number = 1
    bureaucracy: Number = 20
    security: Number = 20
    influence: Number = 0
    score: Number = 0

    def get(self, name: str) -> Number:
        return getattr(self, name)


class Effect(_CatalogModel):
    target: _Stat
    delta: Number


class Condition(_CatalogModel):
    param: _Stat
    op: Operator
    value: Number


class ActionDefinition(_CatalogModel):
    id: str = Field(..., min_length=1)
    label: str
    effects: tuple[Effect, ...] = ()
    cooldown: float = Field(0, ge=0)
    score_impact: Number = 0


class EventDefinition(_CatalogModel):
    id: str = Field(..., min_length=1, pattern=r"^[a-z0-9\-_]+$")
    title: str = Field(..., min_length=1)
    description: str = ""
    base_weight: float = Field(..., gt=0)
    cooldown: float = Field(0, ge=0)
    conditions: tuple[Condition, ...] = ()
    actions: tuple[ActionDefinition, ...] = ()

    terminal: bool = False
    terminal_outcome: Literal["win", "lose"] | None = None

    @model_validator(mode="after")
    def _unique_action_ids(self) -> "EventDefinition":
        ids = [a.id for a in self.actions]
        if len(ids) != len(set(ids)):
            raise ValueError(f"Duplicate action id in event '{self.id}'")
        return self

    def action(self, action_id: str) -> ActionDefinition | None:
        return next((a for a in self.actions if a.id == action_id), None)


class CooldownTable(BaseModel):
    """Absolute expiry timestamps (ms) per event id and per action id.

    Entries are never removed; an entry whose expiry has passed simply reads as
    not on cooldown.
    """

    model_config = ConfigDict(frozen=True)

    events: dict[str, Number] = Field(default_factory=dict)
    actions: dict[str, Number] = Field(default_factory=dict)


class RunOutcome(StrEnum):
    win = "win"
    time = "time"
    stress = "stress"
    privilege = "privilege"
    critical = "critical"


class RunPhase(StrEnum):
    idle = "idle"
    playing = "playing"
    over = "over"
