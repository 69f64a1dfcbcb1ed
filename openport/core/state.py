from __future__ import annotations

from collections.abc import Iterable, Mapping

from openport.core.models import Effect, Number, RunOutcome, RunState

TWO_SIDED: tuple[str, ...] = ("stress", "bureaucracy", "security")
ONE_SIDED: tuple[str, ...] = ("time_left", "privilege")

STAT_MIN = 0
STAT_MAX = 100

INITIAL_STATE = RunState()


def initialize(overrides: Mapping[str, Number] | None = None) -> RunState:
    """Fresh RunState from the defaults, with `overrides` applied on top."""

    if not overrides:
        return INITIAL_STATE
    return INITIAL_STATE.model_copy(update=dict(overrides))


def apply_effects(state: RunState, effects: Iterable[Effect]) -> RunState:
    """Add each delta to its target. Intermediate result is not clamped."""

    update: dict[str, Number] = {}
    for effect in effects:
        current = update.get(effect.target, state.get(effect.target))
        update[effect.target] = current + effect.delta
    if not update:
        return state
    return state.model_copy(update=update)


def clamp(state: RunState) -> RunState:
    update: dict[str, Number] = {}
    for name in TWO_SIDED:
        update[name] = min(STAT_MAX, max(STAT_MIN, state.get(name)))
    for name in ONE_SIDED:
        update[name] = max(STAT_MIN, state.get(name))
    return state.model_copy(update=update)


def apply_and_clamp(state: RunState, effects: Iterable[Effect]) -> RunState:
    return clamp(apply_effects(state, effects))


def decrement_time(state: RunState, units: Number = 1) -> RunState:
    return clamp(state.model_copy(update={"time_left": state.time_left - units}))


def check_lose_condition(state: RunState) -> RunOutcome | None:
    # Exactly one reason is reported; priority is time, stress, privilege.
    if state.time_left <= 0:
        return RunOutcome.time
    if state.stress >= STAT_MAX:
        return RunOutcome.stress
    if state.privilege <= 0:
        return RunOutcome.privilege
    return None
