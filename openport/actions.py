from __future__ import annotations

from dataclasses import dataclass

from openport.core.cooldowns import start_action_cooldown, start_event_cooldown
from openport.core.models import (
    ActionDefinition,
    CooldownTable,
    Effect,
    EventDefinition,
    Number,
    RunOutcome,
    RunState,
)
from openport.core.state import apply_and_clamp, check_lose_condition


@dataclass(frozen=True, slots=True)
class ActionResult:
    """Result of applying an action.

    - `state`: clamped state after the action's effects.
    - `cooldowns`: table with the action and its triggering event started.
    """

    state: RunState
    cooldowns: CooldownTable


def effective_effects(action: ActionDefinition) -> list[Effect]:
    effects = list(action.effects)
    if action.score_impact != 0:
        effects.append(Effect(target="score", delta=action.score_impact))
    return effects


def apply_action(
    state: RunState,
    cooldowns: CooldownTable,
    action: ActionDefinition,
    event_id: str,
    event_cooldown_seconds: Number,
    now: Number,
) -> ActionResult:
    """Apply an action's effects and start its cooldowns.

    The action cooldown is started first, then the event's; both use the same `now`.
    Deciding whether the run is over is left to `check_run_outcome`.
    """

    next_state = apply_and_clamp(state, effective_effects(action))
    next_cooldowns = start_action_cooldown(cooldowns, action.id, action.cooldown, now)
    next_cooldowns = start_event_cooldown(next_cooldowns, event_id, event_cooldown_seconds, now)
    return ActionResult(state=next_state, cooldowns=next_cooldowns)


def check_run_outcome(state: RunState, selected_event: EventDefinition | None = None) -> RunOutcome | None:
    """Stat exhaustion first, then the authored terminal outcome of the acted-on event."""

    lose_reason = check_lose_condition(state)
    if lose_reason is not None:
        return lose_reason

    if selected_event is not None and selected_event.terminal:
        if selected_event.terminal_outcome == "win":
            return RunOutcome.win
        if selected_event.terminal_outcome == "lose":
            return RunOutcome.critical

    return None
