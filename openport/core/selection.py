from __future__ import annotations

import random
from collections.abc import Mapping, Sequence
from typing import TypeVar

from openport.core.conditions import evaluate_all
from openport.core.cooldowns import is_event_on_cooldown
from openport.core.models import CooldownTable, EventDefinition, Number, RunState

T = TypeVar("T")

ENV_MODIFIER_MIN = 0.8
ENV_MODIFIER_SPAN = 0.4


def eligible_events(
    catalog: Sequence[EventDefinition],
    state: RunState,
    cooldowns: CooldownTable,
    now: Number,
) -> list[EventDefinition]:
    """Events whose conditions all hold and which are not on cooldown, in catalog order."""

    return [
        e
        for e in catalog
        if evaluate_all(state, e.conditions) and not is_event_on_cooldown(cooldowns, e.id, now)
    ]


def state_modifier(event: EventDefinition, state: RunState) -> float:
    # Hook for state-based tuning; every event is neutral for now.
    return 1.0


def compute_weight(event: EventDefinition, state: RunState, env_modifiers: Mapping[str, float]) -> float:
    return event.base_weight * state_modifier(event, state) * env_modifiers.get(event.id, 1.0)


def generate_environment_modifiers(catalog: Sequence[EventDefinition], rng: random.Random) -> dict[str, float]:
    """Draw one multiplier in [0.8, 1.2] per event. Called once per run, not per selection."""

    return {e.id: ENV_MODIFIER_MIN + rng.random() * ENV_MODIFIER_SPAN for e in catalog}


def weighted_pick(items: Sequence[T], weights: Sequence[float], rng: random.Random) -> T | None:
    """Linear-scan weighted sampling.

    Negative weights count as zero and zero-weight items are never returned.
    Returns None for an empty candidate list or when no weight is positive.

    O(n) per call, which is fine for catalogs up to ~1k events. A prefix-sum +
    bisect (or alias table) can replace this without changing the distribution.
    """

    if not items:
        return None

    clipped = [max(0.0, w) for w in weights]
    total = sum(clipped)
    if total <= 0:
        return None

    roll = rng.random() * total
    for item, w in zip(items, clipped):
        if w <= 0:
            continue
        roll -= w
        if roll <= 0:
            return item

    # Floating point leftovers: fall back to the last positive-weight item.
    for item, w in zip(reversed(items), reversed(clipped)):
        if w > 0:
            return item
    return None


def select_next(
    catalog: Sequence[EventDefinition],
    state: RunState,
    cooldowns: CooldownTable,
    env_modifiers: Mapping[str, float],
    now: Number,
    rng: random.Random,
) -> EventDefinition | None:
    """Filter, weight, pick. None means nothing is eligible right now, which is not an error."""

    eligible = eligible_events(catalog, state, cooldowns, now)
    if not eligible:
        return None
    weights = [compute_weight(e, state, env_modifiers) for e in eligible]
    return weighted_pick(eligible, weights, rng)
