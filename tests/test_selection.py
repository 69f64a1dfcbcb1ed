from __future__ import annotations

import random
from collections import Counter

from openport.core.cooldowns import empty_cooldowns, start_event_cooldown
from openport.core.models import EventDefinition
from openport.core.selection import (
    compute_weight,
    eligible_events,
    generate_environment_modifiers,
    select_next,
    weighted_pick,
)
from openport.core.state import initialize
from tests.fakes import FixedRandom


def _event(event_id: str, weight: float = 1, **extra: object) -> EventDefinition:
    return EventDefinition.model_validate({"id": event_id, "title": event_id.title(), "base_weight": weight, **extra})


def test_weighted_pick_empty_and_all_zero_return_none() -> None:
    rng = random.Random(1)
    assert weighted_pick([], [], rng) is None
    assert weighted_pick(["a", "b"], [0, 0], rng) is None
    assert weighted_pick(["a", "b"], [-1, 0], rng) is None


def test_weighted_pick_never_returns_zero_weight_items() -> None:
    # A roll of exactly 0 must still skip the zero-weight entries.
    assert weighted_pick(["a", "b", "c"], [0, 0, 5], FixedRandom(0.0)) == "c"

    rng = random.Random(7)
    for _ in range(500):
        assert weighted_pick(["a", "b", "c"], [0, 0, 5], rng) == "c"


def test_weighted_pick_roll_boundaries() -> None:
    items = ["a", "b"]
    assert weighted_pick(items, [1, 3], FixedRandom(0.0)) == "a"
    assert weighted_pick(items, [1, 3], FixedRandom(0.25)) == "a"
    assert weighted_pick(items, [1, 3], FixedRandom(0.26)) == "b"
    assert weighted_pick(items, [1, 3], FixedRandom(0.999999)) == "b"


def test_weighted_pick_distribution() -> None:
    rng = random.Random(12345)
    n = 20_000
    counts = Counter(weighted_pick(["a", "b"], [1, 3], rng) for _ in range(n))
    share_b = counts["b"] / n
    assert abs(share_b - 0.75) < 0.02


def test_environment_modifiers_range_and_one_draw_per_event() -> None:
    catalog = [_event("a"), _event("b"), _event("c")]
    mods = generate_environment_modifiers(catalog, random.Random(3))
    assert set(mods) == {"a", "b", "c"}
    assert all(0.8 <= m <= 1.2 for m in mods.values())

    assert generate_environment_modifiers(catalog, FixedRandom(0.0)) == {"a": 0.8, "b": 0.8, "c": 0.8}


def test_compute_weight_defaults_missing_modifier_to_one() -> None:
    ev = _event("a", 2.5)
    assert compute_weight(ev, initialize(), {}) == 2.5
    assert compute_weight(ev, initialize(), {"a": 0.8}) == 2.5 * 0.8


def test_eligible_events_filters_conditions_and_cooldowns() -> None:
    low_sec = _event("low-sec", conditions=[{"param": "security", "op": "<", "value": 50}])
    high_sec = _event("high-sec", conditions=[{"param": "security", "op": ">=", "value": 50}])
    always = _event("always")
    catalog = [low_sec, high_sec, always]

    state = initialize({"security": 20})
    assert [e.id for e in eligible_events(catalog, state, empty_cooldowns(), 0)] == ["low-sec", "always"]

    cds = start_event_cooldown(empty_cooldowns(), "always", 5, 0)
    assert [e.id for e in eligible_events(catalog, state, cds, 4_999)] == ["low-sec"]
    assert [e.id for e in eligible_events(catalog, state, cds, 5_000)] == ["low-sec", "always"]


def test_select_next_returns_none_when_nothing_is_eligible() -> None:
    catalog = [_event("only", cooldown=10)]
    cds = start_event_cooldown(empty_cooldowns(), "only", 10, 0)
    rng = random.Random(0)
    assert select_next(catalog, initialize(), cds, {}, 1_000, rng) is None
    # Once the cooldown lapses the same event comes back.
    picked = select_next(catalog, initialize(), cds, {}, 10_000, rng)
    assert picked is not None and picked.id == "only"


def test_select_next_uses_env_modifiers() -> None:
    catalog = [_event("a", 1), _event("b", 1)]
    # With "a" scaled down, a roll at 0.45 of the total lands in "b".
    mods = {"a": 0.8, "b": 1.2}
    picked = select_next(catalog, initialize(), empty_cooldowns(), mods, 0, FixedRandom(0.45))
    assert picked is not None and picked.id == "b"


def test_simultaneous_cooldowns_release_at_the_earliest_expiry() -> None:
    catalog = [_event("slow", cooldown=30), _event("fast", cooldown=5), _event("medium", cooldown=12)]
    cds = empty_cooldowns()
    for ev in catalog:
        cds = start_event_cooldown(cds, ev.id, ev.cooldown, 1_000)
    rng = random.Random(0)

    assert select_next(catalog, initialize(), cds, {}, 5_999, rng) is None

    for _ in range(20):
        picked = select_next(catalog, initialize(), cds, {}, 6_000, rng)
        assert picked is not None and picked.id == "fast"

    ids = {e.id for e in eligible_events(catalog, initialize(), cds, 13_000)}
    assert ids == {"fast", "medium"}
