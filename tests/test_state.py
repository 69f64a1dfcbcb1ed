from __future__ import annotations

import pytest

from openport.core.models import Effect, RunOutcome, RunState
from openport.core.state import (
    INITIAL_STATE,
    apply_and_clamp,
    apply_effects,
    check_lose_condition,
    clamp,
    decrement_time,
    initialize,
)


def test_initialize_defaults_and_overrides() -> None:
    s = initialize()
    assert s == INITIAL_STATE
    assert (s.time_left, s.stress, s.privilege, s.bureaucracy, s.security, s.influence, s.score) == (
        180,
        20,
        1,
        20,
        20,
        0,
        0,
    )

    s2 = initialize({"stress": 33, "security": 11})
    assert s2.stress == 33
    assert s2.security == 11
    assert s2.time_left == 180
    # Defaults are untouched.
    assert INITIAL_STATE.stress == 20


def test_apply_effects_sums_per_target_without_clamping() -> None:
    s = initialize({"stress": 90})
    out = apply_effects(s, [Effect(target="stress", delta=8), Effect(target="stress", delta=8), Effect(target="score", delta=-3)])
    assert out.stress == 106
    assert out.score == -3
    # Input state is not mutated.
    assert s.stress == 90


def test_apply_effects_with_no_effects_returns_same_state() -> None:
    s = initialize()
    assert apply_effects(s, []) is s


def test_clamp_bounds_each_stat_domain() -> None:
    s = RunState(time_left=-4, stress=130, privilege=-2, bureaucracy=-10, security=101, influence=-7, score=-50)
    c = clamp(s)
    assert c.time_left == 0
    assert c.stress == 100
    assert c.privilege == 0
    assert c.bureaucracy == 0
    assert c.security == 100
    # Unbounded stats pass through.
    assert c.influence == -7
    assert c.score == -50


def test_clamp_is_idempotent() -> None:
    s = RunState(time_left=-1, stress=250, privilege=3, bureaucracy=50, security=-5, influence=2, score=10)
    once = clamp(s)
    assert clamp(once) == once


def test_apply_and_clamp() -> None:
    s = initialize({"security": 95})
    out = apply_and_clamp(s, [Effect(target="security", delta=20), Effect(target="privilege", delta=-5)])
    assert out.security == 100
    assert out.privilege == 0


def test_decrement_time_never_goes_negative() -> None:
    s = initialize({"time_left": 1})
    s = decrement_time(s)
    assert s.time_left == 0
    s = decrement_time(s)
    assert s.time_left == 0


@pytest.mark.parametrize(
    ("overrides", "expected"),
    [
        ({}, None),
        ({"time_left": 0}, RunOutcome.time),
        ({"stress": 100}, RunOutcome.stress),
        ({"privilege": 0}, RunOutcome.privilege),
        ({"stress": 99, "privilege": 1, "time_left": 1}, None),
    ],
)
def test_check_lose_condition(overrides: dict, expected: RunOutcome | None) -> None:
    assert check_lose_condition(initialize(overrides)) == expected


def test_lose_condition_priority_time_then_stress_then_privilege() -> None:
    everything = RunState(time_left=0, stress=100, privilege=0)
    assert check_lose_condition(everything) == RunOutcome.time

    no_time_issue = RunState(time_left=10, stress=100, privilege=0)
    assert check_lose_condition(no_time_issue) == RunOutcome.stress
