from __future__ import annotations

import pytest

from openport.core.conditions import evaluate, evaluate_all
from openport.core.models import Condition
from openport.core.state import initialize


@pytest.mark.parametrize(
    ("op", "value", "expected"),
    [
        (">", 29, True),
        (">", 30, False),
        ("<", 31, True),
        ("<", 30, False),
        (">=", 30, True),
        (">=", 31, False),
        ("<=", 30, True),
        ("<=", 29, False),
        ("==", 30, True),
        ("==", 31, False),
        ("!=", 31, True),
        ("!=", 30, False),
    ],
)
def test_evaluate_each_operator(op: str, value: int, expected: bool) -> None:
    state = initialize({"security": 30})
    assert evaluate(state, Condition(param="security", op=op, value=value)) is expected


def test_evaluate_all_empty_is_true() -> None:
    assert evaluate_all(initialize(), []) is True


def test_evaluate_all_requires_every_condition() -> None:
    state = initialize({"security": 30, "bureaucracy": 50})
    ok = [
        Condition(param="security", op=">=", value=30),
        Condition(param="bureaucracy", op="<", value=80),
    ]
    assert evaluate_all(state, ok) is True

    one_fails = [*ok, Condition(param="stress", op=">", value=90)]
    assert evaluate_all(state, one_fails) is False


def test_condition_accepts_camel_case_stat_name() -> None:
    c = Condition.model_validate({"param": "timeLeft", "op": "<=", "value": 10})
    assert c.param == "time_left"
    assert evaluate(initialize({"time_left": 10}), c) is True
