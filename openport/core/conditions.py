from __future__ import annotations

import operator
from collections.abc import Callable, Iterable

from openport.core.models import Condition, RunState

_OPERATORS: dict[str, Callable[[float, float], bool]] = {
    ">": operator.gt,
    "<": operator.lt,
    ">=": operator.ge,
    "<=": operator.le,
    "==": operator.eq,
    "!=": operator.ne,
}


def evaluate(state: RunState, condition: Condition) -> bool:
    # Field names and operators are already validated by the catalog models.
    return _OPERATORS[condition.op](state.get(condition.param), condition.value)


def evaluate_all(state: RunState, conditions: Iterable[Condition]) -> bool:
    """AND over `conditions`; an empty collection is vacuously true."""

    return all(evaluate(state, c) for c in conditions)
