from __future__ import annotations

from dataclasses import dataclass

from openport.core.models import ActionDefinition, EventDefinition, Number, RunOutcome


@dataclass(frozen=True, slots=True)
class OutcomeSummary:
    headline: str
    sub: str


_OUTCOME_SUMMARIES: dict[RunOutcome, OutcomeSummary] = {
    RunOutcome.win: OutcomeSummary("PORT IS OPEN", "The change ticket closed as Successfully Implemented."),
    RunOutcome.time: OutcomeSummary("WINDOW EXPIRED", "The ticket aged out. The port stays closed."),
    RunOutcome.stress: OutcomeSummary("BURNT OUT", "Decision fatigue. The ticket was abandoned."),
    RunOutcome.privilege: OutcomeSummary("REQUEST WITHDRAWN", "Support collapsed. The ticket closed as Rejected."),
    RunOutcome.critical: OutcomeSummary("PORT PERMANENTLY BLOCKED", "The change was denied. The rule was never written."),
}


def describe_outcome(outcome: RunOutcome) -> OutcomeSummary:
    return _OUTCOME_SUMMARIES[outcome]


def score_tier(score: Number, tiers: tuple[tuple[int, str], ...]) -> str:
    """Label of the highest tier whose minimum is <= score; the lowest tier otherwise."""

    if not tiers:
        return ""
    for min_score, label in reversed(tiers):
        if score >= min_score:
            return label
    return tiers[0][1]


def event_entry(event: EventDefinition) -> str:
    return event.title


def action_entry(action: ActionDefinition) -> str:
    return f"> {action.label}"


def push_log(log: list[str], entries: list[str], *, limit: int) -> list[str]:
    """Prepend `entries` (kept in the given order) and trim to `limit`. Returns a new list."""

    return (list(entries) + log)[:limit]
