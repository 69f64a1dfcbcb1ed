from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from openport.api.models import RunSnapshot
from openport.core.cooldowns import action_remaining, is_action_on_cooldown
from openport.core.models import ActionDefinition, EventDefinition, Number, RunPhase


class InvalidActionError(ValueError):
    """An action that is not legal right now. The controller logs and ignores it."""


@dataclass(frozen=True, slots=True)
class ValidationContext:
    """Inputs available to validators."""

    run_id: str
    event: EventDefinition
    action: ActionDefinition
    now: Number


class TurnValidator(ABC):
    """A small, composable validation unit for an incoming action."""

    @abstractmethod
    def validate(self, *, ctx: ValidationContext, run: RunSnapshot) -> None:
        raise NotImplementedError


@dataclass(frozen=True, slots=True)
class PhaseValidator(TurnValidator):
    allowed_phases: frozenset[RunPhase]

    def validate(self, *, ctx: ValidationContext, run: RunSnapshot) -> None:
        if run.phase not in self.allowed_phases:
            allowed = ",".join(sorted(p.value for p in self.allowed_phases))
            raise InvalidActionError(
                f"Action '{ctx.action.id}' not allowed in phase '{run.phase.value}' (allowed: {allowed})"
            )


@dataclass(frozen=True, slots=True)
class CurrentEventValidator(TurnValidator):
    """Only the event currently presented can be acted on."""

    def validate(self, *, ctx: ValidationContext, run: RunSnapshot) -> None:
        if run.current_event is None:
            raise InvalidActionError("No event is currently presented")
        if run.current_event.id != ctx.event.id:
            raise InvalidActionError(
                f"Event '{ctx.event.id}' is not the current event ('{run.current_event.id}')"
            )


@dataclass(frozen=True, slots=True)
class ActionMembershipValidator(TurnValidator):
    def validate(self, *, ctx: ValidationContext, run: RunSnapshot) -> None:
        if ctx.event.action(ctx.action.id) is None:
            raise InvalidActionError(f"Action '{ctx.action.id}' does not belong to event '{ctx.event.id}'")


@dataclass(frozen=True, slots=True)
class ActionCooldownValidator(TurnValidator):
    def validate(self, *, ctx: ValidationContext, run: RunSnapshot) -> None:
        if is_action_on_cooldown(run.cooldowns, ctx.action.id, ctx.now):
            remaining = action_remaining(run.cooldowns, ctx.action.id, ctx.now)
            raise InvalidActionError(f"Action '{ctx.action.id}' is on cooldown for {remaining:.1f}s")


@dataclass(frozen=True, slots=True)
class ValidatorPipeline:
    validators: tuple[TurnValidator, ...]

    def validate(self, *, ctx: ValidationContext, run: RunSnapshot) -> None:
        for v in self.validators:
            v.validate(ctx=ctx, run=run)


DEFAULT_SUBMIT_PIPELINE = ValidatorPipeline(
    validators=(
        PhaseValidator(allowed_phases=frozenset({RunPhase.playing})),
        CurrentEventValidator(),
        ActionMembershipValidator(),
        ActionCooldownValidator(),
    )
)
